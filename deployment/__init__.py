"""
Deployment configuration registry.
"""

from deployment.models import (
    Module,
    ADDRESS_FIELDS,
    InitialAsset,
    InsuranceFundInitMsg,
    PriceFeedInitMsg,
    EngineInitMsg,
    VammInitMsg,
    DeployConfig,
    field_path,
    with_resolved_address,
)

from deployment.ordering import (
    DeploymentStep,
    DEPLOY_ORDER,
    STEP_REQUIREMENTS,
    STEP_OUTPUTS,
    missing_dependencies,
    is_ready,
    deployment_plan,
    next_step,
    build_init_msg,
)

from deployment.validation import (
    ConfigValidator,
    validate_config,
)

from deployment.registry import (
    ConfigRegistry,
    load_registry,
    get_config,
)

__all__ = [
    # Records
    'Module',
    'ADDRESS_FIELDS',
    'InitialAsset',
    'InsuranceFundInitMsg',
    'PriceFeedInitMsg',
    'EngineInitMsg',
    'VammInitMsg',
    'DeployConfig',
    'field_path',
    'with_resolved_address',

    # Ordering
    'DeploymentStep',
    'DEPLOY_ORDER',
    'STEP_REQUIREMENTS',
    'STEP_OUTPUTS',
    'missing_dependencies',
    'is_ready',
    'deployment_plan',
    'next_step',
    'build_init_msg',

    # Validation
    'ConfigValidator',
    'validate_config',

    # Registry
    'ConfigRegistry',
    'load_registry',
    'get_config',
]
