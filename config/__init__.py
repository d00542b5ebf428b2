"""
Configuration module.
"""

from config.settings import (
    PROJECT_ROOT,
    DATA_STORAGE_PATH,
    DEPLOY_CONFIG_FILE,
    DEPLOY_ENVIRONMENT,
    DATABASE_URL,
    LOG_LEVEL,
    LOG_FILE,
)

from config.constants import (
    DEFAULT_DECIMALS,
    FIXED_POINT_SCALE,
    DEFAULT_FUNDING_PERIOD,
    MAX_UINT128,
    MAX_UINT256,
)

from config.environments import (
    DEFAULT_DEPLOY_CONFIG,
    ENVIRONMENT_OVERRIDES,
    DEPLOY_CONFIGS,
    merge_config,
    get_deploy_config,
)

__all__ = [
    # Settings
    'PROJECT_ROOT',
    'DATA_STORAGE_PATH',
    'DEPLOY_CONFIG_FILE',
    'DEPLOY_ENVIRONMENT',
    'DATABASE_URL',
    'LOG_LEVEL',
    'LOG_FILE',

    # Precision
    'DEFAULT_DECIMALS',
    'FIXED_POINT_SCALE',
    'DEFAULT_FUNDING_PERIOD',
    'MAX_UINT128',
    'MAX_UINT256',

    # Environments
    'DEFAULT_DEPLOY_CONFIG',
    'ENVIRONMENT_OVERRIDES',
    'DEPLOY_CONFIGS',
    'merge_config',
    'get_deploy_config',
]
