"""
Deployment order of the contract modules.

    pricefeed       needs the oracle hub
    insurance fund  no dependencies
    engine          needs insurance fund and fee pool addresses
    vamm            needs the pricefeed address

The registry itself does not enforce this; a deployer walks
`deployment_plan()` and threads each new address back with
`with_resolved_address` before moving on.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from deployment.models import DeployConfig, Module


class DeploymentStep(Enum):
    """Contract instantiations, in the order they must happen."""
    PRICEFEED = "pricefeed"
    INSURANCE_FUND = "insurance_fund"
    ENGINE = "engine"
    VAMM = "vamm"


DEPLOY_ORDER = (
    DeploymentStep.PRICEFEED,
    DeploymentStep.INSURANCE_FUND,
    DeploymentStep.ENGINE,
    DeploymentStep.VAMM,
)

STEP_REQUIREMENTS = {
    DeploymentStep.PRICEFEED: (Module.ORACLE_HUB,),
    DeploymentStep.INSURANCE_FUND: (),
    DeploymentStep.ENGINE: (Module.INSURANCE_FUND, Module.FEE_POOL),
    DeploymentStep.VAMM: (Module.PRICEFEED,),
}

# Address a step yields, to be resolved into later steps
STEP_OUTPUTS = {
    DeploymentStep.PRICEFEED: Module.PRICEFEED,
    DeploymentStep.INSURANCE_FUND: Module.INSURANCE_FUND,
    DeploymentStep.ENGINE: None,
    DeploymentStep.VAMM: None,
}

STEP_SECTIONS = {
    DeploymentStep.PRICEFEED: 'price_feed_init_msg',
    DeploymentStep.INSURANCE_FUND: 'insurance_fund_init_msg',
    DeploymentStep.ENGINE: 'engine_init_msg',
    DeploymentStep.VAMM: 'vamm_init_msg',
}


def parse_step(value) -> DeploymentStep:
    """Accept a DeploymentStep or its name ('engine', 'VAMM', ...)."""
    if isinstance(value, DeploymentStep):
        return value
    key = str(value).strip().lower()
    for step in DeploymentStep:
        if key == step.value:
            return step
    raise ValueError(f"Unknown deployment step {value!r}. "
                     f"Available: {[s.value for s in DEPLOY_ORDER]}")


def missing_dependencies(config: DeployConfig, step: DeploymentStep) -> Tuple[Module, ...]:
    """Address slots that must be filled before `step` can be instantiated."""
    step = parse_step(step)
    return tuple(m for m in STEP_REQUIREMENTS[step] if not config.is_resolved(m))


def is_ready(config: DeployConfig, step: DeploymentStep) -> bool:
    return not missing_dependencies(config, step)


def deployment_plan(config: DeployConfig) -> List[Tuple[DeploymentStep, Tuple[Module, ...]]]:
    """Every step in order, with the addresses it is still waiting on."""
    return [(step, missing_dependencies(config, step)) for step in DEPLOY_ORDER]


def next_step(config: DeployConfig,
              completed: Optional[List[DeploymentStep]] = None) -> Optional[DeploymentStep]:
    """
    First step not yet completed.

    A step counts as completed when it is listed in `completed` or when the
    address it produces has already been resolved into the record.
    """
    done = {parse_step(s) for s in (completed or [])}
    for step in DEPLOY_ORDER:
        output = STEP_OUTPUTS[step]
        if step in done or (output is not None and config.is_resolved(output)):
            continue
        return step
    return None


def build_init_msg(config: DeployConfig,
                   environment: str,
                   step: DeploymentStep) -> Dict[str, Any]:
    """
    Instantiate payload for one step.

    The record is validated for that step first, so a missing dependency
    stops the deployment instead of sending an empty address.

    Raises:
        ConfigInvalid
    """
    from deployment.validation import validate_config

    step = parse_step(step)
    validate_config(config, environment, step=step)
    return getattr(config, STEP_SECTIONS[step]).to_dict()
