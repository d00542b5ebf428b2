"""
Checks a record must pass before it is handed to contract instantiation.

Template checks hold for every record, deployed or not. Step checks add
the addresses a step depends on and, for the vamm, strictly positive
reserves.
"""
from typing import Callable, List, Optional

from loguru import logger

from config.constants import MAX_UINT128, MAX_UINT256
from deployment.models import DeployConfig, SECTION_KEYS, field_path
from deployment.ordering import DEPLOY_ORDER, STEP_REQUIREMENTS, DeploymentStep, parse_step
from utils.exceptions import ConfigInvalid
from utils.fixed_point import scale_for
from utils.validators import (
    ValidationError,
    Validator,
    validate_address,
    validate_integer,
    validate_string,
    validate_uint_string,
)

RATIO_FIELDS = {
    'engine_init_msg': ('initial_margin_ratio', 'maintenance_margin_ratio', 'liquidation_fee'),
    'vamm_init_msg': ('toll_ratio', 'spread_ratio', 'fluctuation_limit_ratio'),
}

RESERVE_FIELDS = ('quote_asset_reserve', 'base_asset_reserve')

MAX_DECIMALS = 18


class ConfigValidator:
    """
    Validate deployment records.

    Example:
        validator = ConfigValidator()
        problems = validator.check(config, 'local', deployable=True)
        validator.validate(config, 'local', step=DeploymentStep.ENGINE)
    """

    def check(self,
              config: DeployConfig,
              environment: Optional[str],
              step: Optional[DeploymentStep] = None,
              deployable: bool = False) -> List[ConfigInvalid]:
        """
        Collect every problem with a record.

        Args:
            config: Record to check
            environment: Name used in error messages
            step: Also require what this step depends on
            deployable: Also require what every step depends on

        Returns:
            List of ConfigInvalid, empty when the record is fine
        """
        errors: List[ConfigInvalid] = []

        self._check_decimals(config, environment, errors)
        self._check_ratios(config, environment, errors)
        self._check_reserves(config, environment, errors)
        self._check_vamm(config, environment, errors)
        self._check_initial_assets(config, environment, errors)

        if deployable:
            steps = DEPLOY_ORDER
        elif step is not None:
            steps = (parse_step(step),)
        else:
            steps = ()

        for s in steps:
            self._check_step(config, environment, s, errors)

        return errors

    def validate(self,
                 config: DeployConfig,
                 environment: Optional[str],
                 step: Optional[DeploymentStep] = None,
                 deployable: bool = False) -> DeployConfig:
        """
        Raise the first problem found, after logging all of them.

        Raises:
            ConfigInvalid
        """
        errors = self.check(config, environment, step=step, deployable=deployable)

        if errors:
            for error in errors:
                logger.warning(f"Invalid config: {error}")
            raise errors[0]

        return config

    def _capture(self, errors: List[ConfigInvalid], environment: Optional[str],
                 path: str, check: Callable):
        """Run one check, recording a failure under `path`."""
        try:
            return check()
        except ValidationError as e:
            errors.append(ConfigInvalid(path, environment, str(e)))
            return None

    def _check_decimals(self, config, environment, errors):
        sections = ('price_feed_init_msg', 'engine_init_msg', 'vamm_init_msg')
        values = {}

        for attr in sections:
            path = f"{SECTION_KEYS[attr]}.decimals"
            value = self._capture(errors, environment, path, lambda attr=attr: validate_integer(
                getattr(config, attr).decimals, min_value=0, max_value=MAX_DECIMALS, name="decimals"))
            if value is not None:
                values[attr] = value

        # The engine settles in the same denomination the pricefeed and vamm quote in
        reference = values.get('engine_init_msg')
        if reference is None:
            return

        for attr in ('price_feed_init_msg', 'vamm_init_msg'):
            if attr in values and values[attr] != reference:
                errors.append(ConfigInvalid(
                    f"{SECTION_KEYS[attr]}.decimals", environment,
                    f"decimals {values[attr]} does not match engineInitMsg.decimals {reference}"))

    def _check_ratios(self, config, environment, errors):
        for attr, names in RATIO_FIELDS.items():
            section = getattr(config, attr)
            try:
                scale = scale_for(section.decimals)
            except (TypeError, ValidationError):
                scale = None

            for name in names:
                path = f"{SECTION_KEYS[attr]}.{name}"

                def check(value=getattr(section, name), name=name):
                    v = Validator(value, name).is_uint_string()
                    if scale is not None:
                        v.at_most(scale)
                    return v.get()

                self._capture(errors, environment, path, check)

        engine = config.engine_init_msg
        try:
            initial = validate_uint_string(engine.initial_margin_ratio)
            maintenance = validate_uint_string(engine.maintenance_margin_ratio)
        except ValidationError:
            return  # already reported above

        if maintenance > initial:
            errors.append(ConfigInvalid(
                "engineInitMsg.maintenance_margin_ratio", environment,
                f"maintenance margin {maintenance} exceeds initial margin {initial}"))

    def _check_reserves(self, config, environment, errors):
        vamm = config.vamm_init_msg
        for name in RESERVE_FIELDS:
            self._capture(errors, environment, f"vammInitMsg.{name}",
                          lambda name=name: validate_uint_string(
                              getattr(vamm, name), max_value=MAX_UINT128, name=name))

    def _check_vamm(self, config, environment, errors):
        vamm = config.vamm_init_msg

        self._capture(errors, environment, "vammInitMsg.funding_period",
                      lambda: Validator(vamm.funding_period, "funding_period").is_positive().get())

        for name in ('quote_asset', 'base_asset'):
            self._capture(errors, environment, f"vammInitMsg.{name}",
                          lambda name=name: validate_string(
                              getattr(vamm, name), allow_empty=False, name=name))

        if vamm.quote_asset and vamm.quote_asset == vamm.base_asset:
            errors.append(ConfigInvalid(
                "vammInitMsg.base_asset", environment,
                f"base and quote asset are both {vamm.quote_asset!r}"))

    def _check_initial_assets(self, config, environment, errors):
        seen = set()
        for i, asset in enumerate(config.initial_assets):
            path = f"initialAssets[{i}]"
            symbol = self._capture(errors, environment, f"{path}.symbol",
                                   lambda asset=asset: validate_string(
                                       asset.symbol, allow_empty=False, name="symbol"))
            self._capture(errors, environment, f"{path}.decimals",
                          lambda asset=asset: validate_integer(
                              asset.decimals, min_value=0, max_value=MAX_DECIMALS, name="decimals"))

            if symbol is None:
                continue
            if symbol in seen:
                errors.append(ConfigInvalid(f"{path}.symbol", environment,
                                            f"duplicate asset {symbol!r}"))
            seen.add(symbol)

    def _check_step(self, config, environment, step, errors):
        for module in STEP_REQUIREMENTS[step]:
            path = field_path(module)
            self._capture(errors, environment, path,
                          lambda module=module, path=path: validate_address(
                              config.address(module), name=path.split('.')[-1]))

        if step is DeploymentStep.VAMM:
            self._check_curve(config, environment, errors)

    def _check_curve(self, config, environment, errors):
        """Reserves must be live values when the vamm is instantiated."""
        vamm = config.vamm_init_msg
        reserves = {}

        for name in RESERVE_FIELDS:
            try:
                reserves[name] = validate_uint_string(getattr(vamm, name))
            except ValidationError:
                return  # reported by the template checks

            if reserves[name] == 0:
                errors.append(ConfigInvalid(
                    f"vammInitMsg.{name}", environment,
                    f"{name} must be strictly positive at deployment"))

        k = reserves['quote_asset_reserve'] * reserves['base_asset_reserve']
        if k > MAX_UINT256:
            errors.append(ConfigInvalid(
                "vammInitMsg.quote_asset_reserve", environment,
                f"reserve product {k} does not fit in 256 bits"))


_validator = ConfigValidator()


def validate_config(config: DeployConfig,
                    environment: Optional[str],
                    step: Optional[DeploymentStep] = None,
                    deployable: bool = False) -> DeployConfig:
    """Validate with the shared validator; see ConfigValidator.validate."""
    return _validator.validate(config, environment, step=step, deployable=deployable)
