"""
Typed deployment records.

Records are frozen; filling in an address produces a new record via
`with_resolved_address`. Address slots are Optional[str] where None means
the upstream contract has not been deployed yet.
"""
from dataclasses import dataclass, field, fields, replace, MISSING
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from loguru import logger

from config.constants import DEFAULT_DECIMALS
from utils.exceptions import ConfigInvalid
from utils.fixed_point import ratio, to_decimal
from utils.validators import ValidationError, validate_address, validate_dict


class Module(str, Enum):
    """Address slots filled in as upstream contracts are deployed."""
    ORACLE_HUB = "oracle_hub"
    INSURANCE_FUND = "insurance_fund"
    FEE_POOL = "fee_pool"
    ELIGIBLE_COLLATERAL = "eligible_collateral"
    PRICEFEED = "pricefeed"

    @classmethod
    def parse(cls, value: Union["Module", str]) -> "Module":
        """Accept a Module, its value, or the name of the field it fills."""
        if isinstance(value, cls):
            return value

        key = str(value).strip().lower()
        for module in cls:
            if key in (module.value, ADDRESS_FIELDS[module][1]):
                return module

        raise ValueError(f"Unknown module {value!r}. "
                         f"Available: {[m.value for m in cls]}")


# Module -> (DeployConfig attribute, init message field)
ADDRESS_FIELDS = {
    Module.ORACLE_HUB: ('price_feed_init_msg', 'oracle_hub_contract'),
    Module.INSURANCE_FUND: ('engine_init_msg', 'insurance_fund'),
    Module.FEE_POOL: ('engine_init_msg', 'fee_pool'),
    Module.ELIGIBLE_COLLATERAL: ('engine_init_msg', 'eligible_collateral'),
    Module.PRICEFEED: ('vamm_init_msg', 'pricefeed'),
}

# DeployConfig attribute -> key in the serialized record
SECTION_KEYS = {
    'initial_assets': 'initialAssets',
    'insurance_fund_init_msg': 'insuranceFundInitMsg',
    'price_feed_init_msg': 'priceFeedInitMsg',
    'engine_init_msg': 'engineInitMsg',
    'vamm_init_msg': 'vammInitMsg',
}


def field_path(module: Union[Module, str]) -> str:
    """Dotted path of a module's address slot, e.g. 'engineInitMsg.fee_pool'."""
    section_attr, field_name = ADDRESS_FIELDS[Module.parse(module)]
    return f"{SECTION_KEYS[section_attr]}.{field_name}"


class _Record:
    """
    Shared (de)serialization for init messages.

    Subclasses list which fields are integers, fixed-point strings and
    optional addresses; everything else is a plain string.
    """
    SECTION = ""
    INT_FIELDS: Tuple[str, ...] = ()
    NUMERIC_FIELDS: Tuple[str, ...] = ()
    OPTIONAL_ADDRESSES: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]):
        names = [f.name for f in fields(cls)]
        required = [f.name for f in fields(cls)
                    if f.default is MISSING and f.default_factory is MISSING]
        try:
            validate_dict(raw, required_keys=required, allowed_keys=names, name=cls.SECTION)
        except ValidationError as e:
            raise ConfigInvalid(cls.SECTION, None, str(e))

        values = {}
        for name, value in raw.items():
            path = f"{cls.SECTION}.{name}"
            if name in cls.INT_FIELDS:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigInvalid(path, None, f"must be an integer, got {value!r}")
            elif name in cls.NUMERIC_FIELDS:
                if isinstance(value, int) and not isinstance(value, bool):
                    value = str(value)
                elif not isinstance(value, str):
                    raise ConfigInvalid(path, None, f"must be an integer string, got {value!r}")
            elif name in cls.OPTIONAL_ADDRESSES:
                if value == "":
                    value = None
                elif value is not None and not isinstance(value, str):
                    raise ConfigInvalid(path, None, f"must be an address string, got {value!r}")
            elif not isinstance(value, str):
                raise ConfigInvalid(path, None, f"must be a string, got {value!r}")
            values[name] = value

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Init message payload; unset addresses are omitted."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class InitialAsset(_Record):
    """Collateral asset to whitelist once the engine is up."""
    symbol: str
    address: Optional[str] = None
    decimals: int = DEFAULT_DECIMALS

    SECTION = "initialAssets"
    INT_FIELDS = ('decimals',)
    OPTIONAL_ADDRESSES = ('address',)


@dataclass(frozen=True)
class InsuranceFundInitMsg(_Record):
    SECTION = "insuranceFundInitMsg"


@dataclass(frozen=True)
class PriceFeedInitMsg(_Record):
    decimals: int
    oracle_hub_contract: Optional[str] = None

    SECTION = "priceFeedInitMsg"
    INT_FIELDS = ('decimals',)
    OPTIONAL_ADDRESSES = ('oracle_hub_contract',)


@dataclass(frozen=True)
class EngineInitMsg(_Record):
    """Margin engine parameters. Ratios are fixed-point strings."""
    decimals: int
    initial_margin_ratio: str
    maintenance_margin_ratio: str
    liquidation_fee: str
    insurance_fund: Optional[str] = None
    fee_pool: Optional[str] = None
    eligible_collateral: Optional[str] = None

    SECTION = "engineInitMsg"
    INT_FIELDS = ('decimals',)
    NUMERIC_FIELDS = ('initial_margin_ratio', 'maintenance_margin_ratio', 'liquidation_fee')
    OPTIONAL_ADDRESSES = ('insurance_fund', 'fee_pool', 'eligible_collateral')

    def max_leverage(self) -> Decimal:
        """Leverage allowed by the initial margin ratio (62500 -> 16x)."""
        margin = to_decimal(self.initial_margin_ratio, self.decimals, name="initial_margin_ratio")
        if margin == 0:
            raise ValidationError("initial_margin_ratio is zero, leverage is unbounded")
        return Decimal(1) / margin


@dataclass(frozen=True)
class VammInitMsg(_Record):
    """
    Virtual AMM parameters.

    The reserves seed the constant-product curve: k = quote * base and the
    opening price is quote / base.
    """
    decimals: int
    quote_asset: str
    base_asset: str
    quote_asset_reserve: str
    base_asset_reserve: str
    funding_period: int
    toll_ratio: str
    spread_ratio: str
    fluctuation_limit_ratio: str
    pricefeed: Optional[str] = None

    SECTION = "vammInitMsg"
    INT_FIELDS = ('decimals', 'funding_period')
    NUMERIC_FIELDS = ('quote_asset_reserve', 'base_asset_reserve',
                      'toll_ratio', 'spread_ratio', 'fluctuation_limit_ratio')
    OPTIONAL_ADDRESSES = ('pricefeed',)

    @property
    def pair(self) -> str:
        return f"{self.base_asset}/{self.quote_asset}"

    def initial_k(self) -> int:
        """Constant-product invariant of the seed reserves."""
        return int(self.quote_asset_reserve) * int(self.base_asset_reserve)

    def initial_spot_price(self) -> Decimal:
        """Opening price of one base unit in quote units."""
        return ratio(self.quote_asset_reserve, self.base_asset_reserve)


@dataclass(frozen=True)
class DeployConfig:
    """Everything needed to instantiate the four contract modules of one environment."""
    price_feed_init_msg: PriceFeedInitMsg
    engine_init_msg: EngineInitMsg
    vamm_init_msg: VammInitMsg
    insurance_fund_init_msg: InsuranceFundInitMsg = field(default_factory=InsuranceFundInitMsg)
    initial_assets: Tuple[InitialAsset, ...] = ()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DeployConfig":
        """Build from the serialized form (camelCase sections)."""
        try:
            validate_dict(
                raw,
                required_keys=['priceFeedInitMsg', 'engineInitMsg', 'vammInitMsg'],
                allowed_keys=SECTION_KEYS.values(),
                name="config",
            )
        except ValidationError as e:
            raise ConfigInvalid("config", None, str(e))

        assets = raw.get('initialAssets', [])
        if not isinstance(assets, (list, tuple)):
            raise ConfigInvalid("initialAssets", None, f"must be a list, got {type(assets).__name__}")

        return cls(
            price_feed_init_msg=PriceFeedInitMsg.from_dict(raw['priceFeedInitMsg']),
            engine_init_msg=EngineInitMsg.from_dict(raw['engineInitMsg']),
            vamm_init_msg=VammInitMsg.from_dict(raw['vammInitMsg']),
            insurance_fund_init_msg=InsuranceFundInitMsg.from_dict(raw.get('insuranceFundInitMsg', {})),
            initial_assets=tuple(InitialAsset.from_dict(a) for a in assets),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'initialAssets': [asset.to_dict() for asset in self.initial_assets],
            'insuranceFundInitMsg': self.insurance_fund_init_msg.to_dict(),
            'priceFeedInitMsg': self.price_feed_init_msg.to_dict(),
            'engineInitMsg': self.engine_init_msg.to_dict(),
            'vammInitMsg': self.vamm_init_msg.to_dict(),
        }

    def address(self, module: Union[Module, str]) -> Optional[str]:
        section_attr, field_name = ADDRESS_FIELDS[Module.parse(module)]
        return getattr(getattr(self, section_attr), field_name)

    def is_resolved(self, module: Union[Module, str]) -> bool:
        return self.address(module) is not None

    def unresolved(self) -> Tuple[Module, ...]:
        return tuple(m for m in Module if not self.is_resolved(m))

    def with_address(self, module: Union[Module, str], address: str) -> "DeployConfig":
        return with_resolved_address(self, module, address)


def with_resolved_address(config: DeployConfig,
                          module: Union[Module, str],
                          address: str) -> DeployConfig:
    """
    Return a copy of `config` with one address slot populated.

    The input record is left untouched. Resolving a slot to the address it
    already holds returns an equal record.

    Raises:
        ValueError: unknown module
        ConfigInvalid: empty or malformed address
    """
    module = Module.parse(module)
    section_attr, field_name = ADDRESS_FIELDS[module]
    path = field_path(module)

    try:
        address = validate_address(address, name=path)
    except ValidationError as e:
        raise ConfigInvalid(path, None, str(e))

    section = getattr(config, section_attr)
    current = getattr(section, field_name)

    if current == address:
        return config

    if current is not None:
        logger.warning(f"Replacing {path}: {current} -> {address}")

    return replace(config, **{section_attr: replace(section, **{field_name: address})})
