"""
Environment name -> deployment record.

The registry is read-mostly: a deployer looks up one record, and as each
upstream contract comes up it resolves the new address into a fresh record.
Old records are never altered, so every step of a deployment can be
audited from `history()`.
"""
import json
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from loguru import logger

from config.environments import DEPLOY_CONFIGS, merge_config
from config.settings import DEPLOY_CONFIG_FILE
from deployment.models import DeployConfig, Module, with_resolved_address
from utils.exceptions import ConfigInvalid, ConfigNotFound, DuplicateEnvironment
from utils.logging_config import get_logger
from utils.validators import ValidationError, validate_dict

TEMPLATE_KEYS = frozenset({"defaults", "environments"})


def _mapping_or_empty(value, field: str, environment: Optional[str]) -> dict:
    """A template section: a JSON object, or null for an empty one."""
    if value is None:
        return {}
    try:
        return validate_dict(value, name=field)
    except ValidationError as e:
        raise ConfigInvalid(field, environment, str(e)) from e


class ConfigRegistry:
    """
    In-memory store of one `DeployConfig` per environment.

    Example:
        registry = ConfigRegistry.default()
        config = registry.get('juno_testnet')
        config = registry.resolve('juno_testnet', 'insurance_fund', 'juno1...')
    """

    def __init__(self, configs: Optional[Mapping[str, DeployConfig]] = None):
        self._configs: Dict[str, DeployConfig] = {}
        self._history: Dict[str, List[Tuple[Module, str]]] = {}

        for environment, config in (configs or {}).items():
            self.register(environment, config)

    def get(self, environment: str) -> DeployConfig:
        """
        Get the current record for an environment.

        Raises:
            ConfigNotFound if the name is not registered
        """
        try:
            config = self._configs[environment]
        except (KeyError, TypeError):
            raise ConfigNotFound(environment, available=self.names()) from None

        logger.debug(f"Loaded deployment config for {environment}")
        return config

    def register(self, environment: str, config: DeployConfig):
        """Add a new environment. Names are unique."""
        if not isinstance(environment, str) or not environment.strip():
            raise ValueError(f"Environment name must be a non-empty string, got {environment!r}")

        if environment in self._configs:
            raise DuplicateEnvironment(environment)

        if not isinstance(config, DeployConfig):
            raise TypeError(f"Expected DeployConfig, got {type(config).__name__}")

        self._configs[environment] = config
        self._history[environment] = []
        logger.debug(f"Registered environment {environment}")

    def resolve(self, environment: str, module: Union[Module, str], address: str) -> DeployConfig:
        """
        Fill in one address for an environment and keep the result.

        The previously returned record is not modified.

        Returns:
            The updated record
        """
        config = self.get(environment)
        module = Module.parse(module)

        try:
            updated = with_resolved_address(config, module, address)
        except ConfigInvalid as e:
            raise ConfigInvalid(e.field, environment, e.reason) from e

        self._configs[environment] = updated
        self._history[environment].append((module, address))
        get_logger(environment).info(f"Resolved {module.value} -> {address}")

        return updated

    def history(self, environment: str) -> Tuple[Tuple[Module, str], ...]:
        """Resolutions applied to an environment, oldest first."""
        self.get(environment)
        return tuple(self._history[environment])

    def names(self) -> List[str]:
        return sorted(self._configs)

    def to_dict(self) -> Dict[str, dict]:
        return {name: self._configs[name].to_dict() for name in self.names()}

    def to_file(self, path: Union[str, Path]):
        """Write every record to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as fh:
            json.dump(self.to_dict(), fh, indent=2)
            fh.write('\n')

        logger.info(f"Saved {len(self)} deployment configs to {path}")

    def __contains__(self, environment: object) -> bool:
        return environment in self._configs

    def __len__(self) -> int:
        return len(self._configs)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    @classmethod
    def from_mapping(cls, raw: Mapping[str, dict]) -> "ConfigRegistry":
        """
        Build from serialized records.

        Accepts either {environment: record} or a template form
        {"defaults": {...}, "environments": {environment: override}} where
        each override is merged on top of the defaults. A mapping whose
        keys are only "defaults" and "environments" is the template form,
        so those two names cannot be used as environment names.
        """
        if not isinstance(raw, Mapping):
            raise ConfigInvalid("registry", None, f"must be a mapping, got {type(raw).__name__}")

        if 'environments' in raw and set(raw) <= TEMPLATE_KEYS:
            defaults = _mapping_or_empty(raw.get('defaults'), "defaults", None)
            overrides = _mapping_or_empty(raw['environments'], "environments", None)
            records = {
                name: merge_config(defaults, _mapping_or_empty(override, f"environments.{name}", name))
                for name, override in overrides.items()
            }
        else:
            reserved = sorted(TEMPLATE_KEYS & set(raw))
            if reserved:
                raise ConfigInvalid("registry", None,
                                    f"{reserved} are reserved for the template form, "
                                    f"not environment names")
            records = dict(raw)

        registry = cls()
        for environment, record in records.items():
            try:
                config = DeployConfig.from_dict(record)
            except ConfigInvalid as e:
                raise ConfigInvalid(e.field, environment, e.reason) from e
            registry.register(environment, config)

        return registry

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ConfigRegistry":
        """Load records from a JSON file."""
        path = Path(path)

        try:
            with open(path, 'r', encoding='utf-8') as fh:
                raw = json.load(fh)
        except OSError as e:
            raise ConfigInvalid("registry", None, f"cannot read {path}: {e.strerror or e}") from e
        except json.JSONDecodeError as e:
            raise ConfigInvalid("registry", None, f"{path} is not valid JSON: {e}") from e

        registry = cls.from_mapping(raw)
        logger.info(f"Loaded {len(registry)} deployment configs from {path}")
        return registry

    @classmethod
    def default(cls) -> "ConfigRegistry":
        """Registry built from the bundled environment tables."""
        return cls.from_mapping(DEPLOY_CONFIGS)


def load_registry(path: Optional[Union[str, Path]] = DEPLOY_CONFIG_FILE) -> ConfigRegistry:
    """Registry from `path` when given, bundled environments otherwise."""
    if path:
        return ConfigRegistry.from_file(path)
    return ConfigRegistry.default()


_default_registry: Optional[ConfigRegistry] = None


def get_config(environment: str) -> DeployConfig:
    """Look up a record in the process-wide registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = load_registry()
    return _default_registry.get(environment)
