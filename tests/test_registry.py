"""
Tests for the configuration registry.
"""
import copy
import json

import pytest
from loguru import logger

from config.environments import DEPLOY_CONFIGS, ENVIRONMENT_OVERRIDES, get_deploy_config, merge_config
from deployment.models import DeployConfig, Module
from deployment.registry import ConfigRegistry, load_registry
from deployment.validation import validate_config
from utils.exceptions import ConfigInvalid, ConfigNotFound, DuplicateEnvironment


class TestEnvironmentTables:
    """Test the bundled template and overrides."""

    def test_every_override_is_registered(self):
        """Test that each override becomes one record."""
        assert set(DEPLOY_CONFIGS) == {'juno_testnet', 'osmo_testnet', 'local'}
        assert set(DEPLOY_CONFIGS) == set(ENVIRONMENT_OVERRIDES)

    def test_merge_keeps_template_defaults(self):
        """Test that untouched template values survive the merge."""
        juno = DEPLOY_CONFIGS['juno_testnet']

        assert juno['vammInitMsg']['funding_period'] == 3_600
        assert juno['vammInitMsg']['spread_ratio'] == '0'
        assert juno['vammInitMsg']['fluctuation_limit_ratio'] == '0'
        assert juno['engineInitMsg']['decimals'] == 6

    def test_merge_does_not_mutate_inputs(self):
        """Test that merge_config copies instead of aliasing."""
        base = {'a': {'b': 1, 'c': [1]}, 'd': 2}
        override = {'a': {'b': 5}}
        saved_base = copy.deepcopy(base)

        merged = merge_config(base, override)
        merged['a']['c'].append(2)

        assert merged['a'] == {'b': 5, 'c': [1, 2]}
        assert base == saved_base

    def test_get_deploy_config_unknown(self):
        """Test raw lookup of an unknown environment."""
        with pytest.raises(ConfigNotFound):
            get_deploy_config('mainnet')

    def test_get_deploy_config_returns_copy(self):
        """Test that editing a raw record leaves the table intact."""
        raw = get_deploy_config('local')
        raw['vammInitMsg']['base_asset'] = 'BTC'

        assert DEPLOY_CONFIGS['local']['vammInitMsg']['base_asset'] == 'ETH'


class TestConfigRegistry:
    """Test registry lookups."""

    @pytest.mark.parametrize('environment', ['juno_testnet', 'osmo_testnet', 'local'])
    def test_get_known_environment(self, registry, environment):
        """Test that every record has all four messages and shared decimals."""
        config = registry.get(environment)

        assert isinstance(config, DeployConfig)
        assert config.price_feed_init_msg is not None
        assert config.insurance_fund_init_msg is not None
        assert config.engine_init_msg is not None
        assert config.vamm_init_msg is not None

        decimals = {
            config.price_feed_init_msg.decimals,
            config.engine_init_msg.decimals,
            config.vamm_init_msg.decimals,
        }
        assert decimals == {6}

    @pytest.mark.parametrize('environment', ['juno_testnet', 'osmo_testnet', 'local'])
    def test_bundled_records_pass_template_validation(self, registry, environment):
        """Test that no bundled record has a malformed field."""
        validate_config(registry.get(environment), environment)

    def test_get_unknown_environment(self, registry):
        """Test that only ConfigNotFound is raised."""
        with pytest.raises(ConfigNotFound) as exc_info:
            registry.get('nonexistent')

        assert exc_info.value.environment == 'nonexistent'
        assert 'local' in exc_info.value.available

    def test_get_unhashable_name(self, registry):
        """Test that odd input still surfaces as ConfigNotFound."""
        with pytest.raises(ConfigNotFound):
            registry.get(['local'])

    def test_juno_values(self, juno_config):
        """Test the juno testnet parameters."""
        engine = juno_config.engine_init_msg
        vamm = juno_config.vamm_init_msg

        assert engine.initial_margin_ratio == '62500'
        assert engine.maintenance_margin_ratio == '62500'
        assert engine.liquidation_fee == '12500'
        assert vamm.quote_asset == 'mUSD'
        assert vamm.base_asset == 'juno'
        assert vamm.toll_ratio == '1250'

    def test_addresses_start_unset(self, juno_config):
        """Test that template addresses load as None, not ''."""
        assert juno_config.price_feed_init_msg.oracle_hub_contract is None
        assert juno_config.engine_init_msg.insurance_fund is None
        assert juno_config.engine_init_msg.fee_pool is None
        assert juno_config.vamm_init_msg.pricefeed is None
        assert set(juno_config.unresolved()) == set(Module)

    def test_names_and_membership(self, registry):
        """Test container helpers."""
        assert registry.names() == ['juno_testnet', 'local', 'osmo_testnet']
        assert 'local' in registry
        assert 'mainnet' not in registry
        assert len(registry) == 3
        assert list(registry) == registry.names()

    def test_duplicate_environment(self, registry, local_config):
        """Test that environment keys are unique."""
        with pytest.raises(DuplicateEnvironment):
            registry.register('local', local_config)

    def test_register_new_environment(self, registry, local_config):
        """Test adding a record."""
        registry.register('devnet', local_config)

        assert registry.get('devnet') is local_config


class TestResolve:
    """Test address fill-in through the registry."""

    def test_resolve_end_to_end(self, registry):
        """Test the juno deployment sequence."""
        original = registry.get('juno_testnet')
        saved = copy.deepcopy(original.to_dict())

        registry.resolve('juno_testnet', 'oracle_hub_contract', 'addr1')
        registry.resolve('juno_testnet', 'insurance_fund', 'addr2')
        config = registry.resolve('juno_testnet', 'fee_pool', 'addr3')

        assert config.price_feed_init_msg.oracle_hub_contract == 'addr1'
        assert config.engine_init_msg.insurance_fund == 'addr2'
        assert config.engine_init_msg.fee_pool == 'addr3'
        assert config.engine_init_msg.initial_margin_ratio == '62500'
        assert registry.get('juno_testnet') is config

        # Earlier record untouched
        assert original.to_dict() == saved
        assert original.engine_init_msg.insurance_fund is None

    def test_history(self, registry):
        """Test that resolutions are recorded in order."""
        registry.resolve('local', Module.PRICEFEED, 'feed')
        registry.resolve('local', 'fee_pool', 'fees')

        assert registry.history('local') == (
            (Module.PRICEFEED, 'feed'),
            (Module.FEE_POOL, 'fees'),
        )
        assert registry.history('juno_testnet') == ()

    def test_resolve_empty_address(self, registry):
        """Test that an empty address names the field and environment."""
        with pytest.raises(ConfigInvalid) as exc_info:
            registry.resolve('local', 'fee_pool', '')

        assert exc_info.value.field == 'engineInitMsg.fee_pool'
        assert exc_info.value.environment == 'local'
        assert registry.history('local') == ()

    def test_resolve_unknown_environment(self, registry):
        """Test resolving against a missing environment."""
        with pytest.raises(ConfigNotFound):
            registry.resolve('mainnet', 'fee_pool', 'addr')


class TestFileBacking:
    """Test JSON loading and saving."""

    def test_round_trip(self, registry, tmp_path):
        """Test that a saved registry loads back equal."""
        registry.resolve('local', 'insurance_fund', 'wasm1fund')
        path = tmp_path / 'configs.json'

        registry.to_file(path)
        loaded = ConfigRegistry.from_file(path)

        assert loaded.names() == registry.names()
        assert loaded.get('local') == registry.get('local')

    def test_template_form(self, tmp_path):
        """Test the defaults + environments file layout."""
        raw = {
            'defaults': get_deploy_config('local'),
            'environments': {
                'devnet': {'vammInitMsg': {'base_asset': 'BTC'}},
                'staging': {},
            },
        }
        path = tmp_path / 'configs.json'
        path.write_text(json.dumps(raw))

        loaded = load_registry(path)

        assert loaded.names() == ['devnet', 'staging']
        assert loaded.get('devnet').vamm_init_msg.base_asset == 'BTC'
        assert loaded.get('devnet').vamm_init_msg.quote_asset == 'USDC'
        assert loaded.get('staging').vamm_init_msg.base_asset == 'ETH'

    def test_invalid_record_names_environment(self):
        """Test that a bad record reports its environment."""
        raw = {'broken': get_deploy_config('local')}
        raw['broken']['engineInitMsg']['decimals'] = '6'

        with pytest.raises(ConfigInvalid) as exc_info:
            ConfigRegistry.from_mapping(raw)

        assert exc_info.value.environment == 'broken'
        assert exc_info.value.field == 'engineInitMsg.decimals'

    def test_invalid_json(self, tmp_path):
        """Test a corrupt registry file."""
        path = tmp_path / 'configs.json'
        path.write_text('{not json')

        with pytest.raises(ConfigInvalid):
            ConfigRegistry.from_file(path)

    def test_load_registry_without_file(self):
        """Test the bundled fallback."""
        assert load_registry(None).names() == ['juno_testnet', 'local', 'osmo_testnet']

    def test_missing_file(self, tmp_path):
        """Test that an absent registry file is a config error."""
        with pytest.raises(ConfigInvalid) as exc_info:
            ConfigRegistry.from_file(tmp_path / 'nope.json')

        assert exc_info.value.field == 'registry'

    @pytest.mark.parametrize('raw, field, environment', [
        ({'environments': {'devnet': 'oops'}}, 'environments.devnet', 'devnet'),
        ({'environments': ['devnet']}, 'environments', None),
        ({'defaults': 'local', 'environments': {'devnet': {}}}, 'defaults', None),
    ])
    def test_template_sections_must_be_objects(self, raw, field, environment):
        """Test malformed template sections."""
        with pytest.raises(ConfigInvalid) as exc_info:
            ConfigRegistry.from_mapping(raw)

        assert exc_info.value.field == field
        assert exc_info.value.environment == environment

    def test_null_override_uses_defaults(self):
        """Test that a null override is an empty one."""
        raw = {'defaults': get_deploy_config('osmo_testnet'), 'environments': {'devnet': None}}

        registry = ConfigRegistry.from_mapping(raw)

        assert registry.get('devnet').vamm_init_msg.base_asset == 'osmo'

    def test_template_key_as_environment_name(self):
        """Test that template keys are reserved in the plain form."""
        raw = {
            'local': get_deploy_config('local'),
            'environments': get_deploy_config('local'),
        }

        with pytest.raises(ConfigInvalid) as exc_info:
            ConfigRegistry.from_mapping(raw)

        assert exc_info.value.field == 'registry'
        assert 'reserved' in exc_info.value.reason


class TestResolveLogging:
    """Test that resolution log lines carry the environment."""

    def test_resolve_binds_environment(self, registry):
        """Test the environment tag on resolve records."""
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="INFO")
        try:
            registry.resolve('osmo_testnet', 'fee_pool', 'osmo1fees')
        finally:
            logger.remove(handler_id)

        resolved = [r for r in records if 'fee_pool' in r['message']]
        assert resolved
        assert resolved[0]['extra']['environment'] == 'osmo_testnet'
