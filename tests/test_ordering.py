"""
Tests for deployment ordering.
"""
import pytest

from deployment.models import Module
from deployment.ordering import (
    DEPLOY_ORDER,
    DeploymentStep,
    build_init_msg,
    deployment_plan,
    is_ready,
    missing_dependencies,
    next_step,
    parse_step,
)
from utils.exceptions import ConfigInvalid


class TestDeployOrder:
    """Test the fixed dependency order."""

    def test_order(self):
        """Test pricefeed, insurance fund, engine, vamm."""
        assert DEPLOY_ORDER == (
            DeploymentStep.PRICEFEED,
            DeploymentStep.INSURANCE_FUND,
            DeploymentStep.ENGINE,
            DeploymentStep.VAMM,
        )

    def test_parse_step(self):
        """Test step name parsing."""
        assert parse_step('ENGINE') is DeploymentStep.ENGINE
        assert parse_step(DeploymentStep.VAMM) is DeploymentStep.VAMM
        with pytest.raises(ValueError):
            parse_step('oracle')

    def test_plan_for_template(self, juno_config):
        """Test what an untouched record is waiting on."""
        plan = dict(deployment_plan(juno_config))

        assert plan[DeploymentStep.PRICEFEED] == (Module.ORACLE_HUB,)
        assert plan[DeploymentStep.INSURANCE_FUND] == ()
        assert plan[DeploymentStep.ENGINE] == (Module.INSURANCE_FUND, Module.FEE_POOL)
        assert plan[DeploymentStep.VAMM] == (Module.PRICEFEED,)

    def test_plan_follows_resolution(self, juno_config):
        """Test that resolving addresses unblocks later steps."""
        config = (juno_config
                  .with_address('insurance_fund', 'addr2')
                  .with_address('fee_pool', 'addr3'))

        assert is_ready(config, DeploymentStep.ENGINE)
        assert not is_ready(config, DeploymentStep.VAMM)
        assert missing_dependencies(config, 'vamm') == (Module.PRICEFEED,)

    def test_next_step(self, juno_config):
        """Test walking the steps as addresses come in."""
        assert next_step(juno_config) is DeploymentStep.PRICEFEED

        config = juno_config.with_address('pricefeed', 'feed')
        assert next_step(config) is DeploymentStep.INSURANCE_FUND

        config = config.with_address('insurance_fund', 'fund')
        assert next_step(config) is DeploymentStep.ENGINE
        assert next_step(config, completed=['engine']) is DeploymentStep.VAMM
        assert next_step(config, completed=[DeploymentStep.ENGINE, DeploymentStep.VAMM]) is None


class TestBuildInitMsg:
    """Test instantiate payloads."""

    def test_insurance_fund_from_template(self, local_config):
        """Test the step without dependencies."""
        assert build_init_msg(local_config, 'local', DeploymentStep.INSURANCE_FUND) == {}

    def test_pricefeed_blocked_until_oracle(self, local_config):
        """Test that an unset dependency blocks the step."""
        with pytest.raises(ConfigInvalid) as exc_info:
            build_init_msg(local_config, 'local', DeploymentStep.PRICEFEED)

        assert exc_info.value.field == 'priceFeedInitMsg.oracle_hub_contract'

        config = local_config.with_address('oracle_hub', 'wasm1hub')
        assert build_init_msg(config, 'local', 'pricefeed') == {
            'decimals': 6,
            'oracle_hub_contract': 'wasm1hub',
        }

    def test_engine_payload(self, juno_config):
        """Test the engine message after its dependencies resolve."""
        config = (juno_config
                  .with_address('insurance_fund', 'addr2')
                  .with_address('fee_pool', 'addr3'))

        msg = build_init_msg(config, 'juno_testnet', DeploymentStep.ENGINE)

        assert msg == {
            'decimals': 6,
            'insurance_fund': 'addr2',
            'fee_pool': 'addr3',
            'initial_margin_ratio': '62500',
            'maintenance_margin_ratio': '62500',
            'liquidation_fee': '12500',
        }

    def test_vamm_payload(self, deployable_local):
        """Test the vamm message carries the pricefeed address."""
        msg = build_init_msg(deployable_local, 'local', DeploymentStep.VAMM)

        assert msg['pricefeed'] == 'wasm1feed'
        assert msg['quote_asset_reserve'] == '1200000000000'
        assert msg['base_asset_reserve'] == '1000000000'
        assert msg['funding_period'] == 3_600
