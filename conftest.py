"""
Shared pytest fixtures.
"""
import pytest

from config.environments import get_deploy_config
from deployment.registry import ConfigRegistry


@pytest.fixture
def registry():
    """Fresh registry of the bundled environments."""
    return ConfigRegistry.default()


@pytest.fixture
def juno_config(registry):
    return registry.get('juno_testnet')


@pytest.fixture
def local_config(registry):
    return registry.get('local')


@pytest.fixture
def raw_local():
    """Serialized local record, safe to modify."""
    return get_deploy_config('local')


@pytest.fixture
def deployable_local(local_config):
    """Local record with every address filled in."""
    return (local_config
            .with_address('oracle_hub', 'wasm1hub')
            .with_address('insurance_fund', 'wasm1fund')
            .with_address('fee_pool', 'wasm1fees')
            .with_address('eligible_collateral', 'wasm1usdc')
            .with_address('pricefeed', 'wasm1feed'))
