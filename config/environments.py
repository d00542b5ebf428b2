"""
Per-environment deployment parameters.

Every environment is the shared template with a small override applied.
Addresses are None until the upstream contract is deployed.
"""
import copy

from config.constants import DEFAULT_DECIMALS, DEFAULT_FUNDING_PERIOD
from utils.exceptions import ConfigNotFound

DEFAULT_DEPLOY_CONFIG = {
    'initialAssets': [],
    'insuranceFundInitMsg': {},
    'priceFeedInitMsg': {
        'decimals': DEFAULT_DECIMALS,
        'oracle_hub_contract': None,
    },
    'engineInitMsg': {
        'decimals': DEFAULT_DECIMALS,
        'insurance_fund': None,
        'fee_pool': None,
        'eligible_collateral': None,
        'initial_margin_ratio': '0',
        'maintenance_margin_ratio': '0',
        'liquidation_fee': '0',
    },
    'vammInitMsg': {
        'decimals': DEFAULT_DECIMALS,
        'pricefeed': None,
        'quote_asset': '',
        'base_asset': '',
        'quote_asset_reserve': '0',
        'base_asset_reserve': '0',
        'funding_period': DEFAULT_FUNDING_PERIOD,
        'toll_ratio': '0',
        'spread_ratio': '0',            # disabled
        'fluctuation_limit_ratio': '0', # disabled
    },
}

ENVIRONMENT_OVERRIDES = {
    'juno_testnet': {
        'engineInitMsg': {
            'initial_margin_ratio': '62500',      # 6.25%
            'maintenance_margin_ratio': '62500',
            'liquidation_fee': '12500',
        },
        'vammInitMsg': {
            'quote_asset': 'mUSD',
            'base_asset': 'juno',
            'quote_asset_reserve': '2800000000',
            'base_asset_reserve': '1000000000',
            'toll_ratio': '1250',
        },
    },

    'osmo_testnet': {
        'engineInitMsg': {
            'initial_margin_ratio': '62500',
            'maintenance_margin_ratio': '62500',
            'liquidation_fee': '12500',
        },
        'vammInitMsg': {
            'quote_asset': 'mUSD',
            'base_asset': 'osmo',
            'quote_asset_reserve': '1640000000',
            'base_asset_reserve': '1000000000',
            'toll_ratio': '1250',
        },
    },

    'local': {
        'engineInitMsg': {
            'initial_margin_ratio': '50000',      # 5%
            'maintenance_margin_ratio': '50000',
            'liquidation_fee': '50000',
        },
        'vammInitMsg': {
            'quote_asset': 'USDC',
            'base_asset': 'ETH',
            'quote_asset_reserve': '1200000000000',  # ETH seeded at 1200 USDC
            'base_asset_reserve': '1000000000',
        },
    },
}


def merge_config(base: dict, override: dict) -> dict:
    """
    Recursively merge `override` on top of `base`.

    Nested dicts are merged key by key, anything else in the override
    replaces the base value. Neither input is modified.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


DEPLOY_CONFIGS = {
    name: merge_config(DEFAULT_DEPLOY_CONFIG, override)
    for name, override in ENVIRONMENT_OVERRIDES.items()
}


def get_deploy_config(environment: str) -> dict:
    """Get the raw deployment record for an environment."""
    if environment not in DEPLOY_CONFIGS:
        raise ConfigNotFound(environment, available=list(DEPLOY_CONFIGS))
    return copy.deepcopy(DEPLOY_CONFIGS[environment])
