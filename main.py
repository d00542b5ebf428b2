"""
Command line entry point for inspecting deployment configs.

Reads, validates and prints records; it never submits transactions.

    perp-deploy-config list
    perp-deploy-config show juno_testnet
    perp-deploy-config validate local --step vamm
    perp-deploy-config resolve juno_testnet insurance_fund juno1... --record
"""
import argparse
import json
import sys

from loguru import logger

from config.settings import DATABASE_URL, DEPLOY_CONFIG_FILE, DEPLOY_ENVIRONMENT, LOG_FILE, LOG_LEVEL
from deployment.models import Module
from deployment.ordering import DEPLOY_ORDER, deployment_plan
from deployment.registry import load_registry
from deployment.validation import ConfigValidator
from utils.exceptions import ConfigInvalid, ConfigNotFound
from utils.fixed_point import to_decimal
from utils.validators import ValidationError
from utils.logging_config import setup_logging

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Inspect perp contract deployment configs')
    parser.add_argument('--config-file', default=DEPLOY_CONFIG_FILE,
                        help='JSON registry file (defaults to the bundled environments)')
    parser.add_argument('--database-url', default=DATABASE_URL, help='Address ledger database')
    parser.add_argument('--log-level', default=LOG_LEVEL, help='Logging level')
    parser.add_argument('--log-file', default=LOG_FILE, help='Also log to this file')

    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='List environments')

    for name, help_text in (('show', 'Print an environment record'),
                            ('plan', 'Print deployment order and missing addresses'),
                            ('summary', 'Print initial price, k and leverage')):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument('environment', nargs='?', default=DEPLOY_ENVIRONMENT)
        cmd.add_argument('--with-ledger', action='store_true',
                         help='Apply addresses recorded in the ledger first')

    validate = sub.add_parser('validate', help='Validate an environment record')
    validate.add_argument('environment', nargs='?', default=DEPLOY_ENVIRONMENT)
    validate.add_argument('--step', choices=[s.value for s in DEPLOY_ORDER],
                          help='Also require what this step depends on')
    validate.add_argument('--deployable', action='store_true',
                          help='Require every address to be resolved')
    validate.add_argument('--with-ledger', action='store_true',
                          help='Apply addresses recorded in the ledger first')

    resolve = sub.add_parser('resolve', help='Fill in a contract address')
    resolve.add_argument('environment')
    resolve.add_argument('module', choices=[m.value for m in Module])
    resolve.add_argument('address')
    resolve.add_argument('--record', action='store_true',
                         help='Store the address in the ledger')

    return parser


def _open_store(args, environments=None):
    from storage.database import DeploymentStore
    return DeploymentStore(args.database_url, environments=environments)


def _load_config(registry, args):
    config = registry.get(args.environment)
    if getattr(args, 'with_ledger', False):
        config = _open_store(args).apply_addresses(config, args.environment)
    return config


def _print(payload):
    print(json.dumps(payload, indent=2, default=str))


def _fmt(value) -> str:
    """Plain notation for Decimals (20, not 2E+1)."""
    return format(value, 'f')


def run(args) -> int:
    registry = load_registry(args.config_file)

    if args.command == 'list':
        _print(registry.names())
        return EXIT_OK

    if args.command == 'resolve':
        config = registry.resolve(args.environment, args.module, args.address)
        if args.record:
            _open_store(args, registry.names()).record_address(args.environment, args.module, args.address)
        _print(config.to_dict())
        return EXIT_OK

    config = _load_config(registry, args)

    if args.command == 'show':
        _print(config.to_dict())

    elif args.command == 'validate':
        ConfigValidator().validate(config, args.environment,
                                   step=args.step, deployable=args.deployable)
        logger.info(f"✓ {args.environment} is valid")
        _print({'environment': args.environment, 'valid': True})

    elif args.command == 'plan':
        _print([
            {'step': step.value, 'ready': not missing, 'missing': [m.value for m in missing]}
            for step, missing in deployment_plan(config)
        ])

    elif args.command == 'summary':
        ConfigValidator().validate(config, args.environment)
        engine = config.engine_init_msg
        vamm = config.vamm_init_msg
        _print({
            'environment': args.environment,
            'pair': vamm.pair,
            'initial_price': _fmt(vamm.initial_spot_price()) if int(vamm.base_asset_reserve) else None,
            'k': vamm.initial_k(),
            'max_leverage': _fmt(engine.max_leverage()) if int(engine.initial_margin_ratio) else None,
            'funding_period_seconds': vamm.funding_period,
            'toll_ratio': _fmt(to_decimal(vamm.toll_ratio, vamm.decimals)),
            'unresolved': [m.value for m in config.unresolved()],
        })

    return EXIT_OK


def main(argv=None) -> int:
    """Parse arguments, run one command, return the exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(log_file=args.log_file, log_level=args.log_level)

    try:
        return run(args)
    except ConfigNotFound as e:
        logger.error(f"❌ {e}")
        return EXIT_NOT_FOUND
    except (ConfigInvalid, ValidationError) as e:
        logger.error(f"❌ {e}")
        return EXIT_INVALID


if __name__ == '__main__':
    sys.exit(main())
