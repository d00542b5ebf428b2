"""
Utility functions module.
"""

from utils.validators import (
    ValidationError,
    validate_integer,
    validate_uint_string,
    validate_string,
    validate_address,
    validate_dict,
    Validator,
)

from utils.exceptions import (
    ConfigError,
    ConfigNotFound,
    ConfigInvalid,
    DuplicateEnvironment,
)

from utils.fixed_point import (
    scale_for,
    to_decimal,
    from_decimal,
    ratio,
)

from utils.logging_config import (
    setup_logging,
    get_logger,
)

__all__ = [
    # Validators
    'ValidationError',
    'validate_integer',
    'validate_uint_string',
    'validate_string',
    'validate_address',
    'validate_dict',
    'Validator',

    # Errors
    'ConfigError',
    'ConfigNotFound',
    'ConfigInvalid',
    'DuplicateEnvironment',

    # Fixed point
    'scale_for',
    'to_decimal',
    'from_decimal',
    'ratio',

    # Logging
    'setup_logging',
    'get_logger',
]
