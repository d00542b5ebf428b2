"""
Input validation utilities.
"""
import re
from typing import Any, Iterable, List, Optional


class ValidationError(Exception):
    """Custom validation error."""
    pass


_UINT_PATTERN = re.compile(r'[0-9]+')


def validate_integer(value: Any,
                     min_value: Optional[int] = None,
                     max_value: Optional[int] = None,
                     name: str = "value") -> int:
    """
    Validate an integer input.

    Args:
        value: Value to validate (bools are rejected)
        min_value: Minimum allowed value
        max_value: Maximum allowed value
        name: Name for error messages

    Returns:
        Validated int

    Raises:
        ValidationError if invalid
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")

    if min_value is not None and value < min_value:
        raise ValidationError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{name} must be <= {max_value}, got {value}")

    return value


def validate_uint_string(value: Any,
                         max_value: Optional[int] = None,
                         name: str = "value") -> int:
    """
    Validate a fixed-point integer string such as "62500".

    Only base-10 digits are accepted: no sign, no decimal point,
    no surrounding whitespace.

    Returns:
        The parsed integer
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be an integer string, got {type(value).__name__}")

    if not _UINT_PATTERN.fullmatch(value):
        raise ValidationError(f"{name} must be a non-negative base-10 integer string, got {value!r}")

    parsed = int(value)

    if max_value is not None and parsed > max_value:
        raise ValidationError(f"{name} must be <= {max_value}, got {value}")

    return parsed


def validate_string(value: Any,
                    allowed_values: Optional[List[str]] = None,
                    allow_empty: bool = True,
                    name: str = "value") -> str:
    """
    Validate string input.

    Args:
        value: Value to validate
        allowed_values: List of allowed values
        allow_empty: Whether "" is acceptable
        name: Name for error messages

    Returns:
        Validated string

    Raises:
        ValidationError if invalid
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be string, got {type(value).__name__}")

    if not allow_empty and not value.strip():
        raise ValidationError(f"{name} cannot be empty")

    if allowed_values and value not in allowed_values:
        raise ValidationError(f"{name} must be one of {allowed_values}, got {value}")

    return value


def validate_address(value: Any, name: str = "address") -> str:
    """
    Validate a contract address.

    Addresses are opaque to this layer: any non-empty string without
    whitespace is accepted.
    """
    if value is None:
        raise ValidationError(f"{name} is not set")

    value = validate_string(value, allow_empty=False, name=name)

    if any(ch.isspace() for ch in value):
        raise ValidationError(f"{name} must not contain whitespace, got {value!r}")

    return value


def validate_dict(d: Any,
                  required_keys: Optional[Iterable[str]] = None,
                  allowed_keys: Optional[Iterable[str]] = None,
                  name: str = "dict") -> dict:
    """
    Validate dictionary.

    Args:
        d: Dictionary to validate
        required_keys: Keys that must be present
        allowed_keys: Keys that may be present (None = anything)
        name: Name for error messages

    Returns:
        Validated dict

    Raises:
        ValidationError if invalid
    """
    if not isinstance(d, dict):
        raise ValidationError(f"{name} must be dict, got {type(d).__name__}")

    if required_keys:
        missing_keys = sorted(set(required_keys) - set(d.keys()))
        if missing_keys:
            raise ValidationError(f"{name} missing required keys: {missing_keys}")

    if allowed_keys is not None:
        unknown_keys = sorted(set(d.keys()) - set(allowed_keys))
        if unknown_keys:
            raise ValidationError(f"{name} has unknown keys: {unknown_keys}")

    return d


class Validator:
    """
    Chainable validator class.

    Example:
        ratio = Validator("62500", "toll_ratio").is_uint_string().at_most(10**6).get()
    """

    def __init__(self, value: Any, name: str = "value"):
        self.value = value
        self.name = name

    def is_uint_string(self):
        """Parse a non-negative integer string into an int."""
        self.value = validate_uint_string(self.value, name=self.name)
        return self

    def is_positive(self):
        """Validate that value is strictly positive."""
        self.value = validate_integer(self.value, min_value=1, name=self.name)
        return self

    def at_most(self, max_value: int):
        """Validate an upper bound."""
        self.value = validate_integer(self.value, max_value=max_value, name=self.name)
        return self

    def get(self):
        """Get validated value."""
        return self.value
