"""
Runtime validation and error types

Numeric fluctuations (utilization, demand, noise) are clamped by the engine,
never rejected. What is rejected here are configuration and programmer
errors: invalid fee-market parameters, broken catalog references, bad counts
and NaN inputs.
"""

import logging
from functools import wraps
from numbers import Integral
from typing import Iterable

from .units import is_real_number


class BlockspaceSimError(ValueError):
    """Base class for all engine errors"""
    pass


class ConfigurationError(BlockspaceSimError):
    """Raised when fee-market or model parameters are invalid"""
    pass


class CatalogError(BlockspaceSimError):
    """Raised when reference data is inconsistent"""
    pass


class UnknownResourceError(CatalogError):
    """Raised when a resource id is not present in the catalog"""
    pass


class UnknownTransactionTypeError(CatalogError):
    """Raised when a transaction type id is not present in the catalog"""
    pass


class UnknownScenarioError(CatalogError):
    """Raised when a demand scenario id is not registered"""
    pass


class InvalidCountError(BlockspaceSimError):
    """Raised for negative or non-integer block / transaction counts"""
    pass


class SeedSequenceError(BlockspaceSimError):
    """Raised when an injected random-sample sequence is too short"""
    pass


class NonFiniteValueError(BlockspaceSimError):
    """Raised when NaN (or a non-number) reaches a numeric input"""
    pass


# === VALIDATION FUNCTIONS ===

def validate_finite(value, name: str) -> float:
    """
    Validate that value is a real number (infinities allowed, NaN rejected)

    Args:
        value: Value to validate
        name: Name for error messages

    Returns:
        Value as float

    Raises:
        NonFiniteValueError: If value is NaN or not numeric
    """
    if not is_real_number(value):
        raise NonFiniteValueError(f"{name} must be a real number, got {value!r}")
    return float(value)


def validate_positive(value, name: str, error=ConfigurationError) -> float:
    """
    Validate a strictly positive finite parameter

    Raises:
        error: If value is not > 0 (ConfigurationError by default)
    """
    value = validate_finite(value, name)
    if not (0 < value < float('inf')):
        raise error(f"{name} must be positive, got {value}")
    return value


def validate_open_unit_interval(value, name: str) -> float:
    """
    Validate a parameter in the open interval (0, 1)

    Raises:
        ConfigurationError: If value is outside (0, 1)
    """
    value = validate_finite(value, name)
    if not (0 < value < 1):
        raise ConfigurationError(f"{name} must be in (0,1), got {value}")
    return value


def validate_closed_unit_interval(value, name: str, error=CatalogError) -> float:
    """Validate a parameter in [0, 1]"""
    value = validate_finite(value, name)
    if not (0 <= value <= 1):
        raise error(f"{name} must be in [0,1], got {value}")
    return value


def validate_count(value, name: str, allow_zero: bool = True) -> int:
    """
    Validate a block or transaction count

    Args:
        value: Count to validate (must be an integer, bools rejected)
        name: Name for error messages
        allow_zero: Whether 0 is an acceptable count

    Returns:
        Count as int

    Raises:
        InvalidCountError: If value is not an integer, negative, or zero when
            zero is not allowed
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidCountError(f"{name} must be an integer, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise InvalidCountError(f"{name} must be {bound}, got {value}")
    return int(value)


def validate_unique_ids(ids: Iterable[str], kind: str) -> None:
    """Raise CatalogError if any id appears more than once"""
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise CatalogError(f"Duplicate {kind} id: {item_id!r}")
        seen.add(item_id)


# === DECORATORS ===

def finite_inputs(*names: str):
    """
    Decorator rejecting NaN for the named positional/keyword arguments.

    The wrapped function still receives the original values, so clamping of
    out-of-range (but ordered) inputs remains its responsibility.
    """
    def decorator(func):
        arg_names = func.__code__.co_varnames[:func.__code__.co_argcount]

        @wraps(func)
        def wrapper(*args, **kwargs):
            bound = dict(zip(arg_names, args))
            bound.update(kwargs)
            for name in names:
                if name in bound:
                    validate_finite(bound[name], f"{func.__name__}: {name}")
            return func(*args, **kwargs)

        return wrapper

    return decorator


# === LOGGING SETUP ===

def setup_logging(level=logging.WARNING):
    """Setup logging for engine diagnostics"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
