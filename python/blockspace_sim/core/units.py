"""
Typed quantities used by the block-space engine

This module provides lightweight typed wrappers for the quantities flowing
through the engine so that fees, utilization fractions and percentages are
not mixed up silently.

- Gwei: base fee denomination
- Utilization: fraction of capacity in [0, 1]
- Percent: fraction of capacity expressed in [0, 100+]
- ResourceId / TransactionTypeId: catalog keys (validated by Catalog)
"""

from typing import NewType

import numpy as np


# === BASE UNIT TYPES ===

Gwei = NewType('Gwei', float)
Utilization = NewType('Utilization', float)
Percent = NewType('Percent', float)

ResourceId = NewType('ResourceId', str)
TransactionTypeId = NewType('TransactionTypeId', str)

MGAS = 1_000_000  # gas per Mgas


# === CLAMPING ===

def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]. Infinities clamp to the nearest bound."""
    return float(min(upper, max(lower, value)))


def clamp_unit_interval(value: float) -> float:
    """Clamp value into [0, 1]"""
    return clamp(value, 0.0, 1.0)


def to_utilization(value: float) -> Utilization:
    """Clamp a raw fraction into a valid Utilization"""
    return Utilization(clamp_unit_interval(value))


# === CONVERSION UTILITIES ===

def usage_to_percent(usage: float, max_throughput: float) -> Percent:
    """
    Express consumed capacity as a percentage of a resource's maximum.

    Args:
        usage: Accumulated consumption in the resource's unit
        max_throughput: Resource capacity in the same unit (positive)

    Returns:
        usage / max_throughput * 100 (not clamped; >100 means over capacity)
    """
    return Percent(usage / max_throughput * 100)


def percent_to_utilization(percent: Percent) -> Utilization:
    """Convert a percentage to a clamped utilization fraction"""
    return to_utilization(percent / 100)


def gas_to_mgas(gas: float) -> float:
    """Convert gas to Mgas"""
    return gas / MGAS


def mgas_to_gas(mgas: float) -> float:
    """Convert Mgas to gas"""
    return mgas * MGAS


def is_real_number(value) -> bool:
    """True for real numbers that are not NaN (infinities allowed)"""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return not np.isnan(value)
