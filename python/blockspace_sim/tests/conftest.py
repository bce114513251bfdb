"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from ..data.catalog import Catalog, Resource, TransactionType
from ..data.registry import default_catalog


@pytest.fixture
def catalog():
    """Built-in mainnet-calibrated catalog."""
    return default_catalog()


@pytest.fixture
def two_resource_catalog():
    """Resources A (max 100) and B (max 50) with three transaction types."""
    resources = (
        Resource(id="a", name="A", unit="units/sec", max_throughput=100, category="building"),
        Resource(id="b", name="B", unit="units/sec", max_throughput=50, category="verification"),
    )
    transaction_types = (
        TransactionType(
            id="heavy-a", name="Heavy A", resource_consumption={"a": 10, "b": 1},
            average_gas=100_000, demand_volatility=0.5, price_elasticity=0.5,
        ),
        TransactionType(
            id="heavy-b", name="Heavy B", resource_consumption={"a": 1, "b": 10},
            average_gas=50_000, demand_volatility=0.5, price_elasticity=0.5,
        ),
        TransactionType(
            id="balanced", name="Balanced", resource_consumption={"a": 20, "b": 10},
            average_gas=21_000, demand_volatility=0.5, price_elasticity=0.5,
        ),
    )
    return Catalog(resources, transaction_types)


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
