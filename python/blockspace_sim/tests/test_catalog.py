"""
Unit tests for the reference data model and built-in catalog
"""

import dataclasses

import pytest

from ..core.validation import (
    CatalogError,
    NonFiniteValueError,
    UnknownResourceError,
    UnknownTransactionTypeError,
)
from ..data.catalog import (
    Catalog,
    Resource,
    ResourceCategory,
    TransactionCategory,
    TransactionType,
)
from ..data.registry import default_catalog, get_resource, get_transaction_type


def make_resource(resource_id="cpu", max_throughput=10.0):
    return Resource(id=resource_id, name=resource_id, unit="ops/sec",
                    max_throughput=max_throughput, category="building")


def make_type(type_id="tx", consumption=None, **overrides):
    fields = dict(
        id=type_id, name=type_id,
        resource_consumption={"cpu": 1.0} if consumption is None else consumption,
        average_gas=21_000, demand_volatility=0.5, price_elasticity=0.5,
    )
    fields.update(overrides)
    return TransactionType(**fields)


class TestResource:
    """Test suite for Resource validation."""

    def test_category_coerced(self):
        """Test string categories become enum members."""
        resource = Resource(id="sg", name="SG", unit="KB/sec", max_throughput=50, category="sync-archive")
        assert resource.category is ResourceCategory.sync_archive

    def test_invalid_resources(self):
        """Test empty ids, non-positive capacity and unknown categories are rejected."""
        with pytest.raises(CatalogError):
            make_resource(resource_id="")
        with pytest.raises(CatalogError):
            make_resource(max_throughput=0)
        with pytest.raises(CatalogError):
            make_resource(max_throughput=-3)
        with pytest.raises(CatalogError):
            Resource(id="x", name="X", unit="u", max_throughput=1, category="storage")

    def test_frozen(self):
        """Test resources are immutable."""
        resource = make_resource()
        with pytest.raises(dataclasses.FrozenInstanceError):
            resource.max_throughput = 20


class TestTransactionType:
    """Test suite for TransactionType validation."""

    def test_consumption_read_only(self):
        """Test the consumption mapping cannot be modified."""
        tx_type = make_type()
        with pytest.raises(TypeError):
            tx_type.resource_consumption["cpu"] = 5

    def test_consumption_copied(self):
        """Test later changes to the source dict do not leak in."""
        source = {"cpu": 1.0}
        tx_type = make_type(consumption=source)
        source["cpu"] = 99
        assert tx_type.consumption_of("cpu") == 1.0

    def test_missing_resource_is_zero(self):
        """Test unlisted resources are consumed at zero."""
        assert make_type().consumption_of("disk") == 0.0

    def test_default_category(self):
        """Test the category defaults to other."""
        assert make_type().category is TransactionCategory.other

    def test_invalid_consumption(self):
        """Test negative or NaN consumption is rejected."""
        with pytest.raises(CatalogError):
            make_type(consumption={"cpu": -1})
        with pytest.raises(NonFiniteValueError):
            make_type(consumption={"cpu": float('nan')})

    def test_invalid_fields(self):
        """Test out-of-range reference values are rejected."""
        with pytest.raises(CatalogError):
            make_type(average_gas=0)
        with pytest.raises(CatalogError):
            make_type(demand_volatility=1.5)
        with pytest.raises(CatalogError):
            make_type(price_elasticity=-0.1)
        with pytest.raises(CatalogError):
            make_type(base_demand=-1)
        with pytest.raises(CatalogError):
            make_type(category="lending")

    def test_hashable(self):
        """Test transaction types can be hashed, used in sets and as dict keys."""
        first = make_type(consumption={"cpu": 1.0})
        second = make_type(consumption={"cpu": 1.0})

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1
        assert {first: "x"}[second] == "x"

    def test_consumption_part_of_equality(self):
        """Test types differing only in consumption are not equal."""
        assert make_type(consumption={"cpu": 1.0}) != make_type(consumption={"cpu": 2.0})

    def test_built_in_types_hashable(self):
        """Test every registered type hashes."""
        catalog = default_catalog()
        assert len(set(catalog.transaction_types)) == len(catalog.transaction_types)


class TestCatalog:
    """Test suite for Catalog cross validation."""

    def test_lookup(self):
        """Test resources and types resolve by id."""
        catalog = Catalog([make_resource()], [make_type()])

        assert catalog.resource_ids == ("cpu",)
        assert catalog.transaction_type_ids == ("tx",)
        assert catalog.resource("cpu").max_throughput == 10.0
        assert catalog.transaction_type("tx").consumption_of("cpu") == 1.0

    def test_unknown_lookups(self):
        """Test unknown ids raise the specific catalog errors."""
        catalog = Catalog([make_resource()], [make_type()])
        with pytest.raises(UnknownResourceError):
            catalog.resource("disk")
        with pytest.raises(UnknownTransactionTypeError):
            catalog.transaction_type("missing")

    def test_duplicate_ids(self):
        """Test duplicate resource or type ids are rejected."""
        with pytest.raises(CatalogError):
            Catalog([make_resource(), make_resource()])
        with pytest.raises(CatalogError):
            Catalog([make_resource()], [make_type(), make_type()])

    def test_dangling_reference(self):
        """Test a type consuming an absent resource is rejected at construction."""
        with pytest.raises(UnknownResourceError):
            Catalog([make_resource()], [make_type(consumption={"cpu": 1, "disk": 2})])

    def test_resolve(self):
        """Test resolve accepts ids and validates type objects."""
        catalog = Catalog([make_resource()], [make_type()])

        assert catalog.resolve("tx").id == "tx"
        ad_hoc = make_type("ad-hoc")
        assert catalog.resolve(ad_hoc) is ad_hoc
        with pytest.raises(UnknownResourceError):
            catalog.resolve(make_type("bad", consumption={"gpu": 1}))


class TestDefaultCatalog:
    """Test suite for the built-in mainnet catalog."""

    def test_resource_order(self):
        """Test the eight resources in catalog order."""
        assert default_catalog().resource_ids == (
            "evm-compute", "state-access", "merklization", "block-verification",
            "block-distribution", "state-growth", "history-growth", "proof-generation",
        )

    def test_transaction_types(self):
        """Test the nine built-in transaction types."""
        assert default_catalog().transaction_type_ids == (
            "eth-transfer", "erc20-transfer", "uniswap-swap-eth-usdc", "uniswap-swap-eth-dai",
            "nft-mint", "nft-transfer", "rollup-batch", "zk-proof-verify", "xen-mint",
        )

    def test_every_type_covers_every_resource(self):
        """Test consumption vectors are complete over the catalog."""
        catalog = default_catalog()
        for tx_type in catalog.transaction_types:
            assert set(tx_type.resource_consumption) == set(catalog.resource_ids)

    def test_reference_values(self):
        """Test mainnet calibration values."""
        assert get_resource("evm-compute").max_throughput == 2.5
        assert get_resource("state-access").max_throughput == 50_000
        assert get_resource("state-growth").category is ResourceCategory.sync_archive

        eth = get_transaction_type("eth-transfer")
        assert eth.consumption_of("evm-compute") == 0.021
        assert eth.consumption_of("state-access") == 100
        assert eth.average_gas == 21_000

    def test_unknown_ids(self):
        """Test registry lookups raise catalog errors."""
        with pytest.raises(UnknownResourceError):
            get_resource("cpu-gas")
        with pytest.raises(UnknownTransactionTypeError):
            get_transaction_type("blob-tx")
