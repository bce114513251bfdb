"""
Reference data model: resources, transaction types and the validated catalog

A Resource is one independent capacity dimension of block production (EVM
compute, state access, bandwidth, ...). A TransactionType consumes a fixed
amount of each resource per instance. A Catalog pairs an ordered tuple of
resources with an ordered tuple of transaction types and checks every
cross reference once, at construction, so that the engine never looks up a
resource id that does not exist.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Tuple, Union

from ..core.units import ResourceId, TransactionTypeId
from ..core.validation import (
    CatalogError,
    UnknownResourceError,
    UnknownTransactionTypeError,
    validate_closed_unit_interval,
    validate_finite,
    validate_positive,
    validate_unique_ids,
)


class ResourceCategory(str, Enum):
    """Stage of the block pipeline a resource belongs to."""
    building = "building"
    verification = "verification"
    sync_archive = "sync-archive"
    proving = "proving"


class TransactionCategory(str, Enum):
    """Broad class of a transaction archetype."""
    transfer = "transfer"
    defi = "defi"
    nft = "nft"
    gaming = "gaming"
    governance = "governance"
    infrastructure = "infrastructure"
    other = "other"


@dataclass(frozen=True)
class Resource:
    """A named capacity dimension with a maximum throughput per block interval."""
    id: ResourceId
    name: str
    unit: str
    max_throughput: float
    category: ResourceCategory
    description: str = ""

    def __post_init__(self):
        if not self.id:
            raise CatalogError("Resource id cannot be empty")
        validate_positive(self.max_throughput, f"{self.id}: max_throughput", error=CatalogError)
        try:
            object.__setattr__(self, "category", ResourceCategory(self.category))
        except ValueError:
            raise CatalogError(f"{self.id}: unknown resource category {self.category!r}")


@dataclass(frozen=True)
class TransactionType:
    """
    A transaction archetype and its per-instance resource consumption.

    Resources missing from resource_consumption are consumed at zero.
    """
    id: TransactionTypeId
    name: str
    # Read-only view, excluded from the hash
    resource_consumption: Mapping[ResourceId, float] = field(hash=False)
    average_gas: float
    demand_volatility: float
    price_elasticity: float
    category: TransactionCategory = TransactionCategory.other
    base_demand: float = 0.0
    percent_of_mainnet_txs: float = 0.0
    description: str = ""

    def __post_init__(self):
        if not self.id:
            raise CatalogError("Transaction type id cannot be empty")

        consumption = {}
        for resource_id, amount in dict(self.resource_consumption).items():
            amount = validate_finite(amount, f"{self.id}: consumption of {resource_id}")
            if amount < 0:
                raise CatalogError(
                    f"{self.id}: consumption of {resource_id} must be non-negative, got {amount}"
                )
            consumption[resource_id] = amount
        object.__setattr__(self, "resource_consumption", MappingProxyType(consumption))

        validate_positive(self.average_gas, f"{self.id}: average_gas", error=CatalogError)
        validate_closed_unit_interval(self.demand_volatility, f"{self.id}: demand_volatility")
        validate_closed_unit_interval(self.price_elasticity, f"{self.id}: price_elasticity")
        if validate_finite(self.base_demand, f"{self.id}: base_demand") < 0:
            raise CatalogError(f"{self.id}: base_demand must be non-negative")
        try:
            object.__setattr__(self, "category", TransactionCategory(self.category))
        except ValueError:
            raise CatalogError(f"{self.id}: unknown transaction category {self.category!r}")

    def consumption_of(self, resource_id: ResourceId) -> float:
        """Per-instance consumption of a resource (0 when not listed)"""
        return self.resource_consumption.get(resource_id, 0.0)


@dataclass(frozen=True)
class Catalog:
    """
    Ordered, validated reference data.

    Resource order is significant: bottleneck ties and admission checks scan
    resources in this order.

    Raises:
        CatalogError: On duplicate ids
        UnknownResourceError: If a transaction type consumes a resource that
            is not in the catalog
    """
    resources: Tuple[Resource, ...]
    transaction_types: Tuple[TransactionType, ...] = ()
    _resources_by_id: Dict[ResourceId, Resource] = field(init=False, repr=False, compare=False)
    _types_by_id: Dict[TransactionTypeId, TransactionType] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "resources", tuple(self.resources))
        object.__setattr__(self, "transaction_types", tuple(self.transaction_types))

        validate_unique_ids((r.id for r in self.resources), "resource")
        validate_unique_ids((t.id for t in self.transaction_types), "transaction type")

        object.__setattr__(self, "_resources_by_id", {r.id: r for r in self.resources})
        object.__setattr__(self, "_types_by_id", {t.id: t for t in self.transaction_types})

        for tx_type in self.transaction_types:
            self.check_references(tx_type)

    @property
    def resource_ids(self) -> Tuple[ResourceId, ...]:
        return tuple(r.id for r in self.resources)

    @property
    def transaction_type_ids(self) -> Tuple[TransactionTypeId, ...]:
        return tuple(t.id for t in self.transaction_types)

    def resource(self, resource_id: ResourceId) -> Resource:
        try:
            return self._resources_by_id[resource_id]
        except KeyError:
            raise UnknownResourceError(f"Unknown resource: {resource_id!r}") from None

    def transaction_type(self, type_id: TransactionTypeId) -> TransactionType:
        try:
            return self._types_by_id[type_id]
        except KeyError:
            raise UnknownTransactionTypeError(f"Unknown transaction type: {type_id!r}") from None

    def check_references(self, tx_type: TransactionType) -> TransactionType:
        """
        Ensure every resource a transaction type consumes exists in this catalog.

        Returns:
            The transaction type, unchanged

        Raises:
            UnknownResourceError: On the first unknown resource id
        """
        for resource_id in tx_type.resource_consumption:
            if resource_id not in self._resources_by_id:
                raise UnknownResourceError(
                    f"Transaction type {tx_type.id!r} consumes unknown resource {resource_id!r}"
                )
        return tx_type

    def resolve(self, tx_type: Union[TransactionType, TransactionTypeId]) -> TransactionType:
        """
        Resolve an id to its transaction type, or validate a type object.

        Type objects need not be registered in the catalog, but every
        resource they consume must be.
        """
        if isinstance(tx_type, TransactionType):
            return self.check_references(tx_type)
        return self.transaction_type(tx_type)

