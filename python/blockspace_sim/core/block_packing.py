"""
Block Packing and Bottleneck Resolution

Multi-resource admission control for a transaction batch.

Every transaction type consumes a fixed amount of each resource per instance,
so the usage of a batch is a linear function of its counts:

U(r) = Σ_j consumption_j(r) * count_j
P(r) = U(r) / max_throughput(r) * 100

The bottleneck is argmax_r P(r). A batch fits in a block iff P(r) <= 100 for
every resource r. Batches are immutable tuples of AddedTransaction; every
operation returns a new batch.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from ..data.catalog import Catalog, TransactionType
from .units import (
    Percent,
    ResourceId,
    TransactionTypeId,
    Utilization,
    gas_to_mgas,
    percent_to_utilization,
    usage_to_percent,
)
from .validation import validate_count

logger = logging.getLogger(__name__)

FULL_BLOCK_PERCENT = 100.0


@dataclass(frozen=True)
class AddedTransaction:
    """A batch entry: `count` instances of one transaction type"""
    transaction_type_id: TransactionTypeId
    count: int

    def __post_init__(self):
        validate_count(self.count, f"{self.transaction_type_id}: count", allow_zero=False)


Batch = Tuple[AddedTransaction, ...]
TransactionTypeRef = Union[TransactionType, TransactionTypeId]


@dataclass(frozen=True)
class Bottleneck:
    """Most utilized resource of a batch (resource_id is None for an empty batch)"""
    resource_id: Optional[ResourceId]
    utilization_percent: Percent


@dataclass(frozen=True)
class AdmissionCheck:
    """
    Result of would_exceed.

    When exceeds is True, resource_id names the first resource (in catalog
    order) pushed past 100% and utilization_percent is its resulting load.
    Otherwise resource_id is None and utilization_percent is the highest
    resulting load.
    """
    exceeds: bool
    resource_id: Optional[ResourceId]
    utilization_percent: Percent


def _accumulate(
    entries: Iterable[Tuple[TransactionType, int]],
    catalog: Catalog
) -> Dict[ResourceId, float]:
    usage = {resource_id: 0.0 for resource_id in catalog.resource_ids}
    for tx_type, count in entries:
        for resource_id in usage:
            usage[resource_id] += tx_type.consumption_of(resource_id) * count
    return usage


def _merge(batch: Batch, type_id: TransactionTypeId, count: int) -> Batch:
    entries = list(batch)
    for index, entry in enumerate(entries):
        if entry.transaction_type_id == type_id:
            entries[index] = AddedTransaction(type_id, entry.count + count)
            break
    else:
        entries.append(AddedTransaction(type_id, count))
    return tuple(entries)


def compute_usage(batch: Batch, catalog: Catalog) -> Dict[ResourceId, float]:
    """
    Accumulated consumption of a batch, per resource in catalog order.

    Raises:
        UnknownTransactionTypeError: If an entry's type is not in the catalog
    """
    return _accumulate(
        ((catalog.transaction_type(entry.transaction_type_id), entry.count) for entry in batch),
        catalog,
    )


def utilization_percentages(
    usage: Mapping[ResourceId, float],
    catalog: Catalog
) -> Dict[ResourceId, Percent]:
    """Usage as a percentage of each resource's max throughput (missing usage is 0)"""
    return {
        resource.id: usage_to_percent(usage.get(resource.id, 0.0), resource.max_throughput)
        for resource in catalog.resources
    }


def find_bottleneck(usage: Mapping[ResourceId, float], catalog: Catalog) -> Bottleneck:
    """
    Identify the resource with the strictly greatest utilization.

    Exact ties keep the earlier resource in catalog order. If nothing is
    consumed the bottleneck is Bottleneck(None, 0.0).
    """
    bottleneck = Bottleneck(None, Percent(0.0))
    for resource_id, percent in utilization_percentages(usage, catalog).items():
        if percent > bottleneck.utilization_percent:
            bottleneck = Bottleneck(resource_id, percent)
    return bottleneck


def would_exceed(
    batch: Batch,
    proposed_type: TransactionTypeRef,
    proposed_count: int,
    catalog: Catalog
) -> AdmissionCheck:
    """
    Check whether adding proposed_count instances would overfill any resource.

    The check runs on the batch try_add would return, with counts of the same
    type merged into one entry, so the verdict always agrees with
    compute_usage on the admitted batch. Resources are scanned in catalog
    order and the scan stops at the first resource whose resulting
    utilization is above 100%. Exactly 100% fits.

    Raises:
        InvalidCountError: If proposed_count is not a positive integer
        UnknownTransactionTypeError: If proposed_type is an unknown id
        UnknownResourceError: If proposed_type consumes a resource missing
            from the catalog
    """
    proposed_count = validate_count(proposed_count, "proposed_count", allow_zero=False)
    tx_type = catalog.resolve(proposed_type)
    merged = _merge(batch, tx_type.id, proposed_count)
    usage = _accumulate(
        (
            (tx_type if entry.transaction_type_id == tx_type.id
             else catalog.transaction_type(entry.transaction_type_id), entry.count)
            for entry in merged
        ),
        catalog,
    )

    highest = Percent(0.0)
    for resource in catalog.resources:
        percent = usage_to_percent(usage[resource.id], resource.max_throughput)
        if percent > FULL_BLOCK_PERCENT:
            return AdmissionCheck(True, resource.id, percent)
        highest = max(highest, percent)

    return AdmissionCheck(False, None, highest)


def try_add(
    batch: Batch,
    proposed_type: TransactionTypeRef,
    proposed_count: int,
    catalog: Catalog
) -> Tuple[Batch, bool]:
    """
    Admit proposed_count instances of a type into the batch, all or nothing.

    The type must be registered in the catalog so the resulting batch stays
    resolvable. An admitted type already present in the batch has its count
    increased; otherwise a new entry is appended.

    Returns:
        (new batch, True) on admission, (the same batch, False) on rejection
    """
    tx_type = catalog.transaction_type(
        proposed_type.id if isinstance(proposed_type, TransactionType) else proposed_type
    )

    check = would_exceed(batch, tx_type, proposed_count, catalog)
    if check.exceeds:
        logger.info(
            f"Block full: {proposed_count} x {tx_type.id} would push "
            f"{check.resource_id} to {check.utilization_percent:.1f}%"
        )
        return batch, False

    return _merge(batch, tx_type.id, proposed_count), True


def remove_count(batch: Batch, transaction_type_id: TransactionTypeId, count: int) -> Batch:
    """
    Remove up to count instances of a type from the batch.

    Entries that drop to zero are removed. Removing more than is present, or
    a type that is not in the batch, is not an error.

    Raises:
        InvalidCountError: If count is negative or not an integer
    """
    count = validate_count(count, "count")

    entries = []
    for entry in batch:
        if entry.transaction_type_id != transaction_type_id:
            entries.append(entry)
            continue
        remaining = entry.count - count
        if remaining > 0:
            entries.append(AddedTransaction(entry.transaction_type_id, remaining))
    return tuple(entries)


def max_admissible_count(
    batch: Batch,
    proposed_type: TransactionTypeRef,
    catalog: Catalog
) -> Optional[int]:
    """
    Largest count of a type that try_add would admit into the batch.

    Returns:
        The count (0 if not even one instance fits, including when the batch
        is already over capacity), or None when the type consumes none of the
        catalog's resources and the batch has room
    """
    tx_type = catalog.resolve(proposed_type)
    if would_exceed(batch, tx_type, 1, catalog).exceeds:
        # Covers a batch that is already over capacity
        return 0
    usage = compute_usage(batch, catalog)

    limits = []
    for resource in catalog.resources:
        per_instance = tx_type.consumption_of(resource.id)
        if per_instance > 0:
            limits.append((resource.max_throughput - usage[resource.id]) / per_instance)
    if not limits:
        return None

    # Settle floating point rounding against the exact admission rule
    candidate = max(1, math.floor(min(limits)))
    while candidate > 1 and would_exceed(batch, tx_type, candidate, catalog).exceeds:
        candidate -= 1
    while not would_exceed(batch, tx_type, candidate + 1, catalog).exceeds:
        candidate += 1
    return candidate


@dataclass(frozen=True)
class BlockPackingSummary:
    """Usage, load and bottleneck of a batch in one value"""
    usage: Dict[ResourceId, float]
    utilization_percent: Dict[ResourceId, Percent]
    bottleneck: Bottleneck
    transaction_count: int
    total_gas: float

    @property
    def bottleneck_utilization(self) -> Utilization:
        return percent_to_utilization(self.bottleneck.utilization_percent)

    @property
    def total_mgas(self) -> float:
        return gas_to_mgas(self.total_gas)

    @property
    def is_full(self) -> bool:
        return self.bottleneck.utilization_percent >= FULL_BLOCK_PERCENT


def summarize_batch(batch: Batch, catalog: Catalog) -> BlockPackingSummary:
    """Summarize a batch for presentation layers"""
    usage = compute_usage(batch, catalog)
    total_gas = sum(
        catalog.transaction_type(entry.transaction_type_id).average_gas * entry.count
        for entry in batch
    )
    return BlockPackingSummary(
        usage=usage,
        utilization_percent=utilization_percentages(usage, catalog),
        bottleneck=find_bottleneck(usage, catalog),
        transaction_count=sum(entry.count for entry in batch),
        total_gas=float(total_gas),
    )
