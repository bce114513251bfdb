"""
Built-in reference catalog and lookups
"""

from typing import List

from ..core.throughput import TransactionMixEntry
from ..core.validation import UnknownResourceError, UnknownTransactionTypeError
from .catalog import Catalog, Resource, TransactionType
from .resources import RESOURCES, RESOURCES_BY_ID
from .transactions import TRANSACTION_TYPES, TRANSACTION_TYPES_BY_ID

_DEFAULT_CATALOG = Catalog(RESOURCES, TRANSACTION_TYPES)


def default_catalog() -> Catalog:
    """Validated catalog of the built-in resources and transaction types"""
    return _DEFAULT_CATALOG


def get_resource(resource_id: str) -> Resource:
    try:
        return RESOURCES_BY_ID[resource_id]
    except KeyError:
        raise UnknownResourceError(f"Unknown resource: {resource_id!r}") from None


def get_transaction_type(type_id: str) -> TransactionType:
    try:
        return TRANSACTION_TYPES_BY_ID[type_id]
    except KeyError:
        raise UnknownTransactionTypeError(f"Unknown transaction type: {type_id!r}") from None


def realistic_transaction_mix() -> List[TransactionMixEntry]:
    """
    Mainnet-like mix, weighted by each type's share of mainnet transactions.

    Types with no recorded share are left out.
    """
    return [
        TransactionMixEntry(transaction_type=tx_type, weight=tx_type.percent_of_mainnet_txs)
        for tx_type in TRANSACTION_TYPES
        if tx_type.percent_of_mainnet_txs > 0
    ]
