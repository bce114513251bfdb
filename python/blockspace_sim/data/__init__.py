"""
Reference data: resources, transaction types, the validated catalog and
file-based catalog loading.
"""

from .catalog import (
    Catalog,
    Resource,
    ResourceCategory,
    TransactionCategory,
    TransactionType,
)
from .resources import RESOURCES
from .transactions import TRANSACTION_TYPES
from .registry import (
    default_catalog,
    get_resource,
    get_transaction_type,
    realistic_transaction_mix,
)
from .loader import CatalogLoader

__all__ = [
    "Catalog",
    "Resource",
    "ResourceCategory",
    "TransactionCategory",
    "TransactionType",
    "RESOURCES",
    "TRANSACTION_TYPES",
    "default_catalog",
    "get_resource",
    "get_transaction_type",
    "realistic_transaction_mix",
    "CatalogLoader",
]
