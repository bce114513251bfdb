"""
Catalog Loader for externally maintained reference data

Loads resource and transaction-type catalogs from files so that the engine
can be driven by calibrations other than the built-in registry.

Resource CSV format:
id,name,unit,max_throughput,category[,description]
evm-compute,EVM Compute,Mgas/sec,2.5,building

Transaction type JSON format: a list of objects with the TransactionType
fields, e.g.
[{"id": "eth-transfer", "name": "ETH Transfer",
  "resource_consumption": {"evm-compute": 0.021},
  "average_gas": 21000, "demand_volatility": 0.3, "price_elasticity": 0.7}]
"""

import json
import logging
from pathlib import Path
from typing import List, Tuple, Union

import pandas as pd

from ..core.validation import CatalogError
from .catalog import Catalog, Resource, TransactionType

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CatalogLoader:
    """
    Loader for resource (CSV) and transaction type (JSON) catalogs.
    """

    REQUIRED_RESOURCE_COLUMNS = ['id', 'name', 'unit', 'max_throughput', 'category']
    REQUIRED_TRANSACTION_FIELDS = [
        'id', 'name', 'resource_consumption', 'average_gas',
        'demand_volatility', 'price_elasticity',
    ]
    OPTIONAL_TRANSACTION_FIELDS = [
        'category', 'base_demand', 'percent_of_mainnet_txs', 'description',
    ]

    def load_resources_csv(self, file_path: PathLike) -> Tuple[Resource, ...]:
        """
        Load resources from CSV, preserving row order as catalog order.

        Args:
            file_path: Path to CSV file

        Returns:
            Tuple of validated resources

        Raises:
            FileNotFoundError: If file doesn't exist
            CatalogError: If columns are missing or values are blank or invalid
        """
        file_path = self._require_file(file_path)

        try:
            df = pd.read_csv(file_path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise CatalogError(f"Failed to read resource CSV {file_path}: {e}")

        missing_columns = [col for col in self.REQUIRED_RESOURCE_COLUMNS if col not in df.columns]
        if missing_columns:
            raise CatalogError(f"Missing required columns: {missing_columns}")

        blank_columns = [col for col in self.REQUIRED_RESOURCE_COLUMNS if df[col].isna().any()]
        if blank_columns:
            raise CatalogError(f"Blank values in required columns: {blank_columns}")

        if not pd.api.types.is_numeric_dtype(df['max_throughput']):
            raise CatalogError("max_throughput column must be numeric")

        if 'description' in df.columns:
            df['description'] = df['description'].fillna('')
        else:
            df['description'] = ''

        resources = tuple(
            Resource(
                id=str(row['id']),
                name=str(row['name']),
                unit=str(row['unit']),
                max_throughput=float(row['max_throughput']),
                category=row['category'],
                description=row['description'],
            )
            for row in df.to_dict(orient='records')
        )

        logger.debug(f"Loaded {len(resources)} resources from {file_path}")
        return resources

    def load_transaction_types_json(self, file_path: PathLike) -> Tuple[TransactionType, ...]:
        """
        Load transaction types from a JSON list.

        Raises:
            FileNotFoundError: If file doesn't exist
            CatalogError: If the document is malformed or a field is missing
        """
        file_path = self._require_file(file_path)

        try:
            with open(file_path) as f:
                records = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"Failed to parse transaction JSON {file_path}: {e}")

        if not isinstance(records, list):
            raise CatalogError(f"{file_path}: expected a list of transaction types")

        transaction_types: List[TransactionType] = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise CatalogError(f"{file_path}: entry {index} is not an object")

            missing = [key for key in self.REQUIRED_TRANSACTION_FIELDS if key not in record]
            if missing:
                raise CatalogError(f"{file_path}: entry {index} missing fields {missing}")

            if not isinstance(record['resource_consumption'], dict):
                raise CatalogError(f"{file_path}: entry {index} resource_consumption must be an object")

            fields = {key: record[key] for key in self.REQUIRED_TRANSACTION_FIELDS}
            fields.update({key: record[key] for key in self.OPTIONAL_TRANSACTION_FIELDS if key in record})
            transaction_types.append(TransactionType(**fields))

        logger.debug(f"Loaded {len(transaction_types)} transaction types from {file_path}")
        return tuple(transaction_types)

    def load_catalog(self, resources_path: PathLike, transactions_path: PathLike) -> Catalog:
        """
        Load both files and cross-validate them into a Catalog.

        Raises:
            UnknownResourceError: If a transaction type consumes a resource
                missing from the resource file
        """
        resources = self.load_resources_csv(resources_path)
        transaction_types = self.load_transaction_types_json(transactions_path)
        return Catalog(resources, transaction_types)

    @staticmethod
    def _require_file(file_path: PathLike) -> Path:
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Catalog file not found: {file_path}")
        return file_path
