"""
Transaction Type Registry

Transaction archetypes with their per-instance consumption of each resource
in resources.RESOURCES (units match the resource's unit).
"""

from typing import Dict, Tuple

from .catalog import TransactionCategory, TransactionType

ETH_TRANSFER = TransactionType(
    id="eth-transfer",
    name="ETH Transfer",
    category=TransactionCategory.transfer,
    resource_consumption={
        "evm-compute": 0.021,          # 21,000 gas
        "state-access": 100,
        "merklization": 4,             # 2 account updates
        "block-verification": 0.021,
        "block-distribution": 0.00011, # ~110 bytes
        "state-growth": 0,
        "history-growth": 0.11,
        "proof-generation": 0.021,
    },
    average_gas=21_000,
    base_demand=20,
    demand_volatility=0.3,
    price_elasticity=0.7,
    percent_of_mainnet_txs=25,
    description="Simple value transfer between two accounts",
)

ERC20_TRANSFER = TransactionType(
    id="erc20-transfer",
    name="ERC-20 Transfer",
    category=TransactionCategory.transfer,
    resource_consumption={
        "evm-compute": 0.065,
        "state-access": 150,
        "merklization": 8,
        "block-verification": 0.065,
        "block-distribution": 0.14,
        "state-growth": 0,
        "history-growth": 0.14,
        "proof-generation": 0.065,
    },
    average_gas=65_000,
    base_demand=15,
    demand_volatility=0.4,
    price_elasticity=0.6,
    percent_of_mainnet_txs=20,
    description="Token balance transfer on an ERC-20 contract",
)

UNISWAP_SWAP_ETH_USDC = TransactionType(
    id="uniswap-swap-eth-usdc",
    name="Swap ETH/USDC",
    category=TransactionCategory.defi,
    resource_consumption={
        "evm-compute": 0.15,           # 150,000 gas
        "state-access": 300,           # pool state, ticks, balances
        "merklization": 24,
        "block-verification": 0.15,
        "block-distribution": 0.3,
        "state-growth": 0,
        "history-growth": 0.3,
        "proof-generation": 0.15,
    },
    average_gas=150_000,
    base_demand=3,
    demand_volatility=0.8,
    price_elasticity=0.5,
    percent_of_mainnet_txs=5,
    description="Uniswap V3 swap on the ETH/USDC pool",
)

UNISWAP_SWAP_ETH_DAI = TransactionType(
    id="uniswap-swap-eth-dai",
    name="Swap ETH/DAI",
    category=TransactionCategory.defi,
    resource_consumption=UNISWAP_SWAP_ETH_USDC.resource_consumption,
    average_gas=150_000,
    base_demand=1,
    demand_volatility=0.7,
    price_elasticity=0.5,
    percent_of_mainnet_txs=2,
    description="Uniswap V3 swap on the ETH/DAI pool",
)

NFT_MINT = TransactionType(
    id="nft-mint",
    name="NFT Mint",
    category=TransactionCategory.nft,
    resource_consumption={
        "evm-compute": 0.1,
        "state-access": 200,
        "merklization": 16,
        "block-verification": 0.1,
        "block-distribution": 0.5,     # includes metadata
        "state-growth": 0.25,          # new token slot
        "history-growth": 0.5,
        "proof-generation": 0.1,
    },
    average_gas=100_000,
    base_demand=2,
    demand_volatility=0.95,
    price_elasticity=0.3,
    percent_of_mainnet_txs=5,
    description="Mint of a new token in an NFT collection",
)

NFT_TRANSFER = TransactionType(
    id="nft-transfer",
    name="NFT Transfer",
    category=TransactionCategory.nft,
    resource_consumption={
        "evm-compute": 0.08,
        "state-access": 150,
        "merklization": 12,
        "block-verification": 0.08,
        "block-distribution": 0.3,
        "state-growth": 0,
        "history-growth": 0.3,
        "proof-generation": 0.08,
    },
    average_gas=80_000,
    base_demand=3,
    demand_volatility=0.5,
    price_elasticity=0.6,
    percent_of_mainnet_txs=3,
    description="Ownership change of an existing NFT",
)

ROLLUP_BATCH = TransactionType(
    id="rollup-batch",
    name="Rollup Batch",
    category=TransactionCategory.infrastructure,
    resource_consumption={
        "evm-compute": 0.05,
        "state-access": 2,
        "merklization": 2,
        "block-verification": 0.05,
        "block-distribution": 100,     # ~100 KB calldata
        "state-growth": 0,
        "history-growth": 100,
        "proof-generation": 0.05,
    },
    average_gas=500_000,
    base_demand=0.1,
    demand_volatility=0.2,
    price_elasticity=0.2,
    percent_of_mainnet_txs=1,
    description="L2 batch posted as calldata",
)

ZK_PROOF_VERIFY = TransactionType(
    id="zk-proof-verify",
    name="ZK Proof Verify",
    category=TransactionCategory.infrastructure,
    resource_consumption={
        "evm-compute": 0.5,
        "state-access": 3,
        "merklization": 4,
        "block-verification": 0.5,
        "block-distribution": 0.5,
        "state-growth": 0,
        "history-growth": 0.5,
        "proof-generation": 0.5,
    },
    average_gas=500_000,
    base_demand=0.01,
    demand_volatility=0.1,
    price_elasticity=0.1,
    percent_of_mainnet_txs=0.1,
    description="On-chain verification of a validity proof",
)

XEN_MINT = TransactionType(
    id="xen-mint",
    name="XEN Mint",
    category=TransactionCategory.other,
    resource_consumption={
        "evm-compute": 0.02,
        "state-access": 2500,          # state-heavy despite low gas
        "merklization": 200,
        "block-verification": 0.02,
        "block-distribution": 0.2,
        "state-growth": 0.5,
        "history-growth": 0.2,
        "proof-generation": 0.02,
    },
    average_gas=20_000,
    base_demand=50,
    demand_volatility=0.9,
    price_elasticity=0.95,
    percent_of_mainnet_txs=0.5,
    description="XEN crypto rank mint, cheap in gas but heavy on state",
)

TRANSACTION_TYPES: Tuple[TransactionType, ...] = (
    ETH_TRANSFER,
    ERC20_TRANSFER,
    UNISWAP_SWAP_ETH_USDC,
    UNISWAP_SWAP_ETH_DAI,
    NFT_MINT,
    NFT_TRANSFER,
    ROLLUP_BATCH,
    ZK_PROOF_VERIFY,
    XEN_MINT,
)

TRANSACTION_TYPES_BY_ID: Dict[str, TransactionType] = {t.id: t for t in TRANSACTION_TYPES}
