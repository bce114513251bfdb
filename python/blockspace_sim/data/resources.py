"""
Resource Registry

Capacity dimensions of block production, in catalog order. Throughputs are
per second of chain time, calibrated to current Ethereum mainnet.
"""

from typing import Dict, Tuple

from .catalog import Resource, ResourceCategory

EVM_COMPUTE = Resource(
    id="evm-compute",
    name="EVM Compute",
    unit="Mgas/sec",
    max_throughput=2.5,  # ~30M gas / 12 seconds
    category=ResourceCategory.building,
    description="Opcode execution, precompiles and cryptographic operations",
)

STATE_ACCESS = Resource(
    id="state-access",
    name="State Access",
    unit="ops/sec",
    max_throughput=50_000,
    category=ResourceCategory.building,
    description="Account and storage reads/writes against the state database",
)

MERKLIZATION = Resource(
    id="merklization",
    name="Merklization",
    unit="hashes/sec",
    max_throughput=100_000,
    category=ResourceCategory.building,
    description="Hashing needed to recompute the state root",
)

BLOCK_VERIFICATION = Resource(
    id="block-verification",
    name="Block Verification",
    unit="Mgas/sec",
    max_throughput=2.5,  # Should match or exceed building speed
    category=ResourceCategory.verification,
    description="Re-execution of the block by validating nodes",
)

BLOCK_DISTRIBUTION = Resource(
    id="block-distribution",
    name="Block Distribution",
    unit="MB/sec",
    max_throughput=10,
    category=ResourceCategory.verification,
    description="Propagation of block data across the p2p network",
)

STATE_GROWTH = Resource(
    id="state-growth",
    name="State Growth",
    unit="KB/sec",
    max_throughput=50,  # ~1.5 TB/year
    category=ResourceCategory.sync_archive,
    description="Rate of new state accumulation",
)

HISTORY_GROWTH = Resource(
    id="history-growth",
    name="History Growth",
    unit="KB/sec",
    max_throughput=100,  # ~3 TB/year
    category=ResourceCategory.sync_archive,
    description="Rate of block and receipt history accumulation",
)

PROOF_GENERATION = Resource(
    id="proof-generation",
    name="Proof Generation",
    unit="Mgas/sec",
    max_throughput=2.5,  # Matches EVM compute; real provers vary widely
    category=ResourceCategory.proving,
    description="Validity proof generation for executed blocks",
)

RESOURCES: Tuple[Resource, ...] = (
    EVM_COMPUTE,
    STATE_ACCESS,
    MERKLIZATION,
    BLOCK_VERIFICATION,
    BLOCK_DISTRIBUTION,
    STATE_GROWTH,
    HISTORY_GROWTH,
    PROOF_GENERATION,
)

RESOURCES_BY_ID: Dict[str, Resource] = {r.id: r for r in RESOURCES}
