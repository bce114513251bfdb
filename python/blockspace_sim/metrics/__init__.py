"""
Metrics Module

Summary statistics over a completed simulation run.

Usage:
    from blockspace_sim.metrics import calculate_stats, calculate_throughput_stats
"""

from .calculator import (
    SimulationStats,
    ThroughputStats,
    calculate_stats,
    calculate_throughput_stats,
)

__all__ = ['SimulationStats', 'ThroughputStats', 'calculate_stats', 'calculate_throughput_stats']
