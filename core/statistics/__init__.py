"""Statistical tools for the table."""

from core.statistics.simulator import SimulationResult, TableSimulator

__all__ = [
    "SimulationResult",
    "TableSimulator",
]
