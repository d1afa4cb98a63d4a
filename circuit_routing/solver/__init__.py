"""
Connectivity oracle for circuit routing puzzles.

Decides whether the source reaches the destination through matching ports.
"""

from .oracle import (ConnectivityOracle, FlowEdge, OracleResult, is_solvable,
                     is_solved, trace_flow)

__all__ = [
    "ConnectivityOracle",
    "OracleResult",
    "FlowEdge",
    "is_solved",
    "is_solvable",
    "trace_flow",
]
