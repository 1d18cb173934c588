"""Network generation orchestration."""

from src.pipeline.network_builder import BuildPhase, NetworkBuilder, NetworkOutcome

__all__ = [
    "BuildPhase",
    "NetworkBuilder",
    "NetworkOutcome",
]
