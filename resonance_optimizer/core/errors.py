"""
Exception hierarchy for the optimization demonstration engine.
"""

from typing import Optional


class OptimizerError(Exception):
    """Base class for all engine errors."""


class GenerationError(OptimizerError, ValueError):
    """Invalid or out-of-range instance generation parameters."""


class ConfigurationLookupError(OptimizerError, KeyError):
    """Unknown problem id, problem type or difficulty level."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class RemoteSolveError(OptimizerError):
    """The remote solving service failed or answered with something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class OrchestratorStateError(OptimizerError):
    """An action was invoked in a state that does not allow it."""


class SolveInProgressError(OrchestratorStateError):
    """A solve was requested while another one is still running."""
