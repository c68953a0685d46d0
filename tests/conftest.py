import pytest

from resonance_optimizer.core.config import OptimizerSettings
from resonance_optimizer.core.errors import RemoteSolveError


class FakeSRSClient:
    """Stands in for SRSClient; records requests and replays a canned answer."""

    def __init__(self, payload=None, error=None, gate=None):
        self.payload = payload if payload is not None else {
            "feasible": True,
            "certificate": {"indices": [0, 1]},
            "telemetry": [{}] * 10,
            "metrics": {"resonanceStrength": 0.9},
        }
        self.error = error
        self.gate = gate
        self.calls = []
        self.closed = False

    def solve_subset_sum(self, weights, target, config=None):
        self.calls.append({"weights": list(weights), "target": target})
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.payload

    def close(self):
        self.closed = True


@pytest.fixture
def fast_settings():
    return OptimizerSettings(progress_interval=0.01, reseed_on_regenerate=False)


@pytest.fixture
def fake_client():
    return FakeSRSClient()


@pytest.fixture
def failing_client():
    return FakeSRSClient(error=RemoteSolveError("connection refused"))
