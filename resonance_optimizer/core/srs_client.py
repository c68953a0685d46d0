"""
HTTP client for the remote Symbolic Resonance Solver (SRS) service.

The service solves subset-sum (and other NP-complete) instances. Only the
request/response contract lives here; the solver itself is remote.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

import requests

from .config import OptimizerSettings
from .errors import RemoteSolveError

logger = logging.getLogger(__name__)

SOLVE_PATH = "/srs/solve"
SUPPORTED_PROBLEMS = ("subsetsum", "3sat", "ksat", "hamiltonian_path", "vertex_cover", "clique", "x3c")


class SRSClient:
    """Thin JSON client around ``POST /srs/solve``."""

    def __init__(self,
                 base_url: str,
                 api_key: Optional[str] = None,
                 api_token: Optional[str] = None,
                 timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        """
        Args:
            base_url: API root, e.g. ``http://localhost:8080/v1``
            api_key: sent as ``X-API-Key`` when set
            api_token: sent as a bearer token when set
            timeout: per-request timeout in seconds
            session: optional pre-built ``requests.Session``
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_token = api_token
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: OptimizerSettings) -> "SRSClient":
        return cls(
            base_url=settings.api_base_url,
            api_key=settings.api_key,
            api_token=settings.api_token,
            timeout=settings.request_timeout,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Idempotency-Key": str(uuid.uuid4()),
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def solve(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a solve request and return the decoded JSON body.

        Raises:
            RemoteSolveError: on transport failure, a non-2xx status, or a
                body that is not a JSON object.
        """
        problem = request.get("Problem")
        if problem not in SUPPORTED_PROBLEMS:
            raise RemoteSolveError(f"Unsupported remote problem type: {problem!r}")

        url = f"{self.base_url}{SOLVE_PATH}"
        logger.debug("POST %s (%s)", url, problem)

        try:
            response = self.session.post(url, json=request, headers=self._headers(),
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteSolveError(f"SRS request failed: {e}") from e

        if not response.ok:
            raise RemoteSolveError(
                f"SRS returned HTTP {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteSolveError("SRS response is not valid JSON",
                                   status_code=response.status_code) from e

        # Some gateways wrap the result as {"data": {...}}
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if not isinstance(payload, dict):
            raise RemoteSolveError("SRS response is not a JSON object",
                                   status_code=response.status_code)
        return payload

    def solve_subset_sum(self, weights: List[int], target: int,
                         config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        request = {
            "Problem": "subsetsum",
            "Spec": {"weights": list(weights), "target": target},
        }
        if config:
            request["Config"] = config
        return self.solve(request)

    def close(self):
        self.session.close()


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason or "no body"
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("error") or body.get("title") or body)
    return str(body)


def default_config(problem_type: str) -> Dict[str, Any]:
    """Solver schedule presets for a remote problem type."""
    config: Dict[str, Any] = {
        "stop": {
            "plateauEps": 1e-6,
            "plateauT": 150,
            "massThreshold": 0.97,
            "satProb": 0.995,
            "iterMax": 20000,
            "restarts": 20,
        },
        "entropy": {
            "lambdaPrime": 0.1,
            "betaPrimes": "auto",
        },
    }

    if problem_type == "3sat":
        config["schedules"] = {"eta0": 0.3, "etaDecay": 0.002, "alphaMin": 0.2, "alphaGrowth": 0.01}
    elif problem_type == "subsetsum":
        config["schedules"] = {"eta0": 0.25, "etaDecay": 0.001, "alphaMin": 0.15, "alphaGrowth": 0.005}

    return config
