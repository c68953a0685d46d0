"""
Data structures shared by the instance generators, the heuristics and the
optimization orchestrator.

Parameter records coming from the difficulty table keep the camelCase keys
the front end uses (``cityCount``, ``targetRange``...). The typed generator
configs below are the only place those keys are translated.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ConfigurationLookupError, GenerationError


class ProblemType(Enum):
    """Closed set of demonstrable NP-hard problems."""
    TSP = "tsp"
    SUBSET_SUM = "subset_sum"
    CLIQUE = "clique"
    THREE_SAT = "3sat"

    @classmethod
    def parse(cls, value) -> "ProblemType":
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == str(value).strip().lower():
                return member
        raise ConfigurationLookupError(f"Unknown problem type: {value!r}")


class DifficultyLevel(Enum):
    """Named difficulty presets, ordered from easiest to hardest."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"

    @classmethod
    def parse(cls, value) -> "DifficultyLevel":
        """Accept a member, its display value or any casing of it."""
        if isinstance(value, cls):
            return value
        wanted = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ConfigurationLookupError(f"Unknown difficulty level: {value!r}")


class ComplexityClass(Enum):
    NP_COMPLETE = "NP-Complete"
    NP_HARD = "NP-Hard"


# ---------------------------------------------------------------------------
# Problem catalogue
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProblemDefinition:
    """Static descriptor of one problem shown in the gallery."""
    id: str
    name: str
    description: str
    type: ProblemType
    complexity: ComplexityClass
    real_world_applications: Tuple[str, ...]
    difficulty: DifficultyLevel  # default level when the problem is picked
    estimated_time: str
    difficulty_params: Mapping[DifficultyLevel, Mapping[str, Any]] = field(hash=False)

    def __post_init__(self):
        # Read-only view so the catalogue cannot be edited in place
        frozen = {level: MappingProxyType(dict(params)) for level, params in self.difficulty_params.items()}
        object.__setattr__(self, "difficulty_params", MappingProxyType(frozen))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "complexity": self.complexity.value,
            "real_world_applications": list(self.real_world_applications),
            "difficulty": self.difficulty.value,
            "estimated_time": self.estimated_time,
            "difficulty_params": {
                level.value: dict(params)
                for level, params in self.difficulty_params.items()
            },
        }


@dataclass(frozen=True)
class DifficultyConfig:
    """The active level and the parameters it resolved to."""
    level: DifficultyLevel
    parameters: Dict[str, Any] = field(default_factory=dict)

    def with_parameters(self, **overrides) -> "DifficultyConfig":
        """Return a new config with ``overrides`` merged over the parameters."""
        merged = dict(self.parameters)
        merged.update(overrides)
        return replace(self, parameters=merged)

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level.value, "parameters": dict(self.parameters)}


# ---------------------------------------------------------------------------
# Generator inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TSPConfig:
    """Inputs of the TSP instance generator."""
    city_count: int
    seed: int
    map_width: int = 800
    map_height: int = 600
    min_distance: float = 30.0
    clustered: bool = False
    cluster_count: Optional[int] = None  # None -> max(2, city_count // 8)
    use_real_coordinates: bool = False

    @classmethod
    def from_parameters(cls, parameters: Dict[str, Any], seed: int) -> "TSPConfig":
        if "cityCount" not in parameters:
            raise GenerationError("TSP parameters need a 'cityCount'")
        return cls(
            city_count=parameters["cityCount"],
            seed=seed,
            clustered=bool(parameters.get("clustered", False)),
            cluster_count=parameters.get("clusterCount"),
            use_real_coordinates=bool(parameters.get("useRealCoordinates", False)),
        )


@dataclass(frozen=True)
class SubsetSumConfig:
    """Inputs of the subset-sum instance generator."""
    problem_size: int
    max_weight: int
    target_range: Tuple[int, int]
    seed: int
    ensure_feasible: bool = False

    @classmethod
    def from_parameters(cls, parameters: Dict[str, Any], seed: int) -> "SubsetSumConfig":
        missing = [k for k in ("problemSize", "maxWeight", "targetRange") if k not in parameters]
        if missing:
            raise GenerationError(f"Subset-sum parameters missing: {', '.join(missing)}")
        target_range = parameters["targetRange"]
        if len(target_range) != 2:
            raise GenerationError(f"targetRange must be a [low, high] pair, got {target_range!r}")
        return cls(
            problem_size=parameters["problemSize"],
            max_weight=parameters["maxWeight"],
            target_range=(target_range[0], target_range[1]),
            seed=seed,
            ensure_feasible=bool(parameters.get("ensureFeasible", False)),
        )


# ---------------------------------------------------------------------------
# Instances
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class City:
    id: int
    name: str
    x: int
    y: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id, "name": self.name, "x": self.x, "y": self.y}
        if self.latitude is not None and self.longitude is not None:
            data["latitude"] = self.latitude
            data["longitude"] = self.longitude
        return data


@dataclass(frozen=True)
class TSPInstance:
    """A generated TSP instance; the distance matrix is computed once."""
    id: str
    name: str
    cities: Tuple[City, ...]
    distance_matrix: Tuple[Tuple[float, ...], ...]
    difficulty: str  # Easy, Medium, Hard, Expert
    estimated_time: str
    seed: int

    @property
    def city_count(self) -> int:
        return len(self.cities)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cities": [city.to_dict() for city in self.cities],
            "distance_matrix": [list(row) for row in self.distance_matrix],
            "difficulty": self.difficulty,
            "estimated_time": self.estimated_time,
            "seed": self.seed,
        }


@dataclass(frozen=True)
class SubsetSumInstance:
    """Weights and a target; a subset hitting the target may not exist."""
    weights: Tuple[int, ...]
    target: int
    seed: int

    def subset_sum(self, indices: List[int]) -> int:
        return sum(self.weights[i] for i in indices if 0 <= i < len(self.weights))

    def hits_target(self, indices: List[int]) -> bool:
        """True for distinct in-range indices whose weights sum to the target."""
        n = len(self.weights)
        if len(set(indices)) != len(indices) or not all(0 <= i < n for i in indices):
            return False
        return self.subset_sum(indices) == self.target

    def to_dict(self) -> Dict[str, Any]:
        return {"weights": list(self.weights), "target": self.target, "seed": self.seed}


# ---------------------------------------------------------------------------
# Solve results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OptimizationSolution:
    solution: List[int]
    satisfied: bool
    iterations: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "solution": list(self.solution),
            "satisfied": self.satisfied,
            "iterations": self.iterations,
        }


@dataclass(frozen=True)
class OptimizationMetrics:
    """Display figures for the demo narrative; estimates, not measurements."""
    solution_time: float
    classical_time: float
    quantum_advantage: int
    solution_quality: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "solution_time": self.solution_time,
            "classical_time": self.classical_time,
            "quantum_advantage": self.quantum_advantage,
            "solution_quality": self.solution_quality,
        }


class SolutionSource(Enum):
    REMOTE = "remote"
    HEURISTIC = "heuristic"
    SIMULATED = "simulated"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SolveOutcome:
    """Record of one solve attempt."""
    solution: OptimizationSolution
    metrics: OptimizationMetrics
    source: SolutionSource
    error: Optional[str] = None

    @property
    def recovered(self) -> bool:
        return self.source is SolutionSource.FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "solution": self.solution.to_dict(),
            "metrics": self.metrics.to_dict(),
            "source": self.source.value,
            "recovered": self.recovered,
            "error": self.error,
        }


@dataclass
class ValidationResult:
    """Result of checking a candidate solution against its instance."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def report(self) -> str:
        lines = ["✅ Solution valid" if self.valid else "❌ Solution invalid"]

        if self.errors:
            lines.append("\nErrors:")
            for err in self.errors:
                lines.append(f"  - {err}")

        if self.warnings:
            lines.append("\nWarnings:")
            for warn in self.warnings:
                lines.append(f"  - {warn}")

        return "\n".join(lines)
