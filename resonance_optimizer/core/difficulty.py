"""
Difficulty configuration table and problem catalogue.

This table is the single place where problem hardness is tuned. Generators
read their parameters from ``resolve`` and display copy is built from the
same records by ``describe_parameters``.
"""

from typing import Any, Dict, List, Optional, Union

from .errors import ConfigurationLookupError, GenerationError
from .problem_structures import (
    ComplexityClass, DifficultyConfig, DifficultyLevel, ProblemDefinition, ProblemType,
    SubsetSumInstance, TSPInstance,
)

_B, _I, _A, _E = (DifficultyLevel.BEGINNER, DifficultyLevel.INTERMEDIATE,
                  DifficultyLevel.ADVANCED, DifficultyLevel.EXPERT)

PROBLEM_DEFINITIONS = (
    ProblemDefinition(
        id='tsp',
        name='Traveling Salesman Problem',
        description='Find the shortest route visiting all cities exactly once',
        type=ProblemType.TSP,
        complexity=ComplexityClass.NP_HARD,
        real_world_applications=(
            'Logistics and delivery optimization',
            'Circuit board drilling',
            'DNA sequencing',
            'Manufacturing workflow',
        ),
        difficulty=_B,
        estimated_time='30-60 seconds',
        difficulty_params={
            _B: {'cityCount': 8, 'clustered': True, 'clusterCount': 2},
            _I: {'cityCount': 15, 'clustered': True, 'clusterCount': 3},
            _A: {'cityCount': 25, 'clustered': False, 'clusterCount': 1},
            _E: {'cityCount': 40, 'clustered': False, 'clusterCount': 1},
        },
    ),
    ProblemDefinition(
        id='subset_sum',
        name='Subset Sum Problem',
        description='Find a subset of numbers that sum to a target value',
        type=ProblemType.SUBSET_SUM,
        complexity=ComplexityClass.NP_COMPLETE,
        real_world_applications=(
            'Cryptographic key breaking',
            'Portfolio optimization',
            'Resource allocation',
            'Knapsack optimization',
        ),
        difficulty=_I,
        estimated_time='10-30 seconds',
        difficulty_params={
            _B: {'problemSize': 8, 'targetRange': (10, 30), 'maxWeight': 20},
            _I: {'problemSize': 12, 'targetRange': (30, 80), 'maxWeight': 30},
            _A: {'problemSize': 16, 'targetRange': (80, 150), 'maxWeight': 40},
            _E: {'problemSize': 20, 'targetRange': (150, 200), 'maxWeight': 50},
        },
    ),
    ProblemDefinition(
        id='clique',
        name='Maximum Clique Problem',
        description='Find the largest group where everyone is connected to everyone',
        type=ProblemType.CLIQUE,
        complexity=ComplexityClass.NP_COMPLETE,
        real_world_applications=(
            'Social network analysis',
            'Protein structure analysis',
            'Market clustering',
            'Community detection',
        ),
        difficulty=_A,
        estimated_time='45-90 seconds',
        difficulty_params={
            _B: {'nodeCount': 8, 'density': 0.7, 'expectedClique': 4},
            _I: {'nodeCount': 12, 'density': 0.5, 'expectedClique': 4},
            _A: {'nodeCount': 16, 'density': 0.4, 'expectedClique': 5},
            _E: {'nodeCount': 20, 'density': 0.3, 'expectedClique': 5},
        },
    ),
    ProblemDefinition(
        id='3sat',
        name='3-SAT Boolean Satisfiability',
        description='Find truth assignments that satisfy all logical clauses',
        type=ProblemType.THREE_SAT,
        complexity=ComplexityClass.NP_COMPLETE,
        real_world_applications=(
            'Circuit design verification',
            'AI planning problems',
            'Software verification',
            'Logic puzzle solving',
        ),
        difficulty=_E,
        estimated_time='60-120 seconds',
        difficulty_params={
            _B: {'variables': 4, 'clauses': 6, 'ratio': 3.0},
            _I: {'variables': 6, 'clauses': 12, 'ratio': 4.0},
            _A: {'variables': 8, 'clauses': 18, 'ratio': 4.5},
            _E: {'variables': 10, 'clauses': 25, 'ratio': 5.0},
        },
    ),
)

EXPERT_WARNING = (
    "Expert level problems may take significantly longer to solve and "
    "require more computational resources."
)

_BY_ID = {problem.id: problem for problem in PROBLEM_DEFINITIONS}
_BY_TYPE = {problem.type: problem for problem in PROBLEM_DEFINITIONS}


def list_problems() -> List[ProblemDefinition]:
    return list(PROBLEM_DEFINITIONS)


def get_problem(problem_id: str) -> ProblemDefinition:
    try:
        return _BY_ID[problem_id]
    except KeyError:
        raise ConfigurationLookupError(f"Unknown problem id: {problem_id!r}") from None


def resolve(problem_type: Union[ProblemType, str],
            level: Union[DifficultyLevel, str]) -> Dict[str, Any]:
    """
    Look up the generation parameters for a problem type and level.

    Returns a fresh copy so callers can never edit the table. Unknown
    combinations raise ConfigurationLookupError.
    """
    problem_type = ProblemType.parse(problem_type)
    level = DifficultyLevel.parse(level)

    definition = _BY_TYPE.get(problem_type)
    parameters = definition.difficulty_params.get(level) if definition else None
    if not parameters:
        raise ConfigurationLookupError(
            f"No parameters for {problem_type.value} at {level.value}"
        )
    return dict(parameters)


def difficulty_config_for(problem: ProblemDefinition,
                          level: Optional[Union[DifficultyLevel, str]] = None) -> DifficultyConfig:
    """DifficultyConfig for ``level``, or the problem's default level."""
    level = problem.difficulty if level is None else DifficultyLevel.parse(level)
    return DifficultyConfig(level=level, parameters=resolve(problem.type, level))


def describe_parameters(problem_type: Union[ProblemType, str],
                        parameters: Dict[str, Any],
                        instance=None) -> List[str]:
    """Display lines for the current configuration, built from parameter values."""
    problem_type = ProblemType.parse(problem_type)

    if problem_type is ProblemType.TSP:
        city_count = instance.city_count if isinstance(instance, TSPInstance) else parameters.get('cityCount')
        return [
            f"Cities: {city_count}",
            f"Layout: {'Clustered' if parameters.get('clustered') else 'Random'}",
            "Estimated complexity: O(n!)",
        ]

    if problem_type is ProblemType.SUBSET_SUM:
        if isinstance(instance, SubsetSumInstance):
            return [
                f"Numbers: [{', '.join(str(w) for w in instance.weights)}]",
                f"Target Sum: {instance.target}",
                f"Search space: 2^{len(instance.weights)} combinations",
            ]
        low, high = parameters.get('targetRange', (None, None))
        return [
            f"Numbers: {parameters.get('problemSize')} weights up to {parameters.get('maxWeight')}",
            f"Target range: {low}-{high}",
            f"Search space: 2^{parameters.get('problemSize')} combinations",
        ]

    if problem_type is ProblemType.CLIQUE:
        return [
            f"Nodes: {parameters.get('nodeCount')}",
            f"Density: {parameters.get('density', 0) * 100:.0f}%",
            f"Expected clique: {parameters.get('expectedClique')}",
        ]

    return [
        f"Variables: {parameters.get('variables')}",
        f"Clauses: {parameters.get('clauses')}",
        f"Ratio: {parameters.get('ratio', 0):.1f} clauses/variable",
    ]


PARAMETER_KEYS = {
    ProblemType.TSP: frozenset({'cityCount', 'clustered', 'clusterCount', 'useRealCoordinates'}),
    ProblemType.SUBSET_SUM: frozenset({'problemSize', 'targetRange', 'maxWeight', 'ensureFeasible'}),
    ProblemType.CLIQUE: frozenset({'nodeCount', 'density', 'expectedClique'}),
    ProblemType.THREE_SAT: frozenset({'variables', 'clauses', 'ratio'}),
}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_positive_int(parameters: Dict[str, Any], key: str):
    value = parameters.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise GenerationError(f"{key} must be a positive integer, got {value!r}")


def validate_parameters(problem_type: Union[ProblemType, str], parameters: Dict[str, Any]):
    """
    Reject parameter sets no generator or display line could use.

    Unknown keys are refused for every problem. Clique and 3-SAT values are
    checked here because nothing is generated for them; TSP and subset-sum
    values are checked by their generators.

    Raises:
        GenerationError: on the first offending key or value
    """
    problem_type = ProblemType.parse(problem_type)

    unknown = sorted(set(parameters) - PARAMETER_KEYS[problem_type])
    if unknown:
        raise GenerationError(
            f"Unknown {problem_type.value} parameters: {', '.join(unknown)}"
        )

    if problem_type is ProblemType.CLIQUE:
        _require_positive_int(parameters, 'nodeCount')
        _require_positive_int(parameters, 'expectedClique')
        if parameters['expectedClique'] > parameters['nodeCount']:
            raise GenerationError("expectedClique cannot exceed nodeCount")
        density = parameters.get('density')
        if not _is_number(density) or not 0 < density <= 1:
            raise GenerationError(f"density must be a number in (0, 1], got {density!r}")

    elif problem_type is ProblemType.THREE_SAT:
        _require_positive_int(parameters, 'variables')
        _require_positive_int(parameters, 'clauses')
        ratio = parameters.get('ratio')
        if not _is_number(ratio) or ratio <= 0:
            raise GenerationError(f"ratio must be a positive number, got {ratio!r}")
