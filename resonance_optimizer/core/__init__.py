"""
Resonance Optimizer demonstration engine

Generates reproducible NP-hard problem instances (TSP, subset-sum) by
difficulty level, solves them through the remote resonance solver or a
greedy local heuristic, and exposes the whole flow as a small state machine
with a read-only view-model for front ends.
"""

from .problem_structures import (
    ProblemType,
    DifficultyLevel,
    ComplexityClass,
    ProblemDefinition,
    DifficultyConfig,
    TSPConfig,
    SubsetSumConfig,
    City,
    TSPInstance,
    SubsetSumInstance,
    OptimizationSolution,
    OptimizationMetrics,
    SolutionSource,
    SolveOutcome,
    ValidationResult,
)

from .errors import (
    OptimizerError,
    GenerationError,
    ConfigurationLookupError,
    RemoteSolveError,
    OrchestratorStateError,
    SolveInProgressError,
)

from .config import OptimizerSettings, configure_logging
from .difficulty import (
    PROBLEM_DEFINITIONS,
    describe_parameters,
    get_problem,
    list_problems,
    resolve,
    validate_parameters,
)
from .instance_generator import (
    generate_subset_sum_instance,
    generate_tsp_instance,
    get_predefined_instances,
)
from .heuristics import calculate_tour_distance, generate_greedy_tour
from .normalization import Assignment, Indices, encoding_from_certificate
from .validator import Validator
from .srs_client import SRSClient
from .orchestrator import OptimizationOrchestrator, SolveTicket, SolverState, ViewModel

__version__ = "1.0.0"

__all__ = [
    # Orchestration
    'OptimizationOrchestrator',
    'SolverState',
    'SolveTicket',
    'ViewModel',
    'SRSClient',
    'Validator',
    'OptimizerSettings',
    'configure_logging',

    # Generation and heuristics
    'generate_tsp_instance',
    'generate_subset_sum_instance',
    'get_predefined_instances',
    'generate_greedy_tour',
    'calculate_tour_distance',

    # Difficulty table
    'PROBLEM_DEFINITIONS',
    'resolve',
    'get_problem',
    'list_problems',
    'describe_parameters',
    'validate_parameters',

    # Encodings
    'Indices',
    'Assignment',
    'encoding_from_certificate',

    # Data structures
    'ProblemType',
    'DifficultyLevel',
    'ComplexityClass',
    'ProblemDefinition',
    'DifficultyConfig',
    'TSPConfig',
    'SubsetSumConfig',
    'City',
    'TSPInstance',
    'SubsetSumInstance',
    'OptimizationSolution',
    'OptimizationMetrics',
    'SolutionSource',
    'SolveOutcome',
    'ValidationResult',

    # Errors
    'OptimizerError',
    'GenerationError',
    'ConfigurationLookupError',
    'RemoteSolveError',
    'OrchestratorStateError',
    'SolveInProgressError',
]
