"""
Main orchestrator for the optimization showcase.
Coordinates problem selection, instance generation, remote solving and the
local fallback, and publishes a read-only view-model for front ends.
"""

import logging
import random
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import ON_SOLVE_ERROR_FALLBACK, OptimizerSettings
from .difficulty import (
    EXPERT_WARNING, describe_parameters, difficulty_config_for, get_problem, validate_parameters,
)
from .errors import OrchestratorStateError, SolveInProgressError
from .instance_generator import generate_subset_sum_instance, generate_tsp_instance
from .normalization import (
    THREE_SAT_PROXY_TARGET, THREE_SAT_PROXY_WEIGHTS, fallback_result, greedy_tsp_result,
    normalize_subset_sum_response, normalize_three_sat_response, simulated_clique_result,
)
from .problem_structures import (
    DifficultyConfig, DifficultyLevel, OptimizationMetrics, OptimizationSolution,
    ProblemDefinition, ProblemType, SolutionSource, SolveOutcome, SubsetSumConfig,
    SubsetSumInstance, TSPConfig, TSPInstance,
)
from .srs_client import SRSClient

logger = logging.getLogger(__name__)

PROGRESS_CAP = 95.0
PROGRESS_MAX_STEP = 10.0


class SolverState(Enum):
    IDLE = "idle"
    PROBLEM_SELECTED = "problem_selected"
    INSTANCE_READY = "instance_ready"
    SOLVING = "solving"
    SOLVED = "solved"
    FAILED_RECOVERED = "failed_recovered"
    FAILED = "failed"  # only with on_solve_error="surface"


class ProgressTicker:
    """
    Cosmetic progress indicator running on its own daemon thread.

    Every ``interval`` seconds the value grows by a random step below
    ``max_step`` and is capped at ``cap``; it never reaches 100 on its own.
    """

    def __init__(self, interval: float, on_tick: Callable[["ProgressTicker", float], None],
                 rng: Optional[random.Random] = None,
                 cap: float = PROGRESS_CAP, max_step: float = PROGRESS_MAX_STEP):
        self.interval = interval
        self.on_tick = on_tick
        self.rng = rng or random.Random()
        self.cap = cap
        self.max_step = max_step
        self.value = 0.0
        self._stop = threading.Event()
        self._cancel_lock = threading.Lock()
        self._cancelled = False
        self._thread = threading.Thread(target=self._run, name="progress-ticker", daemon=True)

    def start(self):
        self._thread.start()

    def _run(self):
        while not self._stop.wait(self.interval):
            self.value = min(self.cap, self.value + self.rng.uniform(0, self.max_step))
            self.on_tick(self, self.value)
            if self.value >= self.cap:
                break

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Stop ticking. Returns True only for the call that actually cancelled."""
        with self._cancel_lock:
            if self._cancelled:
                return False
            self._cancelled = True
        self._stop.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=max(1.0, self.interval * 5))
        return True


@dataclass(frozen=True)
class SolveTicket:
    """A claimed solve: what to solve and the instance version it belongs to."""
    problem: ProblemDefinition
    instance: Any
    version: int
    ticker: ProgressTicker


@dataclass(frozen=True)
class ViewModel:
    """Read-only snapshot handed to presentation layers."""
    state: SolverState
    selected_problem: Optional[ProblemDefinition]
    difficulty_config: Optional[DifficultyConfig]
    current_instance: Any  # TSPInstance, SubsetSumInstance or None
    seed: Optional[int]
    solution: Optional[OptimizationSolution]
    metrics: Optional[OptimizationMetrics]
    is_optimizing: bool
    optimization_progress: float
    source: Optional[SolutionSource] = None
    last_error: Optional[str] = None
    target_achieved: Optional[bool] = None
    parameter_summary: List[str] = field(default_factory=list)
    warning: Optional[str] = None

    @property
    def can_solve(self) -> bool:
        return self.selected_problem is not None and not self.is_optimizing

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "selected_problem": self.selected_problem.to_dict() if self.selected_problem else None,
            "difficulty_config": self.difficulty_config.to_dict() if self.difficulty_config else None,
            "current_instance": self.current_instance.to_dict() if self.current_instance else None,
            "seed": self.seed,
            "solution": self.solution.to_dict() if self.solution else None,
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "is_optimizing": self.is_optimizing,
            "optimization_progress": round(self.optimization_progress, 2),
            "can_solve": self.can_solve,
            "source": self.source.value if self.source else None,
            "last_error": self.last_error,
            "target_achieved": self.target_achieved,
            "parameter_summary": list(self.parameter_summary),
            "warning": self.warning,
        }


Listener = Callable[[str, ViewModel], None]


class OptimizationOrchestrator:
    """
    State machine behind the optimization showcase.

    IDLE -> PROBLEM_SELECTED -> INSTANCE_READY -> SOLVING -> SOLVED | FAILED_RECOVERED

    Changing problem, difficulty or parameters (or asking for a new
    instance) always lands back in INSTANCE_READY with no solution or
    metrics. Only one solve runs at a time.
    """

    def __init__(self,
                 client: Optional[SRSClient] = None,
                 settings: Optional[OptimizerSettings] = None,
                 seed_source: Optional[random.Random] = None,
                 progress_rng: Optional[random.Random] = None):
        """
        Args:
            client: remote solver client (built from ``settings`` if omitted)
            settings: runtime settings, defaults to ``OptimizerSettings()``
            seed_source: RNG drawing fresh instance seeds when reseeding
            progress_rng: RNG for the cosmetic progress increments
        """
        self.settings = settings or OptimizerSettings()
        self.client = client if client is not None else SRSClient.from_settings(self.settings)
        self._seed_source = seed_source or random.Random()
        self._progress_rng = progress_rng

        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

        self._state = SolverState.IDLE
        self._problem: Optional[ProblemDefinition] = None
        self._difficulty: Optional[DifficultyConfig] = None
        self._instance = None
        self._seed: Optional[int] = None
        self._instance_version = 0

        self._outcome: Optional[SolveOutcome] = None
        self._last_error: Optional[str] = None
        self._progress = 0.0
        self._ticker: Optional[ProgressTicker] = None
        self._in_flight = False

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> SolverState:
        return self._state

    def add_listener(self, listener: Listener):
        """Register ``listener(event, view_model)``; events are state_changed, progress, solve_complete."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self, event: str):
        with self._lock:
            listeners = list(self._listeners)
            snapshot = self.view_model()
        for listener in listeners:
            try:
                listener(event, snapshot)
            except Exception:
                logger.exception("Listener failed on %s", event)

    def view_model(self) -> ViewModel:
        with self._lock:
            outcome = self._outcome
            problem = self._problem
            instance = self._instance

            target_achieved = None
            if outcome and isinstance(instance, SubsetSumInstance):
                target_achieved = instance.hits_target(outcome.solution.solution)

            summary = []
            warning = None
            if problem and self._difficulty:
                summary = describe_parameters(problem.type, self._difficulty.parameters, instance)
                if self._difficulty.level is DifficultyLevel.EXPERT:
                    warning = EXPERT_WARNING

            return ViewModel(
                state=self._state,
                selected_problem=problem,
                difficulty_config=self._difficulty,
                current_instance=instance,
                seed=self._seed,
                solution=outcome.solution if outcome else None,
                metrics=outcome.metrics if outcome else None,
                is_optimizing=self._in_flight,
                optimization_progress=self._progress,
                source=outcome.source if outcome else None,
                last_error=self._last_error,
                target_achieved=target_achieved,
                parameter_summary=summary,
                warning=warning,
            )

    # ------------------------------------------------------------------
    # Problem / difficulty / instance transitions
    # ------------------------------------------------------------------

    def _ensure_not_solving(self, action: str):
        if self._state is SolverState.SOLVING:
            raise OrchestratorStateError(f"Cannot {action} while a solve is running")

    def _ensure_problem(self, action: str) -> ProblemDefinition:
        if self._problem is None:
            raise OrchestratorStateError(f"Select a problem before trying to {action}")
        return self._problem

    def _next_seed(self) -> int:
        if self.settings.reseed_on_regenerate:
            return self._seed_source.randrange(1, 2 ** 31 - 1)
        return self.settings.default_seed

    def _build_instance(self, problem: ProblemDefinition, difficulty: DifficultyConfig,
                        seed: Optional[int]) -> Tuple[Any, Optional[int]]:
        """Generate the instance for ``difficulty``; clique and 3-SAT need none."""
        validate_parameters(problem.type, difficulty.parameters)
        if problem.type is ProblemType.TSP:
            seed = self._next_seed() if seed is None else seed
            return generate_tsp_instance(TSPConfig.from_parameters(difficulty.parameters, seed)), seed
        if problem.type is ProblemType.SUBSET_SUM:
            seed = self._next_seed() if seed is None else seed
            return generate_subset_sum_instance(SubsetSumConfig.from_parameters(difficulty.parameters, seed)), seed
        return None, None

    def _commit_instance(self, difficulty: DifficultyConfig, instance, seed: Optional[int]):
        # Everything derived from the previous instance goes with it
        self._difficulty = difficulty
        self._instance = instance
        self._seed = seed
        self._instance_version += 1
        self._outcome = None
        self._last_error = None
        self._progress = 0.0
        self._state = SolverState.INSTANCE_READY

    def select_problem(self, problem_id: str, level=None, seed: Optional[int] = None) -> ViewModel:
        """Pick a problem at its default (or the given) level and generate an instance."""
        with self._lock:
            self._ensure_not_solving("select a problem")
            problem = get_problem(problem_id)
            difficulty = difficulty_config_for(problem, level)
            instance, seed = self._build_instance(problem, difficulty, seed)

            self._problem = problem
            self._difficulty = difficulty
            self._instance = None
            self._outcome = None
            self._last_error = None
            self._progress = 0.0
            self._state = SolverState.PROBLEM_SELECTED
        self._notify("state_changed")

        with self._lock:
            self._commit_instance(difficulty, instance, seed)
            logger.info("Selected %s at %s", problem.id, difficulty.level.value)
        self._notify("state_changed")
        return self.view_model()

    def set_difficulty(self, level) -> ViewModel:
        """Switch level; the parameters are replaced wholesale and a new instance is generated."""
        with self._lock:
            self._ensure_not_solving("change difficulty")
            problem = self._ensure_problem("change difficulty")
            difficulty = difficulty_config_for(problem, level)
            instance, seed = self._build_instance(problem, difficulty, None)
            self._commit_instance(difficulty, instance, seed)
            logger.info("Difficulty for %s set to %s", problem.id, difficulty.level.value)
        self._notify("state_changed")
        return self.view_model()

    def set_parameters(self, **overrides) -> ViewModel:
        """Override individual generation parameters (e.g. ``cityCount=12``)."""
        with self._lock:
            self._ensure_not_solving("change parameters")
            problem = self._ensure_problem("change parameters")
            difficulty = self._difficulty.with_parameters(**overrides)
            instance, seed = self._build_instance(problem, difficulty, None)
            self._commit_instance(difficulty, instance, seed)
            logger.info("Parameters for %s overridden: %s", problem.id, overrides)
        self._notify("state_changed")
        return self.view_model()

    def regenerate_instance(self, seed: Optional[int] = None) -> ViewModel:
        """New instance for the current configuration; pass ``seed`` to rebuild a known one."""
        with self._lock:
            self._ensure_not_solving("regenerate the instance")
            problem = self._ensure_problem("regenerate the instance")
            instance, seed = self._build_instance(problem, self._difficulty, seed)
            self._commit_instance(self._difficulty, instance, seed)
        self._notify("state_changed")
        return self.view_model()

    def reset(self):
        """Back to IDLE; a running ticker is cancelled and any in-flight result discarded."""
        with self._lock:
            ticker, self._ticker = self._ticker, None
            self._problem = None
            self._difficulty = None
            self._instance = None
            self._seed = None
            self._instance_version += 1
            self._outcome = None
            self._last_error = None
            self._progress = 0.0
            self._state = SolverState.IDLE
        if ticker is not None:
            ticker.cancel()
        self._notify("state_changed")

    def close(self):
        self.reset()
        self.client.close()

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------

    def _on_tick(self, ticker: ProgressTicker, value: float):
        with self._lock:
            if self._ticker is not ticker or self._state is not SolverState.SOLVING:
                return
            self._progress = value
        self._notify("progress")

    def _run_solver(self, problem_type: ProblemType, instance) -> Tuple[OptimizationSolution, OptimizationMetrics, SolutionSource]:
        if problem_type is ProblemType.TSP:
            # No remote TSP operation: the greedy tour is the answer
            if not isinstance(instance, TSPInstance):
                raise OrchestratorStateError("No TSP instance has been generated")
            solution, metrics = greedy_tsp_result(instance)
            return solution, metrics, SolutionSource.HEURISTIC

        if problem_type is ProblemType.SUBSET_SUM:
            if not isinstance(instance, SubsetSumInstance):
                raise OrchestratorStateError("No subset-sum instance has been generated")
            payload = self.client.solve_subset_sum(list(instance.weights), instance.target)
            solution, metrics = normalize_subset_sum_response(payload, instance)
            return solution, metrics, SolutionSource.REMOTE

        if problem_type is ProblemType.THREE_SAT:
            logger.info("3-SAT is sent to the solver as its fixed subset-sum encoding")
            payload = self.client.solve_subset_sum(list(THREE_SAT_PROXY_WEIGHTS), THREE_SAT_PROXY_TARGET)
            solution, metrics = normalize_three_sat_response(payload)
            return solution, metrics, SolutionSource.REMOTE

        # Maximum clique has no remote operation; always simulated
        solution, metrics = simulated_clique_result()
        return solution, metrics, SolutionSource.SIMULATED

    def begin_solve(self) -> SolveTicket:
        """
        Claim the solver for the current instance and start the progress ticker.

        The returned ticket must be passed to ``run_solve``; until then
        ``is_optimizing`` stays true and further solves are refused.

        Raises:
            OrchestratorStateError: no problem selected
            SolveInProgressError: another solve is still running
        """
        with self._lock:
            problem = self._ensure_problem("solve")
            if self._in_flight:
                raise SolveInProgressError("A solve is already running")
            self._in_flight = True

            self._outcome = None
            self._last_error = None
            self._progress = 0.0
            self._state = SolverState.SOLVING
            ticker = ProgressTicker(self.settings.progress_interval, self._on_tick, rng=self._progress_rng)
            self._ticker = ticker
            ticket = SolveTicket(problem=problem, instance=self._instance,
                                 version=self._instance_version, ticker=ticker)
        self._notify("state_changed")

        logger.info("Starting %s optimization", problem.type.value)
        ticker.start()
        return ticket

    def run_solve(self, ticket: SolveTicket) -> Optional[SolveOutcome]:
        """
        Run a solve claimed by ``begin_solve``.

        Blocks until the remote call (if any) returns. With the default
        ``on_solve_error="fallback"`` every failure is logged and replaced
        by a canned answer; with ``"surface"`` the error is re-raised after
        the state moves to FAILED.

        Returns:
            The applied SolveOutcome, or None when the instance was replaced
            or the orchestrator reset while the solve was running.
        """
        problem = ticket.problem
        outcome: Optional[SolveOutcome] = None
        error: Optional[Exception] = None
        try:
            solution, metrics, source = self._run_solver(problem.type, ticket.instance)
            outcome = SolveOutcome(solution=solution, metrics=metrics, source=source)
        except Exception as e:
            error = e
            logger.warning("%s optimization failed: %s", problem.type.value, e, exc_info=True)
            if self.settings.on_solve_error == ON_SOLVE_ERROR_FALLBACK:
                solution, metrics = fallback_result(problem.type, ticket.instance)
                outcome = SolveOutcome(solution=solution, metrics=metrics,
                                       source=SolutionSource.FALLBACK, error=str(e))
        finally:
            ticket.ticker.cancel()
            with self._lock:
                self._in_flight = False
                if self._ticker is ticket.ticker:
                    self._ticker = None

        with self._lock:
            stale = ticket.version != self._instance_version
            if not stale:
                if outcome is not None:
                    self._outcome = outcome
                    self._progress = 100.0
                    self._state = SolverState.FAILED_RECOVERED if outcome.recovered else SolverState.SOLVED
                else:
                    self._progress = 0.0
                    self._last_error = str(error)
                    self._state = SolverState.FAILED

        if stale:
            logger.info("Discarding %s result: the instance changed while solving", problem.type.value)
            # The solver is free again
            self._notify("state_changed")
            return None

        self._notify("solve_complete")

        if outcome is None:
            raise error

        logger.info("Optimization finished (%s)", outcome.source.value)
        return outcome

    def solve(self) -> Optional[SolveOutcome]:
        """
        Solve the current instance; ``begin_solve`` followed by ``run_solve``.

        Raises:
            OrchestratorStateError: no problem selected
            SolveInProgressError: another solve is still running
        """
        return self.run_solve(self.begin_solve())
