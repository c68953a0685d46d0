#!/usr/bin/env python3
"""
Interactive Resonance Optimizer
Pick an NP-hard problem and a difficulty level, look at the generated
instance and watch it get solved.
"""

import argparse
import sys

from resonance_optimizer.core.config import OptimizerSettings, configure_logging
from resonance_optimizer.core.difficulty import list_problems
from resonance_optimizer.core.errors import OptimizerError
from resonance_optimizer.core.orchestrator import OptimizationOrchestrator
from resonance_optimizer.core.problem_structures import (
    DifficultyLevel, SolutionSource, SubsetSumInstance, TSPInstance,
)
from resonance_optimizer.core.validator import Validator


def print_section(title, width=70):
    """Print a formatted section header."""
    print()
    print("=" * width)
    print(title.center(width))
    print("=" * width)
    print()


def print_subsection(title, width=70):
    """Print a formatted subsection header."""
    print()
    print(title)
    print("-" * width)


def choose(prompt, options, default=0):
    """Ask for one of ``options`` by number; returns the chosen option."""
    for i, label in enumerate(options, 1):
        marker = " (default)" if i - 1 == default else ""
        print(f"  {i}. {label}{marker}")
    while True:
        try:
            answer = input(f"{prompt} [1-{len(options)}]: ").strip()
        except EOFError:
            return options[default]
        if not answer:
            return options[default]
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        print("    Invalid choice, try again")


def print_instance(view_model):
    """Print the generated instance and its parameter summary."""
    print_subsection("Problem Instance")
    for line in view_model.parameter_summary:
        print(f"  {line}")

    instance = view_model.current_instance
    if isinstance(instance, TSPInstance):
        print(f"  Instance: {instance.name} (seed {instance.seed})")
        for city in instance.cities[:10]:
            print(f"    {city.id:>3}  {city.name:<14} ({city.x}, {city.y})")
        if instance.city_count > 10:
            print(f"    ... {instance.city_count - 10} more")
    elif isinstance(instance, SubsetSumInstance):
        print(f"  Instance seed: {instance.seed}")

    if view_model.warning:
        print()
        print(f"  ⚠️  {view_model.warning}")


def print_results(view_model, validator=None):
    """Print solution, metrics and a validation report."""
    print_section("Results")

    solution = view_model.solution
    metrics = view_model.metrics
    if solution is None:
        print(f"No solution available ({view_model.state.value})")
        if view_model.last_error:
            print(f"  Error: {view_model.last_error}")
        return

    if view_model.source:
        print(f"Solution source: {view_model.source.value}")
    print(f"  Solution: {solution.solution}")
    print(f"  Satisfied: {'✅' if solution.satisfied else '❌'}")
    print(f"  Iterations: {solution.iterations}")

    instance = view_model.current_instance
    if isinstance(instance, SubsetSumInstance):
        total = instance.subset_sum(solution.solution)
        achieved = "✅" if view_model.target_achieved else "❌"
        print(f"  Subset sum: {total} / target {instance.target} {achieved}")

    if metrics:
        print()
        print("Metrics:")
        print(f"  Solution time: {metrics.solution_time:.2f}s")
        print(f"  Classical estimate: {metrics.classical_time:.2f}s")
        print(f"  Speed-up factor: {metrics.quantum_advantage:.0f}x")
        print(f"  Solution quality: {metrics.solution_quality * 100:.1f}%")

    if validator and view_model.selected_problem:
        print()
        result = validator.validate_solution(view_model.selected_problem.type, solution, instance)
        print(result.report())

    if view_model.source is SolutionSource.FALLBACK:
        print()
        print("Troubleshooting:")
        print("  - Check RESONANCE_API_BASE_URL points at a running solver")
        print("  - Set RESONANCE_API_KEY / RESONANCE_API_TOKEN if the solver requires them")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Interactive NP-hard problem showcase")
    parser.add_argument("--problem", help="Problem id (tsp, subset_sum, clique, 3sat)")
    parser.add_argument("--level", help="Difficulty level (Beginner, Intermediate, Advanced, Expert)")
    parser.add_argument("--seed", type=int, help="Instance seed")
    parser.add_argument("--log-level", default=None, help="Logging level")
    args = parser.parse_args(argv)

    settings = OptimizerSettings.from_env()
    configure_logging(args.log_level or settings.log_level)

    print_section("Resonance Optimizer")
    print("Generates NP-hard problem instances and solves them with the")
    print("resonance solver, or a local heuristic where none is available.")

    problems = list_problems()
    if args.problem:
        problem_id = args.problem
    else:
        print_subsection("Step 1: Choose a problem")
        labels = [f"{p.name} [{p.complexity.value}]" for p in problems]
        chosen = choose("Problem", labels)
        problem_id = problems[labels.index(chosen)].id

    if args.level:
        level = args.level
    else:
        print_subsection("Step 2: Choose a difficulty")
        level = choose("Level", [lvl.value for lvl in DifficultyLevel])

    orchestrator = OptimizationOrchestrator(settings=settings)
    try:
        try:
            view_model = orchestrator.select_problem(problem_id, level=level, seed=args.seed)
        except OptimizerError as e:
            print(f"Error: {e}")
            return 1

        print_instance(view_model)

        print_section("Solving")
        print("Optimizing... (this may take a moment)")
        try:
            orchestrator.solve()
        except Exception as e:
            print(f"Solve failed: {e}")

        print_results(orchestrator.view_model(), Validator())
        print()
        print("=" * 70)
        return 0
    finally:
        orchestrator.close()


if __name__ == "__main__":
    sys.exit(main())
