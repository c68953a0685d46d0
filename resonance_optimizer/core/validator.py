"""
Validator for solutions shown by the optimizer.
Checks tours and subset selections against the instance they belong to.
"""

import logging
from typing import Sequence

from .problem_structures import (
    OptimizationSolution, ProblemType, SubsetSumInstance, TSPInstance, ValidationResult,
)

logger = logging.getLogger(__name__)


class Validator:
    """Validates candidate solutions for TSP and subset-sum instances."""

    def validate_tour(self, tour: Sequence[int], city_count: int) -> ValidationResult:
        """
        Check that ``tour`` visits every city of ``range(city_count)`` exactly once.

        Args:
            tour: city indices in visiting order (return leg implicit)
            city_count: number of cities in the instance

        Returns:
            ValidationResult listing every problem found
        """
        errors = []

        if len(tour) != city_count:
            errors.append(f"Tour length ({len(tour)}) does not match city count ({city_count})")

        seen = set()
        for city in tour:
            if city < 0 or city >= city_count:
                errors.append(f"Invalid city index: {city}")
            if city in seen:
                errors.append(f"City {city} visited multiple times")
            seen.add(city)

        for city in range(city_count):
            if city not in seen:
                errors.append(f"City {city} not visited")

        return ValidationResult(valid=not errors, errors=errors)

    def validate_subset(self, selection: Sequence[int], instance: SubsetSumInstance) -> ValidationResult:
        """
        Check a subset selection.

        Bad or repeated indices are errors. Missing the target is only a
        warning: generated instances may have no exact subset at all.
        """
        errors = []
        warnings = []

        seen = set()
        for index in selection:
            if index < 0 or index >= len(instance.weights):
                errors.append(f"Invalid item index: {index}")
            elif index in seen:
                errors.append(f"Item {index} selected multiple times")
            seen.add(index)

        total = instance.subset_sum(sorted(seen))
        if not errors and total != instance.target:
            warnings.append(f"Selection sums to {total}, target is {instance.target}")

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def validate_solution(self, problem_type: ProblemType, solution: OptimizationSolution,
                          instance) -> ValidationResult:
        """Dispatch on problem type; clique and 3-SAT have no local instance to check."""
        if problem_type is ProblemType.TSP and isinstance(instance, TSPInstance):
            result = self.validate_tour(solution.solution, instance.city_count)
        elif problem_type is ProblemType.SUBSET_SUM and isinstance(instance, SubsetSumInstance):
            result = self.validate_subset(solution.solution, instance)
        else:
            result = ValidationResult(
                valid=True,
                warnings=[f"No local instance to validate {problem_type.value} against"],
            )

        if not result.valid:
            logger.debug("Invalid %s solution: %s", problem_type.value, "; ".join(result.errors))
        return result
