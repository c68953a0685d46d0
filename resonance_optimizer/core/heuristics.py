"""
Classical baseline heuristics.

The greedy tour is the local answer for TSP and the baseline the remote
solver is compared against.
"""

from typing import List, Sequence


def generate_greedy_tour(distance_matrix: Sequence[Sequence[float]]) -> List[int]:
    """
    Nearest-neighbour tour starting at city 0.

    At every step the closest unvisited city is appended; ties go to the
    lowest index. The return leg to city 0 is implicit and not stored.

    Args:
        distance_matrix: square matrix of pairwise distances

    Returns:
        A permutation of ``range(n)``; empty for an empty matrix.
    """
    n = len(distance_matrix)
    if n == 0:
        return []

    tour = [0]
    visited = [False] * n
    visited[0] = True

    for _ in range(n - 1):
        row = distance_matrix[tour[-1]]
        nearest = -1
        nearest_distance = float("inf")
        for j in range(n):
            # strict comparison keeps the lowest index on ties
            if not visited[j] and row[j] < nearest_distance:
                nearest = j
                nearest_distance = row[j]
        if nearest == -1:
            # only reachable with NaN/inf distances; take the first unvisited city
            nearest = visited.index(False)
        tour.append(nearest)
        visited[nearest] = True

    return tour


def calculate_tour_distance(tour: Sequence[int], distance_matrix: Sequence[Sequence[float]]) -> float:
    """Length of the closed tour, including the leg back to the start."""
    total = 0.0
    for i, city in enumerate(tour):
        total += distance_matrix[city][tour[(i + 1) % len(tour)]]
    return total


def identity_tour(city_count: int) -> List[int]:
    """Cities in index order; the fallback tour."""
    return list(range(city_count))
