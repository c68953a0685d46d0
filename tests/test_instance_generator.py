import pytest

from resonance_optimizer.core.errors import GenerationError
from resonance_optimizer.core.instance_generator import (
    BORDER_MARGIN, MAX_CITY_COUNT, MAX_PROBLEM_SIZE, REAL_CITIES, calculate_distance,
    classify_city_count, create_distance_matrix, generate_real_world_cities,
    generate_subset_sum_instance, generate_tsp_instance, get_predefined_instances,
)
from resonance_optimizer.core.problem_structures import City, SubsetSumConfig, TSPConfig


def test_same_seed_same_instance():
    first = generate_tsp_instance(city_count=12, seed=99, clustered=True, cluster_count=3)
    second = generate_tsp_instance(city_count=12, seed=99, clustered=True, cluster_count=3)
    assert first == second


def test_different_seed_changes_layout():
    first = generate_tsp_instance(city_count=12, seed=1)
    second = generate_tsp_instance(city_count=12, seed=2)
    assert [(c.x, c.y) for c in first.cities] != [(c.x, c.y) for c in second.cities]


def test_instance_shape():
    instance = generate_tsp_instance(TSPConfig(city_count=15, seed=42))
    assert instance.id == "tsp-15-42"
    assert instance.city_count == 15
    assert [c.id for c in instance.cities] == list(range(15))
    assert len(instance.distance_matrix) == 15
    assert all(len(row) == 15 for row in instance.distance_matrix)


def test_distance_matrix_symmetric_with_zero_diagonal():
    instance = generate_tsp_instance(city_count=20, seed=5, clustered=True)
    matrix = instance.distance_matrix
    for i in range(20):
        assert matrix[i][i] == 0
        for j in range(20):
            assert matrix[i][j] == matrix[j][i]
            assert matrix[i][j] >= 0


def test_distances_rounded_to_two_decimals():
    cities = [City(0, "A", 0, 0), City(1, "B", 1, 1)]
    matrix = create_distance_matrix(cities)
    assert matrix[0][1] == 1.41


def test_euclidean_distance():
    assert calculate_distance(City(0, "A", 0, 0), City(1, "B", 3, 4)) == 5


def test_cities_stay_inside_map_border():
    for clustered in (False, True):
        instance = generate_tsp_instance(city_count=40, seed=3, clustered=clustered)
        for city in instance.cities:
            assert BORDER_MARGIN <= city.x <= 800 - BORDER_MARGIN
            assert BORDER_MARGIN <= city.y <= 600 - BORDER_MARGIN


def test_city_names_unique_while_available():
    instance = generate_tsp_instance(city_count=50, seed=8)
    names = [c.name for c in instance.cities]
    assert len(set(names)) == len(names)


def test_real_world_cities_carry_coordinates():
    cities = generate_real_world_cities(10, seed=11111)
    assert len(cities) == 10
    assert all(c.latitude is not None and c.longitude is not None for c in cities)
    known = {name for name, _, _ in REAL_CITIES}
    assert all(c.name in known for c in cities)


def test_real_world_instance_uses_geographic_distance():
    instance = generate_tsp_instance(city_count=5, seed=1, use_real_coordinates=True)
    assert instance.name.endswith("(USA)")
    # kilometres, far larger than map pixels for cities across the country
    assert max(max(row) for row in instance.distance_matrix) > 100


def test_too_many_real_cities_rejected():
    with pytest.raises(GenerationError):
        generate_tsp_instance(city_count=len(REAL_CITIES) + 1, seed=1, use_real_coordinates=True)


@pytest.mark.parametrize("kwargs", [
    {"city_count": 1, "seed": 1},
    {"city_count": 0, "seed": 1},
    {"city_count": 5.5, "seed": 1},
    {"city_count": 5, "seed": "abc"},
    {"city_count": 5, "seed": 1, "cluster_count": 0, "clustered": True},
    {"city_count": 5, "seed": 1, "min_distance": -1},
    {"city_count": 5, "seed": 1, "map_width": 30, "map_height": 30},
])
def test_invalid_tsp_parameters(kwargs):
    with pytest.raises(GenerationError):
        generate_tsp_instance(**kwargs)


def test_config_and_kwargs_together_rejected():
    with pytest.raises(TypeError):
        generate_tsp_instance(TSPConfig(city_count=5, seed=1), city_count=6)


@pytest.mark.parametrize("count,label", [(8, "Easy"), (10, "Easy"), (15, "Medium"), (25, "Medium"),
                                         (40, "Hard"), (50, "Hard"), (51, "Expert")])
def test_difficulty_label_by_size(count, label):
    assert classify_city_count(count)[0] == label


def test_predefined_instances():
    instances = get_predefined_instances()
    assert [i.city_count for i in instances] == [8, 15, 25, 50]
    assert [i.seed for i in instances] == [12345, 67890, 11111, 22222]
    assert instances[2].cities[0].latitude is not None
    assert get_predefined_instances() == instances


def test_subset_sum_deterministic():
    config = SubsetSumConfig(problem_size=12, max_weight=30, target_range=(30, 80), seed=7)
    assert generate_subset_sum_instance(config) == generate_subset_sum_instance(config)


def test_subset_sum_ranges():
    for seed in range(20):
        instance = generate_subset_sum_instance(
            problem_size=8, max_weight=20, target_range=(10, 30), seed=seed)
        assert len(instance.weights) == 8
        assert all(1 <= w <= 20 for w in instance.weights)
        assert 10 <= instance.target <= 30


def test_subset_sum_single_value_target_range():
    instance = generate_subset_sum_instance(problem_size=4, max_weight=5, target_range=(9, 9), seed=3)
    assert instance.target == 9


def test_ensure_feasible_plants_reachable_target():
    for seed in range(10):
        instance = generate_subset_sum_instance(
            problem_size=16, max_weight=40, target_range=(80, 150), seed=seed, ensure_feasible=True)
        assert 80 <= instance.target <= 150
        weights = instance.weights
        reachable = {0}
        for w in weights:
            reachable |= {s + w for s in reachable}
        assert instance.target in reachable


def test_ensure_feasible_fails_when_range_unreachable():
    with pytest.raises(GenerationError):
        generate_subset_sum_instance(
            problem_size=2, max_weight=3, target_range=(100, 200), seed=1, ensure_feasible=True)


@pytest.mark.parametrize("kwargs", [
    {"problem_size": 0, "max_weight": 10, "target_range": (1, 5), "seed": 1},
    {"problem_size": 4, "max_weight": 0, "target_range": (1, 5), "seed": 1},
    {"problem_size": 4, "max_weight": 10, "target_range": (5, 1), "seed": 1},
    {"problem_size": 4, "max_weight": 10, "target_range": (-1, 5), "seed": 1},
    {"problem_size": 4, "max_weight": 10, "target_range": (1, 5), "seed": None},
])
def test_invalid_subset_parameters(kwargs):
    with pytest.raises(GenerationError):
        generate_subset_sum_instance(**kwargs)


def test_city_count_upper_limit():
    assert generate_tsp_instance(city_count=MAX_CITY_COUNT, seed=3).city_count == MAX_CITY_COUNT
    with pytest.raises(GenerationError):
        generate_tsp_instance(city_count=MAX_CITY_COUNT + 1, seed=3)
    with pytest.raises(GenerationError):
        generate_tsp_instance(city_count=800, seed=1)


def test_problem_size_upper_limit():
    instance = generate_subset_sum_instance(
        problem_size=MAX_PROBLEM_SIZE, max_weight=10, target_range=(1, 5), seed=1)
    assert len(instance.weights) == MAX_PROBLEM_SIZE
    with pytest.raises(GenerationError):
        generate_subset_sum_instance(
            problem_size=MAX_PROBLEM_SIZE + 1, max_weight=10, target_range=(1, 5), seed=1)
    with pytest.raises(GenerationError):
        generate_subset_sum_instance(problem_size=2000, max_weight=10, target_range=(1, 5), seed=1)
