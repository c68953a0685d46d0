"""
Procedural generation of TSP and subset-sum instances.

Every generator draws from its own ``random.Random(seed)`` so a fixed
(parameters, seed) pair always rebuilds the same instance.
"""

import math
import random
from typing import List, Tuple

from .errors import GenerationError
from .problem_structures import City, SubsetSumConfig, SubsetSumInstance, TSPConfig, TSPInstance


# Predefined city names for more realistic instances
CITY_NAMES = [
    'New York', 'Los Angeles', 'Chicago', 'Houston', 'Phoenix', 'Philadelphia',
    'San Antonio', 'San Diego', 'Dallas', 'Austin', 'San Jose', 'Fort Worth',
    'Jacksonville', 'Columbus', 'Charlotte', 'Indianapolis', 'San Francisco',
    'Seattle', 'Denver', 'Boston', 'Nashville', 'Baltimore', 'Louisville',
    'Portland', 'Las Vegas', 'Milwaukee', 'Albuquerque', 'Tucson', 'Fresno',
    'Sacramento', 'Mesa', 'Kansas City', 'Atlanta', 'Colorado Springs',
    'Omaha', 'Raleigh', 'Miami', 'Long Beach', 'Virginia Beach', 'Oakland',
    'Minneapolis', 'Tampa', 'Tulsa', 'Arlington', 'New Orleans', 'Wichita',
    'Cleveland', 'Bakersfield', 'Aurora', 'Anaheim', 'Honolulu', 'Santa Ana',
    'Corpus Christi', 'Riverside', 'Lexington', 'Stockton', 'Toledo', 'St. Paul',
    'Newark', 'Greensboro', 'Buffalo', 'Plano', 'Lincoln', 'Henderson',
    'Fort Wayne', 'Jersey City', 'St. Petersburg', 'Chula Vista', 'Orlando',
    'Norfolk', 'Chandler', 'Laredo', 'Madison', 'Durham', 'Lubbock',
    'Winston-Salem', 'Garland', 'Glendale', 'Hialeah', 'Reno', 'Baton Rouge',
    'Irvine', 'Chesapeake', 'Irving', 'Scottsdale', 'North Las Vegas',
    'Fremont', 'Gilbert', 'San Bernardino', 'Boise', 'Birmingham',
]

# (name, latitude, longitude) of major US cities
REAL_CITIES = [
    ('New York', 40.7128, -74.0060), ('Los Angeles', 34.0522, -118.2437),
    ('Chicago', 41.8781, -87.6298), ('Houston', 29.7604, -95.3698),
    ('Phoenix', 33.4484, -112.0740), ('Philadelphia', 39.9526, -75.1652),
    ('San Antonio', 29.4241, -98.4936), ('San Diego', 32.7157, -117.1611),
    ('Dallas', 32.7767, -96.7970), ('Austin', 30.2672, -97.7431),
    ('San Jose', 37.3382, -121.8863), ('Jacksonville', 30.3322, -81.6557),
    ('San Francisco', 37.7749, -122.4194), ('Columbus', 39.9612, -82.9988),
    ('Charlotte', 35.2271, -80.8431), ('Indianapolis', 39.7684, -86.1581),
    ('Seattle', 47.6062, -122.3321), ('Denver', 39.7392, -104.9903),
    ('Boston', 42.3601, -71.0589), ('Nashville', 36.1627, -86.7816),
    ('Baltimore', 39.2904, -76.6122), ('Portland', 45.5152, -122.6784),
    ('Las Vegas', 36.1699, -115.1398), ('Milwaukee', 43.0389, -87.9065),
    ('Albuquerque', 35.0844, -106.6504), ('Tucson', 32.2226, -110.9747),
    ('Fresno', 36.7378, -119.7871), ('Sacramento', 38.5816, -121.4944),
    ('Kansas City', 39.0997, -94.5786), ('Mesa', 33.4152, -111.8315),
    ('Atlanta', 33.7490, -84.3880), ('Virginia Beach', 36.8529, -75.9780),
    ('Omaha', 41.2565, -95.9345), ('Colorado Springs', 38.8339, -104.8214),
    ('Raleigh', 35.7796, -78.6382), ('Miami', 25.7617, -80.1918),
    ('Oakland', 37.8044, -122.2711), ('Minneapolis', 44.9778, -93.2650),
    ('Tulsa', 36.1540, -95.9928), ('Cleveland', 41.4993, -81.6944),
    ('Wichita', 37.6872, -97.3301), ('Arlington', 32.7357, -97.1081),
]

EARTH_RADIUS_KM = 6371.0
BORDER_MARGIN = 20
CLUSTER_MARGIN = 100
MAX_PLACEMENT_ATTEMPTS = 1000
MAX_PLANTING_ATTEMPTS = 200

# Upper size limits; rejection sampling is quadratic in the city count and
# the search-space estimate is 2 ** problem_size
MAX_CITY_COUNT = 50
MAX_PROBLEM_SIZE = 64

# Equirectangular projection centred on the continental US
_PROJECTION_CENTER = (39.8283, -98.5795)
_PROJECTION_SCALE = 8


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def calculate_distance(city1: City, city2: City) -> float:
    """Euclidean distance between two cities."""
    return math.hypot(city1.x - city2.x, city1.y - city2.y)


def calculate_geo_distance(city1: City, city2: City) -> float:
    """Great-circle distance in km, falling back to Euclidean without coordinates."""
    if None in (city1.latitude, city1.longitude, city2.latitude, city2.longitude):
        return calculate_distance(city1, city2)

    lat1, lat2 = math.radians(city1.latitude), math.radians(city2.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(city2.longitude - city1.longitude)
    a = (math.sin(d_lat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def create_distance_matrix(cities, use_geo_distance: bool = False) -> Tuple[Tuple[float, ...], ...]:
    """
    Build the full pairwise distance matrix, rounded to two decimals.

    Only the upper triangle is computed; the lower one mirrors it.
    """
    n = len(cities)
    measure = calculate_geo_distance if use_geo_distance else calculate_distance
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            distance = round(measure(cities[i], cities[j]), 2)
            matrix[i][j] = distance
            matrix[j][i] = distance
    return tuple(tuple(row) for row in matrix)


def _validate_tsp_config(config: TSPConfig):
    if not _is_int(config.city_count) or config.city_count < 2:
        raise GenerationError(f"cityCount must be an integer >= 2, got {config.city_count!r}")
    if config.city_count > MAX_CITY_COUNT:
        raise GenerationError(f"cityCount cannot exceed {MAX_CITY_COUNT}, got {config.city_count}")
    if not _is_int(config.seed):
        raise GenerationError(f"seed must be an integer, got {config.seed!r}")
    if config.cluster_count is not None and (
            not _is_int(config.cluster_count) or config.cluster_count < 1):
        raise GenerationError(f"clusterCount must be a positive integer, got {config.cluster_count!r}")
    if config.min_distance < 0:
        raise GenerationError("minDistance cannot be negative")

    min_side = 2 * CLUSTER_MARGIN if config.clustered else 2 * BORDER_MARGIN
    if config.map_width <= min_side or config.map_height <= min_side:
        raise GenerationError(
            f"Map {config.map_width}x{config.map_height} is too small (sides must exceed {min_side})"
        )

    if config.use_real_coordinates and config.city_count > len(REAL_CITIES):
        raise GenerationError(
            f"Only {len(REAL_CITIES)} real-world cities are available, {config.city_count} requested"
        )


def _pick_city_name(rng: random.Random, used_names: set, index: int) -> str:
    while True:
        name = rng.choice(CITY_NAMES)
        if len(used_names) >= len(CITY_NAMES):
            # Every name is taken: number the duplicates
            return f"{name} {index + 1}"
        if name not in used_names:
            return name


def generate_random_cities(config: TSPConfig) -> List[City]:
    """Place cities uniformly, or around random cluster centres when clustered."""
    _validate_tsp_config(config)

    rng = random.Random(config.seed)
    width, height = config.map_width, config.map_height
    cluster_count = config.cluster_count
    if cluster_count is None:
        cluster_count = max(2, config.city_count // 8)

    centers = []
    if config.clustered and cluster_count > 1:
        for _ in range(cluster_count):
            centers.append((
                rng.uniform(CLUSTER_MARGIN, width - CLUSTER_MARGIN),
                rng.uniform(CLUSTER_MARGIN, height - CLUSTER_MARGIN),
                rng.uniform(50, 150),
            ))

    cities: List[City] = []
    used_names: set = set()

    for i in range(config.city_count):
        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            if centers:
                cx, cy, radius = rng.choice(centers)
                angle = rng.uniform(0, 2 * math.pi)
                offset = rng.uniform(0, radius)
                x = min(max(cx + offset * math.cos(angle), BORDER_MARGIN), width - BORDER_MARGIN)
                y = min(max(cy + offset * math.sin(angle), BORDER_MARGIN), height - BORDER_MARGIN)
            else:
                x = rng.uniform(BORDER_MARGIN, width - BORDER_MARGIN)
                y = rng.uniform(BORDER_MARGIN, height - BORDER_MARGIN)

            if all(math.hypot(x - c.x, y - c.y) >= config.min_distance for c in cities):
                break
        # After the last attempt the sample is kept even if it is crowded

        name = _pick_city_name(rng, used_names, i)
        used_names.add(name)
        cities.append(City(id=i, name=name, x=round(x), y=round(y)))

    return cities


def generate_real_world_cities(city_count: int, seed: int) -> List[City]:
    """Pick ``city_count`` real US cities and project them onto the 800x600 map."""
    _validate_tsp_config(TSPConfig(city_count=city_count, seed=seed, use_real_coordinates=True))

    rng = random.Random(seed)
    shuffled = list(REAL_CITIES)
    rng.shuffle(shuffled)

    center_lat, center_lon = _PROJECTION_CENTER
    cos_center = math.cos(math.radians(center_lat))

    cities = []
    for i, (name, lat, lon) in enumerate(shuffled[:city_count]):
        x = (lon - center_lon) * _PROJECTION_SCALE * cos_center + 400
        y = (center_lat - lat) * _PROJECTION_SCALE + 300
        cities.append(City(id=i, name=name, x=round(x), y=round(y), latitude=lat, longitude=lon))
    return cities


def classify_city_count(city_count: int) -> Tuple[str, str]:
    """Difficulty label and estimated solve time shown for an instance size."""
    if city_count <= 10:
        return 'Easy', '5-15 seconds'
    if city_count <= 25:
        return 'Medium', '15-45 seconds'
    if city_count <= 50:
        return 'Hard', '45-90 seconds'
    return 'Expert', '90+ seconds'


def generate_tsp_instance(config: TSPConfig = None, **kwargs) -> TSPInstance:
    """
    Generate a TSP instance.

    Accepts either a ``TSPConfig`` or its fields as keyword arguments::

        generate_tsp_instance(city_count=8, seed=12345, clustered=True, cluster_count=2)
    """
    if config is None:
        config = TSPConfig(**kwargs)
    elif kwargs:
        raise TypeError("Pass either a TSPConfig or keyword arguments, not both")

    if config.use_real_coordinates:
        cities = generate_real_world_cities(config.city_count, config.seed)
    else:
        cities = generate_random_cities(config)

    distance_matrix = create_distance_matrix(cities, config.use_real_coordinates)
    difficulty, estimated_time = classify_city_count(config.city_count)

    return TSPInstance(
        id=f"tsp-{config.city_count}-{config.seed}",
        name=f"{config.city_count} Cities TSP{' (USA)' if config.use_real_coordinates else ''}",
        cities=tuple(cities),
        distance_matrix=distance_matrix,
        difficulty=difficulty,
        estimated_time=estimated_time,
        seed=config.seed,
    )


def _validate_subset_config(config: SubsetSumConfig):
    if not _is_int(config.problem_size) or config.problem_size < 1:
        raise GenerationError(f"problemSize must be an integer >= 1, got {config.problem_size!r}")
    if config.problem_size > MAX_PROBLEM_SIZE:
        raise GenerationError(f"problemSize cannot exceed {MAX_PROBLEM_SIZE}, got {config.problem_size}")
    if not _is_int(config.max_weight) or config.max_weight < 1:
        raise GenerationError(f"maxWeight must be an integer >= 1, got {config.max_weight!r}")
    if not _is_int(config.seed):
        raise GenerationError(f"seed must be an integer, got {config.seed!r}")
    low, high = config.target_range
    if not (_is_int(low) and _is_int(high)) or low < 0 or low > high:
        raise GenerationError(f"targetRange must be 0 <= low <= high, got {config.target_range!r}")


def _plant_target(rng: random.Random, weights: List[int], low: int, high: int) -> int:
    """Sum of a random subset that lands inside [low, high]."""
    order = list(range(len(weights)))
    for _ in range(MAX_PLANTING_ATTEMPTS):
        rng.shuffle(order)
        total = 0
        for index in order:
            total += weights[index]
            if low <= total <= high:
                return total
            if total > high:
                break
    raise GenerationError(
        f"No subset of the generated weights sums into [{low}, {high}]"
    )


def generate_subset_sum_instance(config: SubsetSumConfig = None, **kwargs) -> SubsetSumInstance:
    """
    Generate a subset-sum instance.

    Weights are independent uniform integers in ``[1, max_weight]`` and the
    target is uniform in ``target_range`` (inclusive). Nothing guarantees a
    subset reaching the target unless ``ensure_feasible`` is set, in which
    case the target is the sum of a random subset.
    """
    if config is None:
        config = SubsetSumConfig(**kwargs)
    elif kwargs:
        raise TypeError("Pass either a SubsetSumConfig or keyword arguments, not both")

    _validate_subset_config(config)

    rng = random.Random(config.seed)
    weights = [rng.randint(1, config.max_weight) for _ in range(config.problem_size)]
    low, high = config.target_range

    if config.ensure_feasible:
        target = _plant_target(rng, weights, low, high)
    else:
        target = rng.randint(low, high)

    return SubsetSumInstance(weights=tuple(weights), target=target, seed=config.seed)


def get_predefined_instances() -> List[TSPInstance]:
    """Canned instances used by examples and regression checks."""
    return [
        generate_tsp_instance(city_count=8, seed=12345, clustered=False),
        generate_tsp_instance(city_count=15, seed=67890, clustered=True, cluster_count=3),
        generate_tsp_instance(city_count=25, seed=11111, use_real_coordinates=True),
        generate_tsp_instance(city_count=50, seed=22222, clustered=True, cluster_count=5),
    ]
