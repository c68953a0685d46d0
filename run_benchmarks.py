#!/usr/bin/env python3
"""
Benchmark the greedy nearest-neighbour tour on generated TSP instances.

Compares the greedy tour against the identity tour (0, 1, ..., n-1) for
the predefined instances and for every difficulty level over several seeds.

Usage:
    python run_benchmarks.py
    python run_benchmarks.py --seeds 1 2 3 --output results_greedy
    python run_benchmarks.py --predefined-only
"""

import os
import sys
import argparse
import json
import time
from datetime import datetime

sys.path.insert(0, os.path.dirname(__file__))

from resonance_optimizer.core.difficulty import resolve
from resonance_optimizer.core.heuristics import calculate_tour_distance, generate_greedy_tour, identity_tour
from resonance_optimizer.core.instance_generator import generate_tsp_instance, get_predefined_instances
from resonance_optimizer.core.problem_structures import DifficultyLevel, ProblemType, TSPConfig
from resonance_optimizer.core.validator import Validator

DEFAULT_SEEDS = [12345, 67890, 11111, 22222, 33333]


def run_benchmark(instance, name, validator):
    """Solve one instance greedily and return the comparison record."""
    start = time.perf_counter()
    tour = generate_greedy_tour(instance.distance_matrix)
    elapsed = time.perf_counter() - start

    validation = validator.validate_tour(tour, instance.city_count)
    greedy_length = calculate_tour_distance(tour, instance.distance_matrix)
    identity_length = calculate_tour_distance(identity_tour(instance.city_count), instance.distance_matrix)
    improvement = (1 - greedy_length / identity_length) * 100 if identity_length else 0.0

    print(f"  {name:<28} n={instance.city_count:<3} greedy={greedy_length:9.2f} "
          f"identity={identity_length:9.2f} ({improvement:+.1f}%)")

    return {
        "name": name,
        "instance_id": instance.id,
        "seed": instance.seed,
        "cities": instance.city_count,
        "difficulty": instance.difficulty,
        "greedy_length": round(greedy_length, 2),
        "identity_length": round(identity_length, 2),
        "improvement_pct": round(improvement, 2),
        "elapsed": elapsed,
        "valid": validation.valid,
        "tour": tour,
    }


def collect_instances(seeds, predefined_only=False):
    """(name, instance) pairs for the benchmark run."""
    cases = [(instance.name, instance) for instance in get_predefined_instances()]
    if predefined_only:
        return cases

    for level in DifficultyLevel:
        params = resolve(ProblemType.TSP, level)
        for seed in seeds:
            instance = generate_tsp_instance(TSPConfig.from_parameters(params, seed))
            cases.append((f"{level.value.lower()}_{seed}", instance))
    return cases


def write_summary(output_dir, results, args):
    """Write a summary JSON and markdown file."""
    summary = {
        "run_date": datetime.now().isoformat(),
        "heuristic": "greedy nearest neighbour",
        "baseline": "identity tour",
        "parameters": {
            "seeds": args.seeds,
            "predefined_only": args.predefined_only,
        },
        "results": results,
    }

    summary_json = os.path.join(output_dir, "summary.json")
    with open(summary_json, "w") as f:
        json.dump(summary, f, indent=2)

    summary_md = os.path.join(output_dir, "README.md")
    with open(summary_md, "w") as f:
        f.write("# Greedy Tour Benchmark Results\n\n")
        f.write(f"**Run Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")
        f.write("## Results\n\n")
        f.write("| Instance | Cities | Greedy | Identity | Improvement | Valid |\n")
        f.write("|----------|--------|--------|----------|-------------|-------|\n")
        for r in results:
            f.write(f"| {r['name']} | {r['cities']} | {r['greedy_length']:.2f} | "
                    f"{r['identity_length']:.2f} | {r['improvement_pct']:+.1f}% | "
                    f"{'OK' if r['valid'] else 'INVALID'} |\n")
        f.write("\n## Files\n\n")
        f.write("- `summary.json` - Machine-readable summary\n")

    print(f"\nSummary written to: {summary_json}")
    return summary


def main(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark the greedy TSP tour on generated instances")
    parser.add_argument("--seeds", type=int, nargs="+", default=DEFAULT_SEEDS,
                        help=f"Seeds per difficulty level (default: {DEFAULT_SEEDS})")
    parser.add_argument("--predefined-only", action="store_true",
                        help="Only run the predefined instances")
    parser.add_argument("--output", "-o", type=str,
                        default=f"benchmark_results_{datetime.now().strftime('%Y%m%d_%H%M%S')}",
                        help="Output directory")
    args = parser.parse_args(argv)

    os.makedirs(args.output, exist_ok=True)

    print(f"\n{'#'*60}")
    print("# Greedy Tour Benchmark Suite")
    print(f"# Seeds: {args.seeds}")
    print(f"# Output: {args.output}")
    print(f"{'#'*60}\n")

    validator = Validator()
    results = []
    total_start = time.perf_counter()
    for name, instance in collect_instances(args.seeds, args.predefined_only):
        results.append(run_benchmark(instance, name, validator))
    total_elapsed = time.perf_counter() - total_start

    write_summary(args.output, results, args)

    print(f"\n{'#'*60}")
    print("# Benchmark Suite Complete")
    print(f"# Total time: {total_elapsed:.3f}s")
    print(f"{'#'*60}")

    invalid = [r["name"] for r in results if not r["valid"]]
    if invalid:
        print(f"\nInvalid tours: {invalid}")
        return 1

    best = max(results, key=lambda r: r["improvement_pct"])
    print(f"\nLargest improvement: {best['name']} ({best['improvement_pct']:+.1f}%)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
