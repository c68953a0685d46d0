#!/usr/bin/env python3
"""
Generate an HTML report with embedded SVG charts for optimizer runs.

Usage:
    python generate_html_report.py --problem tsp --level Beginner --seed 12345
    python generate_html_report.py --problem subset_sum --all-levels -o subset.html
"""

import os
import sys
import argparse
from datetime import datetime
from html import escape

sys.path.insert(0, os.path.dirname(__file__))

from resonance_optimizer.core.config import OptimizerSettings, configure_logging
from resonance_optimizer.core.heuristics import calculate_tour_distance, identity_tour
from resonance_optimizer.core.orchestrator import OptimizationOrchestrator
from resonance_optimizer.core.problem_structures import DifficultyLevel, SubsetSumInstance, TSPInstance


def svg_tour(instance, tour, width=600, height=450):
    if not isinstance(instance, TSPInstance) or not instance.cities:
        return '<text x="50%" y="50%" text-anchor="middle">No tour data</text>'

    xs = [c.x for c in instance.cities]
    ys = [c.y for c in instance.cities]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    range_x = max_x - min_x if max_x > min_x else 1
    range_y = max_y - min_y if max_y > min_y else 1

    margin = 40
    plot_w = width - 2 * margin
    plot_h = height - 2 * margin

    def x(v):
        return margin + (v - min_x) / range_x * plot_w

    def y(v):
        return margin + (v - min_y) / range_y * plot_h

    edges = []
    if tour:
        closed = list(tour) + [tour[0]]
        points = ' '.join(f"{x(instance.cities[i].x):.1f},{y(instance.cities[i].y):.1f}" for i in closed)
        edges.append(f'<polyline points="{points}" fill="none" stroke="#2563eb" stroke-width="2" stroke-opacity="0.8"/>')

    nodes = []
    for city in instance.cities:
        fill = '#ef4444' if tour and city.id == tour[0] else '#22c55e'
        nodes.append(f'<circle cx="{x(city.x):.1f}" cy="{y(city.y):.1f}" r="6" fill="{fill}" stroke="white" stroke-width="1.5"/>')
        nodes.append(f'<text x="{x(city.x)+8:.1f}" y="{y(city.y)-6:.1f}" font-size="10" fill="#374151">{escape(city.name)}</text>')

    length = calculate_tour_distance(tour, instance.distance_matrix) if tour else 0.0

    return f'''<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">
  <rect width="100%" height="100%" fill="white"/>
  <text x="{width/2}" y="20" text-anchor="middle" font-size="14" font-weight="bold">Tour ({instance.city_count} cities, length {length:.1f})</text>
  {''.join(edges)}
  {''.join(nodes)}
</svg>'''


def svg_subset_bars(instance, selection, width=700, height=None):
    if not isinstance(instance, SubsetSumInstance) or not instance.weights:
        return '<text x="50%" y="50%" text-anchor="middle">No subset data</text>'

    n = len(instance.weights)
    margin_left, margin_right, margin_top, margin_bottom = 60, 40, 50, 40
    bar_h = 18
    if height is None:
        height = margin_top + margin_bottom + n * (bar_h + 6)
    plot_w = width - margin_left - margin_right
    max_w = max(instance.weights)
    chosen = set(selection or [])

    def y(i):
        return margin_top + i * (bar_h + 6)

    bars = []
    for i, weight in enumerate(instance.weights):
        color = '#22c55e' if i in chosen else '#cbd5e1'
        bar_width = weight / max_w * plot_w
        bars.append(f'<rect x="{margin_left}" y="{y(i):.1f}" width="{bar_width:.1f}" height="{bar_h}" fill="{color}" rx="3"/>')
        bars.append(f'<text x="{margin_left-5}" y="{y(i)+bar_h-4:.1f}" text-anchor="end" font-size="11">#{i}</text>')
        bars.append(f'<text x="{margin_left+bar_width+5:.1f}" y="{y(i)+bar_h-4:.1f}" font-size="11">{weight}</text>')

    total = instance.subset_sum(sorted(i for i in chosen if 0 <= i < n))
    status = '#22c55e' if total == instance.target else '#ef4444'

    return f'''<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">
  <rect width="100%" height="100%" fill="white"/>
  <text x="{width/2}" y="25" text-anchor="middle" font-size="14" font-weight="bold" fill="{status}">Selected sum {total} / target {instance.target}</text>
  {''.join(bars)}
</svg>'''


def metrics_table(view_model):
    """HTML table rows for one run."""
    metrics = view_model.metrics
    solution = view_model.solution
    rows = [
        ('State', view_model.state.value),
        ('Source', view_model.source.value if view_model.source else 'N/A'),
        ('Seed', view_model.seed if view_model.seed is not None else 'N/A'),
        ('Solution', solution.solution if solution else 'N/A'),
        ('Satisfied', solution.satisfied if solution else 'N/A'),
        ('Iterations', solution.iterations if solution else 'N/A'),
    ]
    if metrics:
        rows += [
            ('Solution time (s)', f"{metrics.solution_time:.2f}"),
            ('Classical estimate (s)', f"{metrics.classical_time:.2f}"),
            ('Speed-up factor', metrics.quantum_advantage),
            ('Quality', f"{metrics.solution_quality * 100:.1f}%"),
        ]
    if view_model.target_achieved is not None:
        rows.append(('Target achieved', view_model.target_achieved))
    if view_model.last_error:
        rows.append(('Error', view_model.last_error))

    return ''.join(f'<tr><th>{escape(str(k))}</th><td>{escape(str(v))}</td></tr>' for k, v in rows)


def run_case(orchestrator, problem_id, level, seed):
    """Select, solve and snapshot one problem/level combination."""
    orchestrator.select_problem(problem_id, level=level, seed=seed)
    try:
        orchestrator.solve()
    except Exception as e:
        print(f"  Solve failed for {problem_id}/{level}: {e}")
    return orchestrator.view_model()


def build_report(view_models):
    sections = []
    for vm in view_models:
        problem = vm.selected_problem
        level = vm.difficulty_config.level.value if vm.difficulty_config else 'N/A'
        instance = vm.current_instance
        selection = vm.solution.solution if vm.solution else []

        charts = []
        if isinstance(instance, TSPInstance):
            charts.append(svg_tour(instance, selection))
            baseline = calculate_tour_distance(identity_tour(instance.city_count), instance.distance_matrix)
            charts.append(f'<p class="legend-note">Identity tour length: {baseline:.1f}</p>')
        elif isinstance(instance, SubsetSumInstance):
            charts.append(svg_subset_bars(instance, selection))
        else:
            charts.append('<p>No generated instance for this problem</p>')

        summary = ''.join(f'<li>{escape(line)}</li>' for line in vm.parameter_summary)
        warning = f'<p class="warning">{escape(vm.warning)}</p>' if vm.warning else ''
        sections.append(f'''
    <div class="section">
        <h2>{escape(problem.name)} ({level})</h2>
        <ul>{summary}</ul>
        {warning}
        <div class="charts">
            <div class="chart">{''.join(charts)}</div>
            <div class="chart"><table>{metrics_table(vm)}</table></div>
        </div>
    </div>
''')

    return f'''<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Resonance Optimizer Report</title>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 20px; background: #f8fafc; }}
        h1 {{ color: #1e40af; margin-bottom: 5px; }}
        h2 {{ color: #374151; border-bottom: 2px solid #e5e7eb; padding-bottom: 10px; }}
        .meta {{ color: #6b7280; margin-bottom: 20px; }}
        table {{ border-collapse: collapse; background: white; }}
        th, td {{ border: 1px solid #e5e7eb; padding: 8px 12px; text-align: left; }}
        th {{ background: #f1f5f9; font-weight: 600; color: #334155; }}
        .section {{ background: white; padding: 20px; margin: 20px 0; border-radius: 12px; box-shadow: 0 1px 3px rgba(0,0,0,0.1); }}
        .charts {{ display: flex; flex-wrap: wrap; gap: 20px; }}
        .chart {{ background: white; padding: 10px; border-radius: 8px; border: 1px solid #e5e7eb; }}
        .warning {{ color: #b45309; }}
        svg {{ max-width: 100%; height: auto; }}
        .legend-note {{ font-size: 12px; color: #6b7280; }}
    </style>
</head>
<body>
    <h1>Resonance Optimizer Report</h1>
    <p class="meta">Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} | Runs: {len(view_models)}</p>
    {''.join(sections)}
</body></html>'''


def generate_report(problem_id, levels, seed, output_path, orchestrator=None):
    """Run each level and write the HTML report; returns the view-models."""
    own_orchestrator = orchestrator is None
    orchestrator = orchestrator or OptimizationOrchestrator(settings=OptimizerSettings.from_env())
    try:
        view_models = []
        for level in levels:
            vm = run_case(orchestrator, problem_id, level, seed)
            print(f"  {problem_id} / {level}: {vm.state.value}")
            view_models.append(vm)
    finally:
        if own_orchestrator:
            orchestrator.close()

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(build_report(view_models))

    print(f"\n✅ Report saved to: {output_path}")
    return view_models


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate HTML report for optimizer runs')
    parser.add_argument('--problem', '-p', default='tsp', help='Problem id (tsp, subset_sum, clique, 3sat)')
    parser.add_argument('--level', '-l', default='Beginner', help='Difficulty level')
    parser.add_argument('--all-levels', action='store_true', help='Report every difficulty level')
    parser.add_argument('--seed', '-s', type=int, default=12345, help='Instance seed')
    parser.add_argument('-o', '--output', default='optimizer_report.html', help='Output HTML file')
    args = parser.parse_args(argv)

    configure_logging(OptimizerSettings.from_env().log_level)

    levels = [lvl.value for lvl in DifficultyLevel] if args.all_levels else [args.level]
    print(f"Generating report for {args.problem}: {', '.join(levels)}")
    try:
        generate_report(args.problem, levels, args.seed, args.output)
    except Exception as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
