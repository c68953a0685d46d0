import json

import generate_html_report
import run_benchmarks
from resonance_optimizer import interactive
from resonance_optimizer.core.config import OptimizerSettings
from resonance_optimizer.core.orchestrator import OptimizationOrchestrator

from conftest import FakeSRSClient


def test_benchmarks_write_summary(tmp_path):
    out = tmp_path / "bench"
    assert run_benchmarks.main(["--seeds", "1", "2", "--output", str(out)]) == 0

    summary = json.loads((out / "summary.json").read_text())
    results = summary["results"]
    assert len(results) == 4 + 4 * 2
    assert all(r["valid"] for r in results)
    assert (out / "README.md").exists()


def test_predefined_only_benchmarks(tmp_path):
    out = tmp_path / "bench"
    run_benchmarks.main(["--predefined-only", "--output", str(out)])
    summary = json.loads((out / "summary.json").read_text())
    assert [r["cities"] for r in summary["results"]] == [8, 15, 25, 50]


def test_html_report_for_tsp(tmp_path):
    output = tmp_path / "report.html"
    orch = OptimizationOrchestrator(client=FakeSRSClient(),
                                    settings=OptimizerSettings(progress_interval=0.01))
    view_models = generate_html_report.generate_report("tsp", ["Beginner"], 12345, str(output), orch)

    html = output.read_text(encoding="utf-8")
    assert view_models[0].state.value == "solved"
    assert "<svg" in html
    assert "Traveling Salesman Problem (Beginner)" in html


def test_html_report_for_subset_sum_levels(tmp_path):
    output = tmp_path / "report.html"
    orch = OptimizationOrchestrator(client=FakeSRSClient(),
                                    settings=OptimizerSettings(progress_interval=0.01))
    view_models = generate_html_report.generate_report(
        "subset_sum", ["Beginner", "Expert"], 7, str(output), orch)

    assert len(view_models) == 2
    html = output.read_text(encoding="utf-8")
    assert html.count('class="section"') == 2
    assert "Selected sum" in html


def test_interactive_run(monkeypatch, capsys):
    monkeypatch.setattr(interactive, "OptimizationOrchestrator",
                        lambda settings: OptimizationOrchestrator(client=FakeSRSClient(), settings=settings))
    monkeypatch.setenv("OPTIMIZER_PROGRESS_INTERVAL", "0.01")

    assert interactive.main(["--problem", "tsp", "--level", "Beginner", "--seed", "12345"]) == 0
    out = capsys.readouterr().out
    assert "Cities: 8" in out
    assert "Solution source: heuristic" in out
    assert "✅ Solution valid" in out


def test_interactive_prompts(monkeypatch, capsys):
    monkeypatch.setattr(interactive, "OptimizationOrchestrator",
                        lambda settings: OptimizationOrchestrator(client=FakeSRSClient(), settings=settings))
    monkeypatch.setenv("OPTIMIZER_PROGRESS_INTERVAL", "0.01")
    answers = iter(["2", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert interactive.main([]) == 0
    out = capsys.readouterr().out
    assert "Target Sum" in out
    assert "Solution source: remote" in out


def test_interactive_unknown_problem(monkeypatch, capsys):
    monkeypatch.setattr(interactive, "OptimizationOrchestrator",
                        lambda settings: OptimizationOrchestrator(client=FakeSRSClient(), settings=settings))
    assert interactive.main(["--problem", "knapsack", "--level", "Beginner"]) == 1
    assert "Unknown problem id" in capsys.readouterr().out
