import json

import pytest

from ils_tsp.analysis.benchmark import (append_detailed, plot_convergence, run_benchmark, statistical_tests,
                                        summarize)


@pytest.fixture(scope='module')
def records(berlin52):
    return run_benchmark(berlin52, ['ils', 'hill_climbing', 'random_search'], runs=3, base_seed=10,
                         max_iterations=5, max_no_improv=10)


def test_run_benchmark_records(records):
    assert len(records) == 9
    assert {r.status for r in records} == {'ok'}
    assert [r.seed for r in records if r.method_name == 'ils'] == [10, 11, 12]
    assert all(r.cost >= 7542 for r in records)


def test_config_errors_are_recorded(square100):
    recs = run_benchmark(square100, ['ils', 'ils_restart'], runs=1, max_iterations=5, max_no_improv=5)
    assert recs[0].status.startswith('config_error')
    assert recs[0].cost is None
    assert recs[1].status == 'ok'
    summary = summarize(recs)
    assert set(summary['method_name']) == {'ils', 'ils_restart'}


def test_summarize(records):
    summary = summarize(records)
    assert len(summary) == 3
    assert (summary['runs'] == 3).all()
    assert (summary['successes'] == 3).all()
    assert (summary['cost_best'] <= summary['cost_mean']).all()
    assert (summary['gap_mean'] >= 0).all()


def test_statistical_tests(records):
    lines = statistical_tests(records)
    assert lines[0] == 'ILS Benchmark Statistical Comparison'
    assert any(line.startswith('Friedman') for line in lines)
    assert sum(1 for line in lines if line.startswith('Wilcoxon')) == 3


def test_append_detailed_skips_known_keys(tmp_path, records):
    assert append_detailed(str(tmp_path), records) == 9
    assert append_detailed(str(tmp_path), records) == 0
    data = json.loads((tmp_path / 'ils_detailed_results.json').read_text())
    assert len(data) == 9
    assert data[0]['instance'] == 'berlin52'


def test_plot_convergence(tmp_path):
    path = plot_convergence({'ils': [9000, 8500, 8100], 'hill_climbing': [20000, 15000, 12000]},
                            str(tmp_path / 'plots' / 'conv.png'), optimum=7542)
    assert (tmp_path / 'plots' / 'conv.png').stat().st_size > 0
    assert path.endswith('conv.png')
