#!/usr/bin/env python3
"""Benchmark the registered search methods over several seeds.

Features:
 - Multiple methods (DEFAULT_METHODS) and multiple runs per method with different seeds
 - Incremental saving of detailed JSON records and CSV summaries
 - Gap to the known optimum when the instance has one
 - Statistical comparison (Friedman / Wilcoxon) over per-seed costs
 - Convergence plot of best cost per iteration

Example:
  ils-tsp-benchmark --instance berlin52 --runs 5 --methods ils,hill_climbing --summary

Outputs (in results/ by default):
  ils_detailed_results.json  (append-only detailed per-run records)
  ils_results_final.csv      (summary per method)
  ils_statistics.txt         (statistical tests)
  ils_convergence.png        (best cost per iteration, first seed)
"""
from __future__ import annotations

import argparse
import json
import os
import sys
import time
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd
from scipy.stats import friedmanchisquare, wilcoxon

from ..parsers.instances import load_instance
from ..tsp.config import DEFAULT_METHODS, ConfigurationError
from ..tsp.ils import TSPInstance
from ..tsp.strategies import solve, trace_method


@dataclass
class RunRecord:
    instance: str
    n: int
    method_name: str
    run: int
    seed: int
    status: str
    cost: Optional[float]
    runtime: float
    improvements: int
    optimum: Optional[float]
    timestamp: str


def run_benchmark(instance: TSPInstance, methods: Sequence[str], runs: int = 3, base_seed: int = 0,
                  max_iterations: int = 100, max_no_improv: int = 50, verbose: bool = False) -> List[RunRecord]:
    records: List[RunRecord] = []
    for mname in methods:
        if verbose:
            print(f'  Method {mname}')
        for r in range(1, runs + 1):
            seed = base_seed + r - 1
            ts = time.strftime('%Y-%m-%d %H:%M:%S')
            try:
                res = solve(instance, method=mname, max_iterations=max_iterations,
                            max_no_improv=max_no_improv, seed=seed)
                status, cost, runtime, improvements = 'ok', res.cost, res.runtime, res.improvements
            except ConfigurationError as e:
                status, cost, runtime, improvements = f'config_error:{e}', None, 0.0, 0
            rec = RunRecord(instance=instance.name, n=instance.n, method_name=mname, run=r, seed=seed,
                            status=status, cost=cost, runtime=runtime, improvements=improvements,
                            optimum=instance.optimum, timestamp=ts)
            records.append(rec)
            if verbose:
                print(f'    run {r}/{runs}: status={status} cost={rec.cost} time={runtime:.3f}s imp={improvements}')
    return records


def append_detailed(results_dir: str, new_records: List[RunRecord]) -> int:
    """Append records to the JSON log, skipping (instance, method, run) keys already present."""
    if not new_records:
        return 0
    os.makedirs(results_dir, exist_ok=True)
    json_path = os.path.join(results_dir, 'ils_detailed_results.json')
    data = []
    if os.path.exists(json_path):
        with open(json_path, 'r') as f:
            data = json.load(f)
    existing_keys = {(d['instance'], d['method_name'], d['run']) for d in data}
    added = 0
    for r in new_records:
        key = (r.instance, r.method_name, r.run)
        if key in existing_keys:
            continue
        data.append(asdict(r))
        existing_keys.add(key)
        added += 1
    if added:
        with open(json_path, 'w') as f:
            json.dump(data, f, indent=2)
    return added


def summarize(records: List[RunRecord]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in records])
    df['cost'] = pd.to_numeric(df['cost'], errors='coerce')
    df['optimum'] = pd.to_numeric(df['optimum'], errors='coerce')
    df['gap_percent'] = (df['cost'] - df['optimum']) / df['optimum'] * 100.0
    grp = df.groupby(['instance', 'method_name'])
    summary = grp.agg(
        n=('n', 'first'),
        runs=('run', 'count'),
        successes=('status', lambda s: (s == 'ok').sum()),
        cost_best=('cost', 'min'),
        cost_mean=('cost', 'mean'),
        cost_std=('cost', 'std'),
        gap_mean=('gap_percent', 'mean'),
        runtime_mean=('runtime', 'mean'),
    ).reset_index()
    # std is NaN for a single run
    summary['cost_std'] = summary['cost_std'].fillna(0)
    return summary


def statistical_tests(records: List[RunRecord]) -> List[str]:
    """Friedman over all methods (3+) and pairwise Wilcoxon on per-seed costs."""
    df = pd.DataFrame([asdict(r) for r in records])
    df['cost'] = pd.to_numeric(df['cost'], errors='coerce')
    piv = df[df['status'] == 'ok'].pivot_table(index='seed', columns='method_name', values='cost').dropna()
    out_lines: List[str] = []
    out_lines.append('ILS Benchmark Statistical Comparison')
    out_lines.append('=' * 60)
    if piv.shape[1] >= 3:
        try:
            stat, p = friedmanchisquare(*[piv[c] for c in piv.columns])
            out_lines.append(f'Friedman cost: stat={stat:.4f} p={p:.3e}')
        except ValueError as e:
            out_lines.append(f'Friedman test failed: {e}')
    cols = list(piv.columns)
    for i, c1 in enumerate(cols):
        for c2 in cols[i + 1:]:
            try:
                stat, p = wilcoxon(piv[c1], piv[c2])
                out_lines.append(f'Wilcoxon {c1} vs {c2}: stat={stat} p={p:.3e}')
            except ValueError as e:
                # raised when every paired difference is zero or too few samples
                out_lines.append(f'Wilcoxon {c1} vs {c2} failed: {e}')
    return out_lines


def plot_convergence(curves: Dict[str, List[float]], path: str, title: str = 'ILS convergence',
                     optimum: Optional[float] = None) -> str:
    """Save a best-cost-per-iteration plot, one line per method."""
    fig, ax = plt.subplots(figsize=(10, 6))
    for label, costs in curves.items():
        ax.plot(range(1, len(costs) + 1), costs, label=label)
    if optimum is not None:
        ax.axhline(optimum, color='black', linestyle='--', linewidth=1, label='optimum')
    ax.set_xlabel('Iteration')
    ax.set_ylabel('Best tour cost')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return path


def main(argv: Optional[List[str]] = None):  # pragma: no cover - CLI
    ap = argparse.ArgumentParser(description='Benchmark ILS and its single-level variants over several seeds')
    ap.add_argument('--instance', default='berlin52', help='Built-in instance name or TSPLIB .tsp path')
    ap.add_argument('--runs', type=int, default=3, help='Runs (seeds) per method')
    ap.add_argument('--methods', help='Comma list of method names to include (default: all)')
    ap.add_argument('--max-iterations', type=int, default=100)
    ap.add_argument('--max-no-improv', type=int, default=50)
    ap.add_argument('--seed', type=int, default=0, help='Base seed offset')
    ap.add_argument('--out-dir', default='results', help='Output directory')
    ap.add_argument('--no-plot', action='store_true')
    ap.add_argument('--summary', action='store_true')
    args = ap.parse_args(argv)

    selected = list(DEFAULT_METHODS)
    if args.methods:
        selected = [m.strip() for m in args.methods.split(',') if m.strip()]
        missing = [m for m in selected if m not in DEFAULT_METHODS]
        if missing:
            print(f'[error] unknown method names: {missing}')
            print(f'Known: {list(DEFAULT_METHODS.keys())}')
            sys.exit(1)

    instance = load_instance(args.instance)
    print(f'\nInstance {instance.name} (n={instance.n})')
    records = run_benchmark(instance, selected, runs=args.runs, base_seed=args.seed,
                            max_iterations=args.max_iterations, max_no_improv=args.max_no_improv, verbose=True)

    added = append_detailed(args.out_dir, records)
    print(f'  ✓ Added {added} detailed records')
    summary = summarize(records)
    final_csv = os.path.join(args.out_dir, 'ils_results_final.csv')
    summary.to_csv(final_csv, index=False)
    print(f'\n✓ Final summary: {final_csv}')
    if args.summary:
        print(summary.to_string())

    stats_path = os.path.join(args.out_dir, 'ils_statistics.txt')
    with open(stats_path, 'w') as f:
        f.write('\n'.join(statistical_tests(records)) + '\n')
    print(f'✓ Statistical analysis written to {stats_path}')

    if not args.no_plot:
        curves = {}
        for mname in selected:
            try:
                tr = trace_method(instance, mname, seed=args.seed, max_iterations=args.max_iterations,
                                  max_no_improv=args.max_no_improv)
            except ConfigurationError as e:
                print(f'[warn] skipping {mname} in plot: {e}')
                continue
            curves[mname] = [p.best_cost for p in tr]
        plot_path = plot_convergence(curves, os.path.join(args.out_dir, 'ils_convergence.png'),
                                     title=f'{instance.name} convergence (seed {args.seed})',
                                     optimum=instance.optimum)
        print(f'Plots saved to {plot_path}')


if __name__ == '__main__':  # pragma: no cover
    main()
