#!/usr/bin/env python3
"""Command line front end for the ILS TSP solver.

CLI examples:
    ils-tsp                                   # berlin52, ILS, seed 0
    ils-tsp --instance data/eil51.tsp --max-iterations 200 --progress
    ils-tsp --method hill_climbing --max-iterations 5000 --target-cost 7542
    ils-tsp --runs 8 --workers 4 --json       # multi-start, best of 8 seeds
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .parsers.instances import load_instance
from .parsers.tsplib import write_tour_file
from .tsp.config import DEFAULT_METHODS, PERTURBATIONS
from .tsp.parallel import parallel_run
from .tsp.strategies import solve, trace_method


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Iterated Local Search TSP solver (2-opt + double-bridge)")
    ap.add_argument('--instance', action='append',
                    help='Built-in instance name or TSPLIB .tsp path (repeatable, default: berlin52)')
    ap.add_argument('--method', choices=sorted(DEFAULT_METHODS), default='ils')
    ap.add_argument('--max-iterations', type=int, default=100, help='Outer iteration budget')
    ap.add_argument('--max-no-improv', type=int, default=50, help='Local search patience')
    ap.add_argument('--perturbation', choices=list(PERTURBATIONS), help='Override the method preset perturbation')
    ap.add_argument('--target-cost', type=float, help='Stop early once this cost is reached')
    ap.add_argument('--seed', type=int, default=0)
    ap.add_argument('--runs', type=int, default=1, help='Independent runs with seeds seed..seed+runs-1; best is kept')
    ap.add_argument('--workers', type=int, default=1, help='Processes for multi-run mode')
    ap.add_argument('--progress', action='store_true', help='Print best cost after every iteration')
    ap.add_argument('--tour-out', help='Write the best tour in TSPLIB TOUR format')
    ap.add_argument('--json', action='store_true', help='Emit JSON array of results to stdout instead of plain text lines')
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.runs < 1:
        ap.error(f"--runs must be at least 1, got {args.runs}")
    if args.workers < 1:
        ap.error(f"--workers must be at least 1, got {args.workers}")
    targets = args.instance or ['berlin52']
    if args.tour_out and len(targets) > 1:
        print("[warn] --tour-out with several instances keeps only the last tour")

    options = dict(max_iterations=args.max_iterations, max_no_improv=args.max_no_improv,
                   perturbation=args.perturbation, target_cost=args.target_cost)
    results = []
    for target in targets:
        try:
            instance = load_instance(target)
            if args.progress and not args.json:
                for step in trace_method(instance, args.method, seed=args.seed, **options):
                    print(f" > iteration={step.iteration}, best={step.best_cost:g}")
            if args.runs > 1:
                sol, _ = parallel_run(instance, range(args.seed, args.seed + args.runs), method=args.method,
                                      workers=args.workers, **options)
            else:
                sol = solve(instance, method=args.method, seed=args.seed, **options)
        except (ValueError, OSError) as e:  # ConfigurationError is a ValueError
            if not args.json:
                print(f"{target:20s} ERROR {e}")
            continue
        if not args.json:
            gap = ''
            if instance.optimum:
                gap = f" gap={(sol.cost - instance.optimum) / instance.optimum * 100:.2f}%"
            print(f"{instance.name:20s} cost={sol.cost:12.2f} time={sol.runtime:6.3f}s method={sol.method} seed={sol.seed}{gap}")
        if args.tour_out:
            write_tour_file(args.tour_out, instance.name, sol.tour, sol.cost)
        results.append({
            'instance': instance.name,
            'n': instance.n,
            'cost': sol.cost,
            'runtime': sol.runtime,
            'method': sol.method,
            'improvements': sol.improvements,
            'seed': sol.seed,
            'tour': sol.tour,
        })
    if args.json:
        print(json.dumps(results))
    return 0 if results else 1


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
