# File: qoe/scripts/optimize.py

"""
Command-line optimization runner.

Reads a JSON problem definition, optionally a JSON engine configuration,
runs one optimization (or a quantum-versus-classical benchmark) and writes
the result as JSON to a file or stdout.
"""

import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

from qoe.config import load_config, build_algorithm_config
from qoe.core.engine import QuantumOptimizationEngine
from qoe.core.exceptions import QOEError
from qoe.core.problem import CLASSICAL_METHODS, AlgorithmType, OptimizationProblem
from qoe.evaluation.convergence import ConvergenceAnalyzer
from qoe.utils.logging_utils import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Run the quantum-inspired optimization engine')
    parser.add_argument('--problem', type=str, required=True, help='Path to problem JSON file')
    parser.add_argument('--config', type=str, help='Path to engine configuration JSON file')
    parser.add_argument('--algorithm', type=str, choices=[a.value for a in AlgorithmType],
                        help='Algorithm to run (selected from the problem shape when omitted)')
    parser.add_argument('--method', type=str, choices=list(CLASSICAL_METHODS),
                        help='Classical search method for --algorithm classical')
    parser.add_argument('--iterations', type=int, help='Override the iteration count')
    parser.add_argument('--seed', type=int, help='Random seed for a reproducible run')
    parser.add_argument('--benchmark', action='store_true',
                        help='Also run the classical driver and report both solutions')
    parser.add_argument('--output', type=str, help='Write the solution JSON here instead of stdout')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    return parser


def main(argv: Optional[List[str]] = None) -> int:

    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Could not load configuration: {e}", file=sys.stderr)
        return 1

    logger = setup_logger('qoe', level=args.log_level or config['logging']['level'])

    try:
        with open(args.problem, 'r') as f:
            problem = OptimizationProblem.from_dict(json.load(f))

        engine = QuantumOptimizationEngine(config)
        algorithm_config = None
        if args.algorithm:
            algorithm_config = build_algorithm_config(args.algorithm, config, iterations=args.iterations,
                                                      classical_method=args.method)
        elif args.iterations is not None:
            selected = engine.select_algorithm(problem)
            algorithm_config = build_algorithm_config(selected.algorithm, config,
                                                      iterations=args.iterations)

        if args.benchmark:
            report = engine.benchmark(problem, algorithm_config, seed=args.seed)
            solution = report.quantum
        else:
            solution = engine.optimize(problem, algorithm_config, seed=args.seed)

    except (OSError, ValueError, KeyError, TypeError, QOEError) as e:
        logger.error(f"Optimization failed: {e}")
        return 1

    analyzer = ConvergenceAnalyzer()
    if args.benchmark:
        result = report.to_dict()
        result['quantum']['convergence'] = analyzer.analyze(
            report.quantum.quantum_metrics.best_energy_trace).to_dict()
        result['classical']['convergence'] = analyzer.analyze(
            report.classical.quantum_metrics.best_energy_trace).to_dict()
    else:
        result = solution.to_dict()
        result['convergence'] = analyzer.analyze(solution.quantum_metrics.best_energy_trace).to_dict()

    payload = json.dumps(result, indent=2, default=str)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            f.write(payload)
        logger.info(f"Solution written to {output_path}")
    else:
        print(payload)

    logger.info(f"Problem '{problem.id}' solved with {solution.algorithm.value}: "
                f"score {solution.solution.overall_score:.6f}, "
                f"feasible={solution.solution.feasible}, {solution.computation_time:.3f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
