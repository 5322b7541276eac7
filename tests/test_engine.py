# File: tests/test_engine.py

"""
Integration tests for the optimization engine, configuration loading,
convergence analysis, logging setup and the command-line runner.
"""

import unittest
import json
import logging
import math
import tempfile
import shutil
import numpy as np
import pandas as pd
import os
import sys
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import qoe
from qoe.config import DEFAULT_CONFIG, build_algorithm_config, deep_merge, load_config
from qoe.core.driver_base import QuantumDriver
from qoe.core.engine import QuantumOptimizationEngine, problem_complexity
from qoe.core.exceptions import InvalidProblem, ParameterOutOfRange
from qoe.core.objectives import ObjectiveScorer, ScorerRegistry
from qoe.core.problem import (
    AlgorithmConfig, AlgorithmParameters, AlgorithmType, CoolingSchedule, NoiseModel, Objective,
    OptimizationProblem, Variable, VariableType, make_problem, numeric_values,
)
from qoe.evaluation.convergence import ConvergenceAnalyzer, trace_to_frame
from qoe.scripts.optimize import main as cli_main
from qoe.utils.logging_utils import get_logger, setup_logger


PROBLEM_DICT = {
    'id': 'campaign',
    'name': 'Campaign budget split',
    'variables': [
        {'id': 'search', 'type': 'continuous', 'domain': {'min': 0, 'max': 50}, 'quantumSuperposition': True},
        {'id': 'social', 'type': 'continuous', 'domain': {'min': 0, 'max': 50}, 'quantumSuperposition': True},
        {'id': 'email', 'type': 'binary', 'quantumSuperposition': True},
    ],
    'objectives': [
        {'id': 'spend', 'type': 'generic_sum', 'weight': 1.0, 'minimizeOrMaximize': 'minimize'},
        {'id': 'conversion', 'type': 'conversion_rate', 'weight': 10.0, 'minimizeOrMaximize': 'maximize'},
    ],
    'constraints': [{'id': 'floor', 'bounds': {'min': 10}}],
}


def reset_qoe_logger():
    logger = logging.getLogger('qoe')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestQuantumOptimizationEngine(unittest.TestCase):
    """Test cases for the engine entry point."""

    def setUp(self):
        self.engine = QuantumOptimizationEngine()
        self.problem = OptimizationProblem.from_dict(PROBLEM_DICT)
        self.annealing = AlgorithmConfig(AlgorithmType.ANNEALING,
                                         AlgorithmParameters(iterations=80, temperature=60.0))

    def test_optimize_assembles_solution(self):
        solution = self.engine.optimize(self.problem, self.annealing, seed=17)
        evaluator = self.engine.evaluator

        self.assertEqual(solution.problem_id, 'campaign')
        self.assertIs(solution.algorithm, AlgorithmType.ANNEALING)
        self.assertEqual(set(solution.solution.variables), {'search', 'social', 'email'})
        self.assertAlmostEqual(solution.solution.overall_score,
                               -evaluator.energy(solution.solution.variables, self.problem))
        self.assertEqual(solution.solution.feasible,
                         evaluator.is_feasible(solution.solution.variables, self.problem))
        self.assertEqual(set(solution.solution.objective_values), {'spend', 'conversion'})
        self.assertEqual(solution.solution.confidence, 0.85)
        self.assertLessEqual(len(solution.solution.alternative_solutions), 3)
        self.assertGreaterEqual(solution.computation_time, 0.0)

    def test_measured_quantum_metrics(self):
        solution = self.engine.optimize(self.problem, self.annealing, seed=17)
        metrics = solution.quantum_metrics

        self.assertEqual(metrics.superposition_states, 3)
        self.assertEqual(len(metrics.measurement_results), 3)
        self.assertEqual(metrics.measurement_results[0].state, '|0>')
        self.assertAlmostEqual(sum(m.probability for m in metrics.measurement_results), 1.0, places=9)
        self.assertAlmostEqual(metrics.final_norm, 1.0, places=9)
        self.assertGreaterEqual(metrics.measurement_entropy, 0.0)
        self.assertLessEqual(metrics.measurement_entropy, math.log2(3) + 1e-9)
        self.assertLessEqual(metrics.iterations, 80)
        self.assertGreaterEqual(metrics.acceptance_rate, 0.0)
        self.assertLessEqual(metrics.acceptance_rate, 1.0)
        self.assertFalse(metrics.noise_enabled)
        self.assertEqual(metrics.best_energy_trace[-1], solution.energy)

    def test_to_dict_is_json_serializable(self):
        solution = self.engine.optimize(self.problem, self.annealing, seed=3)
        data = solution.to_dict()

        self.assertEqual(data['algorithm'], 'annealing')
        self.assertIn('quantum_metrics', data)
        restored = json.loads(json.dumps(data))
        self.assertEqual(restored['solution']['variables'], data['solution']['variables'])

    def test_seeded_runs_are_reproducible(self):
        for algorithm in AlgorithmType:
            with self.subTest(algorithm=algorithm):
                config = build_algorithm_config(algorithm, iterations=5, quantum_walk_steps=40)
                first = self.engine.optimize(self.problem, config, seed=123)
                second = self.engine.optimize(self.problem, config, seed=123)
                self.assertEqual(first.solution.variables, second.solution.variables)
                self.assertEqual(first.quantum_metrics.best_energy_trace,
                                 second.quantum_metrics.best_energy_trace)

    def test_explicit_generator(self):
        solution = self.engine.optimize(self.problem, self.annealing, rng=np.random.default_rng(5))
        self.assertIsNotNone(solution.solution.variables)

    def test_automatic_selection(self):
        self.assertEqual(problem_complexity(self.problem), 3 * 2 + 10 * 1)
        self.assertIs(self.engine.select_algorithm(self.problem).algorithm, AlgorithmType.QUANTUM_WALK)

        structured = make_problem('timing', self.problem.variables, self.problem.objectives,
                                  problem_type='timing_optimization')
        self.assertIs(self.engine.select_algorithm(structured).algorithm, AlgorithmType.QAOA)

        large = make_problem(
            'large',
            [Variable(f'v{i}', VariableType.BINARY) for i in range(11)],
            [Objective(f'o{i}', 'generic_sum') for i in range(10)],
        )
        selected = self.engine.select_algorithm(large)
        self.assertIs(selected.algorithm, AlgorithmType.ANNEALING)
        self.assertEqual(selected.parameters.iterations, 1000)
        self.assertEqual(selected.parameters.temperature, 100.0)

    def test_optimize_without_config(self):
        config = deep_merge(DEFAULT_CONFIG, {'algorithms': {'quantum_walk': {'quantum_walk_steps': 30}}})
        engine = QuantumOptimizationEngine(config)
        solution = engine.optimize(self.problem, seed=1)

        self.assertIs(solution.algorithm, AlgorithmType.QUANTUM_WALK)
        self.assertEqual(solution.quantum_metrics.iterations, 30)
        self.assertEqual(solution.quantum_metrics.terminated_by, 'steps')

    def test_invalid_problems_rejected(self):
        empty = make_problem('empty', [], [Objective('o', 'generic_sum')])
        with self.assertRaises(InvalidProblem):
            self.engine.optimize(empty, self.annealing)

        unknown = make_problem('unknown', [Variable('b', VariableType.BINARY)],
                               [Objective('o', 'brand_lift')])
        with self.assertRaises(InvalidProblem):
            self.engine.optimize(unknown, self.annealing)

        self.assertEqual(self.engine.get_statistics()['total_runs'], 0)

    def test_invalid_parameters_rejected(self):
        config = AlgorithmConfig(AlgorithmType.QAOA, AlgorithmParameters(circuit_depth=0))
        with self.assertRaises(ParameterOutOfRange):
            self.engine.optimize(self.problem, config)

    def test_deadline_stops_run(self):
        schedule = CoolingSchedule(final_temperature=0.0, rate=0.9999999)
        config = AlgorithmConfig(AlgorithmType.ANNEALING,
                                 AlgorithmParameters(iterations=100000, cooling_schedule=schedule),
                                 deadline_seconds=0.05)
        solution = self.engine.optimize(self.problem, config, seed=2)
        self.assertEqual(solution.quantum_metrics.terminated_by, 'deadline')
        self.assertLess(solution.quantum_metrics.iterations, 100000)

    def test_noise_reported_in_metrics(self):
        config = AlgorithmConfig(AlgorithmType.ANNEALING, AlgorithmParameters(iterations=30),
                                 noise_model=NoiseModel(enabled=True, measurement_error_rate=0.5))
        solution = self.engine.optimize(self.problem, config, seed=9)
        self.assertTrue(solution.quantum_metrics.noise_enabled)
        self.assertGreater(solution.quantum_metrics.measurement_errors, 0)

    def test_custom_scorer_through_engine(self):
        class CountScorer(ObjectiveScorer):
            def score(self, assignment):
                return float(len(numeric_values(assignment)))

        registry = ScorerRegistry()
        registry.register('variable_count', CountScorer())
        engine = QuantumOptimizationEngine(registry=registry)
        problem = make_problem('custom', [Variable('b', VariableType.BINARY)],
                               [Objective('count', 'variable_count')])

        solution = engine.optimize(problem, build_algorithm_config('quantum_walk', quantum_walk_steps=5), seed=4)
        self.assertEqual(solution.solution.objective_values, {'count': 1.0})

    def test_statistics(self):
        self.engine.optimize(self.problem, self.annealing, seed=1)
        self.engine.optimize(self.problem, build_algorithm_config('quantum_walk', quantum_walk_steps=10), seed=1)

        stats = self.engine.get_statistics()
        self.assertEqual(stats['total_runs'], 2)
        self.assertEqual(stats['runs_by_algorithm']['annealing'], 1)
        self.assertEqual(stats['runs_by_algorithm']['quantum_walk'], 1)
        self.assertEqual(stats['runs_by_algorithm']['qaoa'], 0)
        self.assertGreaterEqual(stats['mean_computation_time'], 0.0)
        self.assertIsNotNone(stats['best_score'])

        self.engine.reset_statistics()
        self.assertEqual(self.engine.get_statistics()['total_runs'], 0)

    def test_module_level_optimize_accepts_dicts(self):
        solution = qoe.optimize(PROBLEM_DICT, {'algorithm': 'quantum_walk',
                                               'parameters': {'quantumWalkSteps': 12}}, seed=8)
        self.assertIs(solution.algorithm, AlgorithmType.QUANTUM_WALK)
        self.assertEqual(solution.quantum_metrics.iterations, 12)


class FailingDriver(QuantumDriver):
    """Driver whose every run raises, for exercising the classical fallback."""

    algorithm = AlgorithmType.QUANTUM_WALK

    def _execute(self, problem, config, context):
        raise RuntimeError('register overflow')


SMALL_CLASSICAL = {'algorithms': {'classical': {'iterations': 15, 'population_size': 10}}}


class TestClassicalFallback(unittest.TestCase):
    """Test cases for the classical fallback and the quantum-vs-classical benchmark."""

    def setUp(self):
        self.problem = OptimizationProblem.from_dict(PROBLEM_DICT)
        self.walk = build_algorithm_config('quantum_walk', quantum_walk_steps=20)

    def test_failed_quantum_run_falls_back(self):
        engine = QuantumOptimizationEngine(deep_merge(DEFAULT_CONFIG, SMALL_CLASSICAL))
        engine.drivers[AlgorithmType.QUANTUM_WALK] = FailingDriver(engine.evaluator)

        with self.assertLogs('qoe.core.engine', level='WARNING'):
            solution = engine.optimize(self.problem, self.walk, seed=6)

        self.assertIs(solution.algorithm, AlgorithmType.CLASSICAL)
        self.assertEqual(solution.quantum_metrics.details['fallback_from'], 'quantum_walk')
        self.assertEqual(solution.quantum_metrics.details['fallback_reason'], 'register overflow')
        self.assertEqual(solution.quantum_metrics.details['method'], 'genetic_algorithm')

        stats = engine.get_statistics()
        self.assertEqual(stats['fallback_runs'], 1)
        self.assertEqual(stats['runs_by_algorithm']['classical'], 1)

    def test_failure_propagates_without_fallback(self):
        config = deep_merge(DEFAULT_CONFIG, {'engine': {'fallback': {'use_classical_fallback': False}}})
        engine = QuantumOptimizationEngine(config)
        engine.drivers[AlgorithmType.QUANTUM_WALK] = FailingDriver(engine.evaluator)

        with self.assertRaises(RuntimeError):
            engine.optimize(self.problem, self.walk, seed=6)
        self.assertEqual(engine.get_statistics()['total_runs'], 0)

    def test_quantum_disabled_runs_classical(self):
        config = deep_merge(DEFAULT_CONFIG, SMALL_CLASSICAL)
        config = deep_merge(config, {'engine': {'quantum_enabled': False,
                                                'fallback': {'method': 'hill_climbing'}}})
        engine = QuantumOptimizationEngine(config)

        solution = engine.optimize(self.problem, self.walk, seed=2)

        self.assertIs(solution.algorithm, AlgorithmType.CLASSICAL)
        self.assertEqual(solution.quantum_metrics.details['method'], 'hill_climbing')
        self.assertNotIn('fallback_from', solution.quantum_metrics.details)
        self.assertEqual(engine.get_statistics()['fallback_runs'], 1)

    def test_classical_config_keeps_deadline_and_noise(self):
        engine = QuantumOptimizationEngine(deep_merge(DEFAULT_CONFIG, SMALL_CLASSICAL))
        quantum = AlgorithmConfig(AlgorithmType.QAOA, AlgorithmParameters(iterations=2),
                                  noise_model=NoiseModel(enabled=True), deadline_seconds=3.0)

        classical = engine.classical_config(quantum)
        self.assertIs(classical.algorithm, AlgorithmType.CLASSICAL)
        self.assertEqual(classical.parameters.population_size, 10)
        self.assertEqual(classical.parameters.classical_method, 'genetic_algorithm')
        self.assertEqual(classical.deadline_seconds, 3.0)
        self.assertTrue(classical.noise_model.enabled)

    def test_benchmark_reports_measured_comparison(self):
        engine = QuantumOptimizationEngine(deep_merge(DEFAULT_CONFIG, SMALL_CLASSICAL))
        report = engine.benchmark(self.problem, self.walk, seed=11)

        self.assertIs(report.quantum.algorithm, AlgorithmType.QUANTUM_WALK)
        self.assertIs(report.classical.algorithm, AlgorithmType.CLASSICAL)
        self.assertAlmostEqual(report.energy_gap, report.classical.energy - report.quantum.energy)
        self.assertGreater(report.speedup, 0.0)
        self.assertEqual(engine.get_statistics()['total_runs'], 2)

        data = json.loads(json.dumps(report.to_dict()))
        self.assertEqual(data['quantum']['algorithm'], 'quantum_walk')
        self.assertEqual(data['classical']['algorithm'], 'classical')

    def test_benchmark_needs_quantum_algorithm(self):
        engine = QuantumOptimizationEngine()
        with self.assertRaises(ParameterOutOfRange):
            engine.benchmark(self.problem, build_algorithm_config('classical'))


class TestSolutionImmutability(unittest.TestCase):

    def setUp(self):
        engine = QuantumOptimizationEngine()
        problem = OptimizationProblem.from_dict(PROBLEM_DICT)
        self.solution = engine.optimize(problem, build_algorithm_config('quantum_walk', quantum_walk_steps=60),
                                        seed=13)

    def test_mappings_are_read_only(self):
        with self.assertRaises(TypeError):
            self.solution.solution.variables['search'] = 0.0
        with self.assertRaises(TypeError):
            self.solution.solution.objective_values['spend'] = 0.0
        with self.assertRaises(TypeError):
            self.solution.quantum_metrics.details['walk_steps'] = 0
        for alternative in self.solution.solution.alternative_solutions:
            with self.assertRaises(TypeError):
                alternative.variables['search'] = 0.0

    def test_to_dict_returns_independent_copy(self):
        data = self.solution.to_dict()
        data['solution']['variables']['search'] = -1.0
        self.assertNotEqual(self.solution.solution.variables['search'], -1.0)
        self.assertIsInstance(data['quantum_metrics']['best_energy_trace'], list)


class TestPackageOptimize(unittest.TestCase):

    def test_delegates_to_engine_module(self):
        with patch('qoe.engine_optimize') as engine_optimize:
            qoe.optimize(PROBLEM_DICT, {'algorithm': 'annealing'}, seed=3)

        problem, config = engine_optimize.call_args[0]
        self.assertIsInstance(problem, OptimizationProblem)
        self.assertIs(config.algorithm, AlgorithmType.ANNEALING)
        self.assertEqual(engine_optimize.call_args[1], {'seed': 3})


class TestConfiguration(unittest.TestCase):
    """Test cases for configuration loading."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_defaults(self):
        config = load_config()
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertIsNot(config, DEFAULT_CONFIG)

    def test_file_merged_over_defaults(self):
        path = os.path.join(self.temp_dir, 'config.json')
        with open(path, 'w') as f:
            json.dump({'engine': {'confidence': 0.95}, 'algorithms': {'qaoa': {'circuit_depth': 2}}}, f)

        config = load_config(path)
        self.assertEqual(config['engine']['confidence'], 0.95)
        self.assertEqual(config['engine']['measurement_shots'], 1000)
        self.assertEqual(config['algorithms']['qaoa'], {'iterations': 100, 'circuit_depth': 2})
        # Defaults untouched
        self.assertEqual(DEFAULT_CONFIG['engine']['confidence'], 0.85)

    def test_non_object_file_rejected(self):
        path = os.path.join(self.temp_dir, 'config.json')
        with open(path, 'w') as f:
            json.dump([1, 2, 3], f)
        with self.assertRaises(ValueError):
            load_config(path)

    def test_build_algorithm_config(self):
        config = build_algorithm_config('quantum_annealing', iterations=25)
        self.assertIs(config.algorithm, AlgorithmType.ANNEALING)
        self.assertEqual(config.parameters.iterations, 25)
        self.assertEqual(config.parameters.cooling_schedule.rate, 0.95)
        self.assertFalse(config.noise_model.enabled)
        config.validate()

    def test_create_default_engine_overrides(self):
        engine = qoe.create_default_engine(engine={'confidence': 0.9})
        problem = OptimizationProblem.from_dict(PROBLEM_DICT)
        solution = engine.optimize(problem, build_algorithm_config('quantum_walk', quantum_walk_steps=5), seed=1)
        self.assertEqual(solution.solution.confidence, 0.9)


class TestConvergenceAnalyzer(unittest.TestCase):
    """Test cases for convergence analysis of energy traces."""

    def setUp(self):
        self.analyzer = ConvergenceAnalyzer()

    def test_short_trace(self):
        report = self.analyzer.analyze([1.0])
        self.assertFalse(report.converged)
        self.assertEqual(report.convergence_rate, 0.0)
        self.assertIsNone(report.convergence_point)

    def test_constant_trace(self):
        report = self.analyzer.analyze([5.0] * 12)
        self.assertEqual(report.convergence_rate, 1.0)
        self.assertEqual(report.stability_score, 1.0)
        self.assertTrue(report.converged)
        self.assertTrue(report.plateau_detected)
        self.assertFalse(report.oscillation_detected)
        self.assertEqual(report.convergence_point, 10)

    def test_settling_trace(self):
        trace = [10.0, 5.0, 2.0] + [1.0] * 9
        report = self.analyzer.analyze(trace)

        self.assertAlmostEqual(report.convergence_rate, 1.0)
        self.assertAlmostEqual(report.stability_score, 1.0 - 0.3 / 1.1)
        self.assertTrue(report.converged)
        self.assertFalse(report.plateau_detected)
        self.assertIsNone(report.convergence_point)
        self.assertEqual(report.samples, 12)

    def test_oscillation(self):
        report = self.analyzer.analyze([1.0, 3.0, 1.0, 3.0, 1.0, 3.0])
        self.assertTrue(report.oscillation_detected)

    def test_trace_to_frame(self):
        frame = trace_to_frame([4.0, 5.0, 2.0])
        self.assertIsInstance(frame, pd.DataFrame)
        self.assertEqual(list(frame.columns), ['iteration', 'energy', 'improvement', 'best_energy'])
        self.assertEqual(frame['best_energy'].tolist(), [4.0, 4.0, 2.0])
        self.assertEqual(frame['improvement'].tolist(), [0.0, -1.0, 3.0])


class TestLoggingUtils(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        reset_qoe_logger()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_setup_logger_with_file(self):
        logger = setup_logger('qoe', self.temp_dir, level='DEBUG')
        logger.debug('written to file')
        for handler in logger.handlers:
            handler.flush()

        self.assertEqual(logger.level, logging.DEBUG)
        log_file = os.path.join(self.temp_dir, 'qoe.log')
        self.assertTrue(os.path.exists(log_file))
        with open(log_file) as f:
            self.assertIn('written to file', f.read())

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logger('qoe')
        logger = setup_logger('qoe')
        self.assertEqual(len(logger.handlers), 1)

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            setup_logger('qoe', level='LOUD')

    def test_get_logger_namespaces(self):
        self.assertEqual(get_logger('engine').name, 'qoe.engine')
        self.assertEqual(get_logger('qoe.core').name, 'qoe.core')


class TestCommandLine(unittest.TestCase):
    """Test cases for the qoe-optimize runner."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.problem_path = os.path.join(self.temp_dir, 'problem.json')
        with open(self.problem_path, 'w') as f:
            json.dump(PROBLEM_DICT, f)

    def tearDown(self):
        reset_qoe_logger()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_writes_solution(self):
        output_path = os.path.join(self.temp_dir, 'out', 'solution.json')
        exit_code = cli_main(['--problem', self.problem_path, '--algorithm', 'annealing',
                              '--iterations', '20', '--seed', '4', '--output', output_path,
                              '--log-level', 'ERROR'])
        self.assertEqual(exit_code, 0)

        with open(output_path) as f:
            result = json.load(f)
        self.assertEqual(result['problem_id'], 'campaign')
        self.assertEqual(result['algorithm'], 'annealing')
        self.assertIn('convergence', result)
        self.assertLessEqual(result['quantum_metrics']['iterations'], 20)

    def test_iterations_with_automatic_selection(self):
        output_path = os.path.join(self.temp_dir, 'solution.json')
        exit_code = cli_main(['--problem', self.problem_path, '--iterations', '7', '--seed', '1',
                              '--output', output_path, '--log-level', 'ERROR'])
        self.assertEqual(exit_code, 0)
        with open(output_path) as f:
            self.assertEqual(json.load(f)['algorithm'], 'quantum_walk')

    def test_benchmark_output(self):
        output_path = os.path.join(self.temp_dir, 'benchmark.json')
        config_path = os.path.join(self.temp_dir, 'config.json')
        with open(config_path, 'w') as f:
            json.dump({'algorithms': {'classical': {'iterations': 10, 'population_size': 8}}}, f)

        exit_code = cli_main(['--problem', self.problem_path, '--config', config_path,
                              '--algorithm', 'quantum_walk', '--iterations', '5', '--benchmark',
                              '--seed', '3', '--output', output_path, '--log-level', 'ERROR'])
        self.assertEqual(exit_code, 0)

        with open(output_path) as f:
            result = json.load(f)
        self.assertEqual(result['quantum']['algorithm'], 'quantum_walk')
        self.assertEqual(result['classical']['algorithm'], 'classical')
        self.assertIn('convergence', result['classical'])
        self.assertIn('energy_gap', result)
        self.assertIn('speedup', result)

    def test_classical_method_option(self):
        output_path = os.path.join(self.temp_dir, 'solution.json')
        exit_code = cli_main(['--problem', self.problem_path, '--algorithm', 'classical',
                              '--method', 'hill_climbing', '--iterations', '10', '--seed', '5',
                              '--output', output_path, '--log-level', 'ERROR'])
        self.assertEqual(exit_code, 0)
        with open(output_path) as f:
            details = json.load(f)['quantum_metrics']['details']
        self.assertEqual(details['method'], 'hill_climbing')

    def test_invalid_problem_exit_code(self):
        with open(self.problem_path, 'w') as f:
            json.dump({'id': 'broken', 'variables': []}, f)
        exit_code = cli_main(['--problem', self.problem_path, '--log-level', 'ERROR'])
        self.assertEqual(exit_code, 1)

    def test_missing_problem_file(self):
        exit_code = cli_main(['--problem', os.path.join(self.temp_dir, 'missing.json'),
                              '--log-level', 'ERROR'])
        self.assertEqual(exit_code, 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
