# File: tests/test_problem_evaluation.py

"""
Unit tests for the problem data model, objective scoring, energy evaluation
and measurement sampling.
"""

import unittest
import math
import numpy as np
import os
import sys

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from qoe.core.evaluator import CONSTRAINT_PENALTY, EnergyEvaluator
from qoe.core.exceptions import InvalidProblem, ParameterOutOfRange
from qoe.core.objectives import ObjectiveScorer, ObjectiveType, ScorerRegistry
from qoe.core.problem import (
    AlgorithmConfig, AlgorithmParameters, AlgorithmType, Constraint, ConstraintBounds,
    CoolingSchedule, NoiseModel, Objective, OptimizationDirection, OptimizationProblem,
    Variable, VariableDomain, VariableType, make_problem, numeric_values,
)
from qoe.core.quantum_state import QuantumState
from qoe.core.sampler import MeasurementSampler


def binary_problem(count=3, max_sum=2.0):
    return make_problem(
        "binary",
        [Variable(f"b{i}", VariableType.BINARY, quantum_superposition=True) for i in range(count)],
        [Objective("total", "generic_sum", minimize_or_maximize=OptimizationDirection.MAXIMIZE)],
        [Constraint(ConstraintBounds(max=max_sum))],
    )


class TestProblemModel(unittest.TestCase):
    """Test cases for problem parsing and validation."""

    def setUp(self):
        self.problem_dict = {
            'id': 'campaign',
            'type': 'channel_optimization',
            'variables': [
                {'id': 'budget', 'type': 'continuous', 'domain': {'min': 0, 'max': 100},
                 'quantumSuperposition': True},
                {'id': 'channel', 'type': 'discrete', 'domain': {'allowedValues': [1, 2, 3]}},
                {'id': 'active', 'type': 'binary'},
            ],
            'objectives': [
                {'id': 'spend', 'type': 'cost_per_lead', 'weight': 0.5, 'minimizeOrMaximize': 'minimize'},
                {'id': 'reach', 'type': 'engagement_rate', 'weight': 1.5, 'minimize_or_maximize': 'maximize'},
            ],
            'constraints': [{'id': 'cap', 'bounds': {'max': 150}}],
        }

    def test_from_dict_accepts_camel_and_snake_case(self):
        problem = OptimizationProblem.from_dict(self.problem_dict)

        self.assertEqual(problem.id, 'campaign')
        self.assertEqual(problem.problem_type, 'channel_optimization')
        self.assertEqual(problem.dimensions, 3)
        self.assertTrue(problem.variables[0].quantum_superposition)
        self.assertEqual(problem.variables[1].allowed_values(), (1, 2, 3))
        self.assertEqual(problem.variables[2].allowed_values(), (0, 1))
        self.assertTrue(problem.objectives[0].minimize)
        self.assertFalse(problem.objectives[1].minimize)
        self.assertEqual(problem.constraints[0].bounds.max, 150)
        problem.validate()

    def test_problem_is_immutable(self):
        problem = OptimizationProblem.from_dict(self.problem_dict)
        with self.assertRaises(Exception):
            problem.id = 'other'
        self.assertIsInstance(problem.variables, tuple)

    def test_discrete_integer_range_fallback(self):
        variable = Variable('n', VariableType.DISCRETE, VariableDomain(min=2, max=5))
        self.assertEqual(variable.allowed_values(), (2, 3, 4, 5))
        variable.validate()

    def test_empty_variables_rejected(self):
        with self.assertRaises(InvalidProblem):
            make_problem('empty', []).validate()

    def test_contradictory_bounds_rejected(self):
        variable = Variable('x', VariableType.CONTINUOUS, VariableDomain(min=5, max=1))
        with self.assertRaises(InvalidProblem):
            make_problem('bad', [variable]).validate()

        constraint = Constraint(ConstraintBounds(min=10, max=1), id='c')
        ok = Variable('y', VariableType.CONTINUOUS, VariableDomain(min=0, max=1))
        with self.assertRaises(InvalidProblem):
            make_problem('bad', [ok], constraints=[constraint]).validate()

    def test_discrete_without_values_rejected(self):
        variable = Variable('d', VariableType.DISCRETE)
        with self.assertRaises(InvalidProblem):
            make_problem('bad', [variable]).validate()

    def test_duplicate_variable_ids_rejected(self):
        variables = [Variable('x', VariableType.BINARY), Variable('x', VariableType.BINARY)]
        with self.assertRaises(InvalidProblem) as ctx:
            make_problem('dup', variables).validate()
        self.assertIn('dup', str(ctx.exception))

    def test_numeric_values_skip_strings_and_bools(self):
        values = numeric_values({'a': 1, 'b': 'red', 'c': 2.5, 'd': True, 'e': np.float64(1.5)})
        self.assertEqual(values, [1.0, 2.5, 1.5])


class TestAlgorithmConfig(unittest.TestCase):
    """Test cases for algorithm configuration parsing and range checks."""

    def test_aliases(self):
        self.assertIs(AlgorithmType.parse('quantum_annealing'), AlgorithmType.ANNEALING)
        self.assertIs(AlgorithmType.parse('quantum_approximate_optimization'), AlgorithmType.QAOA)
        self.assertIs(AlgorithmType.parse('quantum-walk'), AlgorithmType.QUANTUM_WALK)
        with self.assertRaises(ParameterOutOfRange):
            AlgorithmType.parse('genetic_algorithm')

    def test_from_dict(self):
        config = AlgorithmConfig.from_dict({
            'algorithm': 'quantum_annealing',
            'parameters': {
                'iterations': 50,
                'temperature': 20,
                'coolingSchedule': {'finalTemperature': 0.5, 'rate': 0.9},
            },
            'noiseModel': {'enabled': True, 'gateErrorRate': 0.05},
            'deadlineSeconds': 2,
        })
        self.assertIs(config.algorithm, AlgorithmType.ANNEALING)
        self.assertEqual(config.parameters.iterations, 50)
        self.assertEqual(config.parameters.cooling_schedule.final_temperature, 0.5)
        self.assertTrue(config.noise_model.enabled)
        self.assertEqual(config.noise_model.gate_error_rate, 0.05)
        self.assertEqual(config.deadline_seconds, 2.0)
        config.validate()

    def test_missing_algorithm(self):
        with self.assertRaises(ParameterOutOfRange):
            AlgorithmConfig.from_dict({'parameters': {}})

    def test_out_of_range_parameters(self):
        bad_parameters = [
            AlgorithmParameters(iterations=-1),
            AlgorithmParameters(temperature=0.0),
            AlgorithmParameters(cooling_schedule=CoolingSchedule(rate=1.0)),
            AlgorithmParameters(cooling_schedule=CoolingSchedule(rate=0.0)),
            AlgorithmParameters(circuit_depth=0),
            AlgorithmParameters(circuit_depth=2, variational_parameters=(0.1, 0.2, 0.3)),
            AlgorithmParameters(variational_parameters=(0.0,) * 5),
            AlgorithmParameters(circuit_depth=1, variational_parameters=(float('nan'), 0.0)),
            AlgorithmParameters(quantum_walk_steps=-5),
        ]
        for parameters in bad_parameters:
            with self.subTest(parameters=parameters):
                with self.assertRaises(ParameterOutOfRange):
                    AlgorithmConfig(AlgorithmType.QAOA, parameters).validate()

    def test_noise_model_ranges(self):
        for noise in (NoiseModel(gate_error_rate=1.5), NoiseModel(measurement_error_rate=-0.1),
                      NoiseModel(decoherence_time=0.0)):
            with self.assertRaises(ParameterOutOfRange):
                AlgorithmConfig(AlgorithmType.ANNEALING, noise_model=noise).validate()

    def test_non_positive_deadline(self):
        with self.assertRaises(ParameterOutOfRange):
            AlgorithmConfig(AlgorithmType.ANNEALING, deadline_seconds=0).validate()


class TestObjectiveScoring(unittest.TestCase):
    """Test cases for built-in and registered objective scorers."""

    def setUp(self):
        self.registry = ScorerRegistry()
        self.assignment = {'x': 30.0, 'y': 50.0, 'label': 'ignored'}

    def test_builtin_tags_registered(self):
        for objective_type in ObjectiveType:
            self.assertIn(objective_type.value, self.registry)
        self.assertIn('generic-sum', self.registry)
        self.assertNotIn('unknown_metric', self.registry)

    def test_builtin_formulas(self):
        score = lambda tag: self.registry.get(tag).score(self.assignment)

        self.assertAlmostEqual(score('generic_sum'), 80.0)
        self.assertAlmostEqual(score('conversion_rate'), 80.0 / 200.0)
        self.assertAlmostEqual(score('cost_per_lead'), 40.0)
        self.assertAlmostEqual(score('engagement_rate'), math.sin(0.8) * 0.5 + 0.5)
        self.assertAlmostEqual(score('roi'), 80.0)

    def test_conversion_rate_clipped(self):
        scorer = self.registry.get('conversion_rate')
        self.assertEqual(scorer.score({'x': 500.0}), 1.0)
        self.assertEqual(scorer.score({'x': -500.0}), 0.0)
        self.assertEqual(scorer.score({}), 0.0)

    def test_register_custom_scorer(self):
        class MaxScorer(ObjectiveScorer):
            def score(self, assignment):
                return max(numeric_values(assignment))

        self.registry.register('peak-value', MaxScorer())
        self.assertIn('peak_value', self.registry)
        self.assertEqual(self.registry.get('peak_value').score(self.assignment), 50.0)

        with self.assertRaises(TypeError):
            self.registry.register('broken', lambda assignment: 0.0)


class TestEnergyEvaluator(unittest.TestCase):
    """Test cases for energy and constraint evaluation."""

    def setUp(self):
        self.evaluator = EnergyEvaluator()
        self.problem = make_problem(
            'energy',
            [Variable('x', VariableType.CONTINUOUS, VariableDomain(0, 10)),
             Variable('y', VariableType.CONTINUOUS, VariableDomain(0, 10))],
            [Objective('cost', 'generic_sum', weight=2.0),
             Objective('gain', 'generic_sum', weight=1.0,
                       minimize_or_maximize=OptimizationDirection.MAXIMIZE)],
            [Constraint(ConstraintBounds(min=5.0, max=12.0), id='window')],
        )

    def test_feasible_energy(self):
        assignment = {'x': 3.0, 'y': 4.0}
        # 2 * 7 - 1 * 7
        self.assertAlmostEqual(self.evaluator.energy(assignment, self.problem), 7.0)
        self.assertTrue(self.evaluator.is_feasible(assignment, self.problem))

    def test_violations_add_penalty(self):
        above = {'x': 10.0, 'y': 5.0}
        below = {'x': 1.0, 'y': 1.0}

        self.assertEqual(self.evaluator.constraint_violations(above, self.problem), [3.0])
        self.assertEqual(self.evaluator.constraint_violations(below, self.problem), [3.0])
        self.assertAlmostEqual(self.evaluator.energy(above, self.problem),
                               15.0 + 3.0 * CONSTRAINT_PENALTY)
        self.assertFalse(self.evaluator.is_feasible(below, self.problem))

    def test_objective_values(self):
        values = self.evaluator.objective_values({'x': 1.0, 'y': 2.0}, self.problem)
        self.assertEqual(values, {'cost': 3.0, 'gain': 3.0})

    def test_unknown_objective_type(self):
        problem = make_problem('p', [Variable('b', VariableType.BINARY)],
                               [Objective('o', 'lifetime_value')])
        with self.assertRaises(InvalidProblem):
            self.evaluator.validate_objectives(problem)


class TestMeasurementSampler(unittest.TestCase):
    """Test cases for state measurement."""

    def setUp(self):
        self.problem = make_problem(
            'sampling',
            [Variable('x', VariableType.CONTINUOUS, VariableDomain(-1.0, 1.0), quantum_superposition=True),
             Variable('c', VariableType.DISCRETE, VariableDomain(allowed_values=('red', 'green', 'blue')),
                      quantum_superposition=True),
             Variable('b', VariableType.BINARY),
             Variable('n', VariableType.DISCRETE, VariableDomain(min=1, max=4))],
        )
        self.state = QuantumState.initialize(self.problem.dimensions)

    def test_values_respect_domains(self):
        sampler = MeasurementSampler(np.random.default_rng(3))
        for _ in range(200):
            assignment = sampler.measure(self.state, self.problem)
            self.assertGreaterEqual(assignment['x'], -1.0)
            self.assertLessEqual(assignment['x'], 1.0)
            self.assertIn(assignment['c'], ('red', 'green', 'blue'))
            self.assertIn(assignment['b'], (0, 1))
            self.assertIn(assignment['n'], (1, 2, 3, 4))

    def test_builtin_types_only(self):
        sampler = MeasurementSampler(np.random.default_rng(4))
        assignment = sampler.measure(self.state, self.problem)
        self.assertIs(type(assignment['x']), float)
        self.assertIs(type(assignment['b']), int)
        self.assertIs(type(assignment['n']), int)

    def test_deterministic_given_seed(self):
        first = MeasurementSampler(np.random.default_rng(42))
        second = MeasurementSampler(np.random.default_rng(42))
        for _ in range(10):
            self.assertEqual(first.measure(self.state, self.problem),
                             second.measure(self.state, self.problem))

    def test_random_assignment_covers_all_variables(self):
        sampler = MeasurementSampler(np.random.default_rng(5))
        assignment = sampler.random_assignment(self.problem)
        self.assertEqual(set(assignment), {'x', 'c', 'b', 'n'})

    def test_measurement_errors_counted(self):
        noise = NoiseModel(enabled=True, measurement_error_rate=1.0)
        sampler = MeasurementSampler(np.random.default_rng(6), noise)
        sampler.measure(self.state, self.problem)
        # Only the two superposed variables can suffer a measurement error
        self.assertEqual(sampler.measurement_errors, 2)


if __name__ == '__main__':
    unittest.main(verbosity=2)
