# File: qoe/config.py

"""
Engine configuration defaults and loading.

``DEFAULT_CONFIG`` holds every tunable the engine reads. ``load_config``
deep-merges a JSON file over a copy of the defaults, so a file only needs
the keys it changes.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core.problem import AlgorithmConfig, AlgorithmType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'engine': {
        'confidence': 0.85,
        'measurement_shots': 1000,
        'complexity_threshold': 100,
        'structured_problem_types': ['channel_optimization', 'timing_optimization'],
        'deadline_seconds': None,
        'quantum_enabled': True,
        'fallback': {
            'use_classical_fallback': True,
            'method': 'genetic_algorithm'
        }
    },
    'algorithms': {
        'annealing': {
            'iterations': 1000,
            'temperature': 100.0,
            'cooling_schedule': {
                'initial_temperature': 100.0,
                'final_temperature': 0.01,
                'rate': 0.95
            }
        },
        'qaoa': {
            'iterations': 100,
            'circuit_depth': 3
        },
        'quantum_walk': {
            'iterations': 200,
            'quantum_walk_steps': 500
        },
        'classical': {
            'iterations': 200,
            'classical_method': 'genetic_algorithm',
            'population_size': 100,
            'mutation_rate': 0.1,
            'crossover_rate': 0.8
        }
    },
    'noise_model': {
        'enabled': False,
        'gate_error_rate': 0.001,
        'measurement_error_rate': 0.01,
        'decoherence_time': 100.0
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    }
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(path: Optional[Union[str, Path]] = None,
                overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Load engine configuration.

    Args:
        path: Optional JSON file merged over ``DEFAULT_CONFIG``
        overrides: Optional dict merged last

    Returns:
        Complete configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is not None:
        path = Path(path)
        with open(path, 'r') as f:
            file_config = json.load(f)
        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file {path} must contain a JSON object")
        config = deep_merge(config, file_config)
        logger.info(f"Loaded configuration from {path}")

    if overrides:
        config = deep_merge(config, overrides)

    return config


def build_algorithm_config(algorithm: Union[str, AlgorithmType],
                           config: Optional[Dict[str, Any]] = None,
                           **parameter_overrides) -> AlgorithmConfig:
    """
    Algorithm configuration from the parameter bag for ``algorithm``.

    Keyword arguments replace individual parameters, e.g.
    ``build_algorithm_config('annealing', iterations=50)``.
    """
    config = config if config is not None else DEFAULT_CONFIG
    algorithm = AlgorithmType.parse(algorithm)

    parameters = dict(config.get('algorithms', {}).get(algorithm.value, {}))
    parameters.update({k: v for k, v in parameter_overrides.items() if v is not None})

    return AlgorithmConfig.from_dict({
        'algorithm': algorithm.value,
        'parameters': parameters,
        'noise_model': config.get('noise_model'),
        'deadline_seconds': config.get('engine', {}).get('deadline_seconds'),
    })
