# File: qoe/evaluation/__init__.py

from .convergence import ConvergenceAnalyzer, ConvergenceReport, trace_to_frame

__all__ = ['ConvergenceAnalyzer', 'ConvergenceReport', 'trace_to_frame']
