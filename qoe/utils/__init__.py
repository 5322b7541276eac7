# File: qoe/utils/__init__.py

from .logging_utils import setup_logger, get_logger

__all__ = ['setup_logger', 'get_logger']
