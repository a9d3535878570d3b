"""
Context Builder Utils Module

- logger: Logging setup and configuration
- cancel: Cancellation tokens threaded through builds and reconciliation

Usage:
    from ctxbuilder.utils import setup_logger, CancelToken
"""

from .logger import setup_logger, parse_module_levels
from .cancel import CancelToken

__all__ = [
    'setup_logger',
    'parse_module_levels',
    'CancelToken',
]
