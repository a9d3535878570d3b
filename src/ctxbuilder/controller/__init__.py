"""
Context Builder Controller Module

- Action / BaseAction: Phase-scoped units of work
- InitializeAction: New -> Building once the platform exists
- BuildAction: Building -> Ready (or Error) through the image pipeline
- MonitorAction: Ready/Error -> Building when the spec digest changed
- Dispatcher: Picks and runs the single applicable action
"""

from .action import Action, BaseAction
from .initialize import InitializeAction
from .build import BuildAction
from .monitor import MonitorAction
from .dispatcher import Dispatcher, default_actions

__all__ = [
    'Action',
    'BaseAction',
    'InitializeAction',
    'BuildAction',
    'MonitorAction',
    'Dispatcher',
    'default_actions',
]
