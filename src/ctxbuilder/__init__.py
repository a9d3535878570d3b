"""
ctxbuilder (Integration Context Builder)

Builds container images for integration contexts and drives their lifecycle
through a phase-based reconciliation state machine.

Main modules:
- controller: Phase actions and the dispatcher
- docker: Workspaces, Dockerfiles, builder arguments and the image pipeline
- digest: Content fingerprint of a context spec
- platform: Readiness gate on the integration platform
- store: Resource persistence (memory and YAML directory)
- config: Configuration loading and validation
- datacls: Type-safe resource and request models
- utils: Logging and cancellation

Quick start example:
```python
from ctxbuilder import Config, Dispatcher, YamlResourceStore

config = Config("ctxbuilder.yml")
store = YamlResourceStore(config.store_dir)
dispatcher = Dispatcher.from_config(config, store)
dispatcher.reconcile_all(config.namespace)
```
"""

from .constants import ContextPhase
from .config import Config, ConfigModel, BuilderSettings
from .datacls import IntegrationContext, IntegrationPlatform, BuildRequest
from .controller import Dispatcher, Action, BaseAction, InitializeAction, BuildAction, MonitorAction
from .docker import ImageBuilder, Workspace
from .digest import compute_for_integration_context
from .platform import get_current_platform, is_platform_ready
from .store import ResourceStore, MemoryResourceStore, YamlResourceStore
from .exceptions import (
    CtxBuilderError,
    ConfigurationError,
    BuildError,
    BuildFailedError,
    DigestError,
    PlatformNotFoundError,
    ConflictError,
)

__version__ = "0.1.0"

__all__ = [
    '__version__',
    'ContextPhase',
    'Config',
    'ConfigModel',
    'BuilderSettings',
    'IntegrationContext',
    'IntegrationPlatform',
    'BuildRequest',
    'Dispatcher',
    'Action',
    'BaseAction',
    'InitializeAction',
    'BuildAction',
    'MonitorAction',
    'ImageBuilder',
    'Workspace',
    'compute_for_integration_context',
    'get_current_platform',
    'is_platform_ready',
    'ResourceStore',
    'MemoryResourceStore',
    'YamlResourceStore',
    'CtxBuilderError',
    'ConfigurationError',
    'BuildError',
    'BuildFailedError',
    'DigestError',
    'PlatformNotFoundError',
    'ConflictError',
]
