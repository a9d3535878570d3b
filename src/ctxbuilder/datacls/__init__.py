from .resources import (
    ObjectMeta,
    ConfigurationEntry,
    IntegrationContextSpec,
    IntegrationContextStatus,
    IntegrationContext,
    IntegrationPlatform,
)
from .request import BuildRequest, RunCommand

__all__ = [
    'ObjectMeta',
    'ConfigurationEntry',
    'IntegrationContextSpec',
    'IntegrationContextStatus',
    'IntegrationContext',
    'IntegrationPlatform',
    'BuildRequest',
    'RunCommand',
]
