import logging
from typing import Optional

from .datacls import IntegrationPlatform
from .exceptions import PlatformNotFoundError
from .store import ResourceStore
from .utils.cancel import CancelToken

logger = logging.getLogger(__name__)


def get_current_platform(store: ResourceStore, namespace: str,
                         cancel: Optional[CancelToken] = None) -> IntegrationPlatform:
    """Return the platform of `namespace`, or raise PlatformNotFoundError."""
    platforms = store.list_platforms(namespace, cancel=cancel)
    if not platforms:
        raise PlatformNotFoundError(f"No integration platform found in namespace '{namespace}'")
    return platforms[0]


def is_platform_ready(store: ResourceStore, namespace: str,
                      cancel: Optional[CancelToken] = None) -> bool:
    """Readiness gate: does a platform exist in `namespace` right now?"""
    try:
        get_current_platform(store, namespace, cancel=cancel)
    except PlatformNotFoundError:
        return False
    return True
