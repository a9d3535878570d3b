from typing import Dict, List, Optional, Tuple

from .base import ResourceStore
from ..datacls import IntegrationContext, IntegrationPlatform
from ..utils.cancel import CancelToken
from typing_extensions import override


class MemoryResourceStore(ResourceStore):
    """In-process store, used by tests and embedders."""

    def __init__(self):
        self._contexts: Dict[Tuple[str, str], IntegrationContext] = {}
        self._platforms: Dict[Tuple[str, str], IntegrationPlatform] = {}

    @override
    def _load_context(self, namespace: str, name: str) -> Optional[IntegrationContext]:
        ctx = self._contexts.get((namespace, name))
        return ctx.deep_copy() if ctx else None

    @override
    def _save_context(self, ctx: IntegrationContext):
        self._contexts[(ctx.namespace, ctx.name)] = ctx.deep_copy()

    @override
    def list_contexts(self, namespace: str, cancel: Optional[CancelToken] = None) -> List[IntegrationContext]:
        if cancel:
            cancel.raise_if_cancelled("list contexts")
        return [c.deep_copy() for (ns, _), c in sorted(self._contexts.items()) if ns == namespace]

    @override
    def list_platforms(self, namespace: str, cancel: Optional[CancelToken] = None) -> List[IntegrationPlatform]:
        if cancel:
            cancel.raise_if_cancelled("list platforms")
        return [p.deep_copy() for (ns, _), p in sorted(self._platforms.items()) if ns == namespace]

    @override
    def create_platform(self, platform: IntegrationPlatform) -> IntegrationPlatform:
        self._platforms[(platform.metadata.namespace, platform.metadata.name)] = platform.deep_copy()
        return platform.deep_copy()

    def delete_platform(self, namespace: str, name: str):
        self._platforms.pop((namespace, name), None)
