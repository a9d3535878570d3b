from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from ..datacls import IntegrationContext, IntegrationPlatform
from ..exceptions import ConflictError, ResourceNotFoundError
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)


class ResourceStore(ABC):
    """
    Abstract persistence for contexts and platforms.

    Updates use optimistic concurrency: the incoming resource version must
    match the stored one, otherwise ConflictError is raised and the caller
    is expected to retry from a fresh read.
    """

    @abstractmethod
    def _load_context(self, namespace: str, name: str) -> Optional[IntegrationContext]:
        pass

    @abstractmethod
    def _save_context(self, ctx: IntegrationContext):
        pass

    @abstractmethod
    def list_contexts(self, namespace: str, cancel: Optional[CancelToken] = None) -> List[IntegrationContext]:
        pass

    @abstractmethod
    def list_platforms(self, namespace: str, cancel: Optional[CancelToken] = None) -> List[IntegrationPlatform]:
        pass

    @abstractmethod
    def create_platform(self, platform: IntegrationPlatform) -> IntegrationPlatform:
        pass

    def get_context(self, namespace: str, name: str, cancel: Optional[CancelToken] = None) -> IntegrationContext:
        if cancel:
            cancel.raise_if_cancelled("get context")
        ctx = self._load_context(namespace, name)
        if ctx is None:
            raise ResourceNotFoundError(f"Integration context '{namespace}/{name}' not found")
        return ctx

    def create_context(self, ctx: IntegrationContext) -> IntegrationContext:
        if self._load_context(ctx.namespace, ctx.name) is not None:
            raise ConflictError(f"Integration context '{ctx.key()}' already exists")
        created = ctx.deep_copy()
        created.metadata.resource_version = 1
        self._save_context(created)
        logger.debug(f"Created context '{created.key()}'")
        return created.deep_copy()

    def update_context(self, ctx: IntegrationContext, cancel: Optional[CancelToken] = None) -> IntegrationContext:
        if cancel:
            cancel.raise_if_cancelled("update context")
        current = self._load_context(ctx.namespace, ctx.name)
        if current is None:
            raise ResourceNotFoundError(f"Integration context '{ctx.key()}' not found")
        if current.metadata.resource_version != ctx.metadata.resource_version:
            raise ConflictError(
                f"Integration context '{ctx.key()}' was modified: "
                f"stored version {current.metadata.resource_version}, got {ctx.metadata.resource_version}"
            )
        updated = ctx.deep_copy()
        updated.metadata.resource_version += 1
        self._save_context(updated)
        logger.debug(f"Updated context '{updated.key()}' to version {updated.metadata.resource_version}")
        return updated.deep_copy()
