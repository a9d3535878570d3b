from abc import ABC, abstractmethod
from typing import Optional
import logging

from ..datacls import IntegrationContext
from ..store import ResourceStore
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)


class Action(ABC):
    """
    Abstract unit of work for one phase of an integration context.

    `can_handle` is a pure predicate over the context as last persisted.
    `handle` never mutates its argument: it works on a deep copy and, only
    on success, persists and returns that copy. It returns None when there
    was nothing to persist.
    """

    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def can_handle(self, ctx: IntegrationContext) -> bool:
        pass

    @abstractmethod
    def handle(self, ctx: IntegrationContext,
               cancel: Optional[CancelToken] = None) -> Optional[IntegrationContext]:
        pass


class BaseAction(Action, ABC):

    def __init__(self, store: ResourceStore):
        self.store = store

    def update(self, target: IntegrationContext,
               cancel: Optional[CancelToken] = None) -> IntegrationContext:
        return self.store.update_context(target, cancel=cancel)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name()}>"
