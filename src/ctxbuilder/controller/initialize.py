import logging
from typing import Optional

from typing_extensions import override

from .action import BaseAction
from ..constants import ContextPhase
from ..datacls import IntegrationContext
from ..digest import compute_for_integration_context
from ..platform import is_platform_ready
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)


class InitializeAction(BaseAction):
    """Moves a new context to Building once the platform exists."""

    @override
    def name(self) -> str:
        return "initialize"

    @override
    def can_handle(self, ctx: IntegrationContext) -> bool:
        return ctx.status.phase == ContextPhase.NEW

    @override
    def handle(self, ctx: IntegrationContext,
               cancel: Optional[CancelToken] = None) -> Optional[IntegrationContext]:
        # The integration platform needs to be initialized before starting to create contexts
        if not is_platform_ready(self.store, ctx.namespace, cancel=cancel):
            logger.info("Waiting for a integration platform to be initialized")
            return None

        target = ctx.deep_copy()
        logger.info(f"Context {target.name} transitioning to state {ContextPhase.BUILDING.value}")
        target.status.phase = ContextPhase.BUILDING
        target.status.digest = compute_for_integration_context(ctx)

        return self.update(target, cancel=cancel)
