import logging
from typing import Optional

from typing_extensions import override

from .action import BaseAction
from ..constants import ContextPhase
from ..datacls import IntegrationContext
from ..digest import compute_for_integration_context
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)


class MonitorAction(BaseAction):
    """Sends a built (or failed) context back to Building when its spec changed."""

    @override
    def name(self) -> str:
        return "monitor"

    @override
    def can_handle(self, ctx: IntegrationContext) -> bool:
        return ctx.status.phase in (ContextPhase.READY, ContextPhase.ERROR)

    @override
    def handle(self, ctx: IntegrationContext,
               cancel: Optional[CancelToken] = None) -> Optional[IntegrationContext]:
        digest = compute_for_integration_context(ctx)
        if digest == ctx.status.digest:
            return None

        target = ctx.deep_copy()
        logger.info(f"Context {target.name} needs a rebuild, transitioning to state {ContextPhase.BUILDING.value}")
        target.status.phase = ContextPhase.BUILDING
        target.status.digest = digest
        return self.update(target, cancel=cancel)
