import logging
from typing import Optional

from typing_extensions import override

from .action import BaseAction
from ..constants import ContextPhase
from ..datacls import BuildRequest, IntegrationContext
from ..docker import ImageBuilder
from ..exceptions import BuildFailedError, CtxBuilderError
from ..store import ResourceStore
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)


class BuildAction(BaseAction):
    """
    Builds the image of a context in the Building phase.

    Success moves the context to Ready with the produced image recorded.
    A builder failure is persisted as the Error phase and then re-raised;
    any other failure leaves the stored context untouched.
    """

    def __init__(self, store: ResourceStore, builder: ImageBuilder, registry: str = ""):
        super().__init__(store)
        self.builder = builder
        self.registry = registry

    @override
    def name(self) -> str:
        return "build"

    @override
    def can_handle(self, ctx: IntegrationContext) -> bool:
        return ctx.status.phase == ContextPhase.BUILDING

    @override
    def handle(self, ctx: IntegrationContext,
               cancel: Optional[CancelToken] = None) -> Optional[IntegrationContext]:
        request = BuildRequest.from_context(ctx, self.registry)
        target = ctx.deep_copy()
        try:
            image = self.builder.build(request, tag=f"{ctx.namespace}-{ctx.name}", cancel=cancel)
        except BuildFailedError as e:
            logger.error(f"Context {target.name} build failed: {e}")
            logger.info(f"Context {target.name} transitioning to state {ContextPhase.ERROR.value}")
            target.status.phase = ContextPhase.ERROR
            target.status.image = ""
            try:
                self.update(target, cancel=cancel)
            except CtxBuilderError as update_error:
                logger.error(f"Failed to record state {ContextPhase.ERROR.value} for context {target.name}: {update_error}")
            raise

        logger.info(f"Context {target.name} transitioning to state {ContextPhase.READY.value}")
        target.status.phase = ContextPhase.READY
        target.status.image = image
        return self.update(target, cancel=cancel)
