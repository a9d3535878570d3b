import logging
from typing import Dict, Optional, Sequence, Tuple

from .action import Action
from .initialize import InitializeAction
from .build import BuildAction
from .monitor import MonitorAction
from ..config import Config
from ..datacls import IntegrationContext
from ..docker import ImageBuilder
from ..exceptions import BuildCancelledError, CtxBuilderError
from ..store import ResourceStore
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)


def default_actions(store: ResourceStore, builder: ImageBuilder, registry: str = "") -> Tuple[Action, ...]:
    return (
        InitializeAction(store),
        BuildAction(store, builder, registry=registry),
        MonitorAction(store),
    )


class Dispatcher:
    """
    Level-triggered reconciler for integration contexts.

    Actions are registered once and scanned in order; the first whose
    `can_handle` accepts the context runs, exactly once per pass. New phases
    are supported by registering new actions.
    """

    def __init__(self, store: ResourceStore, actions: Sequence[Action]):
        self.store = store
        self.actions: Tuple[Action, ...] = tuple(actions)
        logger.debug(f"Dispatcher initialized with actions: {[a.name() for a in self.actions]}")

    @classmethod
    def from_config(cls, config: Config, store: ResourceStore,
                    builder: Optional[ImageBuilder] = None) -> "Dispatcher":
        builder = builder or ImageBuilder(config.builder, workspace_root=config.workspace_root)
        return cls(store, default_actions(store, builder, registry=config.registry))

    def reconcile(self, ctx: IntegrationContext,
                  cancel: Optional[CancelToken] = None) -> Optional[IntegrationContext]:
        """Run the action applicable to `ctx`; errors propagate unchanged."""
        for action in self.actions:
            if action.can_handle(ctx):
                logger.debug(f"Invoking action {action.name()} on context {ctx.key()}")
                return action.handle(ctx, cancel=cancel)
        logger.debug(f"No action for context {ctx.key()} in phase '{ctx.status.phase.value}'")
        return None

    def reconcile_all(self, namespace: str,
                      cancel: Optional[CancelToken] = None) -> Dict[str, Exception]:
        """
        One pass over every context in `namespace`.

        A failing context is logged and skipped so the others still progress,
        whatever the error type. The failures are returned keyed by context
        name. Cancellation stops the pass.
        """
        failures: Dict[str, Exception] = {}
        for ctx in self.store.list_contexts(namespace, cancel=cancel):
            try:
                self.reconcile(ctx, cancel=cancel)
            except BuildCancelledError:
                raise
            except CtxBuilderError as e:
                logger.error(f"Reconciliation of context {ctx.key()} failed: {e}")
                failures[ctx.name] = e
            except Exception as e:
                logger.exception(f"Unexpected error while reconciling context {ctx.key()}: {e}")
                failures[ctx.name] = e
        return failures

    def run_forever(self, namespace: str, interval: float,
                    cancel: Optional[CancelToken] = None):
        """Reconcile `namespace` every `interval` seconds until cancelled."""
        cancel = cancel or CancelToken()
        logger.info(f"Reconciling namespace '{namespace}' every {interval}s")
        while not cancel.cancelled:
            try:
                self.reconcile_all(namespace, cancel=cancel)
            except BuildCancelledError:
                break
            except CtxBuilderError as e:
                logger.error(f"Reconciliation pass over namespace '{namespace}' failed: {e}")
            except Exception as e:
                logger.exception(f"Unexpected error in reconciliation pass over namespace '{namespace}': {e}")
            if cancel.wait(interval):
                break
        logger.info("Reconcile loop stopped")
