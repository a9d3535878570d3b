import pytest
from typing_extensions import override

from ctxbuilder.constants import ContextPhase
from ctxbuilder.controller import BaseAction, Dispatcher, default_actions
from ctxbuilder.datacls import IntegrationContext, IntegrationPlatform, ObjectMeta
from ctxbuilder.exceptions import BuildFailedError, ConflictError
from ctxbuilder.store import YamlResourceStore
from ctxbuilder.utils import CancelToken


class CountingAction(BaseAction):
    def __init__(self, store, phase, label):
        super().__init__(store)
        self.phase = phase
        self.label = label
        self.handled = []

    @override
    def name(self):
        return self.label

    @override
    def can_handle(self, ctx):
        return ctx.status.phase == self.phase

    @override
    def handle(self, ctx, cancel=None):
        self.handled.append(ctx.name)
        return None


@pytest.fixture
def dispatcher(store, image_builder):
    return Dispatcher(store, default_actions(store, image_builder, registry="example.io"))


class TestDispatch:
    """Tests for action selection."""

    def test_runs_first_applicable_action_only(self, store, make_context):
        first = CountingAction(store, ContextPhase.NEW, "first")
        second = CountingAction(store, ContextPhase.NEW, "second")
        other = CountingAction(store, ContextPhase.READY, "other")
        dispatcher = Dispatcher(store, [other, first, second])

        dispatcher.reconcile(make_context())

        assert first.handled == ["ctx-a"]
        assert second.handled == []
        assert other.handled == []

    def test_no_applicable_action(self, store, make_context):
        dispatcher = Dispatcher(store, [CountingAction(store, ContextPhase.READY, "ready")])
        assert dispatcher.reconcile(make_context()) is None

    def test_new_phase_registered_as_extra_action(self, store, make_context):
        """Additional phases plug in without touching existing actions."""
        custom = CountingAction(store, ContextPhase.ERROR, "retry")
        dispatcher = Dispatcher(store, [custom, *default_actions(store, None)])
        ctx = make_context()
        ctx.status.phase = ContextPhase.ERROR
        ctx.status.digest = "stale"

        assert dispatcher.reconcile(ctx) is None
        assert custom.handled == ["ctx-a"]
        assert store.get_context("default", "ctx-a").status.phase == ContextPhase.NEW


class TestLifecycle:
    """End-to-end reconciliation through the default actions."""

    def test_platform_absent_keeps_new(self, dispatcher, store, make_context, runner):
        ctx = make_context()
        assert dispatcher.reconcile(ctx) is None
        stored = store.get_context("default", "ctx-a")
        assert stored.status.phase == ContextPhase.NEW
        assert stored.status.digest == ""
        assert runner.calls == []

    def test_new_to_ready(self, dispatcher, store, platform, make_context, runner, source_files):
        ctx = make_context(**source_files)

        building = dispatcher.reconcile(ctx)
        assert building.status.phase == ContextPhase.BUILDING
        assert runner.calls == []

        ready = dispatcher.reconcile(building)
        assert ready.status.phase == ContextPhase.READY
        assert ready.status.image == "example.io/ctx-a:latest"
        assert ready.status.digest == building.status.digest
        assert len(runner.calls) == 2

        # nothing changed: monitor is a no-op and nothing is rebuilt
        assert dispatcher.reconcile(ready) is None
        assert len(runner.calls) == 2

    def test_spec_change_triggers_rebuild(self, dispatcher, store, platform, make_context, source_files):
        ready = dispatcher.reconcile(dispatcher.reconcile(make_context(**source_files)))
        changed = ready.deep_copy()
        changed.spec.repositories.append("https://repo.example.io/maven2")
        changed = store.update_context(changed)

        rebuilding = dispatcher.reconcile(changed)

        assert rebuilding.status.phase == ContextPhase.BUILDING
        assert rebuilding.status.digest != ready.status.digest

    def test_builder_failure_persists_error_and_raises(self, store, platform, make_context, image_builder, runner):
        runner.returncodes = [1]
        dispatcher = Dispatcher(store, default_actions(store, image_builder, registry="example.io"))
        building = dispatcher.reconcile(make_context())

        with pytest.raises(BuildFailedError):
            dispatcher.reconcile(building)

        stored = store.get_context("default", "ctx-a")
        assert stored.status.phase == ContextPhase.ERROR
        # Error with an unchanged spec is not retried
        assert dispatcher.reconcile(stored) is None

    def test_stale_error_record_keeps_build_failure(self, dispatcher, store, platform, make_context, runner):
        building = dispatcher.reconcile(make_context())
        store.update_context(store.get_context("default", "ctx-a"))
        runner.returncodes = [1]

        with pytest.raises(BuildFailedError):
            dispatcher.reconcile(building)
        assert store.get_context("default", "ctx-a").status.phase == ContextPhase.BUILDING

    def test_conflict_is_propagated(self, dispatcher, store, platform, make_context):
        ctx = make_context()
        dispatcher.reconcile(ctx)
        with pytest.raises(ConflictError):
            dispatcher.reconcile(ctx)


class TestReconcileAll:

    def test_failures_do_not_stop_the_pass(self, store, platform, make_context, image_builder, runner):
        dispatcher = Dispatcher(store, default_actions(store, image_builder))
        make_context("bad", dependencies=["/nonexistent/dep.jar"])
        make_context("good")

        failures = dispatcher.reconcile_all("default")
        assert failures == {}
        failures = dispatcher.reconcile_all("default")

        assert set(failures) == {"bad"}
        assert store.get_context("default", "good").status.phase == ContextPhase.READY
        assert store.get_context("default", "bad").status.phase == ContextPhase.BUILDING

    def test_run_forever_stops_when_cancelled(self, dispatcher, store, platform, make_context):
        make_context()
        token = CancelToken(timeout=0.5)
        dispatcher.run_forever("default", interval=0.05, cancel=token)
        assert token.cancelled
        assert store.get_context("default", "ctx-a").status.phase == ContextPhase.READY

    def test_unexpected_error_does_not_stop_the_pass(self, dispatcher, store, platform, make_context, monkeypatch):
        make_context("bad")
        make_context("good")
        save = store._save_context

        def read_only_for_bad(ctx):
            if ctx.name == "bad":
                raise PermissionError("read-only store")
            save(ctx)

        monkeypatch.setattr(store, "_save_context", read_only_for_bad)

        failures = dispatcher.reconcile_all("default")

        assert set(failures) == {"bad"}
        assert isinstance(failures["bad"], PermissionError)
        assert store.get_context("default", "good").status.phase == ContextPhase.BUILDING

    def test_run_forever_survives_failing_passes(self, dispatcher, store, monkeypatch):
        passes = []

        def broken_listing(namespace, cancel=None):
            passes.append(namespace)
            raise RuntimeError("listing failed")

        monkeypatch.setattr(store, "list_contexts", broken_listing)
        dispatcher.run_forever("default", interval=0.05, cancel=CancelToken(timeout=0.5))
        assert len(passes) > 1

    def test_malformed_file_does_not_block_other_contexts(self, tmp_path, image_builder):
        yaml_store = YamlResourceStore(tmp_path / "store")
        yaml_store.create_platform(IntegrationPlatform(metadata=ObjectMeta(name="camel-k")))
        yaml_store.create_context(IntegrationContext(metadata=ObjectMeta(name="good")))
        (tmp_path / "store" / "default" / "contexts" / "zz-bad.yaml").write_text("metadata: [\n")
        dispatcher = Dispatcher(yaml_store, default_actions(yaml_store, image_builder))

        assert dispatcher.reconcile_all("default") == {}
        assert yaml_store.get_context("default", "good").status.phase == ContextPhase.BUILDING
