import pytest
from typing import List

from ctxbuilder.config import BuilderSettings, Config
from ctxbuilder.datacls import IntegrationContext, IntegrationPlatform, ObjectMeta
from ctxbuilder.docker import BuildContextAssembler, CommandRunner, ImageBuilder
from ctxbuilder.store import MemoryResourceStore


class FakeRunner(CommandRunner):
    """Records argument vectors instead of spawning the builder."""

    def __init__(self, returncodes: List[int] | None = None):
        super().__init__("docker")
        self.calls: List[List[str]] = []
        self.returncodes = list(returncodes or [])

    def run(self, args, cancel=None):
        self.calls.append(list(args))
        return self.returncodes.pop(0) if self.returncodes else 0


class RecordingAssembler(BuildContextAssembler):
    """Records copy requests and delegates to the real copy."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def _copy_all(self, root, subdir, files):
        self.calls.append((subdir, list(files)))
        return super()._copy_all(root, subdir, files)


@pytest.fixture
def settings() -> BuilderSettings:
    return BuilderSettings()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def assembler() -> RecordingAssembler:
    return RecordingAssembler()


@pytest.fixture
def image_builder(settings, runner, assembler, tmp_path) -> ImageBuilder:
    workspace_root = tmp_path / "workspaces"
    workspace_root.mkdir()
    return ImageBuilder(settings, runner=runner, assembler=assembler, workspace_root=str(workspace_root))


@pytest.fixture
def store() -> MemoryResourceStore:
    return MemoryResourceStore()


@pytest.fixture
def platform(store) -> IntegrationPlatform:
    return store.create_platform(IntegrationPlatform(metadata=ObjectMeta(name="camel-k", namespace="default")))


@pytest.fixture
def config() -> Config:
    return Config(None, overrides={"registry": "example.io"})


@pytest.fixture
def source_files(tmp_path):
    """Host-side dependency, route and property files."""
    src = tmp_path / "host" / "project"
    src.mkdir(parents=True)
    dep = src / "dep1.jar"
    dep.write_bytes(b"PK\x03\x04")
    route = src / "route1.xml"
    route.write_text("<routes/>")
    props = src / "app.properties"
    props.write_text("camel.context.name=demo\n")
    return {"dependencies": [str(dep)], "routes": [str(route)], "property_files": [str(props)]}


@pytest.fixture
def make_context(store):
    def _make(name: str = "ctx-a", namespace: str = "default", persist: bool = True, **spec) -> IntegrationContext:
        ctx = IntegrationContext.model_validate({
            "metadata": {"name": name, "namespace": namespace},
            "spec": spec,
        })
        return store.create_context(ctx) if persist else ctx
    return _make
