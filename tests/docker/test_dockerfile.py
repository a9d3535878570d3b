import pytest

from ctxbuilder.datacls import RunCommand
from ctxbuilder.docker import DockerfileGenerator
from ctxbuilder.exceptions import WorkspaceError


class TestDockerfileGenerator:

    def test_base_dockerfile(self, settings, tmp_path):
        path = DockerfileGenerator(settings).create_base_image_dockerfile(tmp_path)
        assert path.read_text().splitlines()[0] == "FROM adoptopenjdk/openjdk11:slim"

    def test_integration_dirs_exist_even_when_empty(self, settings, tmp_path):
        command = RunCommand(args=["java", "-cp", "/deployments/dependencies/*", "Main"])
        DockerfileGenerator(settings).create_integration_image_dockerfile(tmp_path, "example.io", command)
        for name in ("dependencies", "routes", "properties"):
            assert (tmp_path / name).is_dir()

    def test_unusable_workspace_raises_workspace_error(self, settings, tmp_path):
        not_a_dir = tmp_path / "file"
        not_a_dir.write_text("")
        with pytest.raises(WorkspaceError):
            DockerfileGenerator(settings).create_integration_image_dockerfile(
                not_a_dir, "example.io", RunCommand(args=["java"])
            )

    def test_missing_workspace_raises_workspace_error(self, settings):
        with pytest.raises(WorkspaceError):
            DockerfileGenerator(settings).create_base_image_dockerfile(None)
