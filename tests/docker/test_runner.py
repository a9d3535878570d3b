import sys
import time
import pytest

from ctxbuilder.docker import CommandRunner
from ctxbuilder.exceptions import BuildCancelledError, BuildFailedError
from ctxbuilder.utils import CancelToken


@pytest.fixture
def py_runner():
    return CommandRunner(sys.executable, poll_interval=0.05, kill_grace=2.0)


class TestCommandRunner:
    """Runs a Python child process in place of the image builder."""

    def test_returns_exit_status(self, py_runner):
        assert py_runner.run(["-c", "pass"]) == 0
        assert py_runner.run(["-c", "import sys; sys.exit(3)"]) == 3

    def test_echoes_argv(self, py_runner, caplog):
        caplog.set_level("INFO", logger="ctxbuilder.docker.runner")
        py_runner.run(["-c", "pass"])
        assert f"Executing: {sys.executable} -c pass" in caplog.text

    def test_deadline_terminates_child(self, py_runner):
        start = time.monotonic()
        with pytest.raises(BuildCancelledError):
            py_runner.run(["-c", "import time; time.sleep(30)"], cancel=CancelToken(timeout=0.3))
        assert time.monotonic() - start < 10

    def test_already_cancelled_does_not_spawn(self, py_runner, tmp_path):
        token = CancelToken()
        token.cancel()
        marker = tmp_path / "spawned"
        with pytest.raises(BuildCancelledError):
            py_runner.run(["-c", f"open({str(marker)!r}, 'w').close()"], cancel=token)
        assert not marker.exists()

    def test_missing_binary(self):
        with pytest.raises(BuildFailedError, match="not found"):
            CommandRunner("ctxb-no-such-builder").run(["build"])
