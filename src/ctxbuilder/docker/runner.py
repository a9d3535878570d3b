import logging
import shlex
import subprocess
from typing import List, Optional, Sequence

from .. import constants
from ..exceptions import BuildCancelledError, BuildFailedError
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)


class CommandRunner:
    """
    Runs the external builder and blocks until it exits.

    The full argument vector is logged before execution. When a cancel token
    fires (or its deadline passes) the child is terminated, then killed after
    a grace period, and BuildCancelledError is raised.
    """

    def __init__(self, binary: str = constants.DEFAULT_BUILDER_BINARY,
                 poll_interval: float = constants.PROCESS_POLL_INTERVAL,
                 kill_grace: float = constants.PROCESS_KILL_GRACE):
        self.binary = binary
        self.poll_interval = poll_interval
        self.kill_grace = kill_grace

    def command(self, args: Sequence[str]) -> List[str]:
        return [self.binary, *args]

    def run(self, args: Sequence[str], cancel: Optional[CancelToken] = None) -> int:
        argv = self.command(args)
        logger.info(f"Executing: {shlex.join(argv)}")
        if cancel:
            cancel.raise_if_cancelled(argv[0])

        try:
            proc = subprocess.Popen(argv)
        except FileNotFoundError as e:
            raise BuildFailedError(f"Builder executable '{self.binary}' not found: {e}", argv=argv) from e

        if cancel is None:
            return proc.wait()

        while True:
            try:
                return proc.wait(timeout=self.poll_interval)
            except subprocess.TimeoutExpired:
                if cancel.cancelled:
                    self._terminate(proc)
                    raise BuildCancelledError(f"{shlex.join(argv)} was cancelled")

    def _terminate(self, proc: subprocess.Popen):
        logger.warning(f"Terminating builder process {proc.pid}")
        proc.terminate()
        try:
            proc.wait(timeout=self.kill_grace)
        except subprocess.TimeoutExpired:
            logger.warning(f"Builder process {proc.pid} ignored SIGTERM, killing it")
            proc.kill()
            proc.wait()
