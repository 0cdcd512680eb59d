"""
External process execution.

Generation shells out to `dotnet`; everything that starts a process goes
through a ProcessRunner so it can be swapped for a fake in tests.
"""

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .errors import ProcessTimeoutError
from ...logging_config import get_logger

logger = get_logger(__name__)

# Upper bound for a single external step, in seconds
DEFAULT_TIMEOUT = 300.0


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a finished external process."""

    args: List[str]
    cwd: Optional[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner(ABC):
    """Runs an external command to completion."""

    @abstractmethod
    def run(
        self,
        args: List[str],
        cwd: Optional[Union[str, Path]] = None,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Run a command and wait for it to exit.

        Args:
            args: Executable followed by its arguments
            cwd: Working directory
            timeout: Seconds before the process is killed

        Returns:
            ProcessResult with exit code and captured output

        Raises:
            ProcessTimeoutError: If the process outlives the timeout
            OSError: If the executable can't be started
        """
        pass


class SubprocessRunner(ProcessRunner):
    """ProcessRunner backed by subprocess.run."""

    def run(self, args, cwd=None, timeout=None) -> ProcessResult:
        args = [str(arg) for arg in args]
        cwd = str(cwd) if cwd is not None else None
        logger.debug("Running %s (cwd=%s)", args, cwd)

        try:
            # Both pipes are drained by run() before the exit code is read
            completed = subprocess.run(
                args,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("Process timed out after %ss: %s", timeout, args)
            raise ProcessTimeoutError(args, timeout) from e

        logger.debug("Process exited with %d: %s", completed.returncode, args)
        return ProcessResult(
            args=args,
            cwd=cwd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
