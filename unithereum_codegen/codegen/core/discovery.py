"""
Discovery of the `dotnet` executable.

Lookup is split into small strategies chained together; which strategies
apply depends on the platform descriptor handed to the chain builder.
"""

import getpass
import os
import platform
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .errors import CodeGenError, ShellDiscoveryError
from .process import ProcessRunner, SubprocessRunner
from ...logging_config import get_logger

logger = get_logger(__name__)

DOTNET = "dotnet"

# Seconds allowed for shell lookups
LOOKUP_TIMEOUT = 30.0


@dataclass(frozen=True)
class PlatformInfo:
    """Capabilities of the host platform that affect discovery."""

    system: str
    path_separator: str = os.pathsep

    @classmethod
    def current(cls) -> "PlatformInfo":
        return cls(system=platform.system(), path_separator=os.pathsep)

    @property
    def is_windows(self) -> bool:
        return self.system == "Windows"

    @property
    def is_macos(self) -> bool:
        return self.system == "Darwin"

    @property
    def executable_name(self) -> str:
        return f"{DOTNET}.exe" if self.is_windows else DOTNET

    @property
    def has_path_query(self) -> bool:
        """Whether PATH reliably reflects the user's environment.

        GUI processes on POSIX systems don't inherit the login shell's
        PATH, so the shell has to be asked instead.
        """
        return self.is_windows


class ExecutableLocator(ABC):
    """Strategy that locates an executable."""

    @abstractmethod
    def locate(self) -> Optional[str]:
        """Return an absolute path, or None when not found."""
        pass


class WorkingDirectoryLocator(ExecutableLocator):
    """Looks for a bare executable in the working directory."""

    def __init__(self, names: Iterable[str] = (DOTNET, f"{DOTNET}.exe"), cwd: Path = None):
        self.names = list(names)
        self.cwd = cwd

    def locate(self) -> Optional[str]:
        base = self.cwd or Path.cwd()
        for name in self.names:
            candidate = base / name
            if candidate.is_file():
                return str(candidate.resolve())
        return None


class PathSearchLocator(ExecutableLocator):
    """Searches the directories listed in PATH."""

    def __init__(self, executable_name: str, path: Optional[str] = None,
                 separator: str = os.pathsep):
        self.executable_name = executable_name
        self.path = path
        self.separator = separator

    def locate(self) -> Optional[str]:
        path = self.path if self.path is not None else os.environ.get("PATH", "")
        for directory in path.split(self.separator):
            if not directory:
                continue
            candidate = Path(directory) / self.executable_name
            if candidate.is_file():
                return str(candidate)
        return None


class LoginShellLocator(ExecutableLocator):
    """Asks the user's login shell where `dotnet` is."""

    def __init__(self, runner: ProcessRunner = None,
                 shell_resolver: Callable[[], str] = None,
                 executable_name: str = DOTNET):
        self.runner = runner or SubprocessRunner()
        self.shell_resolver = shell_resolver or (
            lambda: get_default_shell(PlatformInfo.current(), self.runner)
        )
        self.executable_name = executable_name

    def locate(self) -> Optional[str]:
        # Not catching ShellDiscoveryError: without a shell there is no lookup
        shell = self.shell_resolver()

        try:
            result = self.runner.run(
                [shell, "--login", "-i", "-c", f"command -v {self.executable_name}"],
                timeout=LOOKUP_TIMEOUT,
            )
        except (OSError, CodeGenError) as e:
            logger.debug("Shell lookup for %s failed: %s", self.executable_name, e)
            return None

        if not result.ok:
            return None
        return parse_command_output(result.stdout)


class ChainLocator(ExecutableLocator):
    """Returns the first result of several strategies."""

    def __init__(self, locators: List[ExecutableLocator]):
        self.locators = locators

    def locate(self) -> Optional[str]:
        for locator in self.locators:
            found = locator.locate()
            if found:
                logger.debug("%s found %s", type(locator).__name__, found)
                return found
        return None


def parse_command_output(stdout: str) -> Optional[str]:
    """
    Extract a path from `command -v` output.

    Interactive shells may print banners or escape sequences around the
    answer; only the last `;`-separated chunk starting at its first `/` is
    kept.

    Returns:
        Absolute path or None
    """
    text = stdout.strip()
    if not text:
        return None

    last = text.split(";")[-1].strip()
    start = last.find("/")
    if start < 0:
        return None

    path = last[start:].strip()
    return path if path != "/" else None


def get_default_shell(platform_info: PlatformInfo, runner: ProcessRunner = None,
                      username: str = None, passwd_path: str = "/etc/passwd") -> str:
    """
    Determine the login shell of the current user.

    Raises:
        ShellDiscoveryError: If no shell can be determined
    """
    if platform_info.is_macos:
        return _shell_from_dscl(runner or SubprocessRunner())
    return _shell_from_passwd(username or getpass.getuser(), Path(passwd_path))


def _shell_from_dscl(runner: ProcessRunner) -> str:
    prefix = "UserShell:"
    try:
        result = runner.run(
            ["dscl", ".", "-read", str(Path.home()), "UserShell"],
            timeout=LOOKUP_TIMEOUT,
        )
    except (OSError, CodeGenError) as e:
        raise ShellDiscoveryError(
            "Could not get the default shell of the current user needed to find "
            "the dotnet executable."
        ) from e

    if not result.stdout.startswith(prefix):
        raise ShellDiscoveryError(
            "Could not get the default shell of the current user needed to find "
            "the dotnet executable."
        )
    return result.stdout[len(prefix):].strip()


def _shell_from_passwd(username: str, passwd_path: Path) -> str:
    try:
        lines = passwd_path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        raise ShellDiscoveryError(f"Could not read {passwd_path}: {e}") from e

    entry = next((line for line in lines if line.startswith(username + ":")), None)
    if entry is None:
        raise ShellDiscoveryError(
            f"Could not find the entry for user {username!r} in {passwd_path} "
            "needed to find the dotnet executable."
        )

    fields = entry.split(":")
    if len(fields) < 7:
        raise ShellDiscoveryError(
            f"Could not get the default shell of user {username!r} from {passwd_path}."
        )

    shell = fields[6].strip()
    if not shell:
        raise ShellDiscoveryError(
            f"The default shell of user {username!r} is empty in {passwd_path}."
        )
    return shell


def create_dotnet_locator(platform_info: PlatformInfo = None,
                          runner: ProcessRunner = None) -> ExecutableLocator:
    """Build the default discovery chain for a platform."""
    platform_info = platform_info or PlatformInfo.current()
    runner = runner or SubprocessRunner()

    locators: List[ExecutableLocator] = [WorkingDirectoryLocator()]
    if platform_info.has_path_query:
        locators.append(
            PathSearchLocator(platform_info.executable_name,
                              separator=platform_info.path_separator)
        )
    else:
        locators.append(
            LoginShellLocator(
                runner,
                shell_resolver=lambda: get_default_shell(platform_info, runner),
                executable_name=platform_info.executable_name,
            )
        )
    return ChainLocator(locators)
