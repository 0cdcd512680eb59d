"""
Exception hierarchy for code generation.

Every error raised on purpose by this package derives from CodeGenError.
"""

from enum import Enum
from typing import Any, Optional


class CodeGenError(Exception):
    """Base exception for code generation errors."""

    pass


class InvalidConfigurationError(CodeGenError):
    """A configuration value is malformed or unsafe."""

    def __init__(self, reason: str, field: Optional[str] = None, value: Any = None):
        super().__init__(reason)
        self.reason = reason
        self.field = field
        self.value = value

    def __str__(self) -> str:
        if self.field is None:
            return self.reason

        msg = f"Invalid codegen config: {self.field}."
        if self.value is not None:
            msg += f" ({self.value})"
        return f"{msg} {self.reason}"


class ShellDiscoveryError(CodeGenError):
    """The login shell of the current user can't be determined."""

    pass


class ProcessTimeoutError(CodeGenError):
    """An external process didn't exit within its time limit."""

    def __init__(self, args: list, timeout: float):
        super().__init__(f"{' '.join(args)} timed out after {timeout:g}s")
        self.command = args
        self.timeout = timeout


class GenerationStage(Enum):
    """External process steps of a generation run."""

    RESTORE = "restore"
    GENERATE = "generate"


class GenerationError(CodeGenError):
    """An external generator step failed."""

    def __init__(self, stage: GenerationStage, stderr: str, returncode: Optional[int] = None):
        self.stage = stage
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.stage == GenerationStage.RESTORE:
            prefix = "dotnet tool restore failed"
        else:
            prefix = "Failed to generate contract service code"

        if self.returncode is not None:
            prefix += f" (exit code {self.returncode})"
        detail = self.stderr.strip()
        return f"{prefix}: {detail}" if detail else prefix
