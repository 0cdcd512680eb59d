"""
Core code generation components.

Provides configuration, naming and generator invocation used by the CLI
and by host integrations.
"""

from .errors import (
    CodeGenError,
    InvalidConfigurationError,
    ShellDiscoveryError,
    GenerationError,
    GenerationStage,
    ProcessTimeoutError,
)
from .naming import NamespaceSanitizer
from .config import (
    Config,
    ConfigResolver,
    ConfigResult,
    Ok,
    Unconfigured,
    Invalid,
    ProjectLayout,
    resolve_config,
    resolve_project_config,
    validate_config,
)
from .discovery import (
    ExecutableLocator,
    PlatformInfo,
    create_dotnet_locator,
)
from .process import ProcessResult, ProcessRunner, SubprocessRunner
from .generator import GeneratorInvoker, GenerationResult, InvocationState
from .templates import TemplateEngine, TemplateError

__all__ = [
    # Errors
    "CodeGenError",
    "InvalidConfigurationError",
    "ShellDiscoveryError",
    "GenerationError",
    "GenerationStage",
    "ProcessTimeoutError",
    # Naming
    "NamespaceSanitizer",
    # Configuration system
    "Config",
    "ConfigResolver",
    "ConfigResult",
    "Ok",
    "Unconfigured",
    "Invalid",
    "ProjectLayout",
    "resolve_config",
    "resolve_project_config",
    "validate_config",
    # Executable discovery
    "ExecutableLocator",
    "PlatformInfo",
    "create_dotnet_locator",
    # Processes
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    # Generation
    "GeneratorInvoker",
    "GenerationResult",
    "InvocationState",
    # Templates
    "TemplateEngine",
    "TemplateError",
]
