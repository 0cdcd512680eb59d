"""
Contract service code generation.

Drives the external Nethereum generator for `.abi` files of a Unity project.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core import (
    Config,
    ConfigResult,
    GenerationError,
    GenerationResult,
    GeneratorInvoker,
    InvalidConfigurationError,
    ProjectLayout,
    resolve_project_config,
)
from .languages.csharp import sanitize_namespace
from .artifacts import (
    ArtifactPair,
    find_artifact_pairs,
    handle_changed_asset,
    pair_for_changed_path,
    regenerate_all,
)


# Convenience functions
def create_invoker(
    project_root: Union[str, Path],
    overrides: Optional[Dict[str, Any]] = None,
    **invoker_options,
) -> GeneratorInvoker:
    """
    Resolve a project's config and bind a generator to it.

    Args:
        project_root: Unity project directory
        overrides: Explicit config values keyed by field name
        **invoker_options: Passed to GeneratorInvoker

    Returns:
        GeneratorInvoker (whose generate() is a no-op without `dotnet`)

    Raises:
        InvalidConfigurationError: If the config is invalid
    """
    result = resolve_project_config(project_root, overrides)
    return GeneratorInvoker(
        result.unwrap(), ProjectLayout(Path(project_root)), **invoker_options
    )


__all__ = [
    "Config",
    "ConfigResult",
    "GenerationError",
    "GenerationResult",
    "GeneratorInvoker",
    "InvalidConfigurationError",
    "ProjectLayout",
    "ArtifactPair",
    "create_invoker",
    "find_artifact_pairs",
    "handle_changed_asset",
    "pair_for_changed_path",
    "regenerate_all",
    "resolve_project_config",
    "sanitize_namespace",
]
