"""
Configuration management for code generation.

Handles loading `codegen.config.json`, validating its values and filling in
defaults. There is no global config: callers keep the Config they resolved
and resolve again to reload.
"""

import json
import posixpath
import re
from dataclasses import asdict, dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Dict, Mapping, Optional, Union

from .discovery import ExecutableLocator, create_dotnet_locator
from .errors import InvalidConfigurationError
from ..languages.csharp.naming import is_valid_namespace, sanitize_namespace
from ...logging_config import get_logger
from ...utils import JSONLoaderError, load_json_object

logger = get_logger(__name__)

CONFIG_FILE_NAME = "codegen.config.json"
DEFAULT_NAME = "ContractServices"
DEFAULT_CONTRACTS_DIR = "Assets"
ASSETS_DIR_NAME = "Assets"

# Config file keys mapped to Config fields
CONFIG_KEYS = {
    "dotnetPath": "dotnet_path",
    "namespacePrefix": "namespace_prefix",
    "outputDir": "output_dir",
    "contractsDir": "contracts_dir",
}


@dataclass(frozen=True)
class Config:
    """Resolved code generation settings."""

    # Absolute path to `dotnet`, None when it couldn't be found
    dotnet_path: Optional[str]
    namespace_prefix: str
    # Relative to the project's Assets/ directory
    output_dir: str = DEFAULT_NAME
    # Relative to the project directory
    contracts_dir: str = DEFAULT_CONTRACTS_DIR

    def to_dict(self) -> Dict[str, Any]:
        """Config in config file form."""
        values = asdict(self)
        return {key: values[name] for key, name in CONFIG_KEYS.items()}

    def __str__(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class ProjectLayout:
    """Locations inside a Unity project."""

    root: Path

    @property
    def assets_dir(self) -> Path:
        return self.root / ASSETS_DIR_NAME

    @property
    def config_file(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    @property
    def project_settings_file(self) -> Path:
        return self.root / "ProjectSettings" / "ProjectSettings.asset"

    def output_path(self, config: Config) -> Path:
        return self.assets_dir / config.output_dir

    def contracts_path(self, config: Config) -> Path:
        return self.root / config.contracts_dir

    def product_name(self) -> str:
        """Product name from the project settings, else the folder name."""
        settings = self.project_settings_file
        if settings.is_file():
            text = settings.read_text(encoding="utf-8", errors="replace")
            match = re.search(r"^\s*productName:\s*(.*?)\s*$", text, re.MULTILINE)
            if match and match.group(1):
                return match.group(1).strip("'\"")
        return self.root.resolve().name


class ConfigResult:
    """Outcome of config resolution."""

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Config:
        """Return the config or raise the resolution error."""
        raise NotImplementedError


@dataclass(frozen=True)
class Ok(ConfigResult):
    """Every setting is valid and `dotnet` was found."""

    config: Config

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Config:
        return self.config


@dataclass(frozen=True)
class Unconfigured(ConfigResult):
    """Settings are valid but `dotnet` wasn't found; generation is skipped."""

    config: Config
    reason: str

    def unwrap(self) -> Config:
        return self.config


@dataclass(frozen=True)
class Invalid(ConfigResult):
    """A configured value failed validation."""

    error: InvalidConfigurationError

    def unwrap(self) -> Config:
        raise self.error


def is_absolute_path(value: str) -> bool:
    """True for absolute or rooted paths on any platform."""
    return PurePosixPath(value).is_absolute() or bool(PureWindowsPath(value).anchor)


def default_namespace_prefix(application_name: str) -> str:
    """Namespace used when none is configured."""
    return f"{sanitize_namespace(application_name)}.{DEFAULT_NAME}"


def validate_values(values: Mapping[str, Any]):
    """
    Validate config values keyed by Config field name.

    Checks run in order: dotnet path, namespace prefix, output dir,
    contracts dir. Unset (None) values are skipped.

    Raises:
        InvalidConfigurationError: On the first invalid value
    """
    dotnet_path = values.get("dotnet_path")
    if dotnet_path is not None and not Path(dotnet_path).is_file():
        raise InvalidConfigurationError(
            "`dotnet` executable doesn't exist at given path.",
            "dotnetPath",
            dotnet_path,
        )

    namespace_prefix = values.get("namespace_prefix")
    if namespace_prefix is not None and not is_valid_namespace(namespace_prefix):
        raise InvalidConfigurationError(
            "Use proper C# namespace identifier, e.g. "
            f"{sanitize_namespace(namespace_prefix)!r}.",
            "namespacePrefix",
            namespace_prefix,
        )

    _validate_relative(
        values.get("output_dir"),
        "outputDir",
        "Use relative path to Unity `Assets/` directory instead.",
    )
    _validate_relative(
        values.get("contracts_dir"),
        "contractsDir",
        "Use relative path to Unity project directory instead.",
    )


def _validate_relative(value: Optional[str], key: str, hint: str):
    if value is None:
        return
    if is_absolute_path(value):
        raise InvalidConfigurationError(
            f"Using absolute path is not supported. {hint}", key, value
        )
    normalized = posixpath.normpath(value.replace("\\", "/"))
    if normalized in (".", "..") or normalized.startswith("../"):
        raise InvalidConfigurationError(
            f"Path must name a directory below its base. {hint}", key, value
        )


def validate_config(config: Config):
    """Check the invariants of an already built Config."""
    validate_values(asdict(config))


class ConfigResolver:
    """Builds a validated Config from overrides, a config file and defaults."""

    def __init__(self, application_name: str = "", locator: ExecutableLocator = None):
        """
        Initialize config resolver.

        Args:
            application_name: Display name the default namespace is derived from
            locator: Strategy used to find `dotnet` when it isn't configured
        """
        self.application_name = application_name
        self.locator = locator

    def resolve(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> ConfigResult:
        """
        Resolve configuration.

        Args:
            overrides: Explicit values keyed by Config field name
            config_file: Optional JSON config file; its values win over overrides

        Returns:
            Ok, Unconfigured or Invalid

        Raises:
            ShellDiscoveryError: If `dotnet` discovery can't determine the login shell
        """
        try:
            values = self._collect_values(overrides, config_file)
            validate_values(values)
        except InvalidConfigurationError as e:
            logger.error("%s", e)
            return Invalid(e)

        dotnet_path = values.get("dotnet_path")
        if dotnet_path is None:
            dotnet_path = self._discover_dotnet()

        config = Config(
            dotnet_path=dotnet_path,
            namespace_prefix=values.get("namespace_prefix")
            or default_namespace_prefix(self.application_name),
            output_dir=values.get("output_dir") or DEFAULT_NAME,
            contracts_dir=values.get("contracts_dir") or DEFAULT_CONTRACTS_DIR,
        )

        if dotnet_path is None:
            reason = "`dotnet` executable not found, contract code generation will not work."
            logger.warning(reason)
            return Unconfigured(config, reason)

        logger.debug("Resolved config: %s", config)
        return Ok(config)

    def _collect_values(self, overrides, config_file) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        known_fields = set(CONFIG_KEYS.values())

        for name, value in (overrides or {}).items():
            if name not in known_fields:
                logger.warning("Ignoring unknown config override %s", name)
                continue
            if value is not None:
                values[name] = value

        if config_file is not None and Path(config_file).is_file():
            values.update(self._load_config_file(Path(config_file)))

        return values

    def _load_config_file(self, path: Path) -> Dict[str, Any]:
        """Load recognized keys from a JSON config file."""
        try:
            data = load_json_object(path)
        except JSONLoaderError as e:
            raise InvalidConfigurationError(str(e), field=e.position) from e

        values = {}
        for key, value in data.items():
            name = CONFIG_KEYS.get(key)
            if name is None:
                logger.warning("Invalid config property %s in %s. Unknown config key.",
                               key, path.name)
                continue
            if value is None:
                continue
            if not isinstance(value, str):
                raise InvalidConfigurationError("Value must be a string.", key, value)
            values[name] = value

        logger.info("Loaded %d setting(s) from %s", len(values), path)
        return values

    def _discover_dotnet(self) -> Optional[str]:
        locator = self.locator or create_dotnet_locator()
        found = locator.locate()
        if found:
            logger.info("Found dotnet at %s", found)
        return found


def resolve_project_config(
    project_root: Union[str, Path],
    overrides: Optional[Mapping[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
    application_name: Optional[str] = None,
    locator: ExecutableLocator = None,
) -> ConfigResult:
    """
    Resolve the config of a Unity project.

    Args:
        project_root: Unity project directory (parent of Assets/)
        overrides: Explicit values keyed by Config field name
        config_file: Config file path (default: codegen.config.json in the project)
        application_name: Name for the default namespace (default: product name)
        locator: `dotnet` discovery strategy

    Returns:
        Ok, Unconfigured or Invalid
    """
    layout = ProjectLayout(Path(project_root))
    resolver = ConfigResolver(
        application_name if application_name is not None else layout.product_name(),
        locator,
    )
    return resolver.resolve(overrides, config_file or layout.config_file)


def resolve_config(
    project_root: Union[str, Path],
    overrides: Optional[Mapping[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
    application_name: Optional[str] = None,
    locator: ExecutableLocator = None,
) -> Config:
    """
    Convenience function returning the config or raising.

    Unconfigured results are returned as a Config whose dotnet_path is None.

    Raises:
        InvalidConfigurationError: If a configured value is invalid
    """
    return resolve_project_config(
        project_root, overrides, config_file, application_name, locator
    ).unwrap()
