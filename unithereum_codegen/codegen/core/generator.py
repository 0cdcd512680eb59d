"""
Generator invocation.

Runs the external Nethereum generator through `dotnet tool`: restore the
tool manifest, write the support files next to the generated code, run
the generator, then hand the output directory to the host for import.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from .config import Config, ProjectLayout
from .errors import CodeGenError, GenerationError, GenerationStage
from .process import DEFAULT_TIMEOUT, ProcessResult, ProcessRunner, SubprocessRunner
from .templates import render_assembly_definition, render_compiler_response
from ...logging_config import get_logger

logger = get_logger(__name__)

GENERATOR_TOOL_NAME = "Nethereum.Generator.Console"

# Package directory holding .config/dotnet-tools.json
TOOL_DIRECTORY = Path(__file__).resolve().parents[2]

ASMDEF_SUFFIX = ".asmdef"
CSC_RSP_FILE = "csc.rsp"


class InvocationState(Enum):
    """Progress of a single generation run."""

    IDLE = "idle"
    SKIPPED = "skipped"
    RESTORING = "restoring"
    RESTORE_FAILED = "restore_failed"
    GENERATING = "generating"
    GENERATE_FAILED = "generate_failed"
    IMPORTED = "imported"


@dataclass
class GenerationResult:
    """Outcome of a generation run that didn't fail."""

    abi_path: str
    bin_path: Optional[str] = None
    state: InvocationState = InvocationState.IDLE
    output_dir: Optional[Path] = None
    steps: List[ProcessResult] = field(default_factory=list)
    created_files: List[Path] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.state == InvocationState.SKIPPED


def _log_import(output_dir: Path):
    logger.info("Generated code ready for import: %s", output_dir)


def build_restore_command(dotnet_path: str) -> List[str]:
    """Command restoring the local dotnet tool manifest."""
    return [dotnet_path, "tool", "restore"]


def build_generate_command(
    dotnet_path: str,
    output_dir: Union[str, Path],
    namespace: str,
    abi_path: Union[str, Path],
    bin_path: Optional[Union[str, Path]] = None,
) -> List[str]:
    """Command running the generator for one contract."""
    args = [
        dotnet_path,
        "tool",
        "run",
        GENERATOR_TOOL_NAME,
        "--",
        "generate",
        "from-abi",
        "-o",
        str(output_dir),
        "-ns",
        namespace,
        "-abi",
        str(abi_path),
    ]
    if bin_path is not None:
        args.extend(["-bin", str(bin_path)])
    return args


def write_if_absent(path: Path, content: str) -> bool:
    """
    Create a file unless it already exists.

    Returns:
        True if this call created the file
    """
    try:
        with path.open("x", encoding="utf-8") as f:
            f.write(content)
    except FileExistsError:
        return False
    return True


def ensure_support_files(output_dir: Path, namespace: str) -> List[Path]:
    """
    Create the output directory, its assembly definition and csc.rsp.

    Existing files are never overwritten.

    Returns:
        Files created by this call
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    created = []
    asmdef = output_dir / f"{namespace}{ASMDEF_SUFFIX}"
    if write_if_absent(asmdef, render_assembly_definition(namespace)):
        created.append(asmdef)

    # Suppress warnings in generated code
    rsp = output_dir / CSC_RSP_FILE
    if write_if_absent(rsp, render_compiler_response()):
        created.append(rsp)

    for path in created:
        logger.debug("Created %s", path)
    return created


class GeneratorInvoker:
    """Runs the external generator for one project config."""

    def __init__(
        self,
        config: Config,
        layout: ProjectLayout,
        runner: ProcessRunner = None,
        tool_dir: Optional[Path] = None,
        on_imported: Callable[[Path], None] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        """
        Initialize generator invoker.

        Args:
            config: Resolved configuration
            layout: Project the code is generated into
            runner: Process runner (real subprocesses by default)
            tool_dir: Directory holding the dotnet tool manifest
            on_imported: Host callback to import the output directory recursively
            timeout: Seconds allowed per external step (None waits forever)
        """
        self.config = config
        self.layout = layout
        self.runner = runner or SubprocessRunner()
        self.tool_dir = tool_dir or TOOL_DIRECTORY
        self.on_imported = on_imported or _log_import
        self.timeout = timeout
        self.state = InvocationState.IDLE

    @property
    def output_dir(self) -> Path:
        return self.layout.output_path(self.config)

    def generate(
        self, abi_path: Union[str, Path], bin_path: Optional[Union[str, Path]] = None
    ) -> GenerationResult:
        """
        Generate contract services for an ABI file.

        Args:
            abi_path: Interface-description file
            bin_path: Optional bytecode file of the same contract

        Returns:
            GenerationResult; skipped when `dotnet` isn't configured

        Raises:
            GenerationError: If restore or generation exits non-zero or times out,
                or the support files can't be written
        """
        result = GenerationResult(
            abi_path=str(abi_path),
            bin_path=str(bin_path) if bin_path is not None else None,
        )

        dotnet = self.config.dotnet_path
        if dotnet is None:
            # Warned once when the config was resolved
            self.state = result.state = InvocationState.SKIPPED
            return result

        self.state = InvocationState.RESTORING
        restore = self._run_step(
            GenerationStage.RESTORE, build_restore_command(dotnet)
        )
        result.steps.append(restore)

        self.state = InvocationState.GENERATING
        output_dir = self.output_dir.resolve()
        namespace = self.config.namespace_prefix
        result.output_dir = output_dir
        try:
            result.created_files = ensure_support_files(output_dir, namespace)
        except OSError as e:
            self.state = InvocationState.GENERATE_FAILED
            logger.error("Could not write support files in %s: %s", output_dir, e)
            raise GenerationError(GenerationStage.GENERATE, str(e)) from e

        logger.info("Generating %s into %s", Path(abi_path).name, output_dir)
        generate = self._run_step(
            GenerationStage.GENERATE,
            build_generate_command(
                dotnet,
                output_dir,
                namespace,
                Path(abi_path).resolve(),
                Path(bin_path).resolve() if bin_path is not None else None,
            ),
        )
        result.steps.append(generate)

        self.on_imported(output_dir)
        self.state = result.state = InvocationState.IMPORTED
        return result

    def _run_step(self, stage: GenerationStage, args: List[str]) -> ProcessResult:
        failed_state = (
            InvocationState.RESTORE_FAILED
            if stage == GenerationStage.RESTORE
            else InvocationState.GENERATE_FAILED
        )

        try:
            step = self.runner.run(args, cwd=self.tool_dir, timeout=self.timeout)
        except (OSError, CodeGenError) as e:
            self.state = failed_state
            raise GenerationError(stage, str(e)) from e

        if not step.ok:
            self.state = failed_state
            logger.error("%s step failed with exit code %d", stage.value, step.returncode)
            raise GenerationError(stage, step.stderr, step.returncode)

        return step
