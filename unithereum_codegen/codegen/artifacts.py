"""
Contract artifact discovery.

Pairs `.abi` files with their optional `.bin` siblings, reacts to changed
files and regenerates everything under the contracts directory.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from .core.generator import GenerationResult, GeneratorInvoker
from ..logging_config import get_logger

logger = get_logger(__name__)

ABI_EXTENSION = ".abi"
BIN_EXTENSION = ".bin"


@dataclass(frozen=True)
class ArtifactPair:
    """An ABI file and its optional bytecode sibling."""

    abi_path: Path
    bin_path: Optional[Path] = None


def _has_extension(path: Path, extension: str) -> bool:
    return path.suffix.lower() == extension


def _sibling(path: Path, extension: str) -> Optional[Path]:
    """Existing file next to `path` with another extension."""
    for candidate in (path.with_suffix(extension), path.with_suffix(extension.upper())):
        if candidate.is_file():
            return candidate
    return None


def pair_for_changed_path(path: Union[str, Path]) -> Optional[ArtifactPair]:
    """
    Work out what to generate when a file changes.

    A changed `.abi` is generated with its `.bin` sibling if there is one;
    a changed `.bin` only counts when its `.abi` sibling exists.

    Returns:
        ArtifactPair or None if nothing should be generated
    """
    path = Path(path)
    if _has_extension(path, ABI_EXTENSION):
        return ArtifactPair(path, _sibling(path, BIN_EXTENSION))
    if _has_extension(path, BIN_EXTENSION):
        abi = _sibling(path, ABI_EXTENSION)
        if abi is not None:
            return ArtifactPair(abi, path)
    return None


def find_artifact_pairs(root: Union[str, Path]) -> Iterator[ArtifactPair]:
    """Yield a pair for every `.abi` file below a directory, in path order."""
    root = Path(root)
    if not root.is_dir():
        logger.warning("Contracts directory does not exist: %s", root)
        return

    for abi in sorted(p for p in root.rglob("*") if p.is_file() and _has_extension(p, ABI_EXTENSION)):
        yield ArtifactPair(abi, _sibling(abi, BIN_EXTENSION))


def handle_changed_asset(
    invoker: GeneratorInvoker, path: Union[str, Path]
) -> Optional[GenerationResult]:
    """Generate code for a changed asset if it's a contract artifact."""
    pair = pair_for_changed_path(path)
    if pair is None:
        logger.debug("Ignoring non-contract asset %s", path)
        return None
    return invoker.generate(pair.abi_path, pair.bin_path)


def regenerate_all(
    invoker: GeneratorInvoker,
    contracts_root: Union[str, Path],
    on_progress: Callable[[ArtifactPair], None] = None,
) -> List[GenerationResult]:
    """
    Delete the output directory and generate every contract again.

    Stops at the first GenerationError. Without a `dotnet` executable nothing
    is deleted and nothing is generated.

    Args:
        invoker: Generator bound to the project config
        contracts_root: Directory searched for `.abi` files
        on_progress: Called before each pair is generated

    Returns:
        Results in generation order
    """
    if invoker.config.dotnet_path is None:
        logger.warning("Not regenerating contracts: `dotnet` executable not found")
        return []

    output_dir = invoker.output_dir
    if output_dir.exists():
        logger.info("Deleting %s", output_dir)
        shutil.rmtree(output_dir)

    results = []
    for pair in find_artifact_pairs(contracts_root):
        if on_progress:
            on_progress(pair)
        results.append(invoker.generate(pair.abi_path, pair.bin_path))

    logger.info("Regenerated %d contract(s)", len(results))
    return results
