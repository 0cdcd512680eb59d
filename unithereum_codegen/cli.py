"""
Command-line interface for contract service generation.

Wraps config resolution and the generator invoker with rich output.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm
from rich.table import Table

from . import __version__
from .codegen import (
    ArtifactPair,
    GenerationError,
    GeneratorInvoker,
    ProjectLayout,
    handle_changed_asset,
    pair_for_changed_path,
    regenerate_all,
    sanitize_namespace,
)
from .codegen.core import (
    CodeGenError,
    ConfigResult,
    Invalid,
    Unconfigured,
    resolve_project_config,
)
from .codegen.core.process import DEFAULT_TIMEOUT
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="unithereum-codegen",
        description="Generate Nethereum contract services from .abi files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  unithereum-codegen generate Assets/Contracts/Token.abi
  unithereum-codegen --project ../MyGame regenerate-all --yes
  unithereum-codegen config
  unithereum-codegen sanitize "My Game 2"
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project",
        "-p",
        default=".",
        help="Unity project directory (default: current directory)",
    )
    parser.add_argument(
        "--config", metavar="FILE", help="Config file (default: <project>/codegen.config.json)"
    )
    parser.add_argument(
        "--app-name",
        metavar="NAME",
        help="Application name for the default namespace (default: product name)",
    )
    parser.add_argument("--dotnet", metavar="PATH", help="Path to the dotnet executable")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Seconds allowed per dotnet step (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    generate = subparsers.add_parser("generate", help="Generate code for one contract")
    generate.add_argument("abi", help=".abi file (or .bin with an .abi sibling)")
    generate.add_argument("--bin", dest="bin_path", help="Bytecode file (default: .bin sibling)")
    generate.set_defaults(func=_handle_generate)

    changed = subparsers.add_parser(
        "changed", help="React to a changed file like the editor import hook"
    )
    changed.add_argument("paths", nargs="+", help="Changed file paths")
    changed.set_defaults(func=_handle_changed)

    regen = subparsers.add_parser(
        "regenerate-all", help="Delete generated code and regenerate every contract"
    )
    regen.add_argument("--yes", "-y", action="store_true", help="Don't ask for confirmation")
    regen.set_defaults(func=_handle_regenerate_all)

    config = subparsers.add_parser("config", help="Show the resolved configuration")
    config.set_defaults(func=_handle_config)

    sanitize = subparsers.add_parser("sanitize", help="Show the namespace for a name")
    sanitize.add_argument("text", help="Display name to convert")
    sanitize.set_defaults(func=_handle_sanitize)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_logging(level)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except GenerationError as e:
        console.print(f"[red]✗ Generation failed ({e.stage.value}):[/red] {e}")
        return 1
    except CodeGenError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        return 130


def _resolve(args: argparse.Namespace) -> ConfigResult:
    """Resolve config from CLI arguments."""
    project = Path(args.project)
    if not project.is_dir():
        raise CLIError(f"Project directory not found: {project}")

    overrides = {}
    if args.dotnet:
        overrides["dotnet_path"] = args.dotnet

    result = resolve_project_config(
        project,
        overrides,
        config_file=args.config,
        application_name=args.app_name,
    )
    if isinstance(result, Invalid):
        raise result.error
    return result


def _build_invoker(args: argparse.Namespace) -> GeneratorInvoker:
    result = _resolve(args)
    if isinstance(result, Unconfigured):
        console.print(f"[yellow]⚠️  {result.reason}[/yellow]")

    return GeneratorInvoker(
        result.config,
        ProjectLayout(Path(args.project).resolve()),
        timeout=args.timeout if args.timeout > 0 else None,
    )


def _handle_generate(args: argparse.Namespace) -> int:
    path = Path(args.abi)
    if not path.is_file():
        raise CLIError(f"File not found: {path}")

    pair = pair_for_changed_path(path)
    if pair is None:
        raise CLIError(f"Not a contract artifact (or missing .abi sibling): {path}")
    if args.bin_path:
        pair = ArtifactPair(pair.abi_path, Path(args.bin_path))

    invoker = _build_invoker(args)
    with _spinner(f"Generating {pair.abi_path.name}..."):
        result = invoker.generate(pair.abi_path, pair.bin_path)

    if result.skipped:
        console.print("[yellow]Skipped: dotnet is not available[/yellow]")
        return 1

    console.print(
        f"[green]✓[/green] Generated [cyan]{pair.abi_path.name}[/cyan] "
        f"into [cyan]{result.output_dir}[/cyan]"
    )
    return 0


def _handle_changed(args: argparse.Namespace) -> int:
    invoker = _build_invoker(args)
    generated = 0
    for path in args.paths:
        result = handle_changed_asset(invoker, path)
        if result is None:
            console.print(f"[dim]Ignored {path}[/dim]")
        elif not result.skipped:
            generated += 1
            console.print(f"[green]✓[/green] {result.abi_path}")

    console.print(f"\n📊 Generated {generated} contract(s)")
    return 0


def _handle_regenerate_all(args: argparse.Namespace) -> int:
    invoker = _build_invoker(args)
    layout = invoker.layout
    contracts_root = layout.contracts_path(invoker.config)

    if not args.yes and not Confirm.ask(
        f"Delete [cyan]{invoker.output_dir}[/cyan] and regenerate all contracts "
        f"under [cyan]{contracts_root}[/cyan]?",
        default=False,
        console=console,
    ):
        console.print("[yellow]Cancelled[/yellow]")
        return 1

    if invoker.config.dotnet_path is None:
        console.print("[yellow]Skipped: dotnet is not available[/yellow]")
        return 1

    def report(pair: ArtifactPair):
        console.print(f"  [cyan]•[/cyan] {pair.abi_path.relative_to(contracts_root)}")

    results = regenerate_all(invoker, contracts_root, on_progress=report)
    console.print(f"\n[green]✓[/green] Regenerated {len(results)} contract(s)")
    return 0


def _handle_config(args: argparse.Namespace) -> int:
    result = _resolve(args)
    config = result.config
    layout = ProjectLayout(Path(args.project).resolve())

    table = Table(
        title="⚙️  Codegen Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value", style="green")

    for key, value in config.to_dict().items():
        table.add_row(key, str(value) if value is not None else "[red]not found[/red]")
    table.add_row("[dim]output path[/dim]", str(layout.output_path(config)))
    table.add_row("[dim]contracts path[/dim]", str(layout.contracts_path(config)))

    console.print()
    console.print(table)

    if isinstance(result, Unconfigured):
        console.print(
            Panel(
                result.reason + "\nSet [bold]dotnetPath[/bold] in codegen.config.json "
                "or pass [bold]--dotnet[/bold].",
                title="⚠️  dotnet",
                border_style="yellow",
            )
        )
    return 0


def _handle_sanitize(args: argparse.Namespace) -> int:
    console.print(sanitize_namespace(args.text), markup=False, highlight=False)
    return 0


def _spinner(description: str) -> Progress:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )
    progress.add_task(f"[green]{description}", total=None)
    return progress
