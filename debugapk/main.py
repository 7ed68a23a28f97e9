"""CLI entry point for debugapk."""

from __future__ import annotations

from pathlib import Path
import sys

import click
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.markup import escape

from debugapk.console import console
from debugapk.errors import (
    EnvironmentCheckError,
    InputNotFoundError,
    StageError,
)

load_dotenv()


@click.command()
@click.version_option(version="0.1.0", prog_name="debugapk")
@click.argument("apk_file", type=click.Path(dir_okay=False))
@click.argument("mode", type=click.Choice(["debug"]), required=False)
def cli(apk_file: str, mode: str | None) -> None:
    """Make APK_FILE debuggable and re-sign it with a throwaway key.

    The result is written next to the input as <name>.debug.apk. Pass
    "debug" as second argument to print tool output when a step fails.
    """
    from debugapk.android.environment import resolve_environment
    from debugapk.android.pipeline import build_debug_apk
    from debugapk.config import PipelineConfig

    debug = mode == "debug"

    def on_progress(msg: str) -> None:
        console.print(f"[bold]{escape(msg)}[/bold]")

    try:
        config = resolve_environment(PipelineConfig.from_env(), on_progress=on_progress)
        result = build_debug_apk(
            Path(apk_file), config, debug=debug, on_progress=on_progress
        )
    except InputNotFoundError as e:
        # Not fatal: exits 0 on purpose, see DESIGN.md
        console.print(f"[yellow]{escape(str(e))}[/yellow]")
        return
    except (EnvironmentCheckError, ValidationError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    except StageError as e:
        console.print(f"[red]{e.stage.label} stage failed:[/red] {escape(str(e.cause))}")
        if debug:
            _print_captured(e)
        sys.exit(1)

    for line in result.verification:
        console.print(line, markup=False, highlight=False)

    console.print()
    console.print("======")
    console.print("[green]Success![/green]")
    console.print("======")
    console.print("(deleting temporary directory...)")
    console.print(f"Your debug APK: {escape(str(result.output_path))}")


def _print_captured(error: StageError) -> None:
    """Show what the failing tool wrote, when it was kept."""
    if error.stdout is None and error.stderr is None:
        return
    console.print("Command output:", markup=False)
    console.print(error.stdout or "", markup=False, highlight=False)
    console.print("Command error:", markup=False)
    console.print(error.stderr or "", markup=False, highlight=False)


if __name__ == "__main__":
    cli()
