"""
Project Compilation CLI

Creates, shows and compiles LaTeX projects configured by compiler.toml.

Commands:
    init    - Write compiler.toml into an existing project directory
    compile - Compile the project in the current (or given) directory
    show    - Print the project's compiler configuration

Examples:\n

    texcreate init thesis                               # Default configuration

    texcreate init thesis -f -interaction=nonstopmode   # With an extra compiler flag

    cd thesis && texcreate compile                      # Compile using ./compiler.toml

    texcreate compile --project-dir thesis --timeout 60
"""

from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from texcreate.contexts.rendering import CompilerConfig, CompilerMode, TexCreateError
from texcreate.contexts.rendering.logger import _log_debug, setup_rendering_logger
from texcreate.utils.settings import DEFAULT_COMPILER, LOGS_PATH
from texcreate.utils.timestamp import now

app = typer.Typer(
    help="Configure and compile LaTeX projects",
    add_completion=False,
    invoke_without_command=True,
)


def _fail(error: Exception) -> None:
    typer.secho(f"Error: {error}\n", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("init")
def init_command(
    project_name: Annotated[
        str,
        typer.Argument(help="Project name (an existing directory under --root)"),
    ],
    compiler: Annotated[
        str,
        typer.Option("--compiler", "-c", help="LaTeX compiler executable"),
    ] = DEFAULT_COMPILER,
    flags: Annotated[
        Optional[List[str]],
        typer.Option("--flag", "-f", help="Extra compiler argument (repeatable)"),
    ] = None,
    no_clean: Annotated[
        bool,
        typer.Option("--no-clean", help="Keep .aux and .log files after compiling"),
    ] = False,
    mode: Annotated[
        CompilerMode,
        typer.Option("--mode", "-m", help="Spawn shows compiler output, Output hides it"),
    ] = CompilerMode.OUTPUT,
    root: Annotated[
        Path,
        typer.Option("--root", help="Directory containing the project directory"),
    ] = Path("."),
):
    """
    Write compiler.toml for a project.

    Examples:\n

        $ texcreate init thesis

        $ texcreate init thesis --compiler xelatex --mode Spawn
    """
    config = CompilerConfig.new(project_name)
    config.compiler = compiler
    config.flags = list(flags or [])
    config.clean = not no_clean
    config.mode = mode

    try:
        path = config.persist(root)
    except TexCreateError as e:
        _fail(e)

    typer.secho(f"✓ Wrote {path}", fg=typer.colors.GREEN, bold=True)


@app.command("compile")
def compile_command(
    project_dir: Annotated[
        Path,
        typer.Option("--project-dir", "-d", help="Project directory containing compiler.toml"),
    ] = Path("."),
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", help="Kill the compiler after this many seconds", min=0),
    ] = None,
    tolerate_missing: Annotated[
        bool,
        typer.Option(
            "--tolerate-missing",
            help="Do not fail when the compiler produced no .aux or .log file",
        ),
    ] = False,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Session log directory (default: timestamped under logs path)"),
    ] = None,
):
    """
    Compile the project described by compiler.toml.

    Examples:\n

        $ texcreate compile

        $ texcreate compile --project-dir thesis --tolerate-missing
    """
    setup_rendering_logger(log_dir or LOGS_PATH / f"compile_{now()}")

    try:
        config = CompilerConfig.load(project_dir)
    except TexCreateError as e:
        _fail(e)

    _log_debug(f"LaTeX compiler: {config.compiler}")

    typer.secho(f"\nCompiling: {config.project_name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Compiler: {config.compiler}")
    typer.echo("")

    try:
        config.compile(
            project_dir=project_dir, timeout=timeout, missing_artifacts_ok=tolerate_missing
        )
    except TexCreateError as e:
        _fail(e)


@app.command("show")
def show_command(
    project_dir: Annotated[
        Path,
        typer.Option("--project-dir", "-d", help="Project directory containing compiler.toml"),
    ] = Path("."),
):
    """Print the compiler configuration."""
    try:
        config = CompilerConfig.load(project_dir)
    except TexCreateError as e:
        _fail(e)

    typer.echo(config.serialize().rstrip())


if __name__ == "__main__":
    app()
