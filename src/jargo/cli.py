"""The `jargo` command-line interface."""

import importlib.metadata
from pathlib import Path
import sys

import click

from .exceptions import BuildError, CompilationFailedError
from .manifest import load_manifest
from .models import MANIFEST_FILE_NAME
from .packaging.orchestrator import BuildOrchestrator, clean_project
from .packaging.reader import ArchiveReader
from .scaffolding.generator import scaffold_init, scaffold_new_project

try:
    __version__ = importlib.metadata.version("jargo")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"

manifest_option = click.option(
    "--manifest",
    "manifest_path",
    default=MANIFEST_FILE_NAME,
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Path to the Jargo.toml manifest file.",
)


def _report_compile_failure(e: CompilationFailedError) -> None:
    for line in e.diagnostics:
        click.echo(line, err=True)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(
    __version__,
    "-V",
    "--version",
    prog_name="jargo",
    message="%(prog)s version %(version)s",
)
def cli() -> None:
    """A Cargo-inspired build tool for Java."""
    pass


@cli.command("new")
@click.argument("name")
@click.option("--lib", is_flag=True, help="Create a library project instead of an application.")
@click.option(
    "--path",
    default=".",
    type=click.Path(file_okay=False, resolve_path=True),
    help="Directory in which to create the project.",
)
def new_command(name: str, lib: bool, path: str) -> None:
    """Creates a new Jargo project."""
    try:
        scaffold_new_project(name, path, lib=lib)
    except BuildError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        raise click.Abort() from e
    kind = "lib" if lib else "app"
    click.secho(f"✅ Created {kind} `{name}` package", fg="green")


@cli.command("init")
@click.option("--lib", is_flag=True, help="Create a library project instead of an application.")
def init_command(lib: bool) -> None:
    """Initializes a Jargo project in the current directory."""
    try:
        name = scaffold_init(Path.cwd(), lib=lib)
    except BuildError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        raise click.Abort() from e
    kind = "lib" if lib else "app"
    click.secho(f"✅ Created {kind} `{name}` package", fg="green")


@cli.command("build")
@manifest_option
def build_command(manifest_path: str) -> None:
    """Compiles the project and assembles a JAR."""
    try:
        config = load_manifest(Path(manifest_path))
        click.echo(
            f"🚀 Compiling {config.name} v{config.version} (java {config.java_version})"
        )
        jar_path = BuildOrchestrator(config).build_package()
    except CompilationFailedError as e:
        _report_compile_failure(e)
        click.secho(f"❌ Build Failed: {e}", fg="red", err=True)
        raise click.Abort() from e
    except BuildError as e:
        click.secho(f"❌ Build Failed:\n{e}", fg="red", err=True)
        raise click.Abort() from e

    try:
        shown = jar_path.relative_to(config.project_root)
    except ValueError:
        shown = jar_path
    click.secho(f"✅ Finished JAR at {shown.as_posix()}", fg="green")


@cli.command(
    "run",
    context_settings=dict(ignore_unknown_options=True, allow_interspersed_args=False),
)
@manifest_option
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def run_command(manifest_path: str, args: tuple[str, ...]) -> None:
    """Compiles and runs the project (app only)."""
    try:
        config = load_manifest(Path(manifest_path))
        click.echo(
            f"🚀 Compiling {config.name} v{config.version} (java {config.java_version})"
        )
        orchestrator = BuildOrchestrator(config)
        returncode = orchestrator.run_application(
            args, on_compiled=lambda: click.echo(f"▶️  Running {config.name}")
        )
    except CompilationFailedError as e:
        _report_compile_failure(e)
        click.secho(f"❌ Run Failed: {e}", fg="red", err=True)
        raise click.Abort() from e
    except BuildError as e:
        click.secho(f"❌ Run Failed:\n{e}", fg="red", err=True)
        raise click.Abort() from e

    if returncode != 0:
        sys.exit(returncode)


@cli.command("clean")
def clean_command() -> None:
    """Removes the output directory."""
    try:
        removed = clean_project(Path.cwd())
    except BuildError as e:
        click.secho(f"❌ Clean Failed:\n{e}", fg="red", err=True)
        raise click.Abort() from e
    if removed:
        click.secho("✅ Removed output directory", fg="green")
    else:
        click.secho("ℹ️  Nothing to clean", fg="yellow")


@cli.command("inspect")
@click.argument(
    "jar_file",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    default=None,
    required=False,
)
def inspect_command(jar_file: str | None) -> None:
    """Shows the manifest and entries of a built JAR."""
    if jar_file is None:
        manifest_path = Path(MANIFEST_FILE_NAME)
        if not manifest_path.exists():
            raise click.UsageError(
                "Cannot find Jargo.toml to determine the JAR path. Please provide the JAR file directly."
            )
        try:
            jar_path = load_manifest(manifest_path).archive_path
        except BuildError as e:
            raise click.UsageError(str(e)) from e
    else:
        jar_path = Path(jar_file)

    click.echo(f"🔍 Inspecting '{jar_path}'...")
    try:
        reader = ArchiveReader(jar_path)
        click.echo(reader.get_info())
    except (BuildError, FileNotFoundError) as e:
        click.secho(f"❌ Inspection failed: {e}", fg="red", err=True)
        raise click.Abort() from e


main = cli
