"""
Drives `javac` over a project's sources against the staged package root.
"""

from collections.abc import Sequence
import os
from pathlib import Path
import shutil
import subprocess

from pyvider.telemetry import logger

from .exceptions import FilesystemError, NoSourceFilesError, ToolchainMissingError
from .models import (
    JAVAC_ARGS_FILE_NAME,
    SOURCE_DIR_NAME,
    SOURCE_SUFFIX,
    CompileResult,
)

JAVAC = "javac"


def ensure_tool(tool_name: str) -> str:
    """Returns the resolved path of a JDK executable found on PATH."""
    tool_path = shutil.which(tool_name)
    if not tool_path:
        raise ToolchainMissingError(tool_name)
    return tool_path


def discover_sources(src_dir: Path) -> tuple[Path, ...]:
    """Every `.java` file below `src_dir`, in lexicographic order.

    A missing directory is not an error here; callers report the empty
    result.
    """
    if not src_dir.is_dir():
        return ()

    def _raise(error: OSError) -> None:
        raise error

    found: list[Path] = []
    try:
        for dir_path, _, file_names in os.walk(src_dir, onerror=_raise):
            for file_name in file_names:
                path = Path(dir_path) / file_name
                if path.suffix == SOURCE_SUFFIX and path.is_file():
                    found.append(path)
    except OSError as e:
        raise FilesystemError(src_dir, "failed to read directory") from e

    return tuple(sorted(found, key=lambda p: p.relative_to(src_dir).as_posix()))


def _quote_arg(arg: str) -> str:
    """Quotes an argument for a javac @argfile when it needs it."""
    if arg and not any(c.isspace() or c in "\"'\\#" for c in arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def javac_arguments(
    staged_root: Path,
    classes_dir: Path,
    java_version: str,
    sources: Sequence[Path],
) -> list[str]:
    args = [
        "--release",
        java_version,
        "-d",
        str(classes_dir),
        "-sourcepath",
        str(staged_root),
    ]
    args.extend(str(source) for source in sources)
    return args


def write_javac_args(args_file: Path, args: Sequence[str]) -> None:
    content = "".join(f"{_quote_arg(arg)}\n" for arg in args)
    try:
        args_file.parent.mkdir(parents=True, exist_ok=True)
        args_file.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(args_file, "failed to write javac arguments") from e


def compile_sources(
    project_root: Path,
    staged_root: Path,
    classes_dir: Path,
    java_version: str,
    sources: Sequence[Path],
) -> CompileResult:
    """Runs javac once over `sources` and reports the raw outcome."""
    if not sources:
        raise NoSourceFilesError(project_root / SOURCE_DIR_NAME)

    javac = ensure_tool(JAVAC)

    try:
        classes_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(classes_dir, "failed to create") from e

    # Arguments go through a file to stay clear of command line length limits.
    args_file = staged_root.parent / JAVAC_ARGS_FILE_NAME
    write_javac_args(
        args_file, javac_arguments(staged_root, classes_dir, java_version, sources)
    )

    command = [javac, f"@{args_file}"]
    logger.info(f"Running command: {' '.join(command)}")
    try:
        result = subprocess.run(
            command,
            cwd=project_root,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except FileNotFoundError as e:
        raise ToolchainMissingError(JAVAC) from e

    if result.returncode == 0:
        if result.stderr:
            logger.debug("javac stderr", output=result.stderr.strip())
        return CompileResult(success=True)

    diagnostics = result.stderr.splitlines() or result.stdout.splitlines()
    if not diagnostics:
        diagnostics = [f"{JAVAC} exited with status {result.returncode}"]
    logger.debug(
        "javac failed", returncode=result.returncode, lines=len(diagnostics)
    )
    return CompileResult(success=False, diagnostics=diagnostics)
