"""Logic for scaffolding new Jargo projects."""

from pathlib import Path
import shutil
import subprocess

import jinja2
from pyvider.telemetry import logger

from ..exceptions import (
    AlreadyInitializedError,
    InvalidNameError,
    ProjectExistsError,
)
from ..manifest import derive_base_package
from ..models import (
    DEFAULT_JAVA_VERSION,
    DEFAULT_PROJECT_VERSION,
    MANIFEST_FILE_NAME,
    SOURCE_DIR_NAME,
    ProjectKind,
)

_TEMPLATE_DIR = Path(__file__).parent / "templates"


def _get_template_env() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def validate_name(name: str) -> None:
    """Names start with a letter and hold only lowercase letters, digits and hyphens."""
    if not name:
        raise InvalidNameError(name, "name cannot be empty")
    if not (name[0].isascii() and name[0].isalpha()):
        raise InvalidNameError(name, "must start with a letter")
    if not all(c in "abcdefghijklmnopqrstuvwxyz0123456789-" for c in name):
        raise InvalidNameError(
            name, "must contain only lowercase letters, digits, and hyphens"
        )
    if name.endswith("-"):
        raise InvalidNameError(name, "must not end with a hyphen")


def scaffold_project(project_dir: Path, name: str, lib: bool = False) -> None:
    """Writes the manifest, starter sources and .gitignore into `project_dir`."""
    src_dir = project_dir / SOURCE_DIR_NAME
    test_dir = project_dir / "test"
    for existing in (src_dir, test_dir):
        if existing.exists():
            raise ProjectExistsError(existing)

    base_package = derive_base_package(name)
    kind = ProjectKind.LIB if lib else ProjectKind.APP
    context = {
        "name": name,
        "version": DEFAULT_PROJECT_VERSION,
        "kind": kind.value,
        "java_version": DEFAULT_JAVA_VERSION,
        "base_package": base_package,
        "lib": lib,
    }

    env = _get_template_env()
    (project_dir / MANIFEST_FILE_NAME).write_text(
        env.get_template("Jargo.toml.j2").render(context)
    )

    src_dir.mkdir()
    test_dir.mkdir()

    stem = "Lib" if lib else "Main"
    (src_dir / f"{stem}.java").write_text(
        env.get_template(f"{stem}.java.j2").render(context)
    )
    (test_dir / f"{stem}Test.java").write_text(
        env.get_template(f"{stem}Test.java.j2").render(context)
    )
    (project_dir / ".gitignore").write_text(env.get_template("gitignore.j2").render())


def scaffold_new_project(name: str, path: str = ".", lib: bool = False) -> Path:
    """Creates a new project directory named `name` under `path`."""
    validate_name(name)
    project_dir = Path(path).resolve() / name
    if project_dir.exists():
        raise ProjectExistsError(project_dir)

    project_dir.mkdir(parents=True)
    scaffold_project(project_dir, name, lib)

    if shutil.which("git"):
        result = subprocess.run(
            ["git", "init"], cwd=project_dir, capture_output=True, text=True, check=False
        )
        if result.returncode != 0:
            logger.debug("git init failed", stderr=result.stderr.strip())
    return project_dir


def scaffold_init(project_dir: Path, lib: bool = False) -> str:
    """Turns an existing directory into a project named after it."""
    project_dir = project_dir.resolve()
    if (project_dir / MANIFEST_FILE_NAME).exists():
        raise AlreadyInitializedError()

    name = project_dir.name
    validate_name(name)
    scaffold_project(project_dir, name, lib)
    return name
