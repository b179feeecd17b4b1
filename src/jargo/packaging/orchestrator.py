"""Core logic for compiling a project and packaging it into a JAR."""

from collections.abc import Callable, Sequence
from pathlib import Path
import shutil
import subprocess

import attrs
from pyvider.telemetry import logger

from ..compiler import compile_sources, discover_sources, ensure_tool
from ..diagnostics import translate_diagnostics
from ..exceptions import (
    CompilationFailedError,
    FilesystemError,
    NotAnAppError,
    ToolchainMissingError,
)
from ..models import OUTPUT_DIR_NAME, BuildConfiguration, CompileResult
from ..staging import VirtualMount, build_staging
from .archive import assemble_archive
from .resources import copy_resources

JAVA = "java"


class BuildOrchestrator:
    """Runs the staging, compile and packaging stages for one project."""

    def __init__(
        self, config: BuildConfiguration, mount: VirtualMount | None = None
    ) -> None:
        self.config = config
        self.mount = mount

    def compile_project(self) -> CompileResult:
        config = self.config
        logger.info(f"Compiling {config.name} (java {config.java_version})")
        if config.classpath:
            logger.debug(
                "Classpath entries are not passed to javac",
                entries=[str(p) for p in config.classpath],
            )

        if config.classes_dir.exists():
            try:
                shutil.rmtree(config.classes_dir)
            except OSError as e:
                raise FilesystemError(config.classes_dir, "failed to clear") from e

        staged_root = build_staging(config.project_root, config.base_package, self.mount)
        sources = discover_sources(config.source_dir)
        result = compile_sources(
            config.project_root,
            staged_root,
            config.classes_dir,
            config.java_version,
            sources,
        )

        if not result.success:
            return attrs.evolve(
                result,
                diagnostics=translate_diagnostics(
                    result.diagnostics, config.base_package
                ),
            )

        copy_resources(config.resources_dir, config.classes_dir)
        return result

    def build_package(self) -> Path:
        logger.info("Orchestrator starting build process...")
        result = self.compile_project()
        if not result.success:
            raise CompilationFailedError(result.diagnostics)
        return assemble_archive(self.config)

    def run_application(
        self,
        args: Sequence[str] = (),
        on_compiled: Callable[[], None] | None = None,
    ) -> int:
        """
        Compiles the project and launches its main class, returning the exit
        status. `on_compiled` is called once compilation has succeeded.
        """
        config = self.config
        if not config.is_app:
            raise NotAnAppError()

        result = self.compile_project()
        if not result.success:
            raise CompilationFailedError(result.diagnostics)
        if on_compiled is not None:
            on_compiled()

        command = [
            ensure_tool(JAVA),
            "-cp",
            str(config.classes_dir),
            *config.jvm_args,
            config.main_class_fqn,
            *args,
        ]
        logger.info(f"Running command: {' '.join(command)}")
        try:
            completed = subprocess.run(command, cwd=config.project_root, check=False)
        except FileNotFoundError as e:
            raise ToolchainMissingError(JAVA) from e
        return completed.returncode


def clean_project(project_root: Path) -> bool:
    """Removes the output directory. Returns False if there was nothing to remove."""
    output_dir = project_root / OUTPUT_DIR_NAME
    if not output_dir.exists():
        return False
    try:
        shutil.rmtree(output_dir)
    except OSError as e:
        raise FilesystemError(output_dir, "failed to remove") from e
    logger.info(f"Removed {output_dir}")
    return True
