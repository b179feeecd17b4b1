from enum import Enum
from pathlib import Path

from attrs import define, field

# Project layout, relative to the project root.
MANIFEST_FILE_NAME: str = "Jargo.toml"
SOURCE_DIR_NAME: str = "src"
RESOURCES_DIR_NAME: str = "resources"
OUTPUT_DIR_NAME: str = "output"
CLASSES_DIR_NAME: str = "classes"
STAGED_ROOT_DIR_NAME: str = "src-root"
JAVAC_ARGS_FILE_NAME: str = "javac-args.txt"

SOURCE_SUFFIX: str = ".java"
ARCHIVE_SUFFIX: str = ".jar"

# JAR manifest constants
MANIFEST_ENTRY_NAME: str = "META-INF/MANIFEST.MF"
MANIFEST_FORMAT_VERSION: str = "1.0"

DEFAULT_MAIN_CLASS: str = "Main"
DEFAULT_JAVA_VERSION: str = "21"
DEFAULT_PROJECT_VERSION: str = "0.1.0"


class ProjectKind(str, Enum):
    APP = "app"
    LIB = "lib"


class DependencyScope(str, Enum):
    COMPILE = "compile"
    RUNTIME = "runtime"


@define(frozen=True, slots=True)
class Dependency:
    group: str
    artifact: str
    version: str
    scope: DependencyScope = field(default=DependencyScope.COMPILE)
    # Only meaningful for lib projects.
    expose: bool = field(default=False)

    @property
    def coordinate(self) -> str:
        return f"{self.group}:{self.artifact}"


@define(frozen=True, slots=True)
class BuildConfiguration:
    project_root: Path
    name: str
    version: str
    base_package: str
    java_version: str
    kind: ProjectKind = field(default=ProjectKind.APP)
    main_class: str = field(default=DEFAULT_MAIN_CLASS)
    # Accepted but never forwarded to javac.
    classpath: tuple[Path, ...] = field(default=(), converter=tuple)
    jvm_args: tuple[str, ...] = field(default=(), converter=tuple)
    dependencies: tuple[Dependency, ...] = field(default=(), converter=tuple)
    dev_dependencies: tuple[Dependency, ...] = field(default=(), converter=tuple)

    @property
    def is_app(self) -> bool:
        return self.kind is ProjectKind.APP

    @property
    def main_class_fqn(self) -> str:
        return f"{self.base_package}.{self.main_class}"

    @property
    def source_dir(self) -> Path:
        return self.project_root / SOURCE_DIR_NAME

    @property
    def resources_dir(self) -> Path:
        return self.project_root / RESOURCES_DIR_NAME

    @property
    def output_dir(self) -> Path:
        return self.project_root / OUTPUT_DIR_NAME

    @property
    def classes_dir(self) -> Path:
        return self.output_dir / CLASSES_DIR_NAME

    @property
    def archive_path(self) -> Path:
        return self.output_dir / f"{self.name}{ARCHIVE_SUFFIX}"


@define(frozen=True, slots=True)
class CompileResult:
    success: bool
    diagnostics: tuple[str, ...] = field(default=(), converter=tuple)

    def __attrs_post_init__(self) -> None:
        if self.success and self.diagnostics:
            raise ValueError("A successful compilation carries no diagnostics.")
        if not self.success and not self.diagnostics:
            raise ValueError("A failed compilation must carry diagnostics.")
