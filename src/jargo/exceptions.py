from pathlib import Path
from collections.abc import Sequence


class BuildError(Exception):
    pass


class ToolchainMissingError(BuildError):
    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(
            f"{tool} not found in PATH. Please install a JDK and make sure "
            f"'{tool}' is on your PATH."
        )


class CompilationFailedError(BuildError):
    def __init__(self, diagnostics: Sequence[str] = ()) -> None:
        self.diagnostics = tuple(diagnostics)
        super().__init__("javac compilation failed")


class NoSourceFilesError(BuildError):
    def __init__(self, src_dir: Path) -> None:
        self.src_dir = src_dir
        super().__init__(f"no source files found in {src_dir}")


class FilesystemError(BuildError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class InvalidPackageError(BuildError):
    pass


class ManifestError(BuildError):
    pass


class NotAnAppError(BuildError):
    def __init__(self) -> None:
        super().__init__('`jargo run` requires an app project (type = "app")')


class InvalidNameError(BuildError):
    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"invalid project name `{name}`: {reason}")


class ProjectExistsError(BuildError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"destination `{path}` already exists")


class AlreadyInitializedError(BuildError):
    def __init__(self) -> None:
        super().__init__("`Jargo.toml` already exists in this directory")


class InvalidArchiveError(BuildError):
    pass
