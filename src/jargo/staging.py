"""
Builds the synthetic package root that javac resolves sources against.

Projects keep every source file in one flat `src/` directory regardless of
their base package, while javac expects `-sourcepath` to mirror the package
hierarchy. The staged root `output/src-root/com/example` is therefore made to
point back at `src/`, either through a relative directory symlink or, where
the host cannot create one, a full copy.
"""

import functools
import os
from pathlib import Path, PurePath
import shutil
import tempfile
from typing import Protocol

from pyvider.telemetry import logger

from .exceptions import FilesystemError, InvalidPackageError
from .models import OUTPUT_DIR_NAME, SOURCE_DIR_NAME, STAGED_ROOT_DIR_NAME


class VirtualMount(Protocol):
    """Presents `real_dir` at `virtual_path`.

    `real_dir` may be relative, in which case it is interpreted relative to
    the parent directory of `virtual_path`.
    """

    def create_virtual_mount(self, real_dir: PurePath, virtual_path: Path) -> None: ...


class SymlinkMount:
    def create_virtual_mount(self, real_dir: PurePath, virtual_path: Path) -> None:
        try:
            os.symlink(real_dir, virtual_path, target_is_directory=True)
        except OSError as e:
            raise FilesystemError(virtual_path, "failed to create symlink") from e


class CopyMount:
    """Fallback for hosts without symlink support: copies the tree instead."""

    def create_virtual_mount(self, real_dir: PurePath, virtual_path: Path) -> None:
        source = (virtual_path.parent / real_dir).resolve()
        try:
            if not source.is_dir():
                # Mirrors a dangling symlink; discovery reports the absence.
                virtual_path.mkdir()
                return
            shutil.copytree(source, virtual_path)
        except (OSError, shutil.Error) as e:
            raise FilesystemError(source, "failed to copy source directory") from e


@functools.lru_cache(maxsize=1)
def default_mount() -> VirtualMount:
    """Picks a mount strategy by probing whether directory symlinks work."""
    with tempfile.TemporaryDirectory(prefix="jargo_probe_") as probe_dir_str:
        probe_dir = Path(probe_dir_str)
        (probe_dir / "target").mkdir()
        try:
            os.symlink("target", probe_dir / "link", target_is_directory=True)
        except (OSError, NotImplementedError):
            logger.debug("Directory symlinks unavailable, staging by copy")
            return CopyMount()
    return SymlinkMount()


def package_segments(base_package: str) -> list[str]:
    segments = base_package.split(".")
    if not base_package or any(not segment for segment in segments):
        raise InvalidPackageError(
            f"invalid base package `{base_package}`: expected dot-separated identifiers"
        )
    return segments


def relative_source_path(base_package: str) -> PurePath:
    """Path from the staged package leaf's parent back to `src/`.

    For N package segments this climbs N+1 levels: N-1 out of the package
    directories, one out of `src-root` and one out of `output`.
    """
    depth = len(package_segments(base_package))
    return PurePath(*([os.pardir] * (depth + 1)), SOURCE_DIR_NAME)


def staged_root_path(project_root: Path) -> Path:
    return project_root / OUTPUT_DIR_NAME / STAGED_ROOT_DIR_NAME


def build_staging(
    project_root: Path, base_package: str, mount: VirtualMount | None = None
) -> Path:
    """Recreates `output/src-root` and mounts `src/` at the package path."""
    segments = package_segments(base_package)
    src_root = staged_root_path(project_root)

    if src_root.exists():
        try:
            shutil.rmtree(src_root)
        except OSError as e:
            raise FilesystemError(src_root, "failed to remove") from e
    try:
        src_root.mkdir(parents=True)
    except OSError as e:
        raise FilesystemError(src_root, "failed to create") from e

    mount_location = src_root.joinpath(*segments)
    try:
        mount_location.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(mount_location.parent, "failed to create") from e

    link_target = relative_source_path(base_package)
    (mount or default_mount()).create_virtual_mount(link_target, mount_location)
    logger.debug(
        "Staged source root",
        base_package=base_package,
        location=str(mount_location),
        target=str(link_target),
    )
    return src_root
