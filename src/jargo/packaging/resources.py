"""Merges the optional `resources/` tree into compiled output."""

from pathlib import Path
import shutil

from pyvider.telemetry import logger

from ..exceptions import FilesystemError


def copy_resources(resources_dir: Path, classes_dir: Path) -> int:
    """
    Copies every file under `resources_dir` into `classes_dir`, keeping
    relative paths and overwriting existing files. Returns the number of
    files copied; an absent resources directory copies nothing.
    """
    if not resources_dir.is_dir():
        return 0

    copied = 0
    for source in sorted(resources_dir.rglob("*")):
        if source.is_dir():
            continue
        destination = classes_dir / source.relative_to(resources_dir)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as e:
            raise FilesystemError(source, f"failed to copy to {destination}") from e
        copied += 1

    logger.debug("Copied resources", count=copied, source=str(resources_dir))
    return copied
