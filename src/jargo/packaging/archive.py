"""Assembles compiled classes and resources into a JAR."""

import os
from pathlib import Path
import stat
import tempfile
import time
import zipfile

from pyvider.telemetry import logger

from ..exceptions import FilesystemError
from ..models import (
    MANIFEST_ENTRY_NAME,
    MANIFEST_FORMAT_VERSION,
    BuildConfiguration,
)

DateTime = tuple[int, int, int, int, int, int]

# Zip timestamps cannot predate 1980.
ZIP_EPOCH: DateTime = (1980, 1, 1, 0, 0, 0)
# Unix "made by" value in the zip central directory.
ZIP_SYSTEM_UNIX = 3
REGULAR_FILE_MODE = stat.S_IFREG | 0o644


def render_manifest(config: BuildConfiguration) -> str:
    lines = [f"Manifest-Version: {MANIFEST_FORMAT_VERSION}"]
    if config.is_app:
        lines.append(f"Main-Class: {config.main_class_fqn}")
    return "".join(f"{line}\n" for line in lines)


def _now() -> DateTime:
    return max(time.localtime()[:6], ZIP_EPOCH)


def _mtime(path: Path) -> DateTime:
    try:
        return max(time.localtime(path.stat().st_mtime)[:6], ZIP_EPOCH)
    except OSError as e:
        raise FilesystemError(path, "failed to stat") from e


def _entry_info(arcname: str, date_time: DateTime) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(arcname, date_time=date_time)
    info.compress_type = zipfile.ZIP_DEFLATED
    if info.create_system == ZIP_SYSTEM_UNIX:
        info.external_attr = REGULAR_FILE_MODE << 16
    return info


def collect_entries(classes_dir: Path) -> list[tuple[str, Path]]:
    """(arcname, path) for every file under `classes_dir`, sorted by arcname.

    A manifest found among the compiled output is skipped; the generated one
    always takes its place.
    """
    if not classes_dir.is_dir():
        return []
    entries = [
        (path.relative_to(classes_dir).as_posix(), path)
        for path in classes_dir.rglob("*")
        if path.is_file()
    ]
    return sorted(entry for entry in entries if entry[0] != MANIFEST_ENTRY_NAME)


def _write_archive(
    archive: zipfile.ZipFile, config: BuildConfiguration, classes_dir: Path
) -> int:
    # The manifest must be the first entry; some readers only look there.
    archive.writestr(_entry_info(MANIFEST_ENTRY_NAME, _now()), render_manifest(config))

    count = 1
    for arcname, path in collect_entries(classes_dir):
        date_time = _mtime(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FilesystemError(path, "failed to read") from e
        archive.writestr(_entry_info(arcname, date_time), data)
        count += 1
    return count


def assemble_archive(
    config: BuildConfiguration, classes_dir: Path | None = None
) -> Path:
    """
    Writes `output/<name>.jar` from the manifest and the contents of the
    compiled output directory.

    The archive is built in a temporary file next to its destination and
    moved into place once complete, replacing any previous archive.
    """
    classes_dir = classes_dir or config.classes_dir
    archive_path = config.archive_path
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{archive_path.name}.", suffix=".tmp", dir=archive_path.parent
        )
    except OSError as e:
        raise FilesystemError(archive_path.parent, "failed to prepare") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh, zipfile.ZipFile(fh, "w") as archive:
            count = _write_archive(archive, config, classes_dir)
        # mkstemp creates the file owner-only.
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, archive_path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise FilesystemError(archive_path, "failed to write JAR file") from e
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.info(f"Assembled {archive_path.name} with {count} entries")
    return archive_path
