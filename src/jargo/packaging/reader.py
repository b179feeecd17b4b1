"""Python-based reader for assembled JAR files."""

from pathlib import Path
import zipfile

from ..exceptions import InvalidArchiveError
from ..models import MANIFEST_ENTRY_NAME


def parse_manifest(text: str) -> dict[str, str]:
    """Parses `Name: value` manifest lines, joining continuation lines."""
    attributes: dict[str, str] = {}
    last_key: str | None = None
    for line in text.splitlines():
        if line.startswith(" ") and last_key is not None:
            attributes[last_key] += line[1:]
            continue
        key, sep, value = line.partition(": ")
        if not sep:
            last_key = None
            continue
        attributes[key] = value
        last_key = key
    return attributes


class ArchiveReader:
    """Reads the entry list and manifest of a JAR."""

    def __init__(self, archive_path: Path) -> None:
        if not archive_path.is_file():
            raise FileNotFoundError(f"Archive not found at: {archive_path}")
        if not zipfile.is_zipfile(archive_path):
            raise InvalidArchiveError(f"Not a JAR/zip archive: {archive_path}")
        self.archive_path = archive_path

    def entries(self) -> list[str]:
        with zipfile.ZipFile(self.archive_path) as archive:
            return archive.namelist()

    def manifest(self) -> dict[str, str]:
        with zipfile.ZipFile(self.archive_path) as archive:
            try:
                raw = archive.read(MANIFEST_ENTRY_NAME)
            except KeyError as e:
                raise InvalidArchiveError(
                    f"{MANIFEST_ENTRY_NAME} missing from {self.archive_path}"
                ) from e
        return parse_manifest(raw.decode("utf-8"))

    def get_info(self) -> str:
        """Returns a human-readable string of the archive information."""
        entries = self.entries()
        manifest = self.manifest()
        lines = [
            f"JAR Information: {self.archive_path.name}",
            f"  Manifest-Version: {manifest.get('Manifest-Version', '?')}",
            f"  Main-Class: {manifest.get('Main-Class', '(library)')}",
            f"  Entries: {len(entries)}",
        ]
        lines.extend(f"    {name}" for name in entries)
        return "\n".join(lines)
