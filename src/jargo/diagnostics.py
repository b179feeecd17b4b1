"""Maps javac diagnostics from staged paths back to the project's `src/`."""

from collections.abc import Iterable
import os

from .models import OUTPUT_DIR_NAME, SOURCE_DIR_NAME, STAGED_ROOT_DIR_NAME
from .staging import package_segments


def staged_prefix(base_package: str, sep: str = "/") -> str:
    parts = [OUTPUT_DIR_NAME, STAGED_ROOT_DIR_NAME, *package_segments(base_package)]
    return sep.join(parts) + sep


def translate_diagnostics(lines: Iterable[str], base_package: str) -> tuple[str, ...]:
    """
    Rewrites `output/src-root/<package path>/` to `src/` in every line.

    This is a literal substring replacement over the raw compiler output:
    the prefix is replaced wherever it occurs in a line, and nothing else is
    touched.
    """
    replacements = [(staged_prefix(base_package), f"{SOURCE_DIR_NAME}/")]
    if os.sep != "/":
        replacements.append(
            (staged_prefix(base_package, os.sep), f"{SOURCE_DIR_NAME}{os.sep}")
        )

    translated = []
    for line in lines:
        for prefix, replacement in replacements:
            line = line.replace(prefix, replacement)
        translated.append(line)
    return tuple(translated)
