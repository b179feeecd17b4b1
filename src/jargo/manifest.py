"""Loading of `Jargo.toml` project manifests."""

from collections.abc import Mapping
from pathlib import Path
import tomllib
from typing import Any

from .exceptions import ManifestError
from .models import (
    DEFAULT_MAIN_CLASS,
    BuildConfiguration,
    Dependency,
    DependencyScope,
    ProjectKind,
)


def derive_base_package(name: str) -> str:
    """Derives the base package from a project name by stripping hyphens."""
    return name.replace("-", "")


def parse_coordinate(coordinate: str) -> tuple[str, str]:
    group, sep, artifact = coordinate.partition(":")
    if not sep or not group or not artifact:
        raise ManifestError(
            f"invalid dependency coordinate `{coordinate}`: expected `groupId:artifactId`"
        )
    return group, artifact


def _optional_str(table: Mapping[str, Any], key: str, section: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ManifestError(f"`{key}` in [{section}] of Jargo.toml must be a string")
    return value


def parse_dependencies(table: Mapping[str, Any]) -> tuple[Dependency, ...]:
    """
    Normalizes a dependency table into sorted `Dependency` records.

    Accepts both `"group:artifact" = "1.0"` and
    `"group:artifact" = { version = "1.0", scope = "runtime", expose = true }`.
    """
    dependencies = []
    for coordinate, value in table.items():
        group, artifact = parse_coordinate(coordinate)
        if isinstance(value, str):
            dependencies.append(Dependency(group, artifact, value))
            continue
        if not isinstance(value, Mapping) or "version" not in value:
            raise ManifestError(f"dependency `{coordinate}` must declare a version")

        scope_name = value.get("scope", DependencyScope.COMPILE.value)
        try:
            scope = DependencyScope(scope_name)
        except ValueError as e:
            raise ManifestError(
                f"unknown scope `{scope_name}` for `{coordinate}`"
            ) from e
        dependencies.append(
            Dependency(
                group,
                artifact,
                str(value["version"]),
                scope=scope,
                expose=bool(value.get("expose", False)),
            )
        )
    return tuple(sorted(dependencies, key=lambda d: (d.group, d.artifact)))


def manifest_from_dict(
    data: Mapping[str, Any],
    project_root: Path,
    classpath: tuple[Path, ...] = (),
) -> BuildConfiguration:
    package = data.get("package")
    if not isinstance(package, Mapping):
        raise ManifestError("A [package] section was not found in Jargo.toml.")

    missing = [key for key in ("name", "version", "java") if key not in package]
    if missing:
        raise ManifestError(
            f"Missing {', '.join(repr(k) for k in missing)} in [package] table of Jargo.toml"
        )

    kind_name = package.get("type", ProjectKind.APP.value)
    try:
        kind = ProjectKind(kind_name)
    except ValueError as e:
        raise ManifestError(
            f"unknown project type `{kind_name}`: expected `app` or `lib`"
        ) from e

    name = str(package["name"])
    base_package = _optional_str(package, "base-package", "package")
    main_class = _optional_str(package, "main-class", "package")

    run_conf = data.get("run", {})
    if not isinstance(run_conf, Mapping):
        raise ManifestError("[run] in Jargo.toml must be a table")
    jvm_args = run_conf.get("jvm-args", [])
    if not isinstance(jvm_args, list) or not all(isinstance(a, str) for a in jvm_args):
        raise ManifestError("`jvm-args` in [run] of Jargo.toml must be a list of strings")

    return BuildConfiguration(
        project_root=project_root,
        name=name,
        version=str(package["version"]),
        base_package=base_package or derive_base_package(name),
        java_version=str(package["java"]),
        kind=kind,
        main_class=main_class or DEFAULT_MAIN_CLASS,
        classpath=classpath,
        jvm_args=tuple(jvm_args),
        dependencies=parse_dependencies(data.get("dependencies", {})),
        dev_dependencies=parse_dependencies(data.get("dev-dependencies", {})),
    )


def load_manifest(
    manifest_path: Path, classpath: tuple[Path, ...] = ()
) -> BuildConfiguration:
    """Reads a `Jargo.toml` and returns the build configuration it describes."""
    try:
        with manifest_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"Jargo.toml not found at {manifest_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"failed to parse Jargo.toml: {e}") from e

    return manifest_from_dict(data, manifest_path.resolve().parent, classpath)
