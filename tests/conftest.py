"""Pytest fixtures for the entire jargo test suite."""

from pathlib import Path
import re
import subprocess
from typing import Any, Callable

import pytest
from pytest import MonkeyPatch

from jargo.models import BuildConfiguration, ProjectKind

MAIN_JAVA = """package com.example;

public class Main {
    public static void main(String[] args) {
        System.out.println("Hello, World!");
    }
}
"""

PACKAGE_DECLARATION = re.compile(r"^package\s+([\w.]+);", re.MULTILINE)


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., BuildConfiguration]:
    """
    A factory fixture that lays out a flat-layout project under `tmp_path`
    and returns its build configuration.
    """

    def _make_project(
        base_package: str = "com.example",
        kind: ProjectKind = ProjectKind.APP,
        sources: dict[str, str] | None = None,
        name: str = "demo",
    ) -> BuildConfiguration:
        project_root = tmp_path / name
        src_dir = project_root / "src"
        src_dir.mkdir(parents=True)
        if sources is None:
            sources = {"Main.java": MAIN_JAVA.replace("com.example", base_package)}
        for rel_path, content in sources.items():
            path = src_dir / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return BuildConfiguration(
            project_root=project_root,
            name=name,
            version="0.1.0",
            base_package=base_package,
            java_version="21",
            kind=kind,
        )

    return _make_project


def _unquote(arg: str) -> str:
    if arg.startswith('"') and arg.endswith('"'):
        return arg[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return arg


def read_args_file(command: list[str]) -> list[str]:
    args_file = Path(command[1].removeprefix("@"))
    return [_unquote(line) for line in args_file.read_text().splitlines()]


@pytest.fixture
def fake_javac(monkeypatch: MonkeyPatch) -> list[list[str]]:
    """
    Replaces javac with a stand-in that writes one placeholder `.class` per
    source file, placed according to its `package` declaration. Returns the
    list of recorded commands.
    """
    calls: list[list[str]] = []

    def mock_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        if not command[0].endswith("javac"):
            return subprocess.CompletedProcess(command, 0, stdout="", stderr="")
        calls.append(command)
        args = read_args_file(command)
        classes_dir = Path(args[args.index("-d") + 1])
        for source in (Path(arg) for arg in args[6:]):
            match = PACKAGE_DECLARATION.search(source.read_text())
            package_dir = classes_dir.joinpath(*match.group(1).split(".")) if match else classes_dir
            package_dir.mkdir(parents=True, exist_ok=True)
            (package_dir / f"{source.stem}.class").write_bytes(
                b"\xca\xfe\xba\xbe" + source.stem.encode()
            )
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    monkeypatch.setattr("jargo.compiler.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("jargo.compiler.subprocess.run", mock_run)
    return calls


@pytest.fixture
def failing_javac(monkeypatch: MonkeyPatch) -> list[list[str]]:
    """A javac stand-in that reports a syntax error against the staged path."""
    calls: list[list[str]] = []

    def mock_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        if not command[0].endswith("javac"):
            return subprocess.CompletedProcess(command, 0, stdout="", stderr="")
        calls.append(command)
        args = read_args_file(command)
        staged_root = args[args.index("-sourcepath") + 1]
        stderr = (
            f"{staged_root}/com/example/Main.java:3: error: ';' expected\n"
            "        System.out.println(\"hi\")\n"
            "                                 ^\n"
            "1 error\n"
        )
        return subprocess.CompletedProcess(command, 1, stdout="", stderr=stderr)

    monkeypatch.setattr("jargo.compiler.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("jargo.compiler.subprocess.run", mock_run)
    return calls


@pytest.fixture
def javac_args() -> Callable[[list[str]], list[str]]:
    """Reads back the argument file referenced by a recorded javac command."""
    return read_args_file
