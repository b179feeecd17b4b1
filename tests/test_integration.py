"""
Integration tests that compile and run projects with a real JDK.
"""

from pathlib import Path
import shutil
import subprocess
import sys
import zipfile

from click.testing import CliRunner
import pytest

from jargo.cli import cli

pytestmark = pytest.mark.skipif(
    shutil.which("javac") is None or shutil.which("java") is None,
    reason="a JDK (javac and java) is required",
)


@pytest.fixture(scope="module")
def jdk_release() -> str:
    """The feature release of the installed javac, e.g. "17" for "javac 17.0.2"."""
    result = subprocess.run(
        ["javac", "-version"], capture_output=True, text=True, check=True
    )
    version = (result.stdout or result.stderr).split()[1]
    major = version.split(".")[0]
    # Java 8 reports itself as "1.8.0_x".
    return version.split(".")[1] if major == "1" else major


def _pin_release(manifest_path: Path, release: str) -> None:
    content = manifest_path.read_text()
    manifest_path.write_text(content.replace('java = "21"', f'java = "{release}"'))


def test_built_jar_is_runnable(tmp_path: Path, jdk_release: str) -> None:
    """
    Tests a full end-to-end flow: scaffold an app, build it and run the
    resulting JAR with `java -jar`.
    """
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path) as td_str:
        project = Path(td_str) / "test-app"
        assert runner.invoke(cli, ["new", "test-app"]).exit_code == 0
        _pin_release(project / "Jargo.toml", jdk_release)

        build_result = runner.invoke(
            cli, ["build", "--manifest", str(project / "Jargo.toml")]
        )
        assert build_result.exit_code == 0, build_result.output
        assert (project / "output/classes/testapp/Main.class").is_file()

        jar_path = project / "output" / "test-app.jar"
        with zipfile.ZipFile(jar_path) as jar:
            assert jar.namelist()[0] == "META-INF/MANIFEST.MF"

        result = subprocess.run(
            ["java", "-jar", str(jar_path)],
            capture_output=True,
            text=True,
            check=False,
        )
        assert result.returncode == 0, result.stderr
        assert result.stdout.strip() == "Hello, World!"


def test_nested_package_resolves_cross_file_references(
    tmp_path: Path, jdk_release: str
) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path) as td_str:
        project = Path(td_str)
        (project / "src" / "util").mkdir(parents=True)
        (project / "Jargo.toml").write_text(
            f'[package]\nname = "nested"\nversion = "0.1.0"\njava = "{jdk_release}"\n'
            'base-package = "com.example.app"\n'
        )
        (project / "src" / "Main.java").write_text(
            "package com.example.app;\n\n"
            "import com.example.app.util.Greeter;\n\n"
            "public class Main {\n"
            "    public static void main(String[] args) {\n"
            "        System.out.println(Greeter.greet());\n"
            "    }\n"
            "}\n"
        )
        (project / "src" / "util" / "Greeter.java").write_text(
            "package com.example.app.util;\n\n"
            "public class Greeter {\n"
            "    public static String greet() { return \"hi\"; }\n"
            "}\n"
        )

        result = runner.invoke(cli, ["build"])

        assert result.exit_code == 0, result.output
        with zipfile.ZipFile(project / "output" / "nested.jar") as jar:
            assert jar.namelist() == [
                "META-INF/MANIFEST.MF",
                "com/example/app/Main.class",
                "com/example/app/util/Greeter.class",
            ]


def test_syntax_error_reported_against_src(tmp_path: Path, jdk_release: str) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path) as td_str:
        project = Path(td_str)
        (project / "src").mkdir()
        (project / "Jargo.toml").write_text(
            f'[package]\nname = "broken"\nversion = "0.1.0"\njava = "{jdk_release}"\n'
        )
        (project / "src" / "Main.java").write_text(
            "package broken;\n\npublic class Main {\n    int x = 1\n}\n"
        )

        result = runner.invoke(cli, ["build"])

        assert result.exit_code != 0
        assert "Main.java:4: error:" in result.output
        assert not (project / "output" / "broken.jar").exists()


def test_run_application(tmp_path: Path, jdk_release: str) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path) as td_str:
        project = Path(td_str) / "test-app"
        runner.invoke(cli, ["new", "test-app"])
        _pin_release(project / "Jargo.toml", jdk_release)

        result = subprocess.run(
            [sys.executable, "-m", "jargo", "run"],
            cwd=project,
            capture_output=True,
            text=True,
            check=False,
        )
        assert result.returncode == 0, result.stderr
        assert "Hello, World!" in result.stdout
