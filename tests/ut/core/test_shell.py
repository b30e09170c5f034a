"""shell.py run_cmd 单元测试"""

from __future__ import annotations

import sys

import pytest

from cljsbuild.core.exceptions import ExternalToolError
from cljsbuild.utils.shell import CommandResult, LocalExecutor, is_available, run_cmd


class TestRunCmd:
    def test_success_captured(self, tmp_path) -> None:
        r = run_cmd([sys.executable, "-c", "print('hello')"], cwd=str(tmp_path), capture=True)
        assert r.success
        assert "hello" in r.stdout

    def test_failure_raises(self, tmp_path) -> None:
        with pytest.raises(ExternalToolError, match=r"mvn install 执行失败 \(rc=3\)"):
            run_cmd(
                [sys.executable, "-c", "import sys; sys.exit(3)"],
                cwd=str(tmp_path), label="mvn install",
            )

    def test_stderr_in_error(self, tmp_path) -> None:
        with pytest.raises(ExternalToolError, match="BUILD FAILURE"):
            run_cmd(
                [sys.executable, "-c", "import sys; sys.stderr.write('BUILD FAILURE'); sys.exit(1)"],
                cwd=str(tmp_path), capture=True,
            )

    def test_missing_program(self) -> None:
        with pytest.raises(ExternalToolError, match="无法启动"):
            run_cmd(["definitely-not-a-real-program-xyz"], label="mvn")

    def test_custom_executor(self) -> None:
        class Fake:
            def __init__(self) -> None:
                self.cmds: list[list[str]] = []

            def execute(self, cmd, *, cwd=None, capture=False) -> CommandResult:
                self.cmds.append(cmd)
                return CommandResult(returncode=0, stdout="ok")

        fake = Fake()
        assert run_cmd(["mvn", "-v"], executor=fake).stdout == "ok"
        assert fake.cmds == [["mvn", "-v"]]


class TestLocalExecutor:
    def test_returncode(self) -> None:
        r = LocalExecutor().execute([sys.executable, "-c", "raise SystemExit(2)"], capture=True)
        assert r.returncode == 2
        assert not r.success


def test_is_available() -> None:
    assert not is_available("definitely-not-a-real-program-xyz")
