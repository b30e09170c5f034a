"""外部工具调用 — mvn / java / rlwrap 统一子进程入口

通过 CommandExecutor 协议抽象子进程执行，测试时注入假执行器即可，无需 patch subprocess。
mvn 与 java 的输出默认直通终端（capture=False），与用户直接运行这些工具的体验一致。
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol

from cljsbuild.core.exceptions import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """命令执行器协议"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str | None = None,
        capture: bool = False,
    ) -> CommandResult:
        """执行命令并返回结果；命令无法启动时抛 OSError"""
        ...


class LocalExecutor:
    """本地子进程执行器（默认实现）"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str | None = None,
        capture: bool = False,
    ) -> CommandResult:
        r = subprocess.run(
            cmd, cwd=cwd, check=False,
            capture_output=capture, text=True,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout or "",
            stderr=r.stderr or "",
        )


def run_cmd(
    cmd: list[str],
    *,
    executor: CommandExecutor | None = None,
    cwd: str | None = None,
    capture: bool = False,
    label: str = "cmd",
) -> CommandResult:
    """执行外部命令，失败抛 ExternalToolError

    Args:
        cmd: 参数列表
        executor: 命令执行器，默认 LocalExecutor
        cwd: 工作目录
        capture: 是否捕获输出（默认直通终端）
        label: 日志与错误信息中的标签
    """
    executor = executor or LocalExecutor()
    logger.debug("执行 %s: %s", label, shlex.join(cmd))
    try:
        r = executor.execute(cmd, cwd=cwd, capture=capture)
    except OSError as e:
        raise ExternalToolError(f"{label} 无法启动: {e}") from e
    if not r.success:
        detail = f": {r.stderr[:500]}" if r.stderr else ""
        raise ExternalToolError(f"{label} 执行失败 (rc={r.returncode}){detail}")
    return r


def is_available(program: str) -> bool:
    """检查可执行文件是否在 PATH 中"""
    return shutil.which(program) is not None
