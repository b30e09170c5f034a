"""cljsbuild 命令行接口

命令按领域拆分为子模块，每个模块注册自己的命令到 main group。
不带子命令时执行 build。所有 CljsbuildError 在这里统一转换为
"Error: <message>" + 退出码 1，子命令内部不做零散的错误退出。
"""

from __future__ import annotations

import logging
import os
from typing import Any

import click

from cljsbuild import __version__
from cljsbuild.core.config import DEFAULT_MANIFEST, ManifestStore
from cljsbuild.core.exceptions import CljsbuildError
from cljsbuild.services.container import ServiceContainer
from cljsbuild.utils.logger import setup_logging

logger = logging.getLogger(__name__)


class CljsbuildGroup(click.Group):
    """顶层错误处理: 异常类型 -> 退出码 + 提示信息"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except CljsbuildError as e:
            logger.debug("命令失败 [%s]", e.code, exc_info=True)
            click.echo(f"Error: {e}", err=True)
            ctx.exit(e.exit_code)


@click.group(cls=CljsbuildGroup, invoke_without_command=True)
@click.version_option(
    version=__version__, prog_name="cljsbuild",
    message="%(prog)s version %(version)s",
)
@click.option("--verbose", "-v", is_flag=True, help="输出详细日志")
@click.option(
    "--manifest", "-m", default=DEFAULT_MANIFEST, envvar="CLJSBUILD_MANIFEST",
    show_default=True, help="项目清单路径",
)
@click.option("--timeout", default=None, type=float, help="制品仓库单次请求超时（秒）")
@click.option("--production", "-p", is_flag=True, help="以 :advanced 优化级别构建")
@click.pass_context
def main(
    ctx: click.Context, verbose: bool, manifest: str,
    timeout: float | None, production: bool,
) -> None:
    """ClojureScript 项目的构建、依赖管理与 REPL"""
    setup_logging(
        level=os.getenv("CLJSBUILD_LOG_LEVEL", "INFO"),
        json_output=os.getenv("CLJSBUILD_LOG_JSON", "") == "1",
        verbose=verbose,
    )
    ctx.obj = ServiceContainer(ManifestStore(manifest), timeout=timeout)
    if ctx.invoked_subcommand is None:
        logger.debug("构建")
        ctx.obj.cljs.build(production=production)


# 注册各领域子命令
from cljsbuild.cli.cmd_build import register as _reg_build  # noqa: E402
from cljsbuild.cli.cmd_deps import register as _reg_deps  # noqa: E402

_reg_build(main)
_reg_deps(main)
