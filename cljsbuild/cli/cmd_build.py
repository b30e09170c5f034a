"""CLI — 构建与 REPL 命令"""

from __future__ import annotations

import logging

import click

from cljsbuild.services.container import ServiceContainer

logger = logging.getLogger(__name__)


def register(group: click.Group) -> None:
    group.add_command(build)
    group.add_command(watch)
    group.add_command(repl)
    group.add_command(nrepl)
    group.add_command(install)


@click.command()
@click.option("--production", "-p", is_flag=True, help="以 :advanced 优化级别构建")
@click.pass_obj
def build(svc: ServiceContainer, production: bool) -> None:
    """编译 ClojureScript 项目（默认命令）"""
    logger.debug("构建")
    svc.cljs.build(production=production)


@click.command()
@click.pass_obj
def watch(svc: ServiceContainer) -> None:
    """监听源码目录，变化时自动重新编译"""
    logger.debug("启动文件监听")
    svc.cljs.watch()


@click.command()
@click.pass_obj
def repl(svc: ServiceContainer) -> None:
    """编译后启动浏览器 REPL"""
    logger.debug("启动 cljs REPL")
    svc.cljs.repl()


@click.command()
@click.option("--cider", "-c", is_flag=True, help="加载 emacs cider 中间件")
@click.pass_obj
def nrepl(svc: ServiceContainer, cider: bool) -> None:
    """编译后启动 nREPL 服务"""
    logger.debug("启动 nREPL 服务")
    svc.cljs.nrepl(cider=cider)


@click.command()
@click.pass_obj
def install(svc: ServiceContainer) -> None:
    """通过 Maven 安装清单中的全部依赖"""
    logger.info("通过 Maven 安装依赖")
    svc.maven.install()
