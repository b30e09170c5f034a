"""CLI — 依赖版本命令"""

from __future__ import annotations

import click
import yaml

from cljsbuild.core.config import SECTION
from cljsbuild.services.container import ServiceContainer


def register(group: click.Group) -> None:
    group.add_command(init)
    group.add_command(update)


@click.command()
@click.option("--releases-only", "-r", is_flag=True, help="不使用 alpha、beta、RC 版本")
@click.option("--cider", "-c", is_flag=True, help="加入 emacs cider 依赖")
@click.option("--dry-run", "-d", is_flag=True, help="只显示将写入清单的内容")
@click.pass_obj
def init(svc: ServiceContainer, releases_only: bool, cider: bool, dry_run: bool) -> None:
    """查询默认依赖包的最新版本，初始化清单的 cljsbuild 段"""
    section = svc.deps.init_dependencies(
        releases_only=releases_only, cider=cider, dry_run=dry_run,
    )
    if dry_run:
        click.echo(f"{SECTION} 配置:")
        click.echo(yaml.dump(
            {SECTION: section}, default_flow_style=False,
            allow_unicode=True, sort_keys=False,
        ).rstrip())
    else:
        click.echo(f"已写入 {svc.store.path} 的 {SECTION} 段")


@click.command()
@click.option("--releases-only", "-r", is_flag=True, help="不使用 alpha、beta、RC 版本")
@click.option("--dry-run", "-d", is_flag=True, help="只显示将更新的版本，不写入清单")
@click.pass_obj
def update(svc: ServiceContainer, releases_only: bool, dry_run: bool) -> None:
    """把清单中的依赖更新到最新版本"""
    result = svc.deps.update_dependencies(releases_only=releases_only, dry_run=dry_run)
    if not result.changes:
        click.echo("没有可用的更新。")
        return

    if dry_run:
        click.echo("将更新以下依赖:")
    else:
        click.echo(f"已更新 {svc.store.path} 中的依赖:")
    width = max(len(c.name) for c in result.changes) + 1
    for c in result.changes:
        click.echo(f"  {c.name + ':':{width}s} {c.current} => {c.fetched}")
