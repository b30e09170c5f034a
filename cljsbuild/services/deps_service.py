"""依赖版本服务

- init_dependencies():   查询默认依赖包的最新版本，写入清单的 cljsbuild 段
- update_dependencies(): 查询清单中已有依赖的最新版本，写回有变化的版本

两者都支持 dry_run（只返回结果不写清单）和 releases_only（不使用 alpha/beta/RC 版本）。
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from cljsbuild.core.config import SECTION, ManifestStore
from cljsbuild.core.exceptions import ValidationError
from cljsbuild.core.models import DependencySet
from cljsbuild.core.registry import RegistryResolver, is_update

logger = logging.getLogger(__name__)

# clojurescript 基础依赖 + nrepl/piggieback/weasel
BASE_PACKAGES = [
    "org.clojure/clojure",
    "org.clojure/clojurescript",
    "org.clojure/tools.nrepl",
    "com.cemerick/piggieback",
    "weasel",
]

CIDER_PACKAGES = [
    "cider/cider-nrepl",
    "refactor-nrepl",
]

DEFAULT_MAIN = "<add-your-namespace-here>/core"


@dataclass
class VersionChange:
    name: str
    current: str
    fetched: str


@dataclass
class UpdateResult:
    """update_dependencies 的结果"""

    changes: list[VersionChange] = field(default_factory=list)
    dependencies: DependencySet = field(default_factory=dict)
    written: bool = False


class DepsService:
    """依赖版本初始化与升级"""

    def __init__(self, store: ManifestStore, resolver: RegistryResolver) -> None:
        self.store = store
        self.resolver = resolver

    def _find_versions(self, names: list[str], releases_only: bool) -> DependencySet:
        return asyncio.run(self.resolver.resolve_many(names, releases_only))

    def init_dependencies(
        self, releases_only: bool = False, cider: bool = False, dry_run: bool = False,
    ) -> dict[str, Any]:
        """返回写入（或将写入）清单的 cljsbuild 段内容"""
        if self.store.raw_section().get("dependencies"):
            raise ValidationError(f"清单中已存在 {SECTION}.dependencies")

        packages = BASE_PACKAGES + (CIDER_PACKAGES if cider else [])
        section = {
            "main": DEFAULT_MAIN,
            "dependencies": self._find_versions(packages, releases_only),
        }
        if dry_run:
            logger.debug("dry-run: 不写入清单")
        else:
            logger.info("写入 %s 段到 %s", SECTION, self.store.path)
            self.store.update([SECTION], section)
        return section

    def update_dependencies(
        self, releases_only: bool = False, dry_run: bool = False,
    ) -> UpdateResult:
        current = self.store.config.dependencies
        fetched = self._find_versions(list(current), releases_only)

        changes = [
            VersionChange(name, current[name], fetched[name])
            for name in current
            if is_update(current[name], fetched.get(name))
        ]
        merged = {**current, **{c.name: c.fetched for c in changes}}
        result = UpdateResult(changes=changes, dependencies=merged)

        if not changes:
            logger.info("所有依赖已是最新版本")
            return result

        if not dry_run:
            self.store.update([SECTION, "dependencies"], merged)
            result.written = True
            logger.info("已更新 %d 个依赖版本: %s", len(changes), self.store.path)
        return result
