"""依赖版本解析器

按优先级依次查询制品仓库，返回每个坐标最合适的已发布版本。

策略:
  - releases_only 时丢弃 alpha / beta / RC 等非纯数字版本
  - 取仓库自身排序中的第一个候选
  - 当前仓库无候选时回退到下一个仓库，全部无候选则该坐标缺席（仅记录日志）
  - 批量查询在同一个事件循环中并发进行，某个坐标查不到不影响其他坐标；
    传输层错误则让整批失败
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable

import httpx

from cljsbuild.core.exceptions import RegistryLookupEmptyError
from cljsbuild.core.models import DependencyCoordinate, DependencySet
from cljsbuild.core.registry.sources import RegistrySource, default_sources

logger = logging.getLogger(__name__)

RELEASE_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+(-[0-9]+)?")

DEFAULT_TIMEOUT = 30.0


def is_release(version: str) -> bool:
    """MAJOR.MINOR.PATCH，可带纯数字构建号后缀 -BUILD"""
    return RELEASE_PATTERN.fullmatch(version) is not None


def is_update(current: str | None, fetched: str | None) -> bool:
    """版本是否变化：严格字符串比较，不做语义版本排序"""
    return bool(fetched) and fetched != current


def pick_version(candidates: list[str], releases_only: bool) -> str | None:
    if releases_only:
        candidates = [v for v in candidates if is_release(v)]
    return candidates[0] if candidates else None


class RegistryResolver:
    """多仓库回退的版本解析器"""

    def __init__(
        self,
        sources: list[RegistrySource] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.sources = sources if sources is not None else default_sources()
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _lookup(
        self,
        client: httpx.AsyncClient,
        coord: DependencyCoordinate,
        releases_only: bool,
    ) -> str:
        for source in self.sources:
            version = pick_version(await source.query(client, coord), releases_only)
            if version:
                logger.debug("%s: %s (%s)", coord.key, version, source.name)
                return version
        raise RegistryLookupEmptyError(coord.key)

    async def _resolve_one(
        self,
        client: httpx.AsyncClient,
        coord: DependencyCoordinate,
        releases_only: bool,
    ) -> str | None:
        try:
            return await self._lookup(client, coord, releases_only)
        except RegistryLookupEmptyError:
            logger.warning("未找到依赖包版本: %s", coord.key)
            return None

    async def resolve_one(
        self, coord: DependencyCoordinate, releases_only: bool = False,
    ) -> str | None:
        """查询单个坐标的最佳版本，所有仓库都没有时返回 None"""
        async with self._client() as client:
            return await self._resolve_one(client, coord, releases_only)

    async def resolve_many(
        self, names: Iterable[str], releases_only: bool = False,
    ) -> DependencySet:
        """并发查询一批坐标，返回 name -> version；查不到的坐标直接省略"""
        coords = [DependencyCoordinate.parse(n) for n in names]
        async with self._client() as client:
            tasks = [
                asyncio.ensure_future(self._resolve_one(client, c, releases_only))
                for c in coords
            ]
            try:
                versions = await asyncio.gather(*tasks)
            except BaseException:
                for t in tasks:
                    t.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        result: DependencySet = {
            c.key: v for c, v in zip(coords, versions) if v is not None
        }
        logger.info("版本查询完成: %d/%d 个依赖包", len(result), len(coords))
        return result
