"""制品仓库查询源

每个仓库实现同一个查询约定: 把坐标作为搜索条件发出 GET 请求，
从 JSON 响应中按仓库自身的排序取出候选版本列表。

- MavenCentralSource: search.maven.org solr 接口
- ClojarsSource:      clojars.org 搜索接口（需按 group/jar 精确过滤）
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from cljsbuild.core.exceptions import NetworkError, ValidationError
from cljsbuild.core.models import DependencyCoordinate

logger = logging.getLogger(__name__)

MAVEN_CENTRAL_URL = "https://search.maven.org/solrsearch/select"
CLOJARS_URL = "https://clojars.org/search"


class RegistrySource:
    """制品仓库查询源基类"""

    name: str = "registry"

    def __init__(self, url: str) -> None:
        if urlparse(url).scheme not in ("http", "https"):
            raise ValidationError(
                f"不允许的仓库 URL 协议 ({self.name})，仅支持 http/https: {url}"
            )
        self.url = url

    def build_params(self, coord: DependencyCoordinate) -> dict[str, Any]:
        raise NotImplementedError

    def extract_versions(
        self, data: dict[str, Any], coord: DependencyCoordinate,
    ) -> list[str]:
        raise NotImplementedError

    async def query(
        self, client: httpx.AsyncClient, coord: DependencyCoordinate,
    ) -> list[str]:
        """查询候选版本列表，保持仓库返回的排序；传输或解析失败抛 NetworkError"""
        try:
            response = await client.get(self.url, params=self.build_params(coord))
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise NetworkError(f"{self.name} 查询失败 ({coord.key}): {e}") from e
        except json.JSONDecodeError as e:
            raise NetworkError(f"{self.name} 返回了无效 JSON ({coord.key}): {e}") from e

        if not isinstance(data, dict):
            raise NetworkError(f"{self.name} 响应格式异常 ({coord.key})")
        versions = self.extract_versions(data, coord)
        logger.debug("%s: %s -> %d 个候选版本", self.name, coord.key, len(versions))
        return versions


class MavenCentralSource(RegistrySource):
    name = "maven-central"

    def __init__(self, url: str = MAVEN_CENTRAL_URL, rows: int = 32) -> None:
        super().__init__(url)
        self.rows = rows

    def build_params(self, coord: DependencyCoordinate) -> dict[str, Any]:
        return {
            "q": f"g:{json.dumps(coord.group_id)} AND a:{json.dumps(coord.artifact_id)}",
            "wt": "json",
            "rows": self.rows,
            "core": "gav",
        }

    def extract_versions(
        self, data: dict[str, Any], coord: DependencyCoordinate,
    ) -> list[str]:
        docs = (data.get("response") or {}).get("docs") or []
        return [str(d["v"]) for d in docs if d.get("v")]


class ClojarsSource(RegistrySource):
    name = "clojars"

    def __init__(self, url: str = CLOJARS_URL) -> None:
        super().__init__(url)

    def build_params(self, coord: DependencyCoordinate) -> dict[str, Any]:
        return {
            "q": f"{coord.group_id} {coord.artifact_id}",
            "format": "json",
        }

    def extract_versions(
        self, data: dict[str, Any], coord: DependencyCoordinate,
    ) -> list[str]:
        # 搜索是模糊匹配，只保留 group/jar 完全一致的结果
        return [
            str(item["version"])
            for item in data.get("results") or []
            if item.get("group_name") == coord.group_id
            and item.get("jar_name") == coord.artifact_id
            and item.get("version")
        ]


def default_sources() -> list[RegistrySource]:
    """按优先级排列的默认仓库: Maven Central 优先，Clojars 兜底"""
    return [MavenCentralSource(), ClojarsSource()]
