"""共享 fixture — 清单文件 + 模拟制品仓库

  write_manifest(section)      在 tmp_path 写 project.yml，返回路径
  registry(maven=..., clojars=...)
      构造 httpx.MockTransport，按 (group, artifact) 返回候选版本列表，
      同时记录每次请求，便于断言仓库查询顺序
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import yaml

_MAVEN_QUERY = re.compile(r'g:"(?P<g>[^"]*)" AND a:"(?P<a>[^"]*)"')


class FakeRegistry:
    """模拟 Maven Central + Clojars 搜索接口"""

    def __init__(
        self,
        maven: dict[str, list[str]] | None = None,
        clojars: dict[str, list[str]] | None = None,
        fail_hosts: tuple[str, ...] = (),
    ) -> None:
        self.maven = maven or {}
        self.clojars = clojars or {}
        self.fail_hosts = fail_hosts
        self.requests: list[tuple[str, str]] = []

    @staticmethod
    def _split(key: str) -> tuple[str, str]:
        group, _, artifact = key.partition("/")
        return group, artifact or group

    def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        query = request.url.params.get("q", "")
        self.requests.append((host, query))
        if host in self.fail_hosts:
            raise httpx.ConnectError("connection refused", request=request)

        if host == "search.maven.org":
            m = _MAVEN_QUERY.fullmatch(query)
            docs = []
            for key, versions in self.maven.items():
                g, a = self._split(key)
                if m and (g, a) == (m["g"], m["a"]):
                    docs = [{"g": g, "a": a, "v": v} for v in versions]
            return httpx.Response(200, json={"response": {"numFound": len(docs), "docs": docs}})

        if host == "clojars.org":
            results = []
            for key, versions in self.clojars.items():
                g, a = self._split(key)
                if g in query or a in query:
                    results += [
                        {"group_name": g, "jar_name": a, "version": v} for v in versions
                    ]
            return httpx.Response(200, json={"count": len(results), "results": results})

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def hosts(self) -> list[str]:
        return [h for h, _ in self.requests]


@pytest.fixture()
def registry() -> Callable[..., FakeRegistry]:
    return FakeRegistry


@pytest.fixture()
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    def _write(section: dict[str, Any] | str | None = None, name: str = "project.yml") -> Path:
        path = tmp_path / name
        data: dict[str, Any] = {"name": "demo"}
        if section is not None:
            data["cljsbuild"] = section
        path.write_text(yaml.dump(data, allow_unicode=True, sort_keys=False))
        return path

    return _write
