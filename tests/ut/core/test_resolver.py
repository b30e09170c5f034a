"""版本解析器测试 — 仓库回退 / 版本过滤 / 批量容错"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from cljsbuild.core.exceptions import NetworkError, ValidationError
from cljsbuild.core.models import DependencyCoordinate
from cljsbuild.core.registry import (
    ClojarsSource,
    MavenCentralSource,
    RegistryResolver,
    is_release,
    is_update,
)


def _resolver(fake, **kwargs) -> RegistryResolver:
    return RegistryResolver(transport=fake.transport, **kwargs)


class TestReleaseFilter:
    @pytest.mark.parametrize("version", ["1.2.3", "1.2.3-4", "10.0.12", "0.0.1-20170712"])
    def test_release_versions(self, version: str) -> None:
        assert is_release(version)

    @pytest.mark.parametrize("version", ["1.2.3-alpha", "2.0.0-rc1", "1.2", "1.9.0-beta4", "1.2.3-SNAPSHOT", "v1.2.3"])
    def test_pre_release_versions(self, version: str) -> None:
        assert not is_release(version)

    @pytest.mark.parametrize("candidates,releases_only,expected", [
        (["2.0.0-rc1", "1.2.3-alpha", "1.2.3-4"], True, "1.2.3-4"),
        (["2.0.0-rc1", "1.2.3-alpha", "1.2.3-4"], False, "2.0.0-rc1"),
        (["1.2.3-alpha"], False, "1.2.3-alpha"),
    ])
    def test_first_accepted_candidate(
        self, registry, candidates: list[str], releases_only: bool, expected: str,
    ) -> None:
        fake = registry(maven={"org.example/lib": candidates})
        coord = DependencyCoordinate.parse("org.example/lib")
        assert asyncio.run(_resolver(fake).resolve_one(coord, releases_only)) == expected


class TestIsUpdate:
    @pytest.mark.parametrize("current,fetched,expected", [
        ("1.0.0", "1.1.0", True),
        ("1.1.0", "1.0.0", True),      # 只做字符串比较，不判断新旧
        ("1.0", "1.0.0", True),
        ("1.0.0", "1.0.0", False),
        ("1.0.0", None, False),
    ])
    def test_strict_string_inequality(self, current, fetched, expected) -> None:
        assert is_update(current, fetched) is expected


class TestCoordinate:
    def test_group_and_artifact(self) -> None:
        c = DependencyCoordinate.parse("org.clojure/clojurescript")
        assert (c.group_id, c.artifact_id, c.key) == ("org.clojure", "clojurescript", "org.clojure/clojurescript")

    def test_artifact_defaults_to_group(self) -> None:
        c = DependencyCoordinate.parse("weasel")
        assert (c.group_id, c.artifact_id, c.key) == ("weasel", "weasel", "weasel")


class TestResolveOne:
    def test_primary_registry_first(self, registry) -> None:
        fake = registry(
            maven={"org.clojure/clojure": ["1.9.0"]},
            clojars={"org.clojure/clojure": ["0.0.1"]},
        )
        coord = DependencyCoordinate.parse("org.clojure/clojure")
        assert asyncio.run(_resolver(fake).resolve_one(coord)) == "1.9.0"
        assert fake.hosts() == ["search.maven.org"]

    def test_falls_back_to_secondary(self, registry) -> None:
        fake = registry(clojars={"weasel": ["0.7.0", "0.6.0"]})
        coord = DependencyCoordinate.parse("weasel")
        assert asyncio.run(_resolver(fake).resolve_one(coord)) == "0.7.0"
        assert fake.hosts() == ["search.maven.org", "clojars.org"]

    def test_fallback_when_primary_has_no_release(self, registry) -> None:
        fake = registry(
            maven={"cider/cider-nrepl": ["0.17.0-SNAPSHOT"]},
            clojars={"cider/cider-nrepl": ["0.16.0"]},
        )
        coord = DependencyCoordinate.parse("cider/cider-nrepl")
        assert asyncio.run(_resolver(fake).resolve_one(coord, releases_only=True)) == "0.16.0"

    def test_clojars_fuzzy_results_filtered(self, registry) -> None:
        fake = registry(clojars={"lib": ["9.9.9"], "org.example/lib": ["1.0.0"]})
        coord = DependencyCoordinate.parse("org.example/lib")
        assert asyncio.run(_resolver(fake).resolve_one(coord)) == "1.0.0"

    def test_not_found_anywhere(self, registry, caplog) -> None:
        fake = registry()
        coord = DependencyCoordinate.parse("no.such/lib")
        assert asyncio.run(_resolver(fake).resolve_one(coord)) is None
        assert "no.such/lib" in caplog.text

    def test_query_parameters(self, registry) -> None:
        fake = registry(maven={"org.clojure/clojure": ["1.9.0"]})
        asyncio.run(_resolver(fake).resolve_one(DependencyCoordinate.parse("org.clojure/clojure")))
        assert fake.requests == [("search.maven.org", 'g:"org.clojure" AND a:"clojure"')]


class TestResolveMany:
    def test_partial_batch_tolerance(self, registry) -> None:
        fake = registry(maven={"org.clojure/clojure": ["1.9.0"]}, clojars={"weasel": ["0.7.0"]})
        result = asyncio.run(_resolver(fake).resolve_many(
            ["no.such/lib", "org.clojure/clojure", "weasel"],
        ))
        assert result == {"org.clojure/clojure": "1.9.0", "weasel": "0.7.0"}

    def test_empty_batch(self, registry) -> None:
        assert asyncio.run(_resolver(registry()).resolve_many([])) == {}

    def test_network_error_fails_batch(self, registry) -> None:
        fake = registry(maven={"org.clojure/clojure": ["1.9.0"]}, fail_hosts=("clojars.org",))
        with pytest.raises(NetworkError, match="clojars"):
            asyncio.run(_resolver(fake).resolve_many(["org.clojure/clojure", "weasel"]))

    def test_http_status_error_is_network_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        resolver = RegistryResolver(transport=transport)
        with pytest.raises(NetworkError):
            asyncio.run(resolver.resolve_many(["weasel"]))

    def test_invalid_json_is_network_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        resolver = RegistryResolver(transport=transport)
        with pytest.raises(NetworkError, match="无效 JSON"):
            asyncio.run(resolver.resolve_many(["weasel"]))

    def test_timeout_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        resolver = RegistryResolver(transport=httpx.MockTransport(handler), timeout=0.5)
        with pytest.raises(NetworkError):
            asyncio.run(resolver.resolve_many(["weasel"]))

    def test_custom_source_order(self, registry) -> None:
        fake = registry(maven={"weasel": ["0.7.0"]}, clojars={"weasel": ["0.6.0"]})
        resolver = RegistryResolver(
            sources=[ClojarsSource(), MavenCentralSource()], transport=fake.transport,
        )
        assert asyncio.run(resolver.resolve_many(["weasel"])) == {"weasel": "0.6.0"}


class TestSourceUrl:
    def test_non_http_url_rejected(self) -> None:
        with pytest.raises(ValidationError, match="不允许的仓库 URL 协议"):
            MavenCentralSource(url="file:///etc/passwd")
