"""服务容器 — 所有组件共享同一个 ManifestStore

依赖关系（→ 表示依赖）:
  deps  → store, resolver
  cljs  → store, maven
  maven → store, cache
  resolver 与 cache 相互独立

用法:
    container = ServiceContainer(ManifestStore("project.yml"))
    container.cljs.build()
    container.deps.update_dependencies(dry_run=True)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cljsbuild.core.config import ManifestStore

if TYPE_CHECKING:
    from cljsbuild.core.cache import ResolutionCache
    from cljsbuild.core.clojurescript import ClojureScript
    from cljsbuild.core.maven import Maven
    from cljsbuild.core.registry import RegistryResolver
    from cljsbuild.services.deps_service import DepsService
    from cljsbuild.utils.shell import CommandExecutor


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self,
        store: ManifestStore,
        executor: CommandExecutor | None = None,
        timeout: float | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        self.store = store
        self.executor = executor
        self.timeout = timeout

    @property
    def resolver(self) -> RegistryResolver:
        if "resolver" not in self._instances:
            from cljsbuild.core.registry import RegistryResolver
            kwargs = {} if self.timeout is None else {"timeout": self.timeout}
            self._instances["resolver"] = RegistryResolver(**kwargs)
        return self._instances["resolver"]  # type: ignore[return-value]

    @property
    def cache(self) -> ResolutionCache:
        if "cache" not in self._instances:
            from pathlib import Path

            from cljsbuild.core.cache import ResolutionCache
            tempdir = Path(self.store.get("tempdir")).resolve()
            self._instances["cache"] = ResolutionCache(tempdir)
        return self._instances["cache"]  # type: ignore[return-value]

    @property
    def maven(self) -> Maven:
        if "maven" not in self._instances:
            from cljsbuild.core.maven import Maven
            self._instances["maven"] = Maven(
                self.store, cache=self.cache, executor=self.executor,
            )
        return self._instances["maven"]  # type: ignore[return-value]

    @property
    def cljs(self) -> ClojureScript:
        if "cljs" not in self._instances:
            from cljsbuild.core.clojurescript import ClojureScript
            self._instances["cljs"] = ClojureScript(
                self.store, self.maven, executor=self.executor,
            )
        return self._instances["cljs"]  # type: ignore[return-value]

    @property
    def deps(self) -> DepsService:
        if "deps" not in self._instances:
            from cljsbuild.services.deps_service import DepsService
            self._instances["deps"] = DepsService(self.store, self.resolver)
        return self._instances["deps"]  # type: ignore[return-value]
