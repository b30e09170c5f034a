"""制品仓库版本查询

- sources.py:  Maven Central / Clojars 查询源
- resolver.py: 多仓库回退 + 版本过滤 + 批量并发查询
"""

from cljsbuild.core.registry.resolver import RegistryResolver, is_release, is_update
from cljsbuild.core.registry.sources import (
    ClojarsSource,
    MavenCentralSource,
    RegistrySource,
)

__all__ = [
    "RegistryResolver",
    "RegistrySource",
    "MavenCentralSource",
    "ClojarsSource",
    "is_release",
    "is_update",
]
