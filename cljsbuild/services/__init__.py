"""服务层

- container.py:    懒加载服务容器
- deps_service.py: 依赖版本初始化与升级
"""

from cljsbuild.services.container import ServiceContainer
from cljsbuild.services.deps_service import DepsService, UpdateResult, VersionChange

__all__ = ["ServiceContainer", "DepsService", "UpdateResult", "VersionChange"]
