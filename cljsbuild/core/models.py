"""数据模型

- DependencyCoordinate: 依赖坐标 (group, artifact)
- DependencySet: 坐标键 "group/artifact" -> 版本号
- CacheRecord / CacheState: classpath 缓存记录与状态
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DependencySet = dict[str, str]


@dataclass(frozen=True)
class DependencyCoordinate:
    """依赖坐标，由清单中的 "group/artifact" 键解析而来"""

    group_id: str
    artifact_id: str
    name: str = ""  # 清单中的原始键，如 "weasel"

    @classmethod
    def parse(cls, name: str) -> DependencyCoordinate:
        """解析坐标键；没有 artifact 段时 artifact_id 取 group_id"""
        group_id, _, artifact_id = name.partition("/")
        return cls(
            group_id=group_id,
            artifact_id=artifact_id or group_id,
            name=name,
        )

    @property
    def key(self) -> str:
        return self.name or f"{self.group_id}/{self.artifact_id}"


class CacheState(str, Enum):
    """classpath 缓存状态"""

    MISS = "miss"      # 没有持久化的指纹或值
    STALE = "stale"    # 指纹与当前依赖集不一致
    HIT = "hit"


@dataclass
class CacheRecord:
    """持久化的缓存记录：依赖集指纹 + 解析出的 classpath"""

    fingerprint: str
    resolved_paths: str
