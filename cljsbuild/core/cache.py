"""classpath 缓存

计算 classpath 需要调用 Maven，耗时数秒到数分钟，因此以依赖集指纹为键缓存结果。

缓存策略:
  - 指纹 = 依赖集按键排序后规范化序列化的 SHA-256，与插入顺序无关
  - 持久化为 tempdir 下的两个文件: classpath.hash (指纹) + classpath.value (值)
  - 指纹一致且值非空 → 命中，不调用外部工具
  - 否则调用 recompute()，成功后先删除旧指纹、再写值、最后写指纹；
    recompute 失败则不写任何文件
  - 写入中断时指纹缺失，下次按未命中处理
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Callable
from pathlib import Path

from cljsbuild.core.models import CacheRecord, CacheState, DependencySet
from cljsbuild.utils.yaml_io import atomic_write, read_text

logger = logging.getLogger(__name__)

HASH_FILE = "classpath.hash"
VALUE_FILE = "classpath.value"


def fingerprint(dependencies: DependencySet) -> str:
    """依赖集指纹：键排序后序列化为紧凑 JSON 再取 SHA-256"""
    pairs = sorted(dependencies.items())
    canonical = json.dumps(pairs, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class ResolutionCache:
    """依赖集 -> classpath 的单条缓存"""

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)

    @property
    def hash_file(self) -> Path:
        return self.cache_dir / HASH_FILE

    @property
    def value_file(self) -> Path:
        return self.cache_dir / VALUE_FILE

    def read(self) -> CacheRecord | None:
        """读取持久化记录，指纹或值任一缺失返回 None"""
        digest = read_text(self.hash_file).strip()
        value = read_text(self.value_file)
        if not digest or not value:
            return None
        return CacheRecord(fingerprint=digest, resolved_paths=value)

    def state(self, dependencies: DependencySet) -> CacheState:
        record = self.read()
        if record is None:
            return CacheState.MISS
        if record.fingerprint != fingerprint(dependencies):
            return CacheState.STALE
        return CacheState.HIT

    def write(self, record: CacheRecord) -> None:
        # 旧指纹必须先失效，值写完之后才写入新指纹
        self.hash_file.unlink(missing_ok=True)
        atomic_write(self.value_file, record.resolved_paths)
        atomic_write(self.hash_file, record.fingerprint)

    def get_resolved_paths(
        self, dependencies: DependencySet, recompute: Callable[[], str],
    ) -> str:
        """返回依赖集对应的 classpath，必要时调用 recompute 重新计算并缓存"""
        current = fingerprint(dependencies)
        record = self.read()

        if record is not None and record.fingerprint == current:
            logger.debug("使用缓存的 classpath: %s", self.value_file)
            return record.resolved_paths

        if record is None:
            logger.info("classpath 缓存不存在，开始计算")
        else:
            logger.info("依赖集已变化，重新计算 classpath")

        value = recompute()
        self.write(CacheRecord(fingerprint=current, resolved_paths=value))
        logger.debug("classpath 已缓存: %s", self.value_file)
        return value
