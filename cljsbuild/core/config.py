"""清单配置管理

项目清单（默认 project.yml）中的 cljsbuild 段描述了构建所需的全部配置：
路径、REPL 端口、依赖集。ManifestStore 负责:

  - load():   读取清单并合并默认值，未知配置项只告警
  - get():    取配置值，既无清单值也无默认值时报错
  - update(): 按嵌套路径合并写回清单，写回后立即重新加载

配置首次访问时懒加载，进程内缓存；只有 update() / reload() 会使其失效。

用法:
    store = ManifestStore("project.yml")
    tempdir = store.get("tempdir")
    store.update(["cljsbuild", "dependencies"], {"weasel": "0.7.0"})
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cljsbuild.core.exceptions import (
    ConfigError,
    ConfigKeyUndefinedError,
    ConfigMissingError,
    ValidationError,
)
from cljsbuild.core.models import DependencySet
from cljsbuild.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = "project.yml"
SECTION = "cljsbuild"

DEFAULTS: dict[str, Any] = {
    "fakeProjectFile": "project.clj",
    "tempdir": ".cljsbuild",
    "target": "out/main.js",
    "assetPath": ".",
    "src": "src",
    "main": None,
    "replPort": 9000,
    "replHost": "localhost",
    "dependencies": None,
}


@dataclass
class ManifestConfig:
    """校验并合并默认值后的 cljsbuild 配置"""

    values: dict[str, Any] = field(default_factory=dict)
    unknown_keys: list[str] = field(default_factory=list)

    @property
    def dependencies(self) -> DependencySet:
        return self.get("dependencies")

    def get(self, key: str) -> Any:
        value = self.values.get(key)
        if value is None:
            raise ConfigKeyUndefinedError(key, SECTION)
        return value

    @classmethod
    def from_section(cls, section: dict[str, Any]) -> ManifestConfig:
        """以 DEFAULTS 为底合并清单段"""
        values = {**DEFAULTS, **section}
        unknown = [k for k in section if k not in DEFAULTS]
        if unknown:
            logger.warning(
                "清单 %s 段中存在未知配置项: %s", SECTION, ", ".join(unknown),
            )
        values["dependencies"] = _normalize_dependencies(values["dependencies"])
        return cls(values=values, unknown_keys=unknown)


def _normalize_dependencies(deps: Any) -> DependencySet | None:
    """依赖集必须是 name -> version 映射；YAML 会把 1.10 解析成浮点数，统一转回字符串"""
    if deps is None:
        return None
    if not isinstance(deps, dict):
        raise ValidationError(
            f"{SECTION}.dependencies 必须是映射类型，实际为 {type(deps).__name__}"
        )
    result: DependencySet = {}
    for name, version in deps.items():
        if version is None:
            raise ValidationError(f"{SECTION}.dependencies.{name} 缺少版本号")
        result[str(name)] = str(version)
    return result


def _merge(target: dict[str, Any], value: dict[str, Any]) -> None:
    for k, v in value.items():
        if isinstance(v, dict) and isinstance(target.get(k), dict):
            _merge(target[k], v)
        else:
            target[k] = copy.deepcopy(v)


class ManifestStore:
    """清单读写入口，各组件共享同一个实例"""

    def __init__(self, path: str | Path = DEFAULT_MANIFEST) -> None:
        self.path = Path(path)
        self._config: ManifestConfig | None = None

    @property
    def config(self) -> ManifestConfig:
        if self._config is None:
            self._config = self.load()
        return self._config

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            raise ConfigMissingError(f"清单文件不存在: {self.path}")
        try:
            return load_yaml(self.path)
        except yaml.YAMLError as e:
            raise ConfigError(f"清单文件格式错误: {self.path}: {e}") from e
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def _section(self, data: dict[str, Any]) -> dict[str, Any]:
        section = data.get(SECTION) or {}
        if not isinstance(section, dict):
            raise ValidationError(f"清单 {self.path} 中的 {SECTION} 段必须是映射类型")
        return section

    def load(self) -> ManifestConfig:
        """读取清单并返回合并默认值后的配置（不影响缓存）"""
        data = self._read()
        if SECTION not in data:
            logger.warning("清单 %s 中没有 %s 段", self.path, SECTION)
        config = ManifestConfig.from_section(self._section(data))
        logger.debug("清单已加载: %s", self.path)
        return config

    def reload(self) -> ManifestConfig:
        self._config = None
        return self.config

    def get(self, key: str) -> Any:
        return self.config.get(key)

    def raw_section(self) -> dict[str, Any]:
        """清单中原样的 cljsbuild 段（未合并默认值）"""
        return self._section(self._read())

    def update(self, path: list[str], value: Any) -> None:
        """在嵌套键路径上合并写入清单，缺失的中间层自动创建

        映射值与已有映射递归合并，其余值直接覆盖。
        """
        if not path:
            raise ValueError("update 路径不能为空")
        data = self._read()
        pointer = data
        for key in path[:-1]:
            if not isinstance(pointer.get(key), dict):
                pointer[key] = {}
            pointer = pointer[key]

        prop = path[-1]
        if isinstance(value, dict) and isinstance(pointer.get(prop), dict):
            _merge(pointer[prop], value)
        else:
            pointer[prop] = copy.deepcopy(value)

        save_yaml(self.path, data)
        logger.debug("清单已更新: %s -> %s", ".".join(path), self.path)
        self.reload()
