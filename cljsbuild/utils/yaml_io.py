"""清单文件读写工具

统一 encoding="utf-8"、空值保护、目录自动创建、原子写入。
清单默认是 YAML；以 .json 结尾的清单（如 package.json）按 JSON 写回，
读取时 JSON 作为 YAML 子集直接用 safe_load 解析。
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# 清单文件最大大小限制 (10MB)
MAX_YAML_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写同目录临时文件再 rename，中途崩溃不会留下半个文件"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def read_text(path: Path) -> str:
    """读取文本文件，文件不存在时返回空串"""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def load_yaml(path: str | Path) -> dict[str, Any]:
    """安全读取 YAML/JSON 文件

    返回:
        dict: 解析后的字典。文件不存在、为空、或顶层不是字典时返回空字典

    异常:
        yaml.YAMLError: 格式错误
        ValueError: 文件过大（超过 MAX_YAML_SIZE）
    """
    p = Path(path)
    if not p.exists():
        return {}

    file_size = p.stat().st_size
    if file_size > MAX_YAML_SIZE:
        raise ValueError(
            f"清单文件过大: {p} ({file_size} 字节), "
            f"超过限制 {MAX_YAML_SIZE} 字节"
        )

    try:
        with open(p, encoding="utf-8") as f:
            result = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析清单文件失败: %s, 错误: %s", path, e)
        raise

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning(
            "%s 内容不是字典类型 (实际类型: %s)，按空文件处理",
            path, type(result).__name__,
        )
        return {}
    return result


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入清单文件，保持键顺序；.json 后缀写成缩进 JSON"""
    p = Path(path)
    if p.suffix == ".json":
        content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    else:
        try:
            content = yaml.dump(
                data, default_flow_style=False,
                allow_unicode=True, sort_keys=False,
            )
        except yaml.YAMLError as e:
            logger.error("序列化清单数据失败: %s, 错误: %s", path, e)
            raise
    atomic_write(p, content)
