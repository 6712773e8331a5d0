"""YAML 读写工具

config 只需要读一个映射，CLI 只需要写出解析报告。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 映射；文件不存在、为空或顶层不是映射时返回空字典

    异常:
        yaml.YAMLError: YAML 格式错误
    """
    p = Path(path)
    if not p.is_file():
        return {}
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        return data
    if data is not None:
        logger.warning("%s 顶层不是映射 (%s)，忽略", p, type(data).__name__)
    return {}


def dump_yaml(data: Any) -> str:
    """序列化为 YAML 文本，保持键顺序，允许 Unicode"""
    return yaml.safe_dump(
        data, default_flow_style=False,
        allow_unicode=True, sort_keys=False,
    )


def save_yaml(path: str | Path, data: Any) -> None:
    """写出 YAML 报告: 先写同目录临时文件再替换，中途失败不留半截文件"""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=p.parent, suffix=".tmp", delete=False,
    ) as f:
        tmp = Path(f.name)
        try:
            f.write(dump_yaml(data))
        except Exception:
            f.close()
            tmp.unlink(missing_ok=True)
            raise
    os.replace(tmp, p)
