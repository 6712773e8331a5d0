"""清单记录流解析

iter_records 是唯一入口，按清单类型分发到两种语法:
- Gopkg.lock: [[projects]] 表数组，每项 name / version / revision / packages
- go mod edit -json: 单个 JSON 对象，Require 为 {Path, Version} 列表

每次调用返回新的惰性生成器；解析错误抛 ManifestSyntaxError，只影响当前清单。
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from godeps.core.exceptions import ManifestSyntaxError
from godeps.core.models import RawModuleRecord
from godeps.core.source import ManifestKind


def iter_records(
    kind: ManifestKind, document: Any, *, manifest: str = "",
) -> Iterator[RawModuleRecord]:
    """按清单类型产出原始模块记录

    Args:
        kind: 清单类型
        document: LOCK_TABLE 为已解析的 TOML 表，TOOLCHAIN 为 go 的标准输出文本
        manifest: 清单路径，仅用于错误信息
    """
    if kind is ManifestKind.LOCK_TABLE:
        return _iter_lock_table(document, manifest)
    if kind is ManifestKind.TOOLCHAIN:
        return _iter_mod_json(document, manifest)
    raise ValueError(f"不支持的清单类型: {kind}")


# =========================================================================
# Gopkg.lock
# =========================================================================


def _optional_str(project: dict, key: str, manifest: str) -> str:
    value = project.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ManifestSyntaxError(manifest, f"projects.{key} 应为字符串: {value!r}")
    return value


def _iter_lock_table(table: dict[str, Any], manifest: str) -> Iterator[RawModuleRecord]:
    projects = table.get("projects") or []
    if not isinstance(projects, list):
        raise ManifestSyntaxError(manifest, "projects 应为表数组")

    for index, project in enumerate(projects):
        if not isinstance(project, dict):
            raise ManifestSyntaxError(manifest, f"projects[{index}] 不是表")
        name = project.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestSyntaxError(manifest, f"projects[{index}] 缺少 name")

        packages = project.get("packages") or []
        if not isinstance(packages, list) or not all(isinstance(p, str) for p in packages):
            raise ManifestSyntaxError(manifest, f"{name}: packages 应为字符串列表")

        yield RawModuleRecord(
            path=name,
            version=_optional_str(project, "version", manifest),
            revision=_optional_str(project, "revision", manifest),
            packages=list(packages),
        )


# =========================================================================
# go mod edit -json
# =========================================================================


def _iter_mod_json(text: str, manifest: str) -> Iterator[RawModuleRecord]:
    if not text or not text.strip():
        raise ManifestSyntaxError(manifest, "go mod edit 没有输出")
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestSyntaxError(manifest, f"JSON 格式错误: {e}") from e
    if not isinstance(doc, dict):
        raise ManifestSyntaxError(manifest, "go mod edit 输出不是 JSON 对象")

    requires = doc.get("Require") or []
    if not isinstance(requires, list):
        raise ManifestSyntaxError(manifest, "Require 应为列表")

    for index, req in enumerate(requires):
        if not isinstance(req, dict):
            raise ManifestSyntaxError(manifest, f"Require[{index}] 不是对象")
        path = req.get("Path")
        if not isinstance(path, str) or not path:
            raise ManifestSyntaxError(manifest, f"Require[{index}] 缺少 Path")
        version = req.get("Version") or ""
        if not isinstance(version, str):
            raise ManifestSyntaxError(manifest, f"{path}: Version 应为字符串")
        yield RawModuleRecord(path=path, version=version)
