"""坐标构建: package-url 标识与依赖记录

标识构造失败（字符不符合 Go 模块路径语法，或 packageurl 拒绝）时
回退为通用标识 `<模块路径>[/<subpath>][@<version>]`，只记警告。
"""

from __future__ import annotations

import hashlib
import logging
import re

from packageurl import PackageURL

from godeps.core.exceptions import IdentifierConstructionError
from godeps.core.models import (
    ECOSYSTEM,
    CanonicalIdentifier,
    DependencyRecord,
    EvidenceItem,
    FallbackIdentifier,
    ModuleCoordinate,
    PackageIdentifier,
)
from godeps.utils.logger import context

logger = logging.getLogger(__name__)

# Go 模块路径元素允许的字符: 字母数字和 - . _ ~ (另加大小写转义用的 !)
_PATH_ELEMENT = r"[A-Za-z0-9._~!-]+"
_PATH_RE = re.compile(rf"^{_PATH_ELEMENT}(?:/{_PATH_ELEMENT})*$")
_VERSION_RE = re.compile(r"^[A-Za-z0-9._+~-]+$")


def _check(label: str, value: str | None, pattern: re.Pattern[str]) -> None:
    if value is None:
        return
    if not pattern.match(value):
        raise IdentifierConstructionError(f"{label} 含非法字符: {value!r}")


def canonical_identifier(coordinate: ModuleCoordinate) -> CanonicalIdentifier:
    """构造 pkg:golang 标识

    Raises:
        IdentifierConstructionError: 坐标无法表示为 package-url
    """
    namespace = coordinate.canonical_namespace
    _check("namespace", namespace, _PATH_RE)
    _check("name", coordinate.name, _PATH_RE)
    _check("subpath", coordinate.subpath, _PATH_RE)
    _check("version", coordinate.version, _VERSION_RE)
    try:
        purl = PackageURL(
            type=ECOSYSTEM,
            namespace=namespace,
            name=coordinate.name,
            version=coordinate.version,
            subpath=coordinate.subpath,
        )
    except ValueError as e:
        raise IdentifierConstructionError(str(e)) from e
    return CanonicalIdentifier(
        value=purl.to_string(),
        namespace=namespace,
        name=coordinate.name,
        version=coordinate.version,
        subpath=coordinate.subpath,
    )


def fallback_identifier(
    module_path: str, version: str | None = None, subpath: str | None = None,
) -> FallbackIdentifier:
    value = module_path
    if subpath and subpath.strip():
        value += f"/{subpath}"
    if version and version.strip():
        value += f"@{version}"
    return FallbackIdentifier(value=value)


def build_identifier(
    coordinate: ModuleCoordinate, module_path: str, *, manifest: str = "",
) -> PackageIdentifier:
    """构造标识，失败时回退为通用标识（不抛异常）"""
    try:
        return canonical_identifier(coordinate)
    except IdentifierConstructionError as e:
        logger.warning(
            "无法为 `%s` 构造 package-url (%s)，原因: %s",
            module_path, manifest, e,
            extra=context(manifest=manifest, module=module_path),
        )
        return fallback_identifier(module_path, coordinate.version, coordinate.subpath)


def build_dependency(
    coordinate: ModuleCoordinate,
    evidence: list[EvidenceItem],
    *,
    module_path: str,
    manifest: str,
) -> DependencyRecord:
    """组装最终的依赖记录"""
    version = coordinate.display_version or ""
    identifier = build_identifier(coordinate, module_path, manifest=manifest)
    file_path = f"{manifest}:{coordinate.canonical_namespace}/{coordinate.name}/{version}"
    encoded = file_path.encode("utf-8")
    return DependencyRecord(
        display_name=f"{module_path}:{version}" if version else module_path,
        coordinate=coordinate,
        identifier=identifier,
        evidence=list(evidence),
        manifest_path=manifest,
        file_path=file_path,
        package_path=f"{module_path}:{version}",
        md5=hashlib.md5(encoded, usedforsecurity=False).hexdigest(),
        sha1=hashlib.sha1(encoded, usedforsecurity=False).hexdigest(),
        sha256=hashlib.sha256(encoded).hexdigest(),
    )
