"""核心数据模型

所有核心数据类集中定义，parser / identity / coordinate / resolver
统一从此处导入。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

ECOSYSTEM = "golang"
SEPARATOR = "/"


# =========================================================================
# 证据
# =========================================================================


class EvidenceType(str, Enum):
    """证据类别"""

    VENDOR = "vendor"
    PRODUCT = "product"
    VERSION = "version"


class Confidence(Enum):
    """证据置信度，数值越大越可信"""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    HIGHEST = 4

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.value < other.value


@dataclass(frozen=True)
class EvidenceItem:
    """单条证据观测"""

    type: EvidenceType
    source: str
    field_name: str
    value: str
    confidence: Confidence

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type.value,
            "source": self.source,
            "name": self.field_name,
            "value": self.value,
            "confidence": self.confidence.name,
        }


# =========================================================================
# 模块记录与坐标
# =========================================================================


@dataclass
class RawModuleRecord:
    """清单中的一条原始模块记录（解析后立即消费，不保留）"""

    path: str
    version: str = ""
    packages: list[str] = field(default_factory=list)
    revision: str = ""  # 仅 Gopkg.lock 显式给出


@dataclass
class ModuleCoordinate:
    """模块坐标

    namespace 为路径第一段，inner 为首尾分隔符之间的部分，
    name 为最后一段，永不为空。
    """

    name: str
    namespace: str | None = None
    subpath: str | None = None
    version: str | None = None
    revision: str | None = None
    inner: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("模块名不能为空")

    @property
    def canonical_namespace(self) -> str | None:
        """用于 package-url 的命名空间: namespace/inner"""
        if self.namespace and self.inner:
            return f"{self.namespace}{SEPARATOR}{self.inner}"
        return self.namespace

    @property
    def display_version(self) -> str | None:
        """展示用版本，版本缺失时用 revision 代替"""
        return self.version or self.revision or None


# =========================================================================
# 包标识
# =========================================================================


@dataclass(frozen=True)
class CanonicalIdentifier:
    """package-url 标识 (pkg:golang/...)"""

    value: str
    namespace: str | None
    name: str
    version: str | None = None
    subpath: str | None = None
    scheme: str = ECOSYSTEM
    confidence: Confidence = Confidence.HIGHEST

    kind = "purl"


@dataclass(frozen=True)
class FallbackIdentifier:
    """无法构造 package-url 时的通用标识"""

    value: str
    confidence: Confidence = Confidence.HIGH

    kind = "generic"


PackageIdentifier = Union[CanonicalIdentifier, FallbackIdentifier]


# =========================================================================
# 依赖记录
# =========================================================================


@dataclass
class DependencyRecord:
    """一次解析产出的依赖记录，交给调用方后归调用方所有"""

    display_name: str
    coordinate: ModuleCoordinate
    identifier: PackageIdentifier
    evidence: list[EvidenceItem] = field(default_factory=list)
    ecosystem: str = ECOSYSTEM
    manifest_path: str = ""
    file_path: str = ""
    package_path: str = ""
    md5: str = ""
    sha1: str = ""
    sha256: str = ""

    def evidence_of(self, etype: EvidenceType) -> list[EvidenceItem]:
        """按类别筛选证据，保持插入顺序"""
        return [e for e in self.evidence if e.type is etype]

    def to_dict(self) -> dict[str, Any]:
        c = self.coordinate
        return {
            "display_name": self.display_name,
            "ecosystem": self.ecosystem,
            "namespace": c.namespace,
            "name": c.name,
            "version": c.display_version,
            "revision": c.revision,
            "subpath": c.subpath,
            "identifier": {
                "type": self.identifier.kind,
                "value": self.identifier.value,
                "confidence": self.identifier.confidence.name,
            },
            "evidence": [e.to_dict() for e in self.evidence],
            "manifest": self.manifest_path,
            "file_path": self.file_path,
            "package_path": self.package_path,
            "sha1": self.sha1,
            "sha256": self.sha256,
            "md5": self.md5,
        }
