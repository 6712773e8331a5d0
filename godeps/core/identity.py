"""模块身份解析

把一条原始记录的模块路径和版本拆成坐标，并产出分级证据。

路径拆分与置信度:
    rsc.io                  name=rsc.io                       name: HIGHEST
    rsc.io/quote            namespace=rsc.io, name=quote      namespace: LOW, name: HIGHEST
    example.com/a/b/c       namespace=example.com, inner=a/b  namespace: LOW, inner: HIGH,
                            name=c                            name: HIGHEST

单独的命名空间是弱证据；最后一段被视为权威的产品名。
"""

from __future__ import annotations

from godeps.core.exceptions import ManifestSyntaxError
from godeps.core.models import (
    SEPARATOR,
    Confidence,
    EvidenceItem,
    EvidenceType,
    ModuleCoordinate,
    RawModuleRecord,
)

ROOT_PACKAGE = "."
REVISION_DELIMITER = "-"


class EvidenceCollector:
    """按插入顺序追加证据，不去重"""

    def __init__(self, source: str) -> None:
        self.source = source
        self.items: list[EvidenceItem] = []

    def add(
        self, etype: EvidenceType, field_name: str, value: str, confidence: Confidence,
    ) -> None:
        self.items.append(EvidenceItem(etype, self.source, field_name, value, confidence))

    def add_identity(self, field_name: str, value: str, confidence: Confidence) -> None:
        """同一值同时作为 Product 和 Vendor 证据"""
        self.add(EvidenceType.PRODUCT, field_name, value, confidence)
        self.add(EvidenceType.VENDOR, field_name, value, confidence)


def split_revision(version: str) -> str | None:
    """取最后一个连字符之后的部分作为 revision"""
    index = version.rfind(REVISION_DELIMITER)
    if index < 0:
        return None
    return version[index + 1:] or None


def resolve_identity(
    record: RawModuleRecord, source: str,
) -> tuple[ModuleCoordinate, list[EvidenceItem]]:
    """把一条原始记录映射为坐标 + 证据

    Args:
        record: 原始模块记录
        source: 证据来源（清单文件名）
    """
    path = record.path.strip(SEPARATOR)
    if not path:
        raise ManifestSyntaxError(source, f"模块路径为空: {record.path!r}")

    evidence = EvidenceCollector(source)
    # 连续的分隔符不产生空段
    segments = [s for s in path.split(SEPARATOR) if s]
    namespace = inner = None
    if len(segments) == 1:
        name = segments[0]
    else:
        namespace, name = segments[0], segments[-1]
        evidence.add_identity("namespace", namespace, Confidence.LOW)
        if len(segments) > 2:
            inner = SEPARATOR.join(segments[1:-1])
            evidence.add_identity("owner", inner, Confidence.HIGH)
    evidence.add_identity("name", name, Confidence.HIGHEST)

    version = record.version
    revision = split_revision(version) or record.revision or None
    if version:
        evidence.add(EvidenceType.VERSION, "version", version, Confidence.HIGHEST)
    # revision 通常是提交哈希，对识别没有价值，不作为证据

    for pkg in record.packages:
        if pkg and pkg != ROOT_PACKAGE:
            evidence.add(EvidenceType.PRODUCT, "package", pkg, Confidence.HIGH)
            evidence.add(EvidenceType.VENDOR, "package", pkg, Confidence.MEDIUM)

    coordinate = ModuleCoordinate(
        name=name,
        namespace=namespace,
        inner=inner,
        version=version or None,
        revision=revision,
    )
    return coordinate, evidence.items
