"""Go 依赖解析器: 对外入口

职责:
- 启动时执行一次 go 能力探测，决定解析器是否启用
- 逐个清单: 读取 -> 解析记录流 -> 身份解析 -> 构建标识
- 单个清单的错误只跳过该清单
- 工具链不可用时只停用 go.mod 解析，Gopkg.lock 不依赖 go，照常解析
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from godeps.core.config import Config, get_config
from godeps.core.coordinate import build_dependency
from godeps.core.exceptions import (
    CancelledError,
    InitializationError,
    ManifestSyntaxError,
    ToolchainFailure,
    ToolchainUnavailable,
)
from godeps.core.identity import resolve_identity
from godeps.core.models import DependencyRecord
from godeps.core.parser import iter_records
from godeps.core.source import GoToolchain, ManifestKind, detect_kind, load_lock_table
from godeps.utils.logger import context
from godeps.utils.shell import ProcessLauncher

logger = logging.getLogger(__name__)

ANALYZER_NAME = "Golang Resolver"


@dataclass
class ScanReport:
    """多清单解析汇总"""

    records: list[DependencyRecord] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)  # 清单路径 -> 错误信息
    skipped: list[str] = field(default_factory=list)
    disabled_reason: str = ""

    @property
    def success(self) -> bool:
        # go 不可用只停用 go.mod 解析，不算扫描失败
        return not self.errors


class GolangResolver:
    """Go 依赖解析器

    用法:
        resolver = GolangResolver()
        resolver.prepare()               # 可选，analyze_all 会自动调用
        records = resolver.analyze("path/to/go.mod")
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        launcher: ProcessLauncher | None = None,
    ) -> None:
        self.config = config or get_config()
        self.toolchain = GoToolchain(
            self.config.resolve_go(),
            timeout=self.config.timeout,
            launcher=launcher,
        )
        self.enabled = True
        self.disabled_reason = ""
        self.prepared = False

    # ---- 生命周期 ----

    def prepare(self) -> None:
        """执行一次能力探测；失败则在本次运行中停用 go.mod 解析

        Raises:
            InitializationError: 探测失败（go.mod 解析已停用）
        """
        if self.prepared:
            return
        self.prepared = True
        if not self.config.probe_enabled:
            logger.info("已跳过 go 能力探测")
            return
        try:
            self.toolchain.probe(self.config.probe_dir or None)
        except InitializationError as e:
            self._disable(str(e))
            raise
        logger.info("%s 已启用", ANALYZER_NAME)

    def _disable(self, reason: str) -> None:
        if self.enabled:
            logger.warning("%s: go.mod 解析已停用: %s", ANALYZER_NAME, reason)
        self.enabled = False
        self.disabled_reason = reason

    # ---- 单个清单 ----

    def analyze(self, manifest: str | Path) -> list[DependencyRecord]:
        """解析单个清单，返回依赖记录（保持清单中的顺序）

        go 不可用（已被禁用）时 go.mod 返回空列表，Gopkg.lock 照常解析。

        Raises:
            ManifestSyntaxError: 清单格式错误
            ToolchainFailure: go 进程异常退出
            ToolchainUnavailable: go 不可用（随即停用 go.mod 解析）
            CancelledError: 等待 go 进程时被中断
            ValueError: 不支持的清单文件
        """
        path = Path(manifest)
        kind = detect_kind(path)
        if kind is None:
            raise ValueError(f"不支持的清单文件: {path}")
        if kind is ManifestKind.TOOLCHAIN and not self.enabled:
            logger.debug("go 不可用，跳过: %s", path)
            return []

        if kind is ManifestKind.LOCK_TABLE:
            document = load_lock_table(path)
        else:
            document = self._run_toolchain(path)

        records: list[DependencyRecord] = []
        for raw in iter_records(kind, document, manifest=str(path)):
            coordinate, evidence = resolve_identity(raw, path.name)
            records.append(build_dependency(
                coordinate, evidence, module_path=raw.path, manifest=str(path),
            ))
        logger.info("%s: 解析出 %d 个依赖", path, len(records))
        return records

    def _run_toolchain(self, path: Path) -> str:
        try:
            result = self.toolchain.mod_edit_json(path.parent)
        except ToolchainUnavailable as e:
            self._disable(str(e))
            raise
        for line in result.stderr_lines():
            logger.warning("go: %s", line, extra=context(manifest=str(path)))
        return result.stdout

    # ---- 多个清单 ----

    def analyze_all(self, manifests: Iterable[str | Path]) -> ScanReport:
        """依次解析多个清单，单个清单失败不影响其他清单

        CancelledError 不在此处捕获，直接向调用方传播（包括探测期间的中断）。
        """
        report = ScanReport()
        try:
            self.prepare()
        except InitializationError as e:
            if isinstance(e.__cause__, CancelledError):
                raise e.__cause__
            report.disabled_reason = str(e)

        for manifest in manifests:
            key = str(manifest)
            if not self.enabled and detect_kind(manifest) is ManifestKind.TOOLCHAIN:
                report.skipped.append(key)
                continue
            try:
                report.records.extend(self.analyze(manifest))
            except (ManifestSyntaxError, ToolchainFailure, ValueError, OSError) as e:
                logger.error("解析失败: %s - %s", key, e)
                report.errors[key] = str(e)
            except ToolchainUnavailable as e:
                report.skipped.append(key)
                report.disabled_reason = str(e)

        if report.errors:
            logger.warning(
                "解析汇总: %d 个依赖, %d 个清单失败 (%s)",
                len(report.records), len(report.errors), ", ".join(report.errors),
            )
        return report

