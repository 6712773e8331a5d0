"""清单来源: 读取锁文件，或驱动 go 工具链输出模块描述

两种清单:
- Gopkg.lock: TOML 锁文件，直接读取解析
- go.mod: 在清单所在目录执行 `go mod edit -json`，读取标准输出

go 进程退出码约定:
- 0 / 1    : 继续解析 stdout
- 127      : 找不到 go (ToolchainNotFound)
- 2        : stderr 含 `unknown subcommand "mod"` 时为 go 版本过旧 (ToolchainTooOld)
- 其他     : ToolchainFailure
"""

from __future__ import annotations

import logging
import tempfile
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from godeps.core.exceptions import (
    CancelledError,
    InitializationError,
    ManifestSyntaxError,
    ProcessTimeoutError,
    ToolchainFailure,
    ToolchainNotFound,
    ToolchainTooOld,
)
from godeps.utils.shell import CommandResult, ProcessLauncher, run_process

logger = logging.getLogger(__name__)

GOPKG_LOCK = "Gopkg.lock"
GO_MOD = "go.mod"

EXIT_OK = 0
EXIT_NO_MODULE = 1
EXIT_POSSIBLY_TOO_OLD = 2
EXIT_NOT_FOUND = 127
UNSUPPORTED_SUBCOMMAND = 'unknown subcommand "mod"'


class ManifestKind(str, Enum):
    """清单类型"""

    LOCK_TABLE = "lock-table"
    TOOLCHAIN = "toolchain"


_KIND_BY_NAME = {
    GOPKG_LOCK: ManifestKind.LOCK_TABLE,
    GO_MOD: ManifestKind.TOOLCHAIN,
}


def detect_kind(path: str | Path) -> ManifestKind | None:
    """按文件名判断清单类型，不支持的文件返回 None"""
    return _KIND_BY_NAME.get(Path(path).name)


def supports(path: str | Path) -> bool:
    return detect_kind(path) is not None


def load_lock_table(path: str | Path) -> dict[str, Any]:
    """读取并解析 Gopkg.lock

    Raises:
        ManifestSyntaxError: TOML 格式错误或文件无法按 UTF-8 解码
    """
    p = Path(path)
    try:
        with open(p, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ManifestSyntaxError(str(p), f"TOML 格式错误: {e}") from e
    except UnicodeDecodeError as e:
        raise ManifestSyntaxError(str(p), f"无法解码: {e}") from e


def classify_exit(result: CommandResult) -> None:
    """按固定约定解释 go 进程退出码，非 0/1 时抛出对应异常"""
    code = result.returncode
    if code in (EXIT_OK, EXIT_NO_MODULE):
        return
    if code == EXIT_NOT_FOUND:
        raise ToolchainNotFound(f"找不到 go 可执行文件 (exit={code})")
    if code == EXIT_POSSIBLY_TOO_OLD:
        for line in result.stderr_lines():
            if UNSUPPORTED_SUBCOMMAND in line:
                raise ToolchainTooOld(f"go 版本不支持 modules: {line.strip()}")
    raise ToolchainFailure(f"go 进程返回非预期退出码: {code}", returncode=code)


class GoToolchain:
    """go 命令封装: 启动 `go mod edit -json` 并解释退出状态"""

    def __init__(
        self,
        go: str = "go",
        *,
        timeout: float | None = 120,
        launcher: ProcessLauncher | None = None,
    ) -> None:
        self.go = go
        self.timeout = timeout
        self.launcher = launcher

    @property
    def args(self) -> list[str]:
        return [self.go, "mod", "edit", "-json"]

    def mod_edit_json(self, directory: str | Path) -> CommandResult:
        """在指定目录执行 `go mod edit -json`

        Raises:
            ToolchainNotFound: go 无法启动或退出码 127
            ToolchainTooOld: go 不支持 mod 子命令
            ToolchainFailure: 其他非预期退出码或超时
            CancelledError: 等待期间被中断
        """
        folder = Path(directory)
        if not folder.is_dir():
            raise ToolchainFailure(f"{folder} 不是目录")
        logger.info("启动: %s (cwd=%s)", " ".join(self.args), folder)
        try:
            result = run_process(
                self.args, cwd=str(folder),
                timeout=self.timeout, launcher=self.launcher,
            )
        except ProcessTimeoutError as e:
            raise ToolchainFailure(str(e)) from e
        except OSError as e:
            raise ToolchainNotFound(
                f"无法启动 go ({e})；若不分析 Go 项目可忽略，"
                "否则请确认 go 已安装且 go_path 配置正确",
            ) from e
        classify_exit(result)
        return result

    def probe(self, scratch_dir: str | Path | None = None) -> None:
        """能力探测: 在空目录执行一次，期望返回“找不到模块”的退出码 1

        Raises:
            InitializationError: 其他任何结果，go.mod 解析应被停用
        """
        if scratch_dir:
            self._probe_in(Path(scratch_dir))
            return
        with tempfile.TemporaryDirectory(prefix="godeps-probe-") as tmp:
            self._probe_in(Path(tmp))

    def _probe_in(self, folder: Path) -> None:
        try:
            result = self.mod_edit_json(folder)
        except CancelledError as e:
            raise InitializationError("go 进程被中断，停用 go.mod 解析") from e
        except (ToolchainNotFound, ToolchainTooOld, ToolchainFailure) as e:
            raise InitializationError(f"go 不可用，停用 go.mod 解析: {e}") from e
        if result.returncode != EXIT_NO_MODULE:
            raise InitializationError(
                f"go 探测返回非预期退出码，停用 go.mod 解析: {result.returncode}",
            )
        logger.info("go 探测通过: %s", self.go)
