"""子进程执行工具: 统一外部进程调用

通过 ProcessLauncher 协议抽象进程启动，方便测试替换和跨平台适配。
run_process 负责有限等待，以及超时/中断时的进程终止与回收。
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

from godeps.core.exceptions import CancelledError, ProcessTimeoutError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def stderr_lines(self) -> list[str]:
        return [line for line in self.stderr.splitlines() if line.strip()]


# =========================================================================
# 进程协议
# =========================================================================

class ProcessHandle(Protocol):
    """已启动进程的句柄（subprocess.Popen 天然满足）"""

    returncode: int | None

    def communicate(self, timeout: float | None = None) -> tuple[str, str]:
        """等待进程结束，返回 (stdout, stderr)"""
        ...

    def kill(self) -> None:
        ...

    def wait(self, timeout: float | None = None) -> int:
        ...


class ProcessLauncher(Protocol):
    """进程启动器协议

    实现此协议即可替换底层执行方式。
    测试时可注入 fake 实现，无需 patch subprocess。
    """

    def spawn(self, args: list[str], *, cwd: str) -> ProcessHandle:
        """启动进程；无法启动时抛 OSError"""
        ...


# =========================================================================
# 默认实现: 本地进程启动器
# =========================================================================

class LocalLauncher:
    """本地进程启动器（默认实现）"""

    def spawn(self, args: list[str], *, cwd: str) -> ProcessHandle:
        return subprocess.Popen(
            args, cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE, stderr=subprocess.PIPE,
            text=True, encoding="utf-8", errors="replace",
        )


# =========================================================================
# 全局默认启动器（可替换）
# =========================================================================

_default_launcher: ProcessLauncher = LocalLauncher()


def get_launcher() -> ProcessLauncher:
    """获取全局默认进程启动器"""
    return _default_launcher


def set_launcher(launcher: ProcessLauncher) -> None:
    """替换全局默认进程启动器（用于测试或远程执行场景）"""
    global _default_launcher  # noqa: PLW0603
    _default_launcher = launcher


# =========================================================================
# 有限等待执行
# =========================================================================

def _reap(proc: ProcessHandle) -> None:
    """终止并回收进程，不留孤儿进程"""
    logger.warning("终止子进程")
    try:
        proc.kill()
    except OSError:
        # 进程已自行退出
        pass
    proc.wait()


def run_process(
    args: list[str], *, cwd: str,
    timeout: float | None = None,
    launcher: ProcessLauncher | None = None,
) -> CommandResult:
    """启动进程并等待结束

    Args:
        args: 命令参数列表
        cwd: 工作目录
        timeout: 最长等待秒数，None 表示不限
        launcher: 进程启动器，默认使用全局启动器

    Raises:
        OSError: 命令无法启动
        ProcessTimeoutError: 超时（进程已回收）
        CancelledError: 等待期间被中断（进程已回收）
    """
    launcher = launcher or get_launcher()
    proc = launcher.spawn(args, cwd=cwd)
    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        _reap(proc)
        raise ProcessTimeoutError(
            f"进程超时 ({timeout}s): {' '.join(args)}",
        ) from e
    except KeyboardInterrupt as e:
        _reap(proc)
        raise CancelledError(f"进程等待被中断: {' '.join(args)}") from e
    returncode = proc.returncode if proc.returncode is not None else proc.wait()
    return CommandResult(
        returncode=returncode,
        stdout=stdout or "",
        stderr=stderr or "",
    )
