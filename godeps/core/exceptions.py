"""统一异常体系

所有业务异常继承 GoDepsError，CLI 层可据此输出友好提示。

处理策略:
- 单个清单内的错误 (ManifestSyntaxError / ToolchainFailure) 只跳过该清单
- 工具链不可用 (ToolchainUnavailable) 停用 go.mod 解析，Gopkg.lock 不受影响
- 中断 (CancelledError) 立即向上传播，不被逐清单的错误处理吞掉
"""

from __future__ import annotations


class GoDepsError(Exception):
    """解析器基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(GoDepsError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ExecutionError(GoDepsError):
    """子进程执行失败"""

    code = "EXECUTION_ERROR"


class ProcessTimeoutError(ExecutionError):
    """子进程在限定时间内未结束（进程已被终止并回收）"""

    code = "PROCESS_TIMEOUT"


class CancelledError(GoDepsError):
    """等待子进程期间被中断（进程已被终止并回收）"""

    code = "CANCELLED"


class ManifestSyntaxError(GoDepsError):
    """清单内容格式错误，只影响当前文件"""

    code = "MANIFEST_SYNTAX"

    def __init__(self, manifest: str, message: str) -> None:
        super().__init__(f"{manifest}: {message}")
        self.manifest = manifest


class ToolchainFailure(GoDepsError):
    """go 进程返回了非预期的退出码，只影响当前文件"""

    code = "TOOLCHAIN_FAILURE"

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ToolchainUnavailable(GoDepsError):
    """工具链不可用，go.mod 解析在本次运行中被停用"""

    code = "TOOLCHAIN_UNAVAILABLE"


class ToolchainNotFound(ToolchainUnavailable):
    """找不到 go 可执行文件（退出码 127 或无法启动）"""

    code = "TOOLCHAIN_NOT_FOUND"


class ToolchainTooOld(ToolchainUnavailable):
    """go 版本过旧，不支持 mod 子命令"""

    code = "TOOLCHAIN_TOO_OLD"


class InitializationError(GoDepsError):
    """能力探测失败，go.mod 解析被停用"""

    code = "INITIALIZATION_ERROR"


class IdentifierConstructionError(GoDepsError):
    """无法构造 package-url，内部使用，总是回退到通用标识"""

    code = "IDENTIFIER_CONSTRUCTION"
