"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from godeps.core.exceptions import ConfigError
from godeps.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_GO = "go"


@dataclass
class Config:
    """解析器全局配置"""

    # 工具链
    go_path: str = ""          # go 可执行文件路径，留空则使用 PATH 中的 go
    timeout: int = 120         # 单次 go 进程的最长等待秒数
    probe_dir: str = ""        # 能力探测的临时目录，留空则自动创建
    probe_enabled: bool = True

    # 日志
    log_level: str = "INFO"
    json_log: bool = False

    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.timeout, int) or self.timeout <= 0:
            raise ConfigError(f"timeout 必须为正整数: {self.timeout!r}")

    @classmethod
    def from_file(cls, path: str = "configs/godeps.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件无效 {path}: {e}") from e
        cfg.extra = extra
        return cfg

    def resolve_go(self) -> str:
        """确定 go 可执行文件，配置无效时回退到 PATH 中的 go"""
        if not self.go_path:
            logger.warning(
                "未设置 go 可执行文件路径，使用默认的 `%s`（可通过 go_path 配置）",
                DEFAULT_GO,
            )
            return DEFAULT_GO
        go = Path(self.go_path)
        if go.is_file():
            return str(go.resolve())
        logger.warning("go 可执行文件不存在: %s，使用默认的 `%s`", self.go_path, DEFAULT_GO)
        return DEFAULT_GO

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/godeps.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
