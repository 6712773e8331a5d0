"""godeps 日志配置

普通文本和结构化 JSON 两种输出格式，日志统一写 stderr，
stdout 留给解析结果。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# 通过 logger.xxx(..., extra={...}) 附带的上下文字段
CONTEXT_FIELDS = ("manifest", "module", "code")


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，便于 CI 流水线消费

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "WARNING",
            "logger": "godeps.core.coordinate",
            "message": "...",
            "context": {"manifest": "go.mod"}  (仅在带 extra 时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = {
            k: getattr(record, f"ctx_{k}")
            for k in CONTEXT_FIELDS if hasattr(record, f"ctx_{k}")
        }
        if context:
            log_entry["context"] = context
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def context(**fields: str) -> dict[str, str]:
    """构造 extra 参数，避免与 LogRecord 内置属性冲突

    示例:
        >>> logger.warning("回退标识", extra=context(manifest="go.mod"))
    """
    return {f"ctx_{k}": v for k, v in fields.items()}


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR）
        json_output: 为 True 时使用 JSON 格式（适用于 CI）
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def reset_logging() -> None:
    """清理根日志器上的所有 handlers（测试或重新配置时使用）"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
