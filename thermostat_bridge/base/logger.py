"""日志初始化工具

- 读取 `config.yaml` 中的 `global.log.level` 字段，动态设置日志级别。
- 支持结构化日志记录，便于监控和分析。
- 统一格式：`[LEVEL] YYYY-MM-DD HH:MM:SS 模块名: 消息`。

使用方法：在程序入口调用 `init_logging()` 完成全局初始化。
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from thermostat_bridge.base.log_category import LogCategory

LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


class StructuredLogger:
    """结构化日志记录器"""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def log_structured(
        self,
        level: int,
        message: str,
        category: LogCategory = LogCategory.SYSTEM,
        extra_data: Optional[Dict[str, Any]] = None,
        device_id: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        """记录结构化日志"""
        structured_data = {
            "timestamp": datetime.now().isoformat(),
            "category": category.value,
            "message": message,
            "level": logging.getLevelName(level),
        }

        if device_id:
            structured_data["device_id"] = device_id
        if operation:
            structured_data["operation"] = operation
        if extra_data:
            structured_data["extra"] = extra_data

        self.logger.log(
            level, f"STRUCTURED: {json.dumps(structured_data, ensure_ascii=False)}"
        )

    def log_command(
        self,
        device_id: str,
        command: str,
        value: str,
        accepted: bool,
        extra_data: Optional[Dict[str, Any]] = None,
    ):
        """记录命令处理结果"""
        command_data = {"command": command, "value": value, "accepted": accepted}
        if extra_data:
            command_data.update(extra_data)

        level = logging.DEBUG if accepted else logging.INFO
        message = f"命令{'已接受' if accepted else '被拒绝'}: {command}={value}"

        self.log_structured(
            level=level,
            message=message,
            category=LogCategory.COMMAND,
            extra_data=command_data,
            device_id=device_id,
            operation=command,
        )


def get_structured_logger(name: str) -> StructuredLogger:
    """获取结构化日志记录器"""
    return StructuredLogger(name)


def level_from_string(level_str: Optional[str]) -> int:
    """日志级别名称转换，未知名称默认 INFO"""
    if not level_str:
        return logging.INFO
    return _LEVELS.get(level_str.upper(), logging.INFO)


def init_logging(level: Optional[str] = None) -> int:
    """初始化全局日志；未指定级别时从配置文件读取"""
    if level is None:
        try:
            from thermostat_bridge.config.config import get_log_config

            level = get_log_config().level
        except Exception:
            level = "INFO"

    resolved = level_from_string(level)
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )
    return resolved
