"""
错误处理工具函数
"""

import asyncio
import inspect
import logging
from typing import Any, Dict

from thermostat_bridge.base.error_category import ErrorCategory
from thermostat_bridge.base.error_collector import error_collector

logger = logging.getLogger(__name__)


def run_async_safe(result: Any) -> None:
    """
    以“发出即忘”的方式执行可能为协程的调用结果。

    - 非 awaitable 结果直接忽略（同步调用已完成）
    - 有运行中的事件循环时创建后台任务，并在任务失败时记录日志
    - 否则使用 asyncio.run 同步执行
    """
    if not inspect.isawaitable(result):
        return

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(_await(result))
        return

    task = loop.create_task(_await(result))

    def _handle_task_result(task: asyncio.Task) -> None:
        """处理任务完成结果，确保异常不会被静默忽略"""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Background task failed with exception: {type(exc).__name__}: {exc}",
                exc_info=exc,
            )

    task.add_done_callback(_handle_task_result)


async def _await(awaitable):
    return await awaitable


def report_error(error: Exception, context: str = "") -> None:
    """按严重级别写日志并计入错误收集器（被拒绝的命令、配置错误等）"""
    level = ErrorCategory.get_log_level(error)
    logger.log(level, f"{context} {type(error).__name__}: {error}".strip())
    error_collector.record_error(error, context)


def get_error_handling_status() -> Dict[str, Any]:
    """获取错误处理系统状态"""
    summary = error_collector.get_error_summary()
    return {
        "status": "healthy",
        "error_collector": {
            "total_errors": summary.get("total_errors", 0),
            "error_types": summary.get("error_counts", {}),
            "rejected_commands": summary.get("rejected_commands", 0),
            "recent_errors": len(summary.get("recent_errors", [])),
        },
    }
