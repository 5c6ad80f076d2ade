"""
错误处理模块单元测试
"""

import asyncio
import logging
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from thermostat_bridge.base.error_handler import (
    BridgeError,
    ConfigurationError,
    DeviceBindingError,
    CommandError,
    MalformedCommandError,
    OutOfRangeError,
    DeadBandViolationError,
    UnknownCommandError,
    ErrorSeverity,
    ErrorCategory,
    ErrorCollector,
    error_collector,
    report_error,
    run_async_safe,
    get_error_handling_status,
)


@pytest.mark.unit
class TestBridgeError:
    """测试BridgeError基础异常类"""

    def test_bridge_error_basic(self):
        error = BridgeError("测试错误")
        assert str(error) == "测试错误"
        assert error.error_code == "UNKNOWN_ERROR"
        assert error.details == {}
        assert isinstance(error.timestamp, datetime)

    def test_configuration_error(self):
        error = ConfigurationError("配置错误", details={"field": "mqtt.port"})
        assert error.error_code == "CONFIG_ERROR"
        assert error.details["field"] == "mqtt.port"

    def test_device_binding_error(self):
        error = DeviceBindingError("未找到子设备", device_id="thermostat-1")
        assert error.error_code == "DEVICE_BINDING_ERROR"
        assert error.details["device_id"] == "thermostat-1"

    def test_command_error_details(self):
        error = OutOfRangeError(
            "超出范围", command="temperature", value="5", minimum=10.0, maximum=37.2
        )
        assert isinstance(error, CommandError)
        assert error.error_code == "OUT_OF_RANGE"
        assert error.command == "temperature"
        assert error.details == {
            "min": 10.0,
            "max": 37.2,
            "command": "temperature",
            "value": "5",
        }

    def test_dead_band_error(self):
        error = DeadBandViolationError("死区过小", dead_band=0.5)
        assert error.error_code == "DEADBAND_VIOLATION"
        assert error.details["dead_band"] == 0.5


@pytest.mark.unit
class TestErrorCategory:
    """测试错误分类"""

    def test_command_errors_are_low(self):
        assert ErrorCategory.get_severity(MalformedCommandError("x")) == ErrorSeverity.LOW
        assert ErrorCategory.get_log_level(MalformedCommandError("x")) == logging.INFO

    def test_unknown_command_is_medium(self):
        error = UnknownCommandError("x")
        assert ErrorCategory.get_log_level(error) == logging.WARNING

    def test_unregistered_error_defaults_to_medium(self):
        assert ErrorCategory.get_severity(ValueError("x")) == ErrorSeverity.MEDIUM

    def test_register_and_reset(self):
        ErrorCategory.register_error(ValueError, ErrorSeverity.CRITICAL)
        assert ErrorCategory.get_log_level(ValueError("x")) == logging.CRITICAL

        ErrorCategory.reset()
        assert ErrorCategory.get_severity(ValueError("x")) == ErrorSeverity.MEDIUM


@pytest.mark.unit
class TestErrorCollector:
    """测试错误收集器"""

    def test_record_error(self):
        collector = ErrorCollector()
        collector.record_error(MalformedCommandError("坏数据", command="temperature"), "[t1]")

        summary = collector.get_error_summary()
        assert summary["total_errors"] == 1
        assert summary["error_counts"] == {"MalformedCommandError": 1}
        recent = summary["recent_errors"][0]
        assert recent["error_code"] == "MALFORMED_COMMAND"
        assert recent["context"] == "[t1]"
        assert recent["command"] == "temperature"
        assert summary["rejected_commands"] == 1
        assert summary["rejection_counts"] == {"MALFORMED_COMMAND": 1}

    def test_max_records(self):
        collector = ErrorCollector(max_records=3)
        for i in range(5):
            collector.record_error(ValueError(str(i)))

        assert len(collector.errors) == 3
        assert collector.errors[0]["message"] == "2"
        assert collector.error_counts["ValueError"] == 5
        assert collector.get_error_summary()["rejected_commands"] == 0

    def test_clear_errors(self):
        collector = ErrorCollector()
        collector.record_error(ValueError("x"))
        collector.clear_errors()

        assert collector.get_error_summary()["total_errors"] == 0


@pytest.mark.unit
class TestReportError:
    """测试错误上报"""

    def test_report_error_logs_and_records(self, caplog):
        caplog.set_level(logging.INFO)

        report_error(UnknownCommandError("未知命令"), context="[t1]")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "[t1] UnknownCommandError: 未知命令"
        assert error_collector.get_error_summary()["total_errors"] == 1

    def test_get_error_handling_status(self):
        report_error(MalformedCommandError("x"))

        status = get_error_handling_status()
        assert status["status"] == "healthy"
        assert status["error_collector"]["total_errors"] == 1
        assert status["error_collector"]["error_types"] == {"MalformedCommandError": 1}
        assert status["error_collector"]["rejected_commands"] == 1


@pytest.mark.unit
class TestRunAsyncSafe:
    """测试发出即忘执行"""

    def test_ignores_plain_values(self):
        assert run_async_safe(None) is None
        assert run_async_safe(True) is None

    def test_runs_coroutine_without_loop(self):
        mock = AsyncMock(return_value=True)

        run_async_safe(mock("payload"))

        mock.assert_awaited_once_with("payload")

    @pytest.mark.asyncio
    async def test_schedules_task_in_running_loop(self):
        mock = AsyncMock(return_value=True)

        run_async_safe(mock("payload"))
        mock.assert_not_awaited()

        await asyncio.sleep(0)
        await asyncio.sleep(0)
        mock.assert_awaited_once_with("payload")

    @pytest.mark.asyncio
    async def test_logs_background_failure(self, caplog):
        caplog.set_level(logging.ERROR)

        async def _fail():
            raise RuntimeError("boom")

        run_async_safe(_fail())
        for _ in range(3):
            await asyncio.sleep(0)

        assert any("RuntimeError: boom" in r.getMessage() for r in caplog.records)
