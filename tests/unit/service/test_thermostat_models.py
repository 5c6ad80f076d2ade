"""
设备模型单元测试
"""

from unittest.mock import Mock

import pytest

from thermostat_bridge.service.thermostat.thermostat_models import (
    DeviceDataStream,
    LocationDevice,
)


@pytest.mark.unit
class TestDeviceDataStream:
    """变更通知流测试"""

    def test_subscribe_and_emit(self):
        stream = DeviceDataStream()
        callback = Mock()
        stream.subscribe(callback)

        stream.emit({"celsius": 20})

        callback.assert_called_once_with({"celsius": 20})

    def test_unsubscribe(self):
        stream = DeviceDataStream()
        callback = Mock()
        unsubscribe = stream.subscribe(callback)
        unsubscribe()
        unsubscribe()

        stream.emit({})

        callback.assert_not_called()
        assert stream.subscriber_count == 0

    def test_failing_callback_does_not_block_others(self, caplog):
        """测试单个回调异常不影响其他订阅者"""
        stream = DeviceDataStream()
        second = Mock()
        stream.subscribe(Mock(side_effect=ValueError("bad")))
        stream.subscribe(second)

        stream.emit({})

        second.assert_called_once()
        assert "bad" in caplog.text


@pytest.mark.unit
class TestLocationDevice:
    """设备句柄测试"""

    def test_set_info_forwards_to_sink(self):
        sink = Mock(return_value="pending")
        device = LocationDevice("d", "t", "loc", sink=sink)

        assert device.set_info({"device": {"v1": {"mode": "cool"}}}) == "pending"
        sink.assert_called_once_with({"device": {"v1": {"mode": "cool"}}})

    def test_set_info_without_sink(self, caplog):
        device = LocationDevice("d", "t", "loc")
        assert device.set_info({"device": {"v1": {}}}) is None
        assert "未配置写入接收方" in caplog.text

    def test_apply_update_notifies(self):
        device = LocationDevice("d", "t", "loc", data={"parentZid": "p"})
        callback = Mock()
        device.on_data.subscribe(callback)

        device.apply_update({"celsius": 21})

        assert device.parent_id == "p"
        callback.assert_called_once_with({"parentZid": "p", "celsius": 21})
