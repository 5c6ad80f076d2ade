"""
pytest 配置和夹具(fixtures)

提供测试所需的通用夹具和配置
"""

from typing import Any, Dict, List, Tuple
from unittest.mock import Mock

import pytest

from thermostat_bridge.base.error_category import ErrorCategory
from thermostat_bridge.base.error_collector import error_collector
from thermostat_bridge.service.thermostat.thermostat_device import ThermostatDevice
from thermostat_bridge.service.thermostat.thermostat_models import (
    LocationDevice,
    THERMOSTAT_DEVICE_TYPE,
    OPERATING_STATUS_DEVICE_TYPE,
    TEMPERATURE_SENSOR_DEVICE_TYPE,
)

LOCATION_ID = "location-1"
THERMOSTAT_ID = "thermostat-1"
DEVICE_ROOT = f"ring/{LOCATION_ID}/alarm/{THERMOSTAT_ID}"
TOPIC_ROOT = f"{DEVICE_ROOT}/thermostat"


def make_location(
    mode: str = "heat",
    fan_mode: str = "auto",
    set_point: Any = 20,
    dead_band: Any = 1.5,
    operating_mode: str = "off",
    celsius: Any = 21.5,
    sink=None,
    **extra: Any,
) -> Dict[str, LocationDevice]:
    """构造一个位置：恒温器 + 运行状态 + 温度传感器 + 无关设备"""
    thermostat_data = {
        "mode": mode,
        "fanMode": fan_mode,
        "modeSetpoints": {
            "off": {},
            "cool": {"setPoint": 24},
            "heat": {"setPoint": 20},
            "auto": {"deadBand": dead_band},
            "aux": {"setPoint": 20},
        },
        "commStatus": "ok",
        "batteryLevel": 100,
    }
    if set_point is not None:
        thermostat_data["setPoint"] = set_point
    thermostat_data.update(extra)

    thermostat = LocationDevice(
        id=THERMOSTAT_ID,
        device_type=THERMOSTAT_DEVICE_TYPE,
        location_id=LOCATION_ID,
        name="Hallway Thermostat",
        data=thermostat_data,
        sink=sink,
    )
    operating_status = LocationDevice(
        id="operating-1",
        device_type=OPERATING_STATUS_DEVICE_TYPE,
        location_id=LOCATION_ID,
        data={"parentZid": THERMOSTAT_ID, "operatingMode": operating_mode},
    )
    temperature_sensor = LocationDevice(
        id="temperature-1",
        device_type=TEMPERATURE_SENSOR_DEVICE_TYPE,
        location_id=LOCATION_ID,
        data={"parentZid": THERMOSTAT_ID, "celsius": celsius},
    )
    # 属于其他恒温器的同类子设备，不应被绑定
    other_sensor = LocationDevice(
        id="temperature-2",
        device_type=TEMPERATURE_SENSOR_DEVICE_TYPE,
        location_id=LOCATION_ID,
        data={"parentZid": "thermostat-2", "celsius": 5},
    )
    return {
        "thermostat": thermostat,
        "operating_status": operating_status,
        "temperature_sensor": temperature_sensor,
        "other_sensor": other_sensor,
    }


def published(publisher: Mock) -> List[Tuple[str, Any]]:
    """按顺序返回 (topic, payload) 列表"""
    return [c.args for c in publisher.publish.call_args_list]


def written(sink: Mock) -> List[Dict[str, Any]]:
    """按顺序返回写入设备的补丁"""
    return [c.args[0]["device"]["v1"] for c in sink.call_args_list]


def topic(suffix: str) -> str:
    return f"{TOPIC_ROOT}/{suffix}"


@pytest.fixture(autouse=True)
def reset_error_state():
    """每个测试前后清理全局错误状态"""
    error_collector.clear_errors()
    ErrorCategory.reset()
    yield
    error_collector.clear_errors()
    ErrorCategory.reset()


@pytest.fixture
def sink():
    """Mock 设备写入接收方"""
    return Mock(return_value=None)


@pytest.fixture
def publisher():
    """Mock MQTT 发布方"""
    mock = Mock()
    mock.publish = Mock(return_value=None)
    return mock


@pytest.fixture
def build_thermostat(sink, publisher):
    """按给定设备状态构造恒温器适配器"""

    def _build(**kwargs) -> Tuple[ThermostatDevice, Dict[str, LocationDevice]]:
        devices = make_location(sink=sink, **kwargs)
        thermostat = ThermostatDevice(
            devices["thermostat"], list(devices.values()), publisher
        )
        return thermostat, devices

    return _build
