"""
恒温器桥接服务

为一个位置下的每台恒温器创建适配器，注册 Discovery 与命令主题，
并按配置的间隔定时全量刷新状态。
"""

import logging
from typing import Dict, Iterable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from thermostat_bridge.base.error_exceptions import ConfigurationError, DeviceBindingError
from thermostat_bridge.base.error_utils import report_error
from thermostat_bridge.base.logger import init_logging
from thermostat_bridge.config.config import ConfigManager, config_manager
from thermostat_bridge.config.config_models import AppConfig
from thermostat_bridge.config.validation import ConfigValidator
from thermostat_bridge.service.homeassistant.ha_mqtt import HAMQTTClient
from thermostat_bridge.service.homeassistant.mqtt_config import MQTTConfig
from thermostat_bridge.service.thermostat.thermostat_device import ThermostatDevice
from thermostat_bridge.service.thermostat.thermostat_models import (
    LocationDevice,
    THERMOSTAT_DEVICE_TYPE,
)

REFRESH_JOB_ID = "thermostat_refresh"


class ThermostatBridgeService:
    """恒温器与 MQTT 之间的桥接服务"""

    def __init__(self, client: HAMQTTClient, refresh_interval: int = 300):
        self.client = client
        self.refresh_interval = refresh_interval
        self.thermostats: Dict[str, ThermostatDevice] = {}
        self._scheduler: Optional[AsyncIOScheduler] = None

    def add_location(self, devices: Iterable[LocationDevice]) -> List[ThermostatDevice]:
        """为位置下的所有恒温器创建适配器并注册命令主题"""
        devices = list(devices)
        added = []
        for device in devices:
            if device.device_type != THERMOSTAT_DEVICE_TYPE:
                continue
            if device.id in self.thermostats:
                logging.debug(f"恒温器 {device.id} 已注册，跳过")
                continue
            try:
                thermostat = ThermostatDevice(
                    device, devices, self.client, base_topic=self.client.config.base_topic
                )
            except DeviceBindingError as e:
                logging.error(f"恒温器 {device.id} 绑定子设备失败: {e}")
                continue

            self._register_commands(thermostat)
            self.thermostats[device.id] = thermostat
            added.append(thermostat)
            logging.info(f"已注册恒温器: {device.id} ({device.name or '未命名'})")
        return added

    def _register_commands(self, thermostat: ThermostatDevice) -> None:
        for topic, command in thermostat.command_topics().items():

            def _handler(payload: str, _command=command, _thermostat=thermostat):
                _thermostat.process_command(payload, _command.value)

            self.client.subscribe(topic, _handler)

    async def publish_discovery(self) -> None:
        """发布所有恒温器的 Discovery 配置及完整状态"""
        bridge_availability = self.client.config.availability_topic
        for thermostat in self.thermostats.values():
            payload = thermostat.discovery_payload(bridge_availability)
            object_path = f"{thermostat.device.location_id}/{payload['unique_id']}"
            ok = await self.client.publish_discovery("climate", object_path, payload)
            if not ok:
                logging.warning(f"恒温器 {thermostat.device_id} Discovery 发布失败")
                continue
            thermostat.publish_availability()
            if thermostat.is_online():
                thermostat.publish_data()

    async def refresh(self) -> None:
        """定时全量刷新（离线设备跳过）

        协程任务由 AsyncIOScheduler 在事件循环中执行，普通函数则会被放进线程池。
        """
        for thermostat in self.thermostats.values():
            if thermostat.is_online():
                thermostat.publish_data()
            else:
                logging.debug(f"恒温器 {thermostat.device_id} 离线，跳过刷新")

    async def start(self) -> None:
        await self.client.connect()
        await self.publish_discovery()

        if self.refresh_interval > 0:
            self._scheduler = AsyncIOScheduler(
                job_defaults={"max_instances": 1, "coalesce": True}
            )
            self._scheduler.add_job(
                self.refresh,
                IntervalTrigger(seconds=self.refresh_interval),
                id=REFRESH_JOB_ID,
                replace_existing=True,
            )
            self._scheduler.start()
            logging.info(f"定时刷新已启动: 每 {self.refresh_interval} 秒")

    async def stop(self) -> None:
        logging.info("开始停止桥接服务...")
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

        for thermostat in self.thermostats.values():
            thermostat.detach()
            for topic in thermostat.command_topics():
                self.client.unsubscribe(topic)
        self.thermostats.clear()

        await self.client.close()
        logging.info("桥接服务已停止")


def create_bridge_service(
    app_config: Optional[AppConfig] = None, manager: Optional[ConfigManager] = None
) -> ThermostatBridgeService:
    """按配置创建桥接服务；配置无效时抛出 ConfigurationError"""
    if app_config is None:
        app_config = (manager or config_manager).load_config()

    validator = ConfigValidator()
    if not validator.validate(app_config):
        error = ConfigurationError(
            "配置验证失败", details=validator.get_validation_summary()
        )
        report_error(error, context="[config]")
        raise error

    mqtt = app_config.global_config.mqtt
    client = HAMQTTClient(
        MQTTConfig(
            host=mqtt.host,
            port=mqtt.port,
            username=mqtt.username,
            password=mqtt.password,
            client_id=mqtt.client_id,
            discovery_prefix=mqtt.discovery_prefix,
            base_topic=mqtt.base_topic,
            qos=mqtt.qos,
            retain=mqtt.retain,
        )
    )
    return ThermostatBridgeService(
        client, refresh_interval=app_config.global_config.thermostat.refresh_interval
    )


async def run_bridge(
    devices: Iterable[LocationDevice], config_file: str = "config.yaml"
) -> ThermostatBridgeService:
    """程序入口：初始化日志、加载配置并启动桥接服务"""
    manager = ConfigManager(config_file)
    app_config = manager.load_config()
    init_logging(app_config.global_config.log.level)

    service = create_bridge_service(app_config)
    service.add_location(devices)
    await service.start()
    logging.info(f"桥接服务已启动，恒温器数量: {len(service.thermostats)}")
    return service
