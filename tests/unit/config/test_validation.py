"""
配置验证单元测试
"""

import pytest

from thermostat_bridge.config.config_models import AppConfig
from thermostat_bridge.config.validation import ConfigValidator, validate_config


@pytest.mark.unit
class TestConfigValidator:
    """ConfigValidator测试类"""

    def test_default_config_valid(self):
        assert validate_config(AppConfig()) is True

    @pytest.mark.parametrize("port", [0, 65536, "1883"])
    def test_invalid_port(self, port):
        config = AppConfig()
        config.global_config.mqtt.port = port
        validator = ConfigValidator()

        assert validator.validate(config) is False
        assert any("端口" in e for e in validator.errors)

    def test_invalid_qos(self):
        config = AppConfig()
        config.global_config.mqtt.qos = 3

        assert validate_config(config) is False

    def test_empty_host(self):
        config = AppConfig()
        config.global_config.mqtt.host = ""

        assert validate_config(config) is False

    @pytest.mark.parametrize("base_topic", ["ring/#", "/ring", "ring/", "a+b", ""])
    def test_invalid_base_topic(self, base_topic):
        config = AppConfig()
        config.global_config.mqtt.base_topic = base_topic

        assert validate_config(config) is False

    @pytest.mark.parametrize("base_topic", ["ring", "home/ring", "r"])
    def test_valid_base_topic(self, base_topic):
        config = AppConfig()
        config.global_config.mqtt.base_topic = base_topic

        assert validate_config(config) is True

    def test_negative_refresh_interval(self):
        config = AppConfig()
        config.global_config.thermostat.refresh_interval = -1

        assert validate_config(config) is False

    def test_warnings_do_not_fail(self):
        """测试警告不影响验证结果"""
        config = AppConfig()
        config.global_config.thermostat.refresh_interval = 10
        config.global_config.mqtt.username = "user"
        config.global_config.log.level = "VERBOSE"
        validator = ConfigValidator()

        assert validator.validate(config) is True
        summary = validator.get_validation_summary()
        assert summary["valid"] is True
        assert summary["warning_count"] == 3
