import pytest
import yaml

from managers.config_manager import ConfigManager
from models.config import BlasterConfig
from models.enums import ReportedColor, StepArithmetic, TransformPolicy


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_shipped_configuration_loads():
    config = ConfigManager().load()

    assert config.channels.red == 17
    assert config.channels.green == 22
    assert config.channels.blue == 27
    assert config.device.path == "/dev/pi-blaster"
    assert config.device.daemon_command == ("pi-blaster",)
    assert config.color.policy == TransformPolicy.GAMMA
    assert config.api.port == 1337
    assert config.query_timeout == 5.0


def test_factory_defaults_match_dataclass_defaults(tmp_path):
    manager = ConfigManager(config_path=str(tmp_path / "missing.yaml"))
    assert manager.load() == BlasterConfig()


def test_include_files_are_merged(tmp_path):
    write_yaml(tmp_path / "hardware.yaml", {"channels": {"red": 5, "green": 6, "blue": 13}})
    write_yaml(tmp_path / "color.yaml", {"color": {"policy": "fade", "step_arithmetic": "saturate"}})
    main = write_yaml(tmp_path / "config.yaml", {
        "include": ["hardware.yaml", "color.yaml"],
        "query_timeout": 2.5,
    })

    config = ConfigManager(config_path=str(main)).load()

    assert (config.channels.red, config.channels.green, config.channels.blue) == (5, 6, 13)
    assert config.color.policy == TransformPolicy.FADE
    assert config.color.step_arithmetic == StepArithmetic.SATURATE
    assert config.query_timeout == 2.5


def test_missing_include_falls_back_to_factory_defaults(tmp_path):
    main = write_yaml(tmp_path / "config.yaml", {"include": ["nope.yaml"]})
    assert ConfigManager(config_path=str(main)).load() == BlasterConfig()


def test_missing_keys_take_defaults():
    config = ConfigManager.parse({"color": {"reported": "requested"}})
    assert config.color.reported == ReportedColor.REQUESTED
    assert config.channels == BlasterConfig().channels
    assert config.api.cooldown_ms == 10


def test_daemon_command_string_is_split():
    config = ConfigManager.parse({"device": {"daemon_command": "sudo pi-blaster --pcm"}})
    assert config.device.daemon_command == ("sudo", "pi-blaster", "--pcm")


@pytest.mark.parametrize("data, key", [
    ({"channels": {"red": 17, "green": 17, "blue": 27}}, "channels"),
    ({"channels": {"red": -1}}, "channels"),
    ({"color": {"policy": "strobe"}}, "color.policy"),
    ({"color": {"step_arithmetic": "modulo"}}, "color.step_arithmetic"),
    ({"color": {"step_size": 0}}, "color.step_size"),
    ({"color": {"fade_step_delay_ms": -5}}, "color.fade_step_delay_ms"),
    ({"api": {"port": 70000}}, "api.port"),
    ({"query_timeout": 0}, "query_timeout"),
    ({"log_level": "LOUD"}, "log_level"),
    ({"device": {"daemon_command": []}}, "device.daemon_command"),
])
def test_invalid_values_raise(data, key):
    with pytest.raises(ValueError, match=key):
        ConfigManager.parse(data)


def test_config_before_load_raises():
    with pytest.raises(RuntimeError):
        ConfigManager().config
