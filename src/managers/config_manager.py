"""
Config Manager

Loads the YAML configuration (with include support) and parses it into the
frozen BlasterConfig dataclasses.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar
from enum import Enum

from models.config import ApiConfig, BlasterConfig, ChannelAssignment, ColorConfig, DeviceConfig
from models.enums import LogLevel, ReportedColor, StepArithmetic, TransformPolicy
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

E = TypeVar("E", bound=Enum)

SRC_DIR = Path(__file__).parent.parent


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Falls back to factory_defaults.yaml when the main
    configuration cannot be read.

    Example:
        config_manager = ConfigManager()
        config_manager.load()
        config = config_manager.config   # BlasterConfig

        config.channels.red   # 17
        config.color.policy   # TransformPolicy.GAMMA
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Args:
            config_path: Path to main config.yaml (relative to src/ unless absolute)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self._config: Optional[BlasterConfig] = None

    @property
    def config(self) -> BlasterConfig:
        if self._config is None:
            raise RuntimeError("ConfigManager.load() has not been called")
        return self._config

    def load(self) -> BlasterConfig:
        """
        Load and parse the configuration

        Process:
        1. Load main config.yaml
        2. If it has an 'include:' list, load and merge those files
        3. Fallback to factory_defaults.yaml when 1-2 fail to read
        4. Parse into BlasterConfig

        Raises:
            ValueError: A value is present but invalid (bad pin, unknown policy...)
            OSError: Factory defaults cannot be read either
        """
        full_path = SRC_DIR / self.config_path

        try:
            main_config = self._read_yaml(full_path)

            if "include" in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config["include"], full_path.parent)
                for key, value in main_config.items():
                    if key != "include":
                        self.data[key] = value
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(SRC_DIR / self.factory_defaults_path)

        self._config = self.parse(self.data)
        log.info("Configuration loaded", **self._config.summary())
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data or {}

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """Load and merge YAML files in order; later files win on key clashes."""
        merged: Dict[str, Any] = {}

        for filename in include_list:
            try:
                file_data = self._read_yaml(config_dir / filename)
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            merged.update(file_data)
            log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))

        return merged

    # ===== Parsing =====

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> BlasterConfig:
        """
        Build BlasterConfig from raw YAML data; missing keys take defaults

        Raises:
            ValueError: Invalid value, message names the offending key
        """
        channels = data.get("channels") or {}
        device = data.get("device") or {}
        color = data.get("color") or {}
        api = data.get("api") or {}

        defaults = BlasterConfig()

        try:
            channel_assignment = ChannelAssignment(
                red=channels.get("red", defaults.channels.red),
                green=channels.get("green", defaults.channels.green),
                blue=channels.get("blue", defaults.channels.blue),
            )
        except ValueError as ex:
            raise ValueError(f"channels: {ex}") from None

        command = device.get("daemon_command", defaults.device.daemon_command)
        if isinstance(command, str):
            command = command.split()

        device_config = DeviceConfig(
            path=str(device.get("path", defaults.device.path)),
            daemon_command=tuple(str(part) for part in command),
            daemon_timeout=cls._positive("device.daemon_timeout", device.get("daemon_timeout", defaults.device.daemon_timeout)),
            virtual=bool(device.get("virtual", defaults.device.virtual)),
        )
        if not device_config.daemon_command:
            raise ValueError("device.daemon_command must not be empty")

        step_size = color.get("step_size", defaults.color.step_size)
        if not isinstance(step_size, int) or not 0 < step_size <= 255:
            raise ValueError(f"color.step_size must be an integer 1-255, got {step_size!r}")

        color_config = ColorConfig(
            policy=cls._enum("color.policy", TransformPolicy, color.get("policy"), defaults.color.policy),
            fade_step_delay_ms=cls._non_negative("color.fade_step_delay_ms", color.get("fade_step_delay_ms", defaults.color.fade_step_delay_ms)),
            step_arithmetic=cls._enum("color.step_arithmetic", StepArithmetic, color.get("step_arithmetic"), defaults.color.step_arithmetic),
            step_size=step_size,
            reported=cls._enum("color.reported", ReportedColor, color.get("reported"), defaults.color.reported),
        )

        port = api.get("port", defaults.api.port)
        if not isinstance(port, int) or not 0 < port < 65536:
            raise ValueError(f"api.port must be 1-65535, got {port!r}")

        api_config = ApiConfig(
            host=str(api.get("host", defaults.api.host)),
            port=port,
            cooldown_ms=cls._non_negative("api.cooldown_ms", api.get("cooldown_ms", defaults.api.cooldown_ms)),
            cors_origins=tuple(api.get("cors_origins") or ()),
        )

        log_level = cls._enum("log_level", LogLevel, data.get("log_level"), LogLevel.INFO)

        return BlasterConfig(
            channels=channel_assignment,
            device=device_config,
            color=color_config,
            api=api_config,
            query_timeout=cls._positive("query_timeout", data.get("query_timeout", defaults.query_timeout)),
            log_level=log_level.name,
        )

    @staticmethod
    def _enum(key: str, enum_type: Type[E], value: Any, default: E) -> E:
        if value is None:
            return default
        try:
            return enum_type[str(value).upper()]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in enum_type)
            raise ValueError(f"{key}: unknown value '{value}' (valid: {valid})") from None

    @staticmethod
    def _non_negative(key: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"{key} must be a non-negative number, got {value!r}")
        return value

    @staticmethod
    def _positive(key: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"{key} must be a positive number, got {value!r}")
        return value
