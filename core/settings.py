#!/usr/bin/env python3

"""
Settings
========

Loads config/settings.json and turns the ``hardware_config.xy_table`` section
into immutable connection settings for the serial link to the RCX driver.
"""

import json
from dataclasses import dataclass
from typing import Dict, Any

from core.exceptions import ConfigurationError
from core.logger import get_logger

logger = get_logger()

PARITY_MODES = ("none", "even", "odd", "mark", "space")
DATA_BITS = (5, 6, 7, 8)
STOP_BITS = (1, 1.5, 2)


def load_config(config_path: str = "config/settings.json") -> Dict[str, Any]:
    """Load configuration from settings.json"""
    try:
        with open(config_path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load config from {config_path}: {e}", category="config")
        return {}


def table_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return the xy_table section of a loaded configuration"""
    return config.get("hardware_config", {}).get("xy_table", {})


@dataclass(frozen=True)
class ConnectionSettings:
    """Serial line settings for the RCX driver"""
    port: str = "/dev/ttyUSB0"
    baud_rate: int = 9600
    parity: str = "odd"
    data_bits: int = 8
    stop_bits: float = 1
    timeout: float = 1.0        # seconds, read timeout of the transport
    reply_length: int = 60      # bytes read for one reply line

    def __post_init__(self):
        if not self.port:
            raise ConfigurationError("Serial port must not be empty", module="config")
        if self.baud_rate <= 0:
            raise ConfigurationError(f"Invalid baud rate: {self.baud_rate}", module="config")
        if self.parity not in PARITY_MODES:
            raise ConfigurationError(
                f"Invalid parity '{self.parity}', expected one of {', '.join(PARITY_MODES)}",
                module="config"
            )
        if self.data_bits not in DATA_BITS:
            raise ConfigurationError(f"Invalid data bits: {self.data_bits}", module="config")
        if self.stop_bits not in STOP_BITS:
            raise ConfigurationError(f"Invalid stop bits: {self.stop_bits}", module="config")
        if self.timeout is not None and self.timeout < 0:
            raise ConfigurationError(f"Invalid timeout: {self.timeout}", module="config")
        if self.reply_length <= 0:
            raise ConfigurationError(f"Invalid reply length: {self.reply_length}", module="config")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ConnectionSettings":
        """
        Build settings from a loaded settings.json dictionary.

        Missing keys fall back to the defaults above (/dev/ttyUSB0, 9600 8O1).
        """
        section = table_config(config)
        defaults = cls()
        return cls(
            port=section.get("serial_port", defaults.port),
            baud_rate=int(section.get("baud_rate", defaults.baud_rate)),
            parity=str(section.get("parity", defaults.parity)).lower(),
            data_bits=int(section.get("data_bits", defaults.data_bits)),
            stop_bits=section.get("stop_bits", defaults.stop_bits),
            timeout=section.get("timeout", defaults.timeout),
            reply_length=int(section.get("reply_length", defaults.reply_length)),
        )

    def describe(self) -> str:
        stop = int(self.stop_bits) if self.stop_bits in (1, 2) else self.stop_bits
        return f"{self.port} @ {self.baud_rate} {self.data_bits}{self.parity[0].upper()}{stop}"
