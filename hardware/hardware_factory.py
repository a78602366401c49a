#!/usr/bin/env python3

"""
Hardware Factory
================

Creates the XY table controller with either a real serial transport or the
mock transport, depending on ``hardware_config.use_real_hardware`` in
settings.json.
"""

from typing import Optional

from core.logger import get_logger
from core.settings import ConnectionSettings, load_config, table_config
from hardware.rcx_commands import DEFAULT_SPEED
from hardware.table_controller import XYTableController
from hardware.transport import Transport

# Module-level logger
logger = get_logger()


def create_transport(use_real_hardware: bool) -> Transport:
    if use_real_hardware:
        from hardware.serial_transport import SerialTransport
        return SerialTransport()
    else:
        from hardware.mock_transport import MockTransport
        return MockTransport()


def create_table_controller(config_path: str = "config/settings.json") -> XYTableController:
    """
    Factory method to create the table controller.

    Args:
        config_path: Path to settings.json configuration file

    Returns:
        XYTableController wired to a SerialTransport or a MockTransport
    """
    config = load_config(config_path)
    use_real_hardware = config.get("hardware_config", {}).get("use_real_hardware", False)
    settings = ConnectionSettings.from_config(config)
    default_speed = int(table_config(config).get("default_speed", DEFAULT_SPEED))

    logger.info("="*60, category="table")
    logger.info(f"Configuration: {config_path}", category="table")
    logger.info(f"Mode: {'REAL HARDWARE' if use_real_hardware else 'MOCK/SIMULATION'}", category="table")
    logger.info(f"Serial: {settings.describe()}", category="table")
    logger.info("="*60, category="table")

    return XYTableController(settings, create_transport(use_real_hardware), default_speed)


# Convenience singleton for global access
_controller_instance: Optional[XYTableController] = None


def get_table_controller(config_path: str = "config/settings.json") -> XYTableController:
    """Get or create the singleton controller"""
    global _controller_instance

    if _controller_instance is None:
        _controller_instance = create_table_controller(config_path)

    return _controller_instance


def reset_table_controller():
    """Reset the singleton instance (useful for testing)"""
    global _controller_instance
    _controller_instance = None
