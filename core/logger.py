#!/usr/bin/env python3

"""
Centralized Logging System for the XY Table Controller
======================================================

Thread-safe, configurable logging with support for multiple log levels,
categories, and output targets (console, file).

Log Levels:
- DEBUG: Raw serial traffic, parsed replies, internal state
- INFO: Connection changes, movements, program uploads
- WARNING: Rejected operations, configuration fallbacks
- ERROR: Transport failures, unreadable program files
- SUCCESS: Successful completion of operations

Usage:
    from core.logger import get_logger

    logger = get_logger()
    logger.info("Moving to X=120.0mm Y=40.0mm", category="table")
    logger.debug("TABLE >> @SERVO ON", category="transport")
"""

import json
import threading
import queue
import time
from datetime import datetime
from typing import Optional, Dict, Any
from pathlib import Path


class LogLevel:
    """Log level constants"""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    SUCCESS = 4  # Special level for successful operations

    NAMES = {
        0: "DEBUG",
        1: "INFO",
        2: "WARNING",
        3: "ERROR",
        4: "SUCCESS"
    }

    ICONS = {
        0: "🔍",  # DEBUG
        1: "ℹ️",   # INFO
        2: "⚠️",   # WARNING
        3: "🚨",  # ERROR
        4: "✅"   # SUCCESS
    }

    # ANSI color codes for terminal output
    COLORS = {
        0: "\033[90m",      # DEBUG - Gray
        1: "\033[97m",      # INFO - White
        2: "\033[93m",      # WARNING - Yellow
        3: "\033[91m",      # ERROR - Red
        4: "\033[92m",      # SUCCESS - Green
        "RESET": "\033[0m"
    }

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level"""
        level_map = {
            "DEBUG": cls.DEBUG,
            "INFO": cls.INFO,
            "WARNING": cls.WARNING,
            "ERROR": cls.ERROR,
            "SUCCESS": cls.SUCCESS
        }
        return level_map.get(level_str.upper(), cls.INFO)


DEFAULT_LOGGING_CONFIG = {
    "level": "INFO",
    "show_timestamps": True,
    "show_thread_names": False,
    "console_output": True,
    "file_output": False,
    "file_path": "logs/xy_table.log",
    "use_colors": True,
    "use_icons": True,
    "categories": {
        "table": "INFO",
        "transport": "INFO",
        "program": "INFO",
        "config": "WARNING",
        "cli": "INFO"
    }
}


class XYTableLogger:
    """
    Centralized logger for the XY table controller.
    Messages are queued by the caller and written by a background thread.
    """

    def __init__(self, config_path: str = "config/settings.json"):
        """Initialize logger with configuration"""
        self.config_path = config_path
        self.config = self._load_config()

        # Log level configuration
        self.global_level = LogLevel.from_string(self.config.get("level", "INFO"))
        self.category_levels = dict(self.config.get("categories", {}))

        # Output configuration
        self.console_output = self.config.get("console_output", True)
        self.file_output = self.config.get("file_output", False)
        self.file_path = self.config.get("file_path", "logs/xy_table.log")

        # Formatting options
        self.show_timestamps = self.config.get("show_timestamps", True)
        self.show_thread_names = self.config.get("show_thread_names", False)
        self.use_colors = self.config.get("use_colors", True)
        self.use_icons = self.config.get("use_icons", True)

        # Thread-safe message queue
        self.log_queue = queue.Queue()
        self.processor_running = False
        self.processor_thread: Optional[threading.Thread] = None

        self.log_file = None
        self._setup_file_logging()

        self.start_processor()

    def _load_config(self) -> Dict[str, Any]:
        """Load logging configuration from settings.json"""
        try:
            with open(self.config_path, 'r') as f:
                settings = json.load(f)
                return settings.get("logging", DEFAULT_LOGGING_CONFIG)
        except (FileNotFoundError, json.JSONDecodeError):
            return DEFAULT_LOGGING_CONFIG

    def _setup_file_logging(self):
        """Setup file logging if enabled"""
        if self.file_output:
            try:
                log_dir = Path(self.file_path).parent
                log_dir.mkdir(parents=True, exist_ok=True)

                self.log_file = open(self.file_path, 'a', encoding='utf-8')
            except OSError as e:
                print(f"Failed to setup file logging: {e}")
                self.file_output = False

    def start_processor(self):
        """Start the log processor thread"""
        if not self.processor_running:
            self.processor_running = True
            self.processor_thread = threading.Thread(
                target=self._process_logs,
                daemon=True,
                name="LogProcessor"
            )
            self.processor_thread.start()

    def stop_processor(self):
        """Stop the log processor thread, draining pending messages first"""
        self.processor_running = False
        if self.processor_thread:
            self.processor_thread.join(timeout=1.0)
        self._drain()
        if self.log_file:
            self.log_file.close()
            self.log_file = None

    def _process_logs(self):
        """Process log messages from queue (runs in background thread)"""
        while self.processor_running:
            try:
                timestamp, level, category, message = self.log_queue.get(timeout=0.1)
            except queue.Empty:
                continue

            try:
                self._emit(timestamp, level, category, message)
            except Exception as e:
                # Don't let processor thread crash
                print(f"Log processor error: {e}")
                time.sleep(0.1)
            finally:
                self.log_queue.task_done()

    def _drain(self):
        while True:
            try:
                timestamp, level, category, message = self.log_queue.get_nowait()
            except queue.Empty:
                return
            self._emit(timestamp, level, category, message)
            self.log_queue.task_done()

    def _emit(self, timestamp: datetime, level: int, category: str, message: str):
        formatted = self._format_message(timestamp, level, category, message)

        if self.console_output:
            print(formatted["console"])

        if self.file_output and self.log_file:
            self.log_file.write(formatted["file"] + "\n")
            self.log_file.flush()

    def _format_message(self, timestamp: datetime, level: int, category: str, message: str) -> Dict[str, str]:
        """Format log message for different outputs"""
        level_name = LogLevel.NAMES[level]
        level_icon = LogLevel.ICONS[level] if self.use_icons else ""

        time_str = ""
        if self.show_timestamps:
            time_str = f"[{timestamp.strftime('%H:%M:%S.%f')[:-3]}] "

        thread_str = ""
        if self.show_thread_names:
            thread_str = f"[{threading.current_thread().name}] "

        category_str = f"[{category}] " if category else ""

        if self.use_colors:
            color = LogLevel.COLORS[level]
            reset = LogLevel.COLORS["RESET"]
            console_msg = f"{time_str}{thread_str}{color}{level_icon} {level_name:7}{reset} {category_str}{message}"
        else:
            console_msg = f"{time_str}{thread_str}{level_icon} {level_name:7} {category_str}{message}"

        # File output (no colors)
        file_msg = f"{time_str}{thread_str}{level_name:7} {category_str}{message}"

        return {
            "console": console_msg,
            "file": file_msg
        }

    def _should_log(self, level: int, category: Optional[str] = None) -> bool:
        """Determine if message should be logged based on level and category"""
        if category and category in self.category_levels:
            category_level = LogLevel.from_string(self.category_levels[category])
            return level >= category_level

        return level >= self.global_level

    def log(self, level: int, message: str, category: Optional[str] = None):
        """
        Log a message at specified level.

        Args:
            level: Log level (use LogLevel constants)
            message: Message to log
            category: Optional category (e.g., "table", "transport", "program")
        """
        if not self._should_log(level, category):
            return

        timestamp = datetime.now()
        self.log_queue.put((timestamp, level, category or "", message))

    def debug(self, message: str, category: Optional[str] = None):
        """Log debug message (serial traffic, parsed values)"""
        self.log(LogLevel.DEBUG, message, category)

    def info(self, message: str, category: Optional[str] = None):
        """Log info message (movements, connection changes)"""
        self.log(LogLevel.INFO, message, category)

    def warning(self, message: str, category: Optional[str] = None):
        """Log warning message (rejected operations)"""
        self.log(LogLevel.WARNING, message, category)

    def error(self, message: str, category: Optional[str] = None):
        """Log error message (transport and file failures)"""
        self.log(LogLevel.ERROR, message, category)

    def success(self, message: str, category: Optional[str] = None):
        """Log success message (successful operation completion)"""
        self.log(LogLevel.SUCCESS, message, category)


# Singleton instance
_logger_instance: Optional[XYTableLogger] = None
_logger_lock = threading.Lock()


def get_logger(config_path: str = "config/settings.json") -> XYTableLogger:
    """
    Get singleton logger instance.

    Args:
        config_path: Path to settings.json configuration file

    Returns:
        XYTableLogger instance
    """
    global _logger_instance

    if _logger_instance is None:
        with _logger_lock:
            if _logger_instance is None:
                _logger_instance = XYTableLogger(config_path)

    return _logger_instance


def shutdown_logger():
    """Shutdown the logger (call on application exit)"""
    global _logger_instance

    if _logger_instance:
        _logger_instance.stop_processor()
        _logger_instance = None
