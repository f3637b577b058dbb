#!/usr/bin/env python3
"""
Ghostline Logging System
One `ghostline` logger tree: a rich console handler for warnings and a
rotating file handler once the entry point has read the config
"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


class GhostlineLogger:
    """Owns the handlers of the `ghostline` logger; modules log through get_logger children"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if GhostlineLogger._initialized:
            return

        self.logger = logging.getLogger("ghostline")
        self.logger.setLevel(logging.INFO)
        self.logger.handlers.clear()
        self.file_handler: Optional[RotatingFileHandler] = None

        # The console sits under an interactive prompt, keep it quiet
        console_handler = RichHandler(console=Console(stderr=True), show_level=True, show_time=False)
        console_handler.setLevel(logging.WARNING)
        self.logger.addHandler(console_handler)

        GhostlineLogger._initialized = True

    def get_logger(self, name: str) -> logging.Logger:
        return self.logger.getChild(name)

    def set_level(self, level: Union[int, str]) -> None:
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        self.logger.setLevel(level)

    def configure(self, level: Union[int, str] = "INFO", directory: Optional[str] = None) -> Optional[Path]:
        """
        Apply the logging section of the config.

        Args:
            level: Level name or number for the whole tree
            directory: Where the daily log file goes; None turns file logging off

        Returns:
            The log file path, or None without a directory
        """
        self.set_level(level)
        if self.file_handler is not None:
            self.logger.removeHandler(self.file_handler)
            self.file_handler.close()
            self.file_handler = None
        if not directory:
            return None

        logs_dir = Path(directory).expanduser()
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = logs_dir / f"ghostline_{datetime.now().strftime('%Y%m%d')}.log"
        self.file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=3)  # 5MB
        self.file_handler.setLevel(logging.DEBUG)
        self.file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(self.file_handler)
        return log_file


# Singleton instance
logger = GhostlineLogger()
