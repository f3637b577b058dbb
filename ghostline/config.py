#!/usr/bin/env python3
"""
Ghostline Configuration Management
Handles the config file, environment variables, and defaults
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict
from .exceptions import ConfigurationError
from .logger import logger

log = logger.get_logger("config")

MENU_THEMES = ("minimal", "professional")


class ConfigManager:
    """Manage Ghostline configuration"""
    
    _instance = None
    _initialized = False
    
    DEFAULT_CONFIG = {
        "completion": {
            "cache_ttl_seconds": 300,
            "cache_max_entries": 100,
            "history_limit": 10
        },
        "menu": {
            "max_visible_items": 10,
            "theme": "professional"
        },
        "ghost": {
            "enabled": True
        },
        "history": {
            "file": ".ghostline/history"
        },
        "logging": {
            "level": "INFO",
            "directory": ".ghostline/logs"
        }
    }
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self):
        if ConfigManager._initialized:
            return
        
        self.config_dir = Path(os.environ.get("GHOSTLINE_HOME", Path.home() / ".ghostline"))
        self.config_file = self.config_dir / "config.json"
        
        self.config = self._load_config()
        
        ConfigManager._initialized = True
    
    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file and environment"""
        config = copy.deepcopy(self.DEFAULT_CONFIG)
        
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    self._deep_merge(config, json.load(f))
                log.info(f"Loaded configuration from {self.config_file}")
            except (OSError, json.JSONDecodeError) as e:
                log.warning(f"Failed to load config file: {e}")
        
        self._load_from_env(config)
        return config
    
    def _deep_merge(self, base: Dict, overlay: Dict):
        """Deep merge overlay config into base"""
        for key, value in overlay.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value
    
    def _load_from_env(self, config: Dict):
        """Load configuration from environment variables"""
        # Pattern: GHOSTLINE_SECTION_KEY=value
        for env_key, env_value in os.environ.items():
            if not env_key.startswith("GHOSTLINE_"):
                continue
            parts = env_key[len("GHOSTLINE_"):].lower().split("_", 1)
            if len(parts) == 2:
                section, key = parts
                if section in config and isinstance(config[section], dict):
                    config[section][key] = self._parse_env_value(env_value)
    
    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if value.lower() in ('true', 'yes'):
            return True
        elif value.lower() in ('false', 'no'):
            return False
        elif value.isdigit():
            return int(value)
        else:
            try:
                return float(value)
            except ValueError:
                return value
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value with dot notation
        
        Args:
            key: Configuration key (e.g., "completion.cache_ttl_seconds")
            default: Default value if key not found
            
        Returns:
            Configuration value
        """
        value = self.config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value
    
    def set(self, key: str, value: Any):
        """Set configuration value with dot notation"""
        parts = key.split(".")
        config = self.config
        for part in parts[:-1]:
            config = config.setdefault(part, {})
        config[parts[-1]] = value
        log.debug(f"Configuration updated: {key} = {value}")
    
    def save(self) -> Path:
        """
        Save configuration to file
        
        Returns:
            Path to saved configuration file
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
            log.info(f"Configuration saved to {self.config_file}")
            return self.config_file
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")
    
    def reset_to_defaults(self):
        """Reset configuration to defaults"""
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        log.info("Configuration reset to defaults")
    
    def validate(self):
        """Validate configuration"""
        ttl = self.get("completion.cache_ttl_seconds")
        if not isinstance(ttl, (int, float)) or ttl < 0:
            raise ConfigurationError(
                "completion.cache_ttl_seconds must be a non-negative number",
                config_key="completion.cache_ttl_seconds"
            )
        
        for key in ("completion.cache_max_entries", "completion.history_limit", "menu.max_visible_items"):
            value = self.get(key)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"{key} must be a positive integer", config_key=key)
        
        if self.get("menu.theme") not in MENU_THEMES:
            raise ConfigurationError(
                f"menu.theme must be one of: {', '.join(MENU_THEMES)}",
                config_key="menu.theme"
            )
        
        log.debug("Configuration validation passed")
    
    def to_dict(self) -> Dict[str, Any]:
        """Get entire configuration as dictionary"""
        return copy.deepcopy(self.config)
    
    def print_config(self, console=None):
        """Print configuration in readable format"""
        from rich.console import Console
        from rich.syntax import Syntax
        
        console = console or Console()
        syntax = Syntax(json.dumps(self.config, indent=2), "json", theme="monokai", line_numbers=False)
        console.print(syntax)


# Singleton instance
config = ConfigManager()
