import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import AppConfig

ENV_PREFIX = "SECSCAN_"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ConfigManager:
    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self.config: Optional[AppConfig] = None
        self.load_config()

    def load_config(self) -> AppConfig:
        """Load configuration from file, or defaults when no file is given"""
        config_data: Dict[str, Any] = {}
        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

        # Merge with environment variables
        config_data = self._merge_env_vars(config_data)

        self.config = AppConfig(**config_data)
        return self.config

    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge environment variables with configuration

        SECSCAN_LOG_LEVEL sets log_level; SECSCAN_TOOLS_OSCAP_PATH sets
        tools.oscap.path.
        """
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            config_key = key[len(ENV_PREFIX):].lower()

            if config_key.startswith('tools_') and config_key != 'tools_dir':
                parts = config_key.split('_', 2)
                if len(parts) < 3:
                    continue
                _, tool_name, field = parts
                tools = config_data.setdefault('tools', {}) or {}
                tools.setdefault(tool_name, {})[field] = value
                config_data['tools'] = tools
            elif config_key != 'tools':
                config_data[config_key] = value

        return config_data

    def get_config(self) -> AppConfig:
        """Get current configuration"""
        if self.config is None:
            self.load_config()
        return self.config


def setup_logging(config: AppConfig, log_file: str = 'secscan.log') -> None:
    """Setup logging configuration"""
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    # Create logs directory
    log_dir = Path(config.logs_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_dir / log_file, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
