"""Configuration management for the onchfs minter CLI."""

import json
import os
import shutil
from pathlib import Path
from typing import Optional

from common.constants import (
    CHUNK_SIZE_BYTES,
    CONFIRMATION_POLL_INTERVAL_SECONDS,
    CONFIRMATION_TIMEOUT_SECONDS,
    CONFIRMATIONS,
    DEFAULT_NETWORK,
    NETWORKS,
    SUBMISSION_INTERVAL_SECONDS,
)
from common.exceptions import ConfigurationError
from common.logging_config import get_logger

logger = get_logger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "network": DEFAULT_NETWORK,
        "gateway_url": "http://localhost:8732",
        "onchfs_contract": None,
        "header_map_path": None,
        "timeout": 30,
        "confirmations": CONFIRMATIONS,
        "chunk_size": CHUNK_SIZE_BYTES,
        "submission_interval": SUBMISSION_INTERVAL_SECONDS,
        "confirmation_poll_interval": CONFIRMATION_POLL_INTERVAL_SECONDS,
        "confirmation_timeout": CONFIRMATION_TIMEOUT_SECONDS,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.onchfs-minter/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.onchfs-minter' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Unreadable config {self.config_path}, using defaults: {e}")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    pass
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError:
                logger.warning(f"Cannot write default config to {self.config_path}")
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Cannot save config to {self.config_path}: {e}")

    def get_network(self) -> str:
        """
        Get active network name.

        MINTER_NETWORK, when set, takes precedence over the config file.
        """
        network = os.environ.get('MINTER_NETWORK') or self.data.get('network', DEFAULT_NETWORK)
        if network not in NETWORKS:
            logger.warning(f"Unknown network '{network}', using {DEFAULT_NETWORK}")
            return DEFAULT_NETWORK
        return network

    def set_network(self, network: str) -> None:
        """
        Switch network and save to file.

        Args:
            network: Network name (mainnet or ghostnet)
        """
        if network not in NETWORKS:
            raise ValueError(f"Unknown network: {network}")
        self.data['network'] = network
        self.save()

    def get_onchfs_contract(self) -> str:
        """
        Get content-store contract address.

        Returns:
            Configured address, or the active network's preset
        """
        return self.data.get('onchfs_contract') or NETWORKS[self.get_network()]['onchfs_contract']

    def get_marketplace_url(self) -> str:
        return NETWORKS[self.get_network()]['marketplace_url']

    def get_gateway_url(self) -> str:
        return os.environ.get('MINTER_GATEWAY_URL') or self.data.get('gateway_url', 'http://localhost:8732')

    def get_gateway_api_key(self) -> Optional[str]:
        return self.data.get('gateway_api_key') or os.environ.get('MINTER_GATEWAY_API_KEY')

    def get_header_map_path(self) -> Optional[Path]:
        path = self.data.get('header_map_path')
        return Path(path).expanduser() if path else None

    def get_timeout(self) -> int:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', 30)

    def get_pipeline_settings(self) -> dict:
        """
        Get pipeline tuning values.

        Returns:
            Dictionary with 'chunk_size', 'confirmations' and 'submission_interval'

        Raises:
            ConfigurationError: If a value is not a number or is out of range
        """
        try:
            settings = {
                'chunk_size': int(self.data.get('chunk_size', CHUNK_SIZE_BYTES)),
                'confirmations': int(self.data.get('confirmations', CONFIRMATIONS)),
                'submission_interval': float(self.data.get('submission_interval', SUBMISSION_INTERVAL_SECONDS)),
            }
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid pipeline setting in {self.config_path}: {e}") from e

        if not 0 < settings['chunk_size'] <= CHUNK_SIZE_BYTES:
            raise ConfigurationError(
                f"chunk_size must be between 1 and {CHUNK_SIZE_BYTES}, got {settings['chunk_size']}"
            )
        if settings['confirmations'] < 1:
            raise ConfigurationError(f"confirmations must be at least 1, got {settings['confirmations']}")
        if settings['submission_interval'] < 0:
            raise ConfigurationError(
                f"submission_interval must not be negative, got {settings['submission_interval']}"
            )
        return settings

    def get_confirmation_settings(self) -> dict:
        try:
            return {
                'poll_interval': float(self.data.get('confirmation_poll_interval', CONFIRMATION_POLL_INTERVAL_SECONDS)),
                'confirmation_timeout': float(self.data.get('confirmation_timeout', CONFIRMATION_TIMEOUT_SECONDS)),
            }
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid confirmation setting in {self.config_path}: {e}") from e
