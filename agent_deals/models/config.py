"""
Configuration models for the system.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DEFAULT_USER_AGENT = "AgentDeals-PricingMonitor/1.0"


@dataclass
class DataConfig:
    """Locations of the JSON documents the system reads and writes."""

    offers_path: str = "data/index.json"
    changes_path: str = "data/deal_changes.json"
    snapshot_path: str = "data/pricing-hashes.json"

    def validate(self) -> bool:
        """Validate data paths."""
        for name in ("offers_path", "changes_path", "snapshot_path"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Data path '{name}' must be a non-empty string")

        return True


@dataclass
class MonitorConfig:
    """Settings for the pricing page monitor."""

    fetch_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    max_workers: int = 1

    def validate(self) -> bool:
        """Validate monitor settings."""
        if not isinstance(self.fetch_timeout, (int, float)) or self.fetch_timeout <= 0:
            raise ValueError("Fetch timeout must be a positive number")

        if self.fetch_timeout > 120:
            raise ValueError("Fetch timeout cannot exceed 120 seconds")

        if not self.user_agent or not self.user_agent.strip():
            raise ValueError("User agent cannot be empty")

        if not isinstance(self.max_workers, int) or self.max_workers <= 0:
            raise ValueError("Max workers must be a positive integer")

        if self.max_workers > 32:
            raise ValueError("Max workers cannot exceed 32")

        return True


@dataclass
class Configuration:
    """System configuration."""

    data: DataConfig = field(default_factory=DataConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    change_window_days: int = 30
    stale_threshold_days: int = 30
    log_level: str = "INFO"
    log_directory: str = "logs"

    @classmethod
    def from_dict(cls, raw_config: Optional[Dict[str, Any]]) -> "Configuration":
        """Build configuration from a parsed YAML/JSON document."""
        raw_config = raw_config or {}
        data_section = raw_config.get("data") or {}
        monitor_section = raw_config.get("monitor") or {}
        feed_section = raw_config.get("feed") or {}
        staleness_section = raw_config.get("staleness") or {}
        logging_section = raw_config.get("logging") or {}

        defaults = DataConfig()
        monitor_defaults = MonitorConfig()

        return cls(
            data=DataConfig(
                offers_path=data_section.get("offers_path", defaults.offers_path),
                changes_path=data_section.get("changes_path", defaults.changes_path),
                snapshot_path=data_section.get(
                    "snapshot_path", defaults.snapshot_path
                ),
            ),
            monitor=MonitorConfig(
                fetch_timeout=monitor_section.get(
                    "fetch_timeout", monitor_defaults.fetch_timeout
                ),
                user_agent=monitor_section.get(
                    "user_agent", monitor_defaults.user_agent
                ),
                max_workers=monitor_section.get(
                    "max_workers", monitor_defaults.max_workers
                ),
            ),
            change_window_days=feed_section.get("default_window_days", 30),
            stale_threshold_days=staleness_section.get("threshold_days", 30),
            log_level=logging_section.get("level", "INFO"),
            log_directory=logging_section.get("directory", "logs"),
        )

    def validate(self) -> bool:
        """Validate system configuration."""
        if (
            not isinstance(self.change_window_days, int)
            or self.change_window_days <= 0
        ):
            raise ValueError("Change window days must be a positive integer")

        if (
            not isinstance(self.stale_threshold_days, int)
            or self.stale_threshold_days < 0
        ):
            raise ValueError("Stale threshold days must be a non-negative integer")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if str(self.log_level).upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")

        # Validate nested configurations
        self.data.validate()
        self.monitor.validate()

        return True
