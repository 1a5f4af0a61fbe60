"""Configuration loader for the API client.

Supports YAML format with environment variable interpolation.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .request import DEFAULT_USER_AGENT
from .retry import CallOptions


@dataclass
class ApiConfig:
    """Endpoint and HTTP settings."""
    base_url: str = "https://api.exchange.coinbase.com"
    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class RetryConfig:
    """Default retry policy, see ``CallOptions``."""
    should_retry_on_status_codes: bool = False
    max_retries: int = 3
    min_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0
    retryable_status_codes: List[int] = field(default_factory=list)

    def to_call_options(self) -> CallOptions:
        return CallOptions(
            should_retry_on_status_codes=self.should_retry_on_status_codes,
            max_retries=self.max_retries,
            min_delay_seconds=self.min_delay_seconds,
            max_delay_seconds=self.max_delay_seconds,
            retryable_status_codes=frozenset(self.retryable_status_codes),
        )


@dataclass
class LoggingConfig:
    log_file: Optional[str] = None
    log_level: str = "INFO"


@dataclass
class ClientConfig:
    """Complete client configuration."""
    api: ApiConfig = field(default_factory=ApiConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: str) -> "ClientConfig":
        """Load configuration from YAML file with env var interpolation.

        Example YAML:
            api:
              base_url: "${CB_BASE_URL}"
              timeout: 10
            retry:
              should_retry_on_status_codes: true
              retryable_status_codes: [429, 503]
            logging:
              log_level: DEBUG
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with config_file.open("r") as f:
            raw = f.read()

        # Interpolate environment variables: ${VAR_NAME}
        for key, value in os.environ.items():
            raw = raw.replace(f"${{{key}}}", value)

        data = yaml.safe_load(raw) or {}

        retry = RetryConfig(**data.get("retry", {}))
        # validate eagerly so a bad file fails at load time
        retry.to_call_options()

        return cls(
            api=ApiConfig(**data.get("api", {})),
            retry=retry,
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_yaml(self, output_path: str) -> None:
        """Save configuration to YAML file."""
        data = {
            "api": {
                "base_url": self.api.base_url,
                "timeout": self.api.timeout,
                "user_agent": self.api.user_agent,
            },
            "retry": {
                "should_retry_on_status_codes": self.retry.should_retry_on_status_codes,
                "max_retries": self.retry.max_retries,
                "min_delay_seconds": self.retry.min_delay_seconds,
                "max_delay_seconds": self.retry.max_delay_seconds,
                "retryable_status_codes": list(self.retry.retryable_status_codes),
            },
            "logging": {
                "log_file": self.logging.log_file,
                "log_level": self.logging.log_level,
            },
        }

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with output_file.open("w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
