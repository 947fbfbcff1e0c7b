"""Configuration models and loaders for ctxretry."""

from .loader import CONFIG_ENV_VAR, ConfigError, DEFAULT_CONFIG_PATH, dump_example_config, load_config
from .models import (
    CtxRetryConfig,
    HttpConfig,
    LoggingConfig,
    PolicyRegistry,
    RetryPolicyConfig,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "CtxRetryConfig",
    "DEFAULT_CONFIG_PATH",
    "HttpConfig",
    "LoggingConfig",
    "PolicyRegistry",
    "RetryPolicyConfig",
    "dump_example_config",
    "load_config",
]
