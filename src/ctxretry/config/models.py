"""Pydantic models describing ctxretry configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel

from ctxretry.retry import backoff_schedule


class RetryPolicyConfig(BaseModel):
    """Retry budget and deadline for one class of operations."""

    model_config = ConfigDict(extra="allow")

    max_retries: int = Field(default=3, ge=0)
    base_backoff_seconds: float = Field(default=0.1, gt=0)
    deadline_seconds: Optional[float] = Field(default=None, gt=0)
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    def schedule(self) -> List[float]:
        """Waits following each failed attempt when all attempts fail."""

        return backoff_schedule(self.base_backoff_seconds, self.max_retries)

    def worst_case_wait_seconds(self) -> float:
        return sum(self.schedule())


class PolicyRegistry(RootModel[Dict[str, RetryPolicyConfig]]):
    """Named retry policies."""

    def get(self, key: str) -> RetryPolicyConfig:
        try:
            return self.root[key]
        except KeyError as exc:
            raise KeyError(f"Policy '{key}' not found in registry.") from exc

    def names(self) -> List[str]:
        return sorted(self.root)


class LoggingConfig(BaseModel):
    """Handler settings applied by ``configure_logging``."""

    model_config = ConfigDict(extra="allow")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_path: Optional[Path] = None


class HttpConfig(BaseModel):
    """Defaults for the HTTP fetch helpers."""

    model_config = ConfigDict(extra="allow")

    headers: Dict[str, str] = Field(default_factory=dict)


class CtxRetryConfig(BaseModel):
    """Root configuration object."""

    model_config = ConfigDict(extra="allow")

    policies: PolicyRegistry = Field(default_factory=lambda: PolicyRegistry.model_validate({}))
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    def policy(self, name: str) -> RetryPolicyConfig:
        """Return a named policy, raising ``KeyError`` if missing."""

        return self.policies.get(name)


__all__ = [
    "CtxRetryConfig",
    "HttpConfig",
    "LoggingConfig",
    "PolicyRegistry",
    "RetryPolicyConfig",
]
