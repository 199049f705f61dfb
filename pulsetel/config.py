"""Configuration for the telemetry provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

__all__ = [
    "TelemetryConfig",
    "TelemetryConfigUpdate",
    "new_telemetry_config",
    "with_allow_concurrent_execution",
    "with_concurrent_pool_size",
    "with_concurrent_buffer_size",
]


@dataclass
class TelemetryConfig:
    """Settings that control how a telemetry provider runs its handlers.

    allow_concurrent_execution: run handlers on a worker pool instead of inline.
    concurrent_pool_size: number of pool workers when running concurrently.
    concurrent_buffer_size: number of queued jobs the pool accepts.
    """

    allow_concurrent_execution: bool = False
    concurrent_pool_size: int = 0
    concurrent_buffer_size: int = 0


TelemetryConfigUpdate = Callable[[TelemetryConfig], None]


def new_telemetry_config(*updates: TelemetryConfigUpdate) -> TelemetryConfig:
    """Build a config from the defaults, applying each update in order."""
    config = TelemetryConfig()
    for update in updates:
        update(config)
    return config


def with_allow_concurrent_execution(allow_concurrent_execution: bool) -> TelemetryConfigUpdate:
    """Return an update that sets whether handlers run concurrently."""

    def update(config: TelemetryConfig) -> None:
        config.allow_concurrent_execution = allow_concurrent_execution

    return update


def with_concurrent_pool_size(concurrent_pool_size: int) -> TelemetryConfigUpdate:
    """Return an update that sets the worker pool size."""

    def update(config: TelemetryConfig) -> None:
        config.concurrent_pool_size = concurrent_pool_size

    return update


def with_concurrent_buffer_size(concurrent_buffer_size: int) -> TelemetryConfigUpdate:
    """Return an update that sets the worker pool buffer size."""

    def update(config: TelemetryConfig) -> None:
        config.concurrent_buffer_size = concurrent_buffer_size

    return update