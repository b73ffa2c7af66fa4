"""Timeout presets for provider HTTP calls."""

from dataclasses import dataclass

import httpx


@dataclass
class TimeoutConfig:
    """
    Configuration for request timeouts.

    All timeout values are in seconds.

    Attributes:
        connect: Timeout for establishing connection
        read: Timeout for reading response
        write: Timeout for sending the request body
        pool: Timeout for acquiring a pooled connection

    Example:
        config = TimeoutConfig(connect=10.0, read=60.0)
    """

    connect: float = 10.0
    read: float = 60.0
    write: float = 30.0
    pool: float = 10.0

    def __post_init__(self):
        for name in ("connect", "read", "write", "pool"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} timeout must be positive")

    @classmethod
    def fast(cls) -> "TimeoutConfig":
        """Preset for fast, low-latency operations."""
        return cls(connect=5.0, read=30.0, write=15.0, pool=5.0)

    @classmethod
    def standard(cls) -> "TimeoutConfig":
        """Standard preset for chat completions."""
        return cls()

    @classmethod
    def long_running(cls) -> "TimeoutConfig":
        """Preset for long-running operations (e.g., large embedding batches)."""
        return cls(connect=15.0, read=300.0, write=60.0, pool=15.0)

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(connect=self.connect, read=self.read, write=self.write, pool=self.pool)
