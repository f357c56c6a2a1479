"""
Options configure a hivelink session and every RowSet it produces.

Example:
    Options(poll_interval=1.0, batch_size=5000, username="etl")

Options can also be read from the environment:
    HIVELINK_POLL_INTERVAL=1 HIVELINK_BATCH_SIZE=5000 -> Options.from_env()
"""
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Options:
    poll_interval: float = 5.0
    batch_size: int = 10000
    http_path: str = "cliservice"
    timeout: float = 30.0
    username: Optional[str] = None
    configuration: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int) or self.batch_size <= 0:
            raise ValueError(f"batch_size must be a positive integer, got {self.batch_size!r}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, prefix: str = "HIVELINK_", **overrides: Any) -> "Options":
        """
        Builds options from environment variables. Keyword overrides win over
        the environment.
        """
        values: Dict[str, Any] = {}
        env = os.environ
        if prefix + "POLL_INTERVAL" in env:
            values["poll_interval"] = float(env[prefix + "POLL_INTERVAL"])
        if prefix + "BATCH_SIZE" in env:
            values["batch_size"] = int(env[prefix + "BATCH_SIZE"])
        if prefix + "HTTP_PATH" in env:
            values["http_path"] = env[prefix + "HTTP_PATH"]
        if prefix + "TIMEOUT" in env:
            values["timeout"] = float(env[prefix + "TIMEOUT"])
        if prefix + "USERNAME" in env:
            values["username"] = env[prefix + "USERNAME"]
        values.update(overrides)
        return cls(**values)


DEFAULT_OPTIONS = Options()
