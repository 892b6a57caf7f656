"""Load and validate print host settings from a TOML file."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from craftlink.host import DEFAULT_TIMEOUT

VALID_HOST_TYPES = {"craftbot"}

ENV_OVERRIDES = {
    "host": "CRAFTBOT_HOST",
    "username": "CRAFTBOT_USER",
    "password": "CRAFTBOT_PASSWORD",
}


@dataclass
class PrintHostConfig:
    host_type: str = "craftbot"
    host: str | None = None
    username: str = ""
    password: str = ""
    timeout: float = DEFAULT_TIMEOUT


def load_config(path: Path) -> PrintHostConfig:
    """Load and validate the [printhost] table of a TOML file."""
    path = path.resolve()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    if "printhost" not in raw:
        raise ValueError("A [printhost] table is required")
    ph = raw["printhost"]

    host_type = ph.get("type", "craftbot")
    if host_type not in VALID_HOST_TYPES:
        raise ValueError(
            f"printhost.type must be one of {sorted(VALID_HOST_TYPES)}, got '{host_type}'"
        )

    timeout = float(ph.get("timeout", DEFAULT_TIMEOUT))
    if timeout <= 0:
        raise ValueError(f"printhost.timeout must be > 0, got {timeout}")

    return PrintHostConfig(
        host_type=host_type,
        host=ph.get("host"),
        username=str(ph.get("user", "")),
        password=str(ph.get("password", "")),
        timeout=timeout,
    )


def resolve_credentials(config: PrintHostConfig) -> PrintHostConfig:
    """Merge config values with env var overrides.

    Env vars take precedence over config file values.
    """
    resolved = PrintHostConfig(
        host_type=config.host_type,
        host=os.environ.get(ENV_OVERRIDES["host"], config.host),
        username=os.environ.get(ENV_OVERRIDES["username"], config.username),
        password=os.environ.get(ENV_OVERRIDES["password"], config.password),
        timeout=config.timeout,
    )
    if not resolved.host:
        raise ValueError(
            f"printhost.host is required. Set it in [printhost] config "
            f"or the {ENV_OVERRIDES['host']} env var."
        )
    return resolved
