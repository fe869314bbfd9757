"""TheOldReader configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_THEOLDREADER_HOST = "theoldreader.com"
DEFAULT_THEOLDREADER_SOURCE = "theoldreader"
THEOLDREADER_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True)
class TheOldReaderConfig:
    """Holds TheOldReader account configuration values."""

    auth_token: str
    host: str
    source_id: str
    resilience: ResilienceConfig

    @property
    def auth_header_value(self) -> str:
        return f"GoogleLogin auth={self.auth_token}"


def get_source_id() -> str:
    return os.getenv("THEOLDREADER_SOURCE_ID") or DEFAULT_THEOLDREADER_SOURCE


def get_theoldreader_config(*, resilience: ResilienceConfig | None = None) -> TheOldReaderConfig:
    values = require_env_vars(("THEOLDREADER_AUTH_TOKEN",))
    host = os.getenv("THEOLDREADER_HOST") or DEFAULT_THEOLDREADER_HOST
    return TheOldReaderConfig(
        auth_token=values["THEOLDREADER_AUTH_TOKEN"],
        host=host,
        source_id=get_source_id(),
        resilience=resilience
        or ResilienceConfig(
            name="theoldreader",
            timeout_seconds=THEOLDREADER_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        ),
    )
