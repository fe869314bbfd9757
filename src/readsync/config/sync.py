"""Synchronization defaults for reconciliation passes."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_flag

DEFAULT_SOURCE_ID_PREFIX = "tag:google.com"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    log_raw_payloads: bool = False
    source_id_prefix: str = DEFAULT_SOURCE_ID_PREFIX


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        log_raw_payloads=env_flag("READSYNC_LOG_RAW_PAYLOADS"),
        source_id_prefix=os.getenv("READSYNC_SOURCE_ID_PREFIX") or DEFAULT_SOURCE_ID_PREFIX,
    )
