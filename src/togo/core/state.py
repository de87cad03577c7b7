# src/togo/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.quota import QuotaEnforcer
from .ports import TodoRepo


@dataclass
class AppState:
    # Settings object (togo.config.Settings or a test stand-in).
    settings: Any

    store: TodoRepo
    enforcer: QuotaEnforcer

    # Logged-in user for the console session.
    current_user: str | None = None

    lock: threading.RLock = field(default_factory=threading.RLock)
