"""
modules/observability/audit_log.py
-----------------------------------
Connection audit trail: one JSON object per line in a single .jsonl file.

Every record names the connection, its status after the event and the user
who caused it, so the file can be grepped or loaded without joins:

    {"timestamp": "...", "event": "connection_responded",
     "connection_id": "...", "status": "accepted", "actor_id": "...",
     "from_user_id": "...", "to_user_id": "...", "detail": {}}

Enabled by AUDIT_LOG_PATH in config.py.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from schemas.connection import Connection


class AuditLog:

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def record(
        self,
        event: str,
        connection: Connection,
        actor_id: Optional[str] = None,
        **detail: Any,
    ) -> None:
        """Append one event for ``connection``; extra keyword arguments land in ``detail``."""
        entry = {
            "timestamp":     datetime.now(timezone.utc).isoformat(),
            "event":         event,
            "connection_id": connection.id,
            "status":        connection.status.value,
            "actor_id":      actor_id,
            "from_user_id":  connection.from_user_id,
            "to_user_id":    connection.to_user_id,
            "detail":        detail,
        }
        line = json.dumps(entry, default=str, ensure_ascii=False)
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")

    def events(self, connection_id: Optional[str] = None) -> list[dict]:
        """Recorded events, oldest first, optionally for one connection only."""
        with self._lock:
            if not self._path.exists():
                return []
            with self._path.open(encoding="utf-8") as fh:
                entries = [json.loads(line) for line in fh if line.strip()]
        if connection_id is None:
            return entries
        return [e for e in entries if e["connection_id"] == connection_id]
