"""JSON Lines log of answered requests and history write failures."""
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from config import INTERACTION_LOG_PATH

logger = logging.getLogger(__name__)


class InteractionLogger:
    """Appends one JSON object per event to a log file."""

    def __init__(self, log_file_path: str = INTERACTION_LOG_PATH):
        """
        Initialize the interaction logger.

        Args:
            log_file_path: Path of the JSON Lines file; parent directories
                are created on first use
        """
        self.log_file_path = Path(log_file_path)
        self._file = None
        self._lock = threading.Lock()

    def log_interaction(
        self,
        user_id: str,
        session_id: str,
        response_type: str,
        classification: str,
        model_used: str,
        tokens_input: int,
        tokens_output: int,
        latency_ms: int,
        history_turns: int = 0
    ) -> None:
        """Record one answered request."""
        self._write({
            "event": "interaction",
            "user_id": user_id,
            "session_id": session_id,
            "response_type": response_type,
            "classification": classification,
            "model_used": model_used,
            "tokens_input": tokens_input,
            "tokens_output": tokens_output,
            "latency_ms": latency_ms,
            "history_turns": history_turns,
        })

    def log_persistence_failure(
        self,
        user_id: str,
        session_id: str,
        error_code: str,
        detail: Optional[str] = None
    ) -> None:
        """Record a history write that did not succeed."""
        self._write({
            "event": "persistence_failure",
            "user_id": user_id,
            "session_id": session_id,
            "error_code": error_code,
            "detail": detail,
        })

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def _write(self, entry: Dict[str, Any]) -> None:
        entry = {"timestamp": datetime.now(timezone.utc).isoformat(), **entry}
        line = json.dumps(entry, ensure_ascii=False)

        with self._lock:
            if self._file is None:
                self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self.log_file_path, "a", encoding="utf-8")
            self._file.write(line + "\n")
            self._file.flush()

        logger.debug(f"Logged {entry['event']} event to {self.log_file_path}")
