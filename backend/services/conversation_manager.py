"""Conversation history storage backed by Supabase."""
import logging
import re
from datetime import datetime
from typing import Optional, List

from supabase import create_client, Client

from models.conversation import Turn
from services.errors import StoreUnavailableError
from config import SUPABASE_URL, SUPABASE_KEY, CONVERSATIONS_TABLE, HISTORY_WINDOW

logger = logging.getLogger(__name__)

_FRACTION = re.compile(r"\.(\d+)")


class ConversationManager:
    """Reads and appends conversation turns keyed by user and session."""

    def __init__(self, client: Optional[Client] = None, table: str = CONVERSATIONS_TABLE):
        """
        Initialize the conversation manager.

        Args:
            client: Supabase client (built from SUPABASE_URL/SUPABASE_KEY if omitted)
            table: Name of the turns table
        """
        if client is None:
            if not SUPABASE_URL or not SUPABASE_KEY:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")
            client = create_client(SUPABASE_URL, SUPABASE_KEY)

        self.client = client
        self.table = table
        logger.info(f"ConversationManager initialized with Supabase table '{table}'")

    def fetch_recent(self, user_id: str, session_id: str, limit: int = HISTORY_WINDOW) -> List[Turn]:
        """
        Fetch the most recent turns of a session, newest first.

        Args:
            user_id: Owner of the session
            session_id: Conversation session
            limit: Maximum number of turns to return

        Returns:
            List of Turn objects, newest first

        Raises:
            StoreUnavailableError: If Supabase cannot be reached or errors
        """
        try:
            result = (
                self.client.table(self.table)
                .select("input, response, timestamp")
                .eq("user_id", user_id)
                .eq("session_id", session_id)
                .order("timestamp", desc=True)
                .order("id", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error(
                f"Error fetching history for session {session_id}: {e}",
                extra={"user_id": user_id, "session_id": session_id}
            )
            raise StoreUnavailableError(StoreUnavailableError.READ, str(e)) from e

        rows = result.data or []
        turns = [
            Turn(
                user_id=user_id,
                session_id=session_id,
                user_input=row.get("input") or "",
                assistant_raw=row.get("response"),
                created_at=self._parse_timestamp(row.get("timestamp"))
            )
            for row in rows
        ]

        logger.debug(f"Fetched {len(turns)} turns for session {session_id}")
        return turns

    def append(self, turn: Turn) -> None:
        """
        Persist a new turn. The store assigns its timestamp.

        Raises:
            StoreUnavailableError: If the insert fails
        """
        try:
            self.client.table(self.table).insert({
                "user_id": turn.user_id,
                "session_id": turn.session_id,
                "input": turn.user_input,
                "response": turn.assistant_raw,
            }).execute()
        except Exception as e:
            raise StoreUnavailableError(StoreUnavailableError.WRITE, str(e)) from e

        logger.info(f"Added turn to session {turn.session_id}")

    @staticmethod
    def _parse_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
        """
        Parse a timestamp returned by Supabase.

        Postgres may return fractional seconds with fewer or more than six
        digits, which older ``datetime.fromisoformat`` rejects; the fraction
        is padded or truncated to microseconds first.
        """
        if not timestamp_str:
            return None

        value = timestamp_str.replace("Z", "+00:00")
        value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.warning(f"Unparseable timestamp from store: {timestamp_str!r}")
            return None
