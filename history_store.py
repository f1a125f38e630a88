"""
Session history of generated posters.

Entries are prepended (listed newest first), deleted by id, never updated.
The backing database is in-memory, see db_utils.
"""
# stdlib imports
import logging
import threading
import time

# third-party imports
from sqlmodel import Session, select

# local imports
from models import GeneratedImage, UserSession


logger = logging.getLogger(__name__)


class TimestampIdClock:
    """
    Issues millisecond-timestamp ids that never repeat within the process.

    Two posters finished in the same millisecond get consecutive values, so
    delete-by-id always targets a single entry.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> tuple[str, int]:
        """Return (id, timestamp_ms) for a new entry."""
        now_ms = time.time_ns() // 1_000_000
        with self._lock:
            issued = max(now_ms, self._last + 1)
            self._last = issued
        return str(issued), now_ms


id_clock = TimestampIdClock()


class HistoryStore:
    """Reads and writes the poster history through a database session."""

    def __init__(self, session: Session, clock: TimestampIdClock = id_clock):
        self.session = session
        self.clock = clock


    def create_session(self, session_id: str, text_provider: str) -> UserSession:
        """Persist a new studio session row."""
        record = UserSession(id=session_id, text_provider=text_provider)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record


    def has_session(self, session_id: str) -> bool:
        return self.session.get(UserSession, session_id) is not None


    def append(self, session_id: str, url: str, style_name: str) -> GeneratedImage:
        """
        Add a poster to the front of the session history.

        Args:
            session_id: Owning studio session.
            url: Image handle of the poster.
            style_name: Display name of the style used.

        Returns:
            The persisted GeneratedImage.
        """
        entry_id, timestamp = self.clock.next()
        entry = GeneratedImage(
            id=entry_id,
            url=url,
            style_name=style_name,
            timestamp=timestamp,
            session_id=session_id,
        )
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)

        logger.info(f"History entry added: {entry.id} (session {session_id})")
        return entry


    def list_entries(self, session_id: str) -> list[GeneratedImage]:
        """Return the session's posters, newest first."""
        stmt = (
            select(GeneratedImage)
            .where(GeneratedImage.session_id == session_id)
            .order_by(GeneratedImage.timestamp.desc(), GeneratedImage.id.desc())
        )
        return list(self.session.exec(stmt).all())


    def delete(self, session_id: str, entry_id: str) -> bool:
        """
        Remove one poster from the session history.

        Returns:
            True if an entry was removed, False if no such entry exists.
        """
        entry = self.session.get(GeneratedImage, entry_id)
        if entry is None or entry.session_id != session_id:
            return False

        self.session.delete(entry)
        self.session.commit()

        logger.info(f"History entry deleted: {entry_id} (session {session_id})")
        return True
