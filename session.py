"""Per-login session context.

A SessionContext is created when a user logs in and closed on logout or
account switch. Every orchestrator receives it explicitly; there is no
module-level session state.
"""

import logging

from content import ContentGenerator
from models import SessionRecord, Settings, SurfaceKind, User
from storage import SessionStore

logger = logging.getLogger(__name__)


class SessionContext:
    """Live record, collaborators and navigation state for one user.

    Args:
        user: The logged-in identity.
        store: Persistence for the user's record.
        generator: Content generator shared by every surface.
        record: A restored record, or None for a fresh session.
        reply_delay: Seconds to wait before an assistant turn is appended.
    """

    def __init__(
        self,
        user: User,
        store: SessionStore,
        generator: ContentGenerator,
        record: SessionRecord | None = None,
        reply_delay: float = 0.5,
    ):
        self.user = user
        self.store = store
        self.generator = generator
        self.reply_delay = reply_delay
        self.is_new = record is None
        self.record = record if record is not None else SessionRecord()
        self.closed = False

    @classmethod
    def open(
        cls,
        user: User,
        store: SessionStore,
        generator: ContentGenerator,
        reply_delay: float = 0.5,
    ) -> "SessionContext":
        """Start a session, restoring the user's saved record if there is one."""
        record = store.load(user.email)
        logger.info(
            "Opened session for %s (%s)",
            user.email,
            "new" if record is None else "restored",
        )
        return cls(user, store, generator, record, reply_delay)

    @property
    def settings(self) -> Settings:
        return self.record.settings

    @property
    def active_surface(self) -> SurfaceKind:
        return self.record.active_surface

    def activate(self, kind: SurfaceKind) -> None:
        """Make a surface the active one. Other surfaces keep their state."""
        if self.record.active_surface != kind:
            logger.debug("Switching surface %s -> %s", self.record.active_surface.value, kind.value)
            self.record.active_surface = kind
            self.persist()

    def update_settings(self, **changes) -> Settings:
        """Apply setting changes. Tasks already generated are not touched.

        Raises:
            pydantic.ValidationError: If a value is not valid for its field.
        """
        settings = Settings.model_validate({**self.record.settings.model_dump(), **changes})
        self.record.settings = settings
        self.persist()
        return settings

    def persist(self) -> None:
        """Save the record. Does nothing once the session has been closed."""
        if self.closed:
            logger.debug("Session for %s is closed; not saving", self.user.email)
            return
        self.store.save(self.user.email, self.record)

    def close(self) -> None:
        """Save a final time and detach from the store."""
        if self.closed:
            return
        self.persist()
        self.closed = True
        logger.info("Closed session for %s", self.user.email)
