"""
Sequencer service — human-facing document numbers.

get_next_number() is the only way a counter moves. Each call
holds the per-code lock and advances the row with a single
UPDATE before reading it back, so a second caller blocks on the
row until the first one's transaction ends.

Where the database allows one writer at a time (SQLite) the
number is drawn in the caller's own session and is returned to
the counter if the caller rolls back. Elsewhere it is drawn in a
short transaction of its own, and a number handed out stays
consumed even if the caller later rolls back, the same way
database sequences behave.
"""

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session, sessionmaker

from erp_ledger.exceptions import (
    DuplicateSequenceError,
    InactiveSequenceError,
    SequenceNotFoundError,
    ValidationError,
)
from erp_ledger.locks import KeyedLock, SEQUENCE_LOCKS
from erp_ledger.models.sequence import Sequence

logger = logging.getLogger(__name__)

SINGLE_WRITER_DIALECTS = {"sqlite"}


class SequencerService:
    """
    Named counters that produce formatted numbers such as T0001S.

    Counters only move forward; a number is never handed out twice.
    """

    def __init__(
        self,
        db: Session,
        session_factory: sessionmaker | None = None,
        locks: KeyedLock = SEQUENCE_LOCKS,
    ):
        self.db = db
        self.locks = locks
        if session_factory is None and not self._single_writer(db):
            session_factory = sessionmaker(
                bind=db.get_bind(),
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        # None means numbers are drawn in the caller's session
        self.session_factory = session_factory

    @staticmethod
    def _single_writer(db: Session) -> bool:
        return db.get_bind().dialect.name in SINGLE_WRITER_DIALECTS

    def create_sequence(
        self,
        code: str,
        initial: int = 0,
        prefix: str = "",
        suffix: str = "",
        name: str | None = None,
        padding_length: int = 4,
        padding_char: str = "0",
    ) -> Sequence:
        """
        Register a new counter.

        The first number handed out is initial + 1.
        Raises DuplicateSequenceError if the code is taken.
        """
        if not code:
            raise ValidationError("Sequence code cannot be empty")
        if initial < 0:
            raise ValidationError("Sequence initial number cannot be negative")
        if len(padding_char) != 1:
            raise ValidationError("Sequence padding must be a single character")

        if self.get_sequence(code) is not None:
            raise DuplicateSequenceError(
                f"Sequence with code '{code}' already exists"
            )

        sequence = Sequence(
            code=code,
            name=name or code,
            prefix=prefix,
            suffix=suffix,
            current_number=initial,
            padding_length=padding_length,
            padding_char=padding_char,
            is_active=True,
        )
        self.db.add(sequence)
        self.db.flush()
        logger.info("Created sequence %s starting after %d", code, initial)
        return sequence

    def get_next_number(self, code: str) -> str:
        """
        Atomically advance a counter and return the formatted number.

        Raises SequenceNotFoundError for an unknown code and
        InactiveSequenceError for a deactivated one.
        """
        if not code:
            raise ValidationError("Sequence code cannot be empty")

        with self.locks.acquire(code):
            if self.session_factory is None:
                number = self._advance(self.db, code)
            else:
                with self.session_factory() as session, session.begin():
                    number = self._advance(session, code)

        logger.debug("Issued %s from sequence %s", number, code)
        return number

    def _advance(self, session: Session, code: str) -> str:
        # The UPDATE comes first so the row (or, on SQLite, the
        # database) is write-locked before the counter is read.
        session.execute(
            update(Sequence)
            .where(Sequence.code == code, Sequence.is_active.is_(True))
            .values(
                current_number=Sequence.current_number + 1,
                last_used_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        sequence = session.execute(
            select(Sequence)
            .where(Sequence.code == code)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

        if sequence is None:
            raise SequenceNotFoundError(f"Sequence with code '{code}' not found")
        if not sequence.is_active:
            raise InactiveSequenceError(f"Sequence '{code}' is not active")

        return sequence.format_number(sequence.current_number)

    def get_sequence(self, code: str) -> Sequence | None:
        """Return the sequence with its counter re-read from the database."""
        if not code:
            raise ValidationError("Sequence code cannot be empty")
        return self.db.execute(
            select(Sequence)
            .where(Sequence.code == code)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_active_sequences(self) -> list[Sequence]:
        sequences = self.db.execute(
            select(Sequence)
            .where(Sequence.is_active.is_(True))
            .order_by(Sequence.code)
        ).scalars().all()
        return list(sequences)
