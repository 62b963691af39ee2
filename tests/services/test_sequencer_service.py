"""
Tests for the SequencerService.

Tests cover:
- Sequence creation and duplicate rejection
- Number formatting (prefix, padding, suffix)
- Unknown and inactive sequences
- Uniqueness under concurrent callers
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.orm import sessionmaker

from erp_ledger.exceptions import (
    DuplicateSequenceError,
    InactiveSequenceError,
    SequenceNotFoundError,
    ValidationError,
)
from erp_ledger.services.sequencer_service import SequencerService


class TestCreateSequence:

    def test_create_sequence_succeeds(self, db_session):
        service = SequencerService(db_session)
        sequence = service.create_sequence("INV", initial=10, prefix="F")
        db_session.commit()

        assert sequence.id is not None
        assert sequence.current_number == 10
        assert sequence.is_active is True
        assert sequence.name == "INV"

    def test_duplicate_code_rejected(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("INV")
        db_session.commit()

        with pytest.raises(DuplicateSequenceError):
            service.create_sequence("INV")

    def test_empty_code_rejected(self, db_session):
        service = SequencerService(db_session)
        with pytest.raises(ValidationError):
            service.create_sequence("")

    def test_negative_initial_rejected(self, db_session):
        service = SequencerService(db_session)
        with pytest.raises(ValidationError):
            service.create_sequence("INV", initial=-1)


class TestGetNextNumber:

    def test_first_number_is_initial_plus_one(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("TRANS", prefix="T", suffix="S")
        db_session.commit()

        assert service.get_next_number("TRANS") == "T0001S"
        assert service.get_next_number("TRANS") == "T0002S"

    def test_starts_after_initial(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("LEDGER", initial=41, prefix="LE")
        db_session.commit()

        assert service.get_next_number("LEDGER") == "LE0042"

    def test_custom_padding(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence(
            "BATCH", prefix="B-", padding_length=6, padding_char="#"
        )
        db_session.commit()

        assert service.get_next_number("BATCH") == "B-#####1"

    def test_number_wider_than_padding_is_not_truncated(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("TRANS", initial=9999, prefix="T")
        db_session.commit()

        assert service.get_next_number("TRANS") == "T10000"

    def test_counter_advances(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("TRANS")
        db_session.commit()

        service.get_next_number("TRANS")
        service.get_next_number("TRANS")

        assert service.get_sequence("TRANS").current_number == 2
        assert service.get_sequence("TRANS").last_used_at is not None

    def test_draw_from_uncommitted_sequence(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("TRANS", prefix="T")

        assert service.get_next_number("TRANS") == "T0001"
        assert service.get_next_number("TRANS") == "T0002"

    def test_sqlite_draws_in_callers_transaction(self, db_session):
        service = SequencerService(db_session)
        assert service.session_factory is None

        service.create_sequence("TRANS")
        db_session.commit()
        service.get_next_number("TRANS")
        db_session.rollback()

        assert service.get_sequence("TRANS").current_number == 0

    def test_own_session_keeps_numbers_after_rollback(self, db_session):
        factory = sessionmaker(bind=db_session.get_bind(), expire_on_commit=False)
        service = SequencerService(db_session, session_factory=factory)
        service.create_sequence("TRANS")
        db_session.commit()

        assert service.get_next_number("TRANS") == "0001"
        db_session.rollback()

        assert service.get_sequence("TRANS").current_number == 1
        assert service.get_next_number("TRANS") == "0002"

    def test_unknown_sequence_raises(self, db_session):
        service = SequencerService(db_session)
        with pytest.raises(SequenceNotFoundError):
            service.get_next_number("NOPE")

    def test_inactive_sequence_raises(self, db_session):
        service = SequencerService(db_session)
        sequence = service.create_sequence("OLD")
        sequence.is_active = False
        db_session.commit()

        with pytest.raises(InactiveSequenceError):
            service.get_next_number("OLD")

    def test_active_sequences_excludes_inactive(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("A")
        service.create_sequence("B").is_active = False
        db_session.commit()

        codes = [s.code for s in service.get_active_sequences()]
        assert codes == ["A"]


class TestConcurrency:

    def test_concurrent_callers_get_distinct_contiguous_numbers(self, db_session):
        service = SequencerService(db_session)
        service.create_sequence("TRANS", initial=100, padding_length=1)
        db_session.commit()
        factory = sessionmaker(bind=db_session.get_bind(), expire_on_commit=False)

        def draw(_):
            with factory() as session:
                number = SequencerService(session).get_next_number("TRANS")
                session.commit()
            return number

        calls = 40
        with ThreadPoolExecutor(max_workers=8) as pool:
            numbers = list(pool.map(draw, range(calls)))

        assert len(set(numbers)) == calls
        assert sorted(int(n) for n in numbers) == list(range(101, 101 + calls))
        assert service.get_sequence("TRANS").current_number == 100 + calls
