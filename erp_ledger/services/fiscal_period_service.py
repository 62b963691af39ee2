"""
Fiscal period service — the period registry and posting gate.

Answers "which period covers this date" and opens/closes periods
by code. Opening and closing are idempotent and run under the
same per-period lock the posting engine holds while it writes,
so a period cannot close halfway through a posting.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_ledger.exceptions import (
    InvalidPeriodError,
    LedgerError,
    PeriodNotFoundError,
    ValidationError,
)
from erp_ledger.locks import KeyedLock, PERIOD_LOCKS
from erp_ledger.models.enums import FiscalPeriodStatus
from erp_ledger.models.fiscal_period import FiscalPeriod

logger = logging.getLogger(__name__)


class FiscalPeriodService:
    """
    The fiscal period registry.

    Decides whether a date may be posted into, and opens and
    closes periods under the same per-period lock the posting
    engine holds.
    """

    def __init__(self, db: Session, locks: KeyedLock = PERIOD_LOCKS):
        self.db = db
        self.locks = locks

    @contextmanager
    def locked(self, code: str):
        """Hold the period's lock for the duration of the block."""
        with self.locks.acquire(code.upper()):
            yield

    def create_period(
        self,
        code: str,
        name: str,
        start_date: date,
        end_date: date,
        actor: str,
        status: FiscalPeriodStatus = FiscalPeriodStatus.OPEN,
        description: str = "",
    ) -> FiscalPeriod:
        """
        Register a fiscal period.

        Rejects empty names, inverted date ranges, duplicate codes
        and ranges that overlap an existing period.
        """
        if not code or not code.strip():
            raise ValidationError("Fiscal period code cannot be empty")
        if not name or not name.strip():
            raise ValidationError("Fiscal period name cannot be empty")
        if not actor:
            raise ValidationError("Actor cannot be empty")
        if end_date < start_date:
            raise InvalidPeriodError(
                f"Fiscal period '{code}' ends ({end_date}) "
                f"before it starts ({start_date})"
            )

        if self.get_period_by_code(code) is not None:
            raise InvalidPeriodError(
                f"Fiscal period with code '{code}' already exists"
            )

        overlapping = self.db.execute(
            select(FiscalPeriod).where(
                FiscalPeriod.start_date <= end_date,
                FiscalPeriod.end_date >= start_date,
            )
        ).scalars().first()
        if overlapping is not None:
            raise InvalidPeriodError(
                f"Fiscal period '{code}' overlaps '{overlapping.code}' "
                f"({overlapping.start_date}..{overlapping.end_date})"
            )

        now = datetime.utcnow()
        period = FiscalPeriod(
            code=code,
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            status=status,
            inserted_by=actor,
            inserted_at=now,
            updated_by=actor,
            updated_at=now,
        )
        self.db.add(period)
        self.db.flush()
        logger.info(
            "Created fiscal period %s (%s..%s, %s)",
            code, start_date, end_date, status.value,
        )
        return period

    def get_period_for_date(self, value: date) -> FiscalPeriod | None:
        """
        Return the period covering a date, or None.

        Periods never overlap, so more than one match means the
        period table is corrupt.
        """
        periods = self.db.execute(
            select(FiscalPeriod).where(
                FiscalPeriod.start_date <= value,
                FiscalPeriod.end_date >= value,
            )
        ).scalars().all()

        if len(periods) > 1:
            codes = ", ".join(p.code for p in periods)
            raise LedgerError(
                f"Date {value} is covered by more than one fiscal period: {codes}"
            )
        return periods[0] if periods else None

    def get_periods_by_status(
        self, status: FiscalPeriodStatus
    ) -> list[FiscalPeriod]:
        periods = self.db.execute(
            select(FiscalPeriod)
            .where(FiscalPeriod.status == status)
            .order_by(FiscalPeriod.start_date)
        ).scalars().all()
        return list(periods)

    def get_all_periods(self) -> list[FiscalPeriod]:
        periods = self.db.execute(
            select(FiscalPeriod).order_by(FiscalPeriod.start_date)
        ).scalars().all()
        return list(periods)

    def get_period_by_code(
        self,
        code: str,
        search_first: FiscalPeriodStatus = FiscalPeriodStatus.OPEN,
    ) -> FiscalPeriod | None:
        """
        Find a period by code, case-insensitively.

        Callers do not know a period's status, so both the open
        and the closed set are searched, search_first first.
        """
        if not code:
            return None
        wanted = code.upper()
        other = (
            FiscalPeriodStatus.CLOSED
            if search_first == FiscalPeriodStatus.OPEN
            else FiscalPeriodStatus.OPEN
        )
        for status in (search_first, other):
            for period in self.get_periods_by_status(status):
                if period.code.upper() == wanted:
                    return period
        return None

    def refresh_status(self, period: FiscalPeriod) -> FiscalPeriodStatus:
        """
        Re-read a period's status from the database.

        The row is read with a shared lock (where the database
        supports it) so a concurrent close waits for the caller's
        commit.
        """
        self.db.refresh(
            period,
            attribute_names=["status", "updated_by", "updated_at"],
            with_for_update={"read": True},
        )
        return period.status

    def open_period(self, code: str, actor: str) -> bool:
        """Open a period by code. Succeeds if it is already open."""
        return self._set_status(code, actor, FiscalPeriodStatus.OPEN)

    def close_period(self, code: str, actor: str) -> bool:
        """Close a period by code. Succeeds if it is already closed."""
        return self._set_status(code, actor, FiscalPeriodStatus.CLOSED)

    def is_date_in_open_period(self, value: date) -> bool:
        period = self.get_period_for_date(value)
        return period is not None and period.is_open

    def _set_status(
        self, code: str, actor: str, status: FiscalPeriodStatus
    ) -> bool:
        if not code:
            raise ValidationError("Fiscal period code cannot be empty")
        if not actor:
            raise ValidationError("Actor cannot be empty")

        # Look in the set we expect to change first
        search_first = (
            FiscalPeriodStatus.CLOSED
            if status == FiscalPeriodStatus.OPEN
            else FiscalPeriodStatus.OPEN
        )

        with self.locked(code):
            period = self.get_period_by_code(code, search_first=search_first)
            if period is None:
                raise PeriodNotFoundError(
                    f"Fiscal period with code '{code}' not found"
                )

            previous = period.status
            period.status = status
            period.updated_by = actor
            period.updated_at = datetime.utcnow()
            self.db.flush()

        if previous != status:
            logger.info(
                "Fiscal period %s changed %s -> %s by %s",
                period.code, previous.value, status.value, actor,
            )
        return True
