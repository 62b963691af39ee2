"""
Tests for the FiscalPeriodService.
"""

from datetime import date

import pytest

from erp_ledger.exceptions import (
    InvalidPeriodError,
    PeriodNotFoundError,
    ValidationError,
)
from erp_ledger.models.enums import FiscalPeriodStatus
from erp_ledger.services.fiscal_period_service import FiscalPeriodService


def make_period(service, code, start, end, status=FiscalPeriodStatus.OPEN):
    return service.create_period(
        code=code,
        name=code.title(),
        start_date=start,
        end_date=end,
        actor="controller",
        status=status,
    )


class TestCreatePeriod:

    def test_create_period_succeeds(self, db_session):
        service = FiscalPeriodService(db_session)
        period = make_period(
            service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31)
        )
        db_session.commit()

        assert period.id is not None
        assert period.is_open
        assert period.duration_days == 31
        assert period.inserted_by == "controller"

    def test_end_before_start_rejected(self, db_session):
        service = FiscalPeriodService(db_session)
        with pytest.raises(InvalidPeriodError):
            make_period(service, "BAD", date(2020, 2, 1), date(2020, 1, 1))

    def test_overlap_rejected(self, db_session):
        service = FiscalPeriodService(db_session)
        make_period(service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31))
        db_session.commit()

        with pytest.raises(InvalidPeriodError, match="overlaps"):
            make_period(service, "MID", date(2020, 1, 31), date(2020, 2, 15))

    def test_duplicate_code_rejected(self, db_session):
        service = FiscalPeriodService(db_session)
        make_period(service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31))
        db_session.commit()

        with pytest.raises(InvalidPeriodError, match="already exists"):
            make_period(service, "jan-2020", date(2021, 1, 1), date(2021, 1, 31))

    def test_empty_name_rejected(self, db_session):
        service = FiscalPeriodService(db_session)
        with pytest.raises(ValidationError):
            service.create_period(
                code="X", name=" ", start_date=date(2020, 1, 1),
                end_date=date(2020, 1, 31), actor="controller",
            )


class TestLookup:

    def test_period_for_date_includes_both_ends(self, db_session):
        service = FiscalPeriodService(db_session)
        make_period(service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31))
        db_session.commit()

        assert service.get_period_for_date(date(2020, 1, 1)).code == "JAN-2020"
        assert service.get_period_for_date(date(2020, 1, 31)).code == "JAN-2020"
        assert service.get_period_for_date(date(2020, 2, 1)) is None

    def test_lookup_by_code_is_case_insensitive(self, db_session):
        service = FiscalPeriodService(db_session)
        make_period(
            service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31),
            status=FiscalPeriodStatus.CLOSED,
        )
        db_session.commit()

        period = service.get_period_by_code("jan-2020")
        assert period is not None
        assert period.status == FiscalPeriodStatus.CLOSED

    def test_periods_by_status(self, db_session):
        service = FiscalPeriodService(db_session)
        make_period(service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31))
        make_period(
            service, "FEB-2020", date(2020, 2, 1), date(2020, 2, 29),
            status=FiscalPeriodStatus.CLOSED,
        )
        db_session.commit()

        open_codes = [p.code for p in service.get_periods_by_status(FiscalPeriodStatus.OPEN)]
        closed_codes = [p.code for p in service.get_periods_by_status(FiscalPeriodStatus.CLOSED)]
        assert open_codes == ["JAN-2020"]
        assert closed_codes == ["FEB-2020"]
        assert len(service.get_all_periods()) == 2


class TestOpenClose:

    def test_close_then_open(self, db_session):
        service = FiscalPeriodService(db_session)
        make_period(service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31))
        db_session.commit()

        assert service.close_period("JAN-2020", "auditor") is True
        db_session.commit()
        assert service.is_date_in_open_period(date(2020, 1, 15)) is False

        assert service.open_period("JAN-2020", "auditor") is True
        db_session.commit()
        assert service.is_date_in_open_period(date(2020, 1, 15)) is True

    def test_close_is_idempotent_but_records_actor(self, db_session):
        service = FiscalPeriodService(db_session)
        make_period(service, "JAN-2020", date(2020, 1, 1), date(2020, 1, 31))
        db_session.commit()

        service.close_period("JAN-2020", "first")
        db_session.commit()
        assert service.close_period("jan-2020", "second") is True
        db_session.commit()

        period = service.get_period_by_code("JAN-2020")
        assert period.status == FiscalPeriodStatus.CLOSED
        assert period.updated_by == "second"

    def test_unknown_code_raises(self, db_session):
        service = FiscalPeriodService(db_session)
        with pytest.raises(PeriodNotFoundError):
            service.close_period("NOPE", "auditor")

    def test_date_outside_any_period_is_not_open(self, db_session):
        service = FiscalPeriodService(db_session)
        assert service.is_date_in_open_period(date(2020, 1, 15)) is False
