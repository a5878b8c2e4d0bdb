"""Unit tests for domain primitives.

These test invariants that must hold at construction time, and the pure
lifecycle rules.
Run with: pytest tests/test_domain.py -v
"""

import uuid
from datetime import datetime, timezone

import pytest

from kermesses.domain import (
    Credit,
    Interaction,
    InteractionStatus,
    Kermesse,
    KermesseStatus,
    Price,
    StandKind,
    Stock,
    Tombola,
    TombolaStatus,
)
from kermesses.domain.errors import (
    ErrorKind,
    InteractionAlreadyEndedError,
    InteractionNotActivityError,
    KermesseEndedError,
    KermesseHasOpenTombolaError,
    NotEnoughCreditError,
    TombolaNotStartedError,
)
from kermesses.domain.lifecycle import (
    ensure_activity_open,
    ensure_can_end,
    ensure_kermesse_open,
    ensure_tombola_started,
    initial_interaction_status,
)
from kermesses.domain.value_objects import parse_id

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _kermesse(status: KermesseStatus) -> Kermesse:
    return Kermesse(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        name="Fair",
        description="",
        status=status,
        created_at=NOW,
    )


def _tombola(status: TombolaStatus) -> Tombola:
    return Tombola(
        id=uuid.uuid4(),
        kermesse_id=uuid.uuid4(),
        name="Raffle",
        price=Price(2),
        gift="Cake",
        status=status,
        created_at=NOW,
    )


def _interaction(kind: StandKind, status: InteractionStatus) -> Interaction:
    return Interaction(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        stand_id=uuid.uuid4(),
        kermesse_id=uuid.uuid4(),
        kind=kind,
        status=status,
        credit=5,
        quantity=1,
        point=0,
        created_at=NOW,
    )


class TestCredit:
    """Tests for Credit value object."""

    def test_credit_accepts_zero(self):
        assert int(Credit(0)) == 0

    def test_credit_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Credit(-1)

    def test_covers_is_inclusive(self):
        assert Credit(20).covers(20)
        assert not Credit(19).covers(20)

    def test_str_is_the_amount(self):
        assert str(Credit(42)) == "42"


class TestStockAndPrice:
    """Tests for Stock and Price value objects."""

    def test_stock_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Stock(-1)

    def test_stock_covers(self):
        assert Stock(3).covers(3)
        assert not Stock(1).covers(2)

    def test_price_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Price(-5)

    def test_price_times_quantity(self):
        assert Price(10).times(2) == 20


class TestParseId:
    """Tests for parse_id."""

    def test_valid_uuid(self):
        value = uuid.uuid4()
        assert parse_id(str(value)) == value

    def test_uuid_passes_through(self):
        value = uuid.uuid4()
        assert parse_id(value) is value

    def test_invalid_uuid(self):
        with pytest.raises(ValueError):
            parse_id("not-a-uuid")


class TestLifecycle:
    """Tests for the lifecycle rules."""

    def test_started_kermesse_is_open(self):
        ensure_kermesse_open(_kermesse(KermesseStatus.STARTED))

    def test_ended_kermesse_is_closed(self):
        with pytest.raises(KermesseEndedError):
            ensure_kermesse_open(_kermesse(KermesseStatus.ENDED))

    def test_end_requires_finished_tombolas(self):
        with pytest.raises(KermesseHasOpenTombolaError):
            ensure_can_end(_kermesse(KermesseStatus.STARTED), has_started_tombola=True)
        ensure_can_end(_kermesse(KermesseStatus.STARTED), has_started_tombola=False)

    def test_end_is_terminal(self):
        with pytest.raises(KermesseEndedError):
            ensure_can_end(_kermesse(KermesseStatus.ENDED), has_started_tombola=False)

    def test_tombola_finishes_once(self):
        ensure_tombola_started(_tombola(TombolaStatus.STARTED))
        with pytest.raises(TombolaNotStartedError):
            ensure_tombola_started(_tombola(TombolaStatus.ENDED))

    def test_activity_rules(self):
        ensure_activity_open(_interaction(StandKind.ACTIVITY, InteractionStatus.OPEN))
        with pytest.raises(InteractionAlreadyEndedError):
            ensure_activity_open(
                _interaction(StandKind.ACTIVITY, InteractionStatus.ENDED)
            )
        with pytest.raises(InteractionNotActivityError):
            ensure_activity_open(
                _interaction(StandKind.CONSUMPTION, InteractionStatus.ENDED)
            )

    def test_initial_interaction_status(self):
        assert initial_interaction_status(StandKind.ACTIVITY) is InteractionStatus.OPEN
        assert (
            initial_interaction_status(StandKind.CONSUMPTION) is InteractionStatus.ENDED
        )


class TestErrors:
    """Tests for the error hierarchy."""

    def test_business_rule_is_bad_request(self):
        error = NotEnoughCreditError(uuid.uuid4(), required=20, available=5)
        assert error.kind is ErrorKind.BAD_REQUEST
        assert error.code.value == "NOT_ENOUGH_CREDIT"
        assert error.required == 20
        assert str(error) == "NOT_ENOUGH_CREDIT: Not enough credit"
