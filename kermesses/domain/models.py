"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in kermesses/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from kermesses.domain.value_objects import (
    Credit,
    InteractionStatus,
    KermesseStatus,
    Price,
    Role,
    StandKind,
    Stock,
    TombolaStatus,
)


@dataclass(frozen=True)
class User:
    """Domain representation of an account."""

    id: UUID
    name: str
    email: str
    role: Role
    credit: Credit
    parent_id: UUID | None = None
    password_hash: str = field(default="", repr=False)

    @property
    def is_child(self) -> bool:
        return self.role is Role.CHILD


@dataclass(frozen=True)
class Profile:
    """Signed-in view of a user, with the bearer token when one was issued."""

    user: User
    has_stand: bool
    token: str = ""


@dataclass(frozen=True)
class Stand:
    """Domain representation of a Stand."""

    id: UUID
    user_id: UUID
    name: str
    description: str
    kind: StandKind
    price: Price
    stock: Stock
    created_at: datetime

    @property
    def is_consumption(self) -> bool:
        return self.kind is StandKind.CONSUMPTION


@dataclass(frozen=True)
class Kermesse:
    """Domain representation of a Kermesse."""

    id: UUID
    user_id: UUID
    name: str
    description: str
    status: KermesseStatus
    created_at: datetime

    @property
    def is_ended(self) -> bool:
        return self.status is KermesseStatus.ENDED


@dataclass(frozen=True)
class KermesseStats:
    """Role-scoped counters shown on a kermesse detail page.

    Counters a role is not entitled to stay at zero.
    """

    stand_count: int = 0
    tombola_count: int = 0
    user_count: int = 0
    interaction_count: int = 0
    interaction_income: int = 0
    tombola_income: int = 0
    points: int = 0


@dataclass(frozen=True)
class KermesseWithStats:
    kermesse: Kermesse
    stats: KermesseStats


@dataclass(frozen=True)
class Interaction:
    """A single purchase or activity recorded against a stand."""

    id: UUID
    user_id: UUID
    stand_id: UUID
    kermesse_id: UUID
    kind: StandKind
    status: InteractionStatus
    credit: int
    quantity: int
    point: int
    created_at: datetime


@dataclass(frozen=True)
class Tombola:
    """Domain representation of a Tombola."""

    id: UUID
    kermesse_id: UUID
    name: str
    price: Price
    gift: str
    status: TombolaStatus
    created_at: datetime

    @property
    def is_started(self) -> bool:
        return self.status is TombolaStatus.STARTED


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a raffle Ticket."""

    id: UUID
    user_id: UUID
    tombola_id: UUID
    is_winner: bool
    created_at: datetime
