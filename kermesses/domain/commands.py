"""Per-operation command objects.

Handlers build these from validated request payloads; services take them as
their only input besides the acting principal.
"""

from dataclasses import dataclass
from uuid import UUID

from kermesses.domain.value_objects import Role, StandKind


@dataclass(frozen=True)
class Principal:
    """The authenticated user acting on a request."""

    user_id: UUID
    role: Role

    @property
    def is_authenticated(self) -> bool:
        return True

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles


@dataclass(frozen=True)
class SignUp:
    name: str
    email: str
    password: str
    role: Role


@dataclass(frozen=True)
class SignIn:
    email: str
    password: str


@dataclass(frozen=True)
class UpdatePassword:
    user_id: UUID
    password: str
    new_password: str


@dataclass(frozen=True)
class InviteChild:
    name: str
    email: str


@dataclass(frozen=True)
class PayChild:
    child_id: UUID
    amount: int


@dataclass(frozen=True)
class CreateStand:
    name: str
    description: str
    kind: StandKind
    price: int
    stock: int = 0


@dataclass(frozen=True)
class UpdateStand:
    """Update a stand. Without ``stand_id`` the caller's own stand is targeted."""

    name: str
    description: str
    price: int
    stock: int | None = None
    stand_id: UUID | None = None


@dataclass(frozen=True)
class CreateKermesse:
    name: str
    description: str


@dataclass(frozen=True)
class UpdateKermesse:
    kermesse_id: UUID
    name: str
    description: str


@dataclass(frozen=True)
class AddMember:
    kermesse_id: UUID
    user_id: UUID


@dataclass(frozen=True)
class AddStand:
    kermesse_id: UUID
    stand_id: UUID


@dataclass(frozen=True)
class CreateInteraction:
    stand_id: UUID
    quantity: int | None = None


@dataclass(frozen=True)
class SettleActivity:
    interaction_id: UUID
    point: int


@dataclass(frozen=True)
class CreateTombola:
    kermesse_id: UUID
    name: str
    price: int
    gift: str


@dataclass(frozen=True)
class UpdateTombola:
    tombola_id: UUID
    name: str
    price: int
    gift: str


@dataclass(frozen=True)
class SellTicket:
    tombola_id: UUID
