"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class Role(str, Enum):
    """Role of an account. Fixed at sign-up."""

    ORGANIZER = "ORGANIZER"
    STAND_HOLDER = "STAND_HOLDER"
    PARENT = "PARENT"
    CHILD = "CHILD"


class StandKind(str, Enum):
    CONSUMPTION = "CONSUMPTION"
    ACTIVITY = "ACTIVITY"


class KermesseStatus(str, Enum):
    STARTED = "STARTED"
    ENDED = "ENDED"


class TombolaStatus(str, Enum):
    STARTED = "STARTED"
    ENDED = "ENDED"


class InteractionStatus(str, Enum):
    OPEN = "OPEN"
    ENDED = "ENDED"


def parse_id(value: str | UUID) -> UUID:
    """Coerce a path or payload value into a UUID.

    Raises:
        ValueError: If the value is not a valid UUID.
    """
    if isinstance(value, UUID):
        return value
    return UUID(str(value))


@dataclass(frozen=True)
class Credit:
    """Non-negative balance of virtual currency."""

    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Credit amount cannot be negative")

    def covers(self, price: int) -> bool:
        return self.amount >= price

    def __int__(self) -> int:
        return self.amount

    def __str__(self) -> str:
        return str(self.amount)


@dataclass(frozen=True)
class Stock:
    """Non-negative count of units a stand can still sell."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Stock cannot be negative")

    def covers(self, quantity: int) -> bool:
        return self.value >= quantity

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class Price:
    """Unit price in credit."""

    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Price cannot be negative")

    def times(self, quantity: int) -> int:
        return self.amount * quantity

    def __int__(self) -> int:
        return self.amount
