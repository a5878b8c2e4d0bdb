from kermesses.domain.commands import Principal
from kermesses.domain.models import (
    Interaction,
    Kermesse,
    KermesseStats,
    KermesseWithStats,
    Profile,
    Stand,
    Ticket,
    Tombola,
    User,
)
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

__all__ = [
    "Principal",
    "User",
    "Profile",
    "Stand",
    "Kermesse",
    "KermesseStats",
    "KermesseWithStats",
    "Interaction",
    "Tombola",
    "Ticket",
    "Role",
    "StandKind",
    "KermesseStatus",
    "TombolaStatus",
    "InteractionStatus",
    "Credit",
    "Price",
    "Stock",
]
