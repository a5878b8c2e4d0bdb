"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every mutating service
call runs inside ``UnitOfWork.atomic()``; reads made with ``for_update=True``
lock the row until that block exits.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from uuid import UUID

from kermesses.domain import (
    Interaction,
    InteractionStatus,
    Kermesse,
    KermesseStats,
    Role,
    Stand,
    StandKind,
    Ticket,
    Tombola,
    User,
)


class UserStore(ABC):
    """Accounts and the credit ledger."""

    @abstractmethod
    def get_user(self, user_id: UUID, *, for_update: bool = False) -> User | None:
        """Return a user by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_users(self, *user_ids: UUID) -> dict[UUID, User]:
        """Lock several users in ascending id order and return those found."""
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None:
        ...

    @abstractmethod
    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        parent_id: UUID | None = None,
    ) -> User:
        """Insert a user.

        Raises:
            EmailAlreadyExistsError: If the email is already taken.
        """
        ...

    @abstractmethod
    def set_password(self, user_id: UUID, password_hash: str) -> None:
        ...

    @abstractmethod
    def adjust_credit(self, user_id: UUID, delta: int) -> None:
        """Apply ``credit += delta`` in a single statement.

        The caller has already checked the result stays non-negative.
        """
        ...

    @abstractmethod
    def has_stand(self, user_id: UUID) -> bool:
        ...

    @abstractmethod
    def list_users(self, kermesse_id: UUID | None = None) -> list[User]:
        """Return all users, or the members of a kermesse."""
        ...

    @abstractmethod
    def list_children(
        self, parent_id: UUID, kermesse_id: UUID | None = None
    ) -> list[User]:
        ...

    @abstractmethod
    def list_invitable_children(self, kermesse_id: UUID) -> list[User]:
        """Return children that are not members of the kermesse yet."""
        ...


class StandStore(ABC):
    """Stands and the stock inventory."""

    @abstractmethod
    def get_stand(self, stand_id: UUID, *, for_update: bool = False) -> Stand | None:
        ...

    @abstractmethod
    def get_stand_by_holder(
        self, user_id: UUID, *, for_update: bool = False
    ) -> Stand | None:
        ...

    @abstractmethod
    def create_stand(
        self,
        user_id: UUID,
        name: str,
        description: str,
        kind: StandKind,
        price: int,
        stock: int,
    ) -> Stand:
        ...

    @abstractmethod
    def update_stand(
        self, stand_id: UUID, name: str, description: str, price: int
    ) -> Stand:
        ...

    @abstractmethod
    def adjust_stock(self, stand_id: UUID, delta: int) -> None:
        """Apply ``stock += delta`` in a single statement.

        The caller has already checked the result stays non-negative.
        """
        ...

    @abstractmethod
    def list_stands(
        self, kermesse_id: UUID | None = None, is_free: bool = False
    ) -> list[Stand]:
        """Return stands, optionally those of a kermesse or those not running
        in any started kermesse."""
        ...


class KermesseStore(ABC):
    """Kermesses and the membership graph."""

    @abstractmethod
    def get_kermesse(
        self, kermesse_id: UUID, *, for_update: bool = False
    ) -> Kermesse | None:
        ...

    @abstractmethod
    def list_kermesses(
        self,
        *,
        organizer_id: UUID | None = None,
        member_id: UUID | None = None,
        stand_holder_id: UUID | None = None,
    ) -> list[Kermesse]:
        ...

    @abstractmethod
    def create_kermesse(self, user_id: UUID, name: str, description: str) -> Kermesse:
        ...

    @abstractmethod
    def update_kermesse(
        self, kermesse_id: UUID, name: str, description: str
    ) -> Kermesse:
        ...

    @abstractmethod
    def end_kermesse(self, kermesse_id: UUID) -> Kermesse:
        ...

    @abstractmethod
    def has_started_tombola(self, kermesse_id: UUID) -> bool:
        ...

    @abstractmethod
    def add_member(self, kermesse_id: UUID, user_id: UUID) -> None:
        ...

    @abstractmethod
    def is_member(self, kermesse_id: UUID, user_id: UUID) -> bool:
        ...

    @abstractmethod
    def is_stand_in_started_kermesse(self, stand_id: UUID) -> bool:
        ...

    @abstractmethod
    def add_stand(self, kermesse_id: UUID, stand_id: UUID) -> None:
        ...

    @abstractmethod
    def find_shared_kermesse_id(self, user_id: UUID, stand_id: UUID) -> UUID | None:
        """Return a kermesse the user is a member of and the stand runs in.

        A started kermesse wins over ended ones.
        """
        ...

    @abstractmethod
    def stats(
        self,
        kermesse_id: UUID,
        *,
        organizer_id: UUID | None = None,
        parent_id: UUID | None = None,
        child_id: UUID | None = None,
        stand_holder_id: UUID | None = None,
    ) -> KermesseStats:
        ...


class InteractionStore(ABC):
    @abstractmethod
    def create_interaction(
        self,
        user_id: UUID,
        stand_id: UUID,
        kermesse_id: UUID,
        kind: StandKind,
        status: InteractionStatus,
        credit: int,
        quantity: int,
    ) -> Interaction:
        ...

    @abstractmethod
    def get_interaction(
        self, interaction_id: UUID, *, for_update: bool = False
    ) -> Interaction | None:
        ...

    @abstractmethod
    def settle_interaction(self, interaction_id: UUID, point: int) -> Interaction:
        """Mark an activity ended and record its points."""
        ...

    @abstractmethod
    def list_interactions(
        self,
        *,
        parent_id: UUID | None = None,
        child_id: UUID | None = None,
        stand_holder_id: UUID | None = None,
        kermesse_id: UUID | None = None,
    ) -> list[Interaction]:
        ...


class TombolaStore(ABC):
    """Tombolas and their tickets."""

    @abstractmethod
    def get_tombola(
        self, tombola_id: UUID, *, for_update: bool = False
    ) -> Tombola | None:
        ...

    @abstractmethod
    def list_tombolas(self, kermesse_id: UUID | None = None) -> list[Tombola]:
        ...

    @abstractmethod
    def create_tombola(
        self, kermesse_id: UUID, name: str, price: int, gift: str
    ) -> Tombola:
        ...

    @abstractmethod
    def update_tombola(
        self, tombola_id: UUID, name: str, price: int, gift: str
    ) -> Tombola:
        ...

    @abstractmethod
    def end_tombola(self, tombola_id: UUID) -> Tombola:
        ...

    @abstractmethod
    def draw_winner(self, tombola_id: UUID) -> Ticket | None:
        """Mark one ticket, picked uniformly at random by the store, as winner.

        Returns None when no ticket was sold.
        """
        ...

    @abstractmethod
    def create_ticket(self, user_id: UUID, tombola_id: UUID) -> Ticket:
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: UUID) -> Ticket | None:
        ...

    @abstractmethod
    def list_tickets(
        self,
        *,
        organizer_id: UUID | None = None,
        parent_id: UUID | None = None,
        child_id: UUID | None = None,
        tombola_id: UUID | None = None,
    ) -> list[Ticket]:
        ...


class UnitOfWork(ABC):
    """Bundle of stores sharing one transaction boundary."""

    users: UserStore
    stands: StandStore
    kermesses: KermesseStore
    interactions: InteractionStore
    tombolas: TombolaStore

    @abstractmethod
    def atomic(self) -> AbstractContextManager["UnitOfWork"]:
        """Open an all-or-nothing transaction.

        Any exception leaving the block rolls back every write made inside it.
        Store failures surface as ``StoreUnavailableError``.
        """
        ...
