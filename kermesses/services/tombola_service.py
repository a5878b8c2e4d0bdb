"""Tombola service - raffle management, ticket sales and the draw.

The draw happens exactly once, in the transaction that moves the tombola from
STARTED to ENDED, with the tombola row locked. Ticket sales lock the same row,
so a sale never interleaves with the draw.
"""

import logging
from uuid import UUID

from kermesses.domain import Kermesse, Principal, Role, Ticket, Tombola
from kermesses.domain import commands
from kermesses.domain.errors import (
    InvalidInputError,
    KermesseNotFoundError,
    PermissionDeniedError,
    TicketNotFoundError,
    TombolaNotFoundError,
    UserNotFoundError,
)
from kermesses.domain.lifecycle import ensure_kermesse_open, ensure_tombola_started
from kermesses.services.access import require_owner, require_principal, require_role
from kermesses.services.ledger import AccountLedger
from kermesses.stores.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


class TombolaService:
    """Service for tombola lifecycle and ticket operations."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._ledger = AccountLedger(uow)

    def _lock_kermesse(self, kermesse_id: UUID) -> Kermesse:
        kermesse = self._uow.kermesses.get_kermesse(kermesse_id, for_update=True)
        if kermesse is None:
            raise KermesseNotFoundError(kermesse_id)
        return kermesse

    def _lock_tombola(self, tombola_id: UUID) -> tuple[Kermesse, Tombola]:
        # Kermesse row first, then the tombola row.
        found = self._uow.tombolas.get_tombola(tombola_id)
        if found is None:
            raise TombolaNotFoundError(tombola_id)
        kermesse = self._lock_kermesse(found.kermesse_id)
        tombola = self._uow.tombolas.get_tombola(tombola_id, for_update=True)
        if tombola is None:
            raise TombolaNotFoundError(tombola_id)
        return kermesse, tombola

    def create_tombola(
        self, principal: Principal, command: commands.CreateTombola
    ) -> Tombola:
        principal = require_role(principal, Role.ORGANIZER)
        _ensure_price(command.price)
        with self._uow.atomic():
            kermesse = self._lock_kermesse(command.kermesse_id)
            require_owner(principal, kermesse.user_id)
            ensure_kermesse_open(kermesse)
            tombola = self._uow.tombolas.create_tombola(
                kermesse.id, command.name, command.price, command.gift
            )
        logger.info("Tombola %s created in kermesse %s", tombola.id, kermesse.id)
        return tombola

    def update_tombola(
        self, principal: Principal, command: commands.UpdateTombola
    ) -> Tombola:
        principal = require_role(principal, Role.ORGANIZER)
        _ensure_price(command.price)
        with self._uow.atomic():
            kermesse, tombola = self._lock_tombola(command.tombola_id)
            require_owner(principal, kermesse.user_id)
            ensure_kermesse_open(kermesse)
            return self._uow.tombolas.update_tombola(
                tombola.id, command.name, command.price, command.gift
            )

    def finish_tombola(self, principal: Principal, tombola_id: UUID) -> Tombola:
        """End a tombola and draw its winner.

        A tombola without tickets ends with no winner.

        Raises:
            TombolaNotFoundError: If the tombola does not exist.
            PermissionDeniedError: If the caller does not organize its kermesse.
            KermesseEndedError: If the kermesse is ended.
            TombolaNotStartedError: If the tombola is already ended.
        """
        principal = require_role(principal, Role.ORGANIZER)
        with self._uow.atomic():
            kermesse, tombola = self._lock_tombola(tombola_id)
            require_owner(principal, kermesse.user_id)
            ensure_kermesse_open(kermesse)
            ensure_tombola_started(tombola)

            ended = self._uow.tombolas.end_tombola(tombola.id)
            winner = self._uow.tombolas.draw_winner(tombola.id)

        if winner is None:
            logger.info("Tombola %s ended without tickets", tombola_id)
        else:
            logger.info(
                "Tombola %s ended, ticket %s of user %s wins",
                tombola_id,
                winner.id,
                winner.user_id,
            )
        return ended

    def sell_ticket(self, principal: Principal, command: commands.SellTicket) -> Ticket:
        """Sell one ticket to the calling child.

        Raises:
            TombolaNotFoundError: If the tombola does not exist.
            TombolaNotStartedError: If the tombola is ended.
            PermissionDeniedError: If the child is not a member of its kermesse.
            KermesseEndedError: If the kermesse is ended.
            NotEnoughCreditError: If the child cannot pay the ticket.
        """
        principal = require_role(principal, Role.CHILD)
        with self._uow.atomic():
            kermesse, tombola = self._lock_tombola(command.tombola_id)
            ensure_tombola_started(tombola)
            if not self._uow.kermesses.is_member(kermesse.id, principal.user_id):
                raise PermissionDeniedError("User is not a member of the kermesse")
            ensure_kermesse_open(kermesse)

            buyer = self._uow.users.get_user(principal.user_id, for_update=True)
            if buyer is None:
                raise UserNotFoundError(principal.user_id)
            price = int(tombola.price)
            self._ledger.ensure_can_pay(buyer, price)
            self._ledger.adjust_credit(buyer.id, -price)

            ticket = self._uow.tombolas.create_ticket(buyer.id, tombola.id)

        logger.info(
            "Ticket %s sold to %s for tombola %s", ticket.id, buyer.id, tombola.id
        )
        return ticket

    def get_tombola(self, principal: Principal, tombola_id: UUID) -> Tombola:
        require_principal(principal)
        with self._uow.atomic():
            tombola = self._uow.tombolas.get_tombola(tombola_id)
        if tombola is None:
            raise TombolaNotFoundError(tombola_id)
        return tombola

    def list_tombolas(
        self, principal: Principal, kermesse_id: UUID | None = None
    ) -> list[Tombola]:
        require_principal(principal)
        with self._uow.atomic():
            return self._uow.tombolas.list_tombolas(kermesse_id)

    def get_ticket(self, principal: Principal, ticket_id: UUID) -> Ticket:
        require_principal(principal)
        with self._uow.atomic():
            ticket = self._uow.tombolas.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    def list_tickets(
        self, principal: Principal, tombola_id: UUID | None = None
    ) -> list[Ticket]:
        principal = require_role(principal, Role.ORGANIZER, Role.PARENT, Role.CHILD)
        scope: dict[str, UUID] = {}
        if principal.role is Role.ORGANIZER:
            scope["organizer_id"] = principal.user_id
        elif principal.role is Role.PARENT:
            scope["parent_id"] = principal.user_id
        elif principal.role is Role.CHILD:
            scope["child_id"] = principal.user_id
        with self._uow.atomic():
            return self._uow.tombolas.list_tickets(tombola_id=tombola_id, **scope)


def _ensure_price(price: int) -> None:
    if price < 0:
        raise InvalidInputError("Price must not be negative")
