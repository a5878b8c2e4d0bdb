"""Interaction engine: purchases at consumption stands and activity entries.

A purchase decrements the stand stock, debits the buyer, credits the stand
holder and records the interaction. All four writes happen in one
transaction; the kermesse row, the stand row and both user rows are locked
before any check.
"""

import logging
from uuid import UUID

from kermesses.domain import Interaction, Principal, Role
from kermesses.domain import commands
from kermesses.domain.errors import (
    InteractionNotFoundError,
    InvalidQuantityError,
    KermesseNotFoundError,
    PermissionDeniedError,
    StandNotFoundError,
    UserNotFoundError,
)
from kermesses.domain.lifecycle import (
    ensure_activity_open,
    ensure_kermesse_open,
    initial_interaction_status,
)
from kermesses.services.access import require_owner, require_principal, require_role
from kermesses.services.ledger import AccountLedger, StandInventory
from kermesses.stores.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


class InteractionService:
    """Service for creating and settling stand interactions."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._ledger = AccountLedger(uow)
        self._inventory = StandInventory(uow)

    def create_interaction(
        self, principal: Principal, command: commands.CreateInteraction
    ) -> Interaction:
        """Buy from a stand, or enter its activity.

        Raises:
            StandNotFoundError: If the stand does not exist.
            PermissionDeniedError: If the buyer is not a member of a kermesse
                the stand runs in.
            KermesseEndedError: If the only such kermesse has ended.
            InvalidQuantityError: If a consumption has no positive quantity.
            NotEnoughStockError: If the stand cannot serve the quantity.
            NotEnoughCreditError: If the buyer cannot pay the total.
        """
        principal = require_role(principal, Role.PARENT, Role.CHILD)

        with self._uow.atomic():
            if self._uow.stands.get_stand(command.stand_id) is None:
                raise StandNotFoundError(command.stand_id)

            kermesse_id = self._uow.kermesses.find_shared_kermesse_id(
                principal.user_id, command.stand_id
            )
            if kermesse_id is None:
                raise PermissionDeniedError(
                    "User is not a member of a kermesse running this stand"
                )
            kermesse = self._uow.kermesses.get_kermesse(kermesse_id, for_update=True)
            if kermesse is None:
                raise KermesseNotFoundError(kermesse_id)
            ensure_kermesse_open(kermesse)

            stand = self._uow.stands.get_stand(command.stand_id, for_update=True)
            if stand is None:
                raise StandNotFoundError(command.stand_id)

            quantity = 1
            if stand.is_consumption:
                if command.quantity is None or command.quantity <= 0:
                    raise InvalidQuantityError()
                quantity = command.quantity
                self._inventory.ensure_in_stock(stand, quantity)
            total = stand.price.times(quantity)

            accounts = self._uow.users.lock_users(principal.user_id, stand.user_id)
            buyer = accounts.get(principal.user_id)
            if buyer is None:
                raise UserNotFoundError(principal.user_id)
            self._ledger.ensure_can_pay(buyer, total)

            if stand.is_consumption:
                self._inventory.adjust_stock(stand.id, -quantity)
            self._ledger.transfer(buyer, stand.user_id, total)

            interaction = self._uow.interactions.create_interaction(
                user_id=buyer.id,
                stand_id=stand.id,
                kermesse_id=kermesse_id,
                kind=stand.kind,
                status=initial_interaction_status(stand.kind),
                credit=total,
                quantity=quantity,
            )

        logger.info(
            "Interaction %s: %s x%s at stand %s for %s credit",
            interaction.id,
            interaction.kind.value,
            quantity,
            stand.id,
            total,
        )
        return interaction

    def settle_activity(
        self, principal: Principal, command: commands.SettleActivity
    ) -> Interaction:
        """Close an open activity interaction and award its points."""
        principal = require_role(principal, Role.STAND_HOLDER)

        with self._uow.atomic():
            found = self._uow.interactions.get_interaction(command.interaction_id)
            if found is None:
                raise InteractionNotFoundError(command.interaction_id)

            kermesse = self._uow.kermesses.get_kermesse(
                found.kermesse_id, for_update=True
            )
            if kermesse is None:
                raise KermesseNotFoundError(found.kermesse_id)
            interaction = self._uow.interactions.get_interaction(
                found.id, for_update=True
            )

            stand = self._uow.stands.get_stand(interaction.stand_id)
            if stand is None:
                raise StandNotFoundError(interaction.stand_id)
            require_owner(principal, stand.user_id)

            ensure_activity_open(interaction)
            ensure_kermesse_open(kermesse)

            settled = self._uow.interactions.settle_interaction(
                interaction.id, command.point
            )

        logger.info(
            "Activity %s settled with %s points", settled.id, settled.point
        )
        return settled

    def get_interaction(self, principal: Principal, interaction_id: UUID) -> Interaction:
        require_principal(principal)
        with self._uow.atomic():
            interaction = self._uow.interactions.get_interaction(interaction_id)
        if interaction is None:
            raise InteractionNotFoundError(interaction_id)
        return interaction

    def list_interactions(
        self, principal: Principal, kermesse_id: UUID | None = None
    ) -> list[Interaction]:
        principal = require_principal(principal)
        scope: dict[str, UUID] = {}
        if principal.role is Role.PARENT:
            scope["parent_id"] = principal.user_id
        elif principal.role is Role.CHILD:
            scope["child_id"] = principal.user_id
        elif principal.role is Role.STAND_HOLDER:
            scope["stand_holder_id"] = principal.user_id
        with self._uow.atomic():
            return self._uow.interactions.list_interactions(
                kermesse_id=kermesse_id, **scope
            )
