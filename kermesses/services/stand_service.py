"""Stand service - stand holders manage their single stand."""

import logging
from uuid import UUID

from kermesses.domain import Principal, Role, Stand
from kermesses.domain import commands
from kermesses.domain.errors import (
    InvalidInputError,
    StandAlreadyExistsError,
    StandNotFoundError,
)
from kermesses.services.access import require_owner, require_principal, require_role
from kermesses.services.ledger import StandInventory
from kermesses.stores.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


class StandService:
    """Service for stand operations."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._inventory = StandInventory(uow)

    def create_stand(self, principal: Principal, command: commands.CreateStand) -> Stand:
        """Open the calling holder's stand.

        Raises:
            InvalidInputError: If price or stock is negative.
            StandAlreadyExistsError: If the holder already has a stand.
        """
        principal = require_role(principal, Role.STAND_HOLDER)
        _ensure_amounts(command.price, command.stock)
        with self._uow.atomic():
            # The holder row serializes concurrent creations.
            self._uow.users.get_user(principal.user_id, for_update=True)
            if self._uow.stands.get_stand_by_holder(principal.user_id) is not None:
                raise StandAlreadyExistsError(principal.user_id)
            stand = self._uow.stands.create_stand(
                user_id=principal.user_id,
                name=command.name,
                description=command.description,
                kind=command.kind,
                price=command.price,
                stock=command.stock,
            )
        logger.info("Stand %s opened by %s", stand.id, principal.user_id)
        return stand

    def update_stand(self, principal: Principal, command: commands.UpdateStand) -> Stand:
        """Update a stand; without ``stand_id`` the caller's own stand.

        A ``stock`` of ``None`` keeps the current stock.
        """
        principal = require_role(principal, Role.STAND_HOLDER)
        _ensure_amounts(command.price, command.stock)
        with self._uow.atomic():
            if command.stand_id is None:
                stand = self._uow.stands.get_stand_by_holder(
                    principal.user_id, for_update=True
                )
                if stand is None:
                    raise StandNotFoundError(principal.user_id)
            else:
                stand = self._uow.stands.get_stand(command.stand_id, for_update=True)
                if stand is None:
                    raise StandNotFoundError(command.stand_id)
                require_owner(principal, stand.user_id)
            delta = 0 if command.stock is None else command.stock - int(stand.stock)
            if delta:
                self._inventory.adjust_stock(stand.id, delta)
                logger.info(
                    "Stand %s restocked from %s to %s",
                    stand.id,
                    int(stand.stock),
                    command.stock,
                )
            return self._uow.stands.update_stand(
                stand.id,
                name=command.name,
                description=command.description,
                price=command.price,
            )

    def get_stand(self, principal: Principal, stand_id: UUID) -> Stand:
        require_principal(principal)
        with self._uow.atomic():
            stand = self._uow.stands.get_stand(stand_id)
        if stand is None:
            raise StandNotFoundError(stand_id)
        return stand

    def get_current_stand(self, principal: Principal) -> Stand:
        principal = require_role(principal, Role.STAND_HOLDER)
        with self._uow.atomic():
            stand = self._uow.stands.get_stand_by_holder(principal.user_id)
        if stand is None:
            raise StandNotFoundError(principal.user_id)
        return stand

    def list_stands(
        self,
        principal: Principal,
        kermesse_id: UUID | None = None,
        is_free: bool = False,
    ) -> list[Stand]:
        require_principal(principal)
        with self._uow.atomic():
            return self._uow.stands.list_stands(kermesse_id=kermesse_id, is_free=is_free)


def _ensure_amounts(price: int, stock: int | None) -> None:
    if price < 0:
        raise InvalidInputError("Price must not be negative")
    if stock is not None and stock < 0:
        raise InvalidInputError("Stock must not be negative")
