"""Credit ledger and stand inventory primitives.

The only code paths allowed to write ``User.credit`` and ``Stand.stock``.
Both expect to run inside ``UnitOfWork.atomic()`` on rows the caller locked
and checked; they re-validate against those snapshots and never read again.
"""

import logging
from uuid import UUID

from kermesses.domain import Stand, User
from kermesses.domain.errors import NotEnoughCreditError, NotEnoughStockError
from kermesses.stores.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


class AccountLedger:
    """Moves virtual credit between accounts."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def ensure_can_pay(self, user: User, amount: int) -> None:
        if not user.credit.covers(amount):
            logger.warning(
                "Credit check failed for user %s: needs %s, has %s",
                user.id,
                amount,
                user.credit,
            )
            raise NotEnoughCreditError(user.id, amount, int(user.credit))

    def adjust_credit(self, user_id: UUID, delta: int) -> None:
        self._uow.users.adjust_credit(user_id, delta)

    def transfer(self, payer: User, payee_id: UUID, amount: int) -> None:
        """Debit ``payer`` and credit ``payee_id`` by ``amount``."""
        self.ensure_can_pay(payer, amount)
        self.adjust_credit(payer.id, -amount)
        self.adjust_credit(payee_id, amount)
        logger.info("Transferred %s credit from %s to %s", amount, payer.id, payee_id)

    def top_up(self, user_id: UUID, amount: int) -> None:
        self.adjust_credit(user_id, amount)
        logger.info("Issued %s credit to %s", amount, user_id)


class StandInventory:
    """Keeps stand stock in step with consumption purchases."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def ensure_in_stock(self, stand: Stand, quantity: int) -> None:
        if not stand.stock.covers(quantity):
            logger.warning(
                "Stock check failed for stand %s: wants %s, has %s",
                stand.id,
                quantity,
                int(stand.stock),
            )
            raise NotEnoughStockError(stand.id, quantity, int(stand.stock))

    def adjust_stock(self, stand_id: UUID, delta: int) -> None:
        self._uow.stands.adjust_stock(stand_id, delta)
