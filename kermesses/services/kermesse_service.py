"""Kermesse service - lifecycle and membership orchestration.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from uuid import UUID

from kermesses.domain import (
    Kermesse,
    KermesseWithStats,
    Principal,
    Role,
    User,
)
from kermesses.domain import commands
from kermesses.domain.errors import (
    KermesseNotFoundError,
    StandAlreadyAssociatedError,
    StandNotFoundError,
    UserNotChildError,
    UserNotFoundError,
)
from kermesses.domain.lifecycle import ensure_can_end, ensure_kermesse_open
from kermesses.services.access import require_owner, require_principal, require_role
from kermesses.stores.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


class KermesseService:
    """Service for kermesse lifecycle and membership operations."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def _load_owned(self, principal: Principal, kermesse_id: UUID) -> Kermesse:
        kermesse = self._uow.kermesses.get_kermesse(kermesse_id, for_update=True)
        if kermesse is None:
            raise KermesseNotFoundError(kermesse_id)
        require_owner(principal, kermesse.user_id)
        return kermesse

    def create_kermesse(
        self, principal: Principal, command: commands.CreateKermesse
    ) -> Kermesse:
        principal = require_role(principal, Role.ORGANIZER)
        with self._uow.atomic():
            kermesse = self._uow.kermesses.create_kermesse(
                principal.user_id, command.name, command.description
            )
        logger.info("Kermesse %s created by %s", kermesse.id, principal.user_id)
        return kermesse

    def update_kermesse(
        self, principal: Principal, command: commands.UpdateKermesse
    ) -> Kermesse:
        principal = require_role(principal, Role.ORGANIZER)
        with self._uow.atomic():
            kermesse = self._load_owned(principal, command.kermesse_id)
            ensure_kermesse_open(kermesse)
            return self._uow.kermesses.update_kermesse(
                kermesse.id, command.name, command.description
            )

    def end_kermesse(self, principal: Principal, kermesse_id: UUID) -> Kermesse:
        """Close a kermesse for good.

        Raises:
            KermesseNotFoundError: If the kermesse does not exist.
            PermissionDeniedError: If the caller does not organize it.
            KermesseEndedError: If it is already ended.
            KermesseHasOpenTombolaError: If one of its tombolas is still started.
        """
        principal = require_role(principal, Role.ORGANIZER)
        with self._uow.atomic():
            kermesse = self._load_owned(principal, kermesse_id)
            ensure_can_end(
                kermesse, self._uow.kermesses.has_started_tombola(kermesse.id)
            )
            ended = self._uow.kermesses.end_kermesse(kermesse.id)
        logger.info("Kermesse %s ended", kermesse_id)
        return ended

    def add_member(self, principal: Principal, command: commands.AddMember) -> None:
        """Invite a child to a kermesse, along with the child's parent.

        Inviting the same child twice stores two membership rows.
        """
        principal = require_role(principal, Role.ORGANIZER)
        with self._uow.atomic():
            kermesse = self._load_owned(principal, command.kermesse_id)
            ensure_kermesse_open(kermesse)

            child = self._uow.users.get_user(command.user_id)
            if child is None:
                raise UserNotFoundError(command.user_id)
            if not child.is_child:
                raise UserNotChildError(child.id)

            self._uow.kermesses.add_member(kermesse.id, child.id)
            if child.parent_id is not None:
                self._uow.kermesses.add_member(kermesse.id, child.parent_id)
        logger.info(
            "Child %s (parent %s) joined kermesse %s",
            child.id,
            child.parent_id,
            kermesse.id,
        )

    def add_stand(self, principal: Principal, command: commands.AddStand) -> None:
        principal = require_role(principal, Role.ORGANIZER)
        with self._uow.atomic():
            kermesse = self._load_owned(principal, command.kermesse_id)
            ensure_kermesse_open(kermesse)

            stand = self._uow.stands.get_stand(command.stand_id, for_update=True)
            if stand is None:
                raise StandNotFoundError(command.stand_id)
            if self._uow.kermesses.is_stand_in_started_kermesse(stand.id):
                raise StandAlreadyAssociatedError(stand.id)

            self._uow.kermesses.add_stand(kermesse.id, stand.id)
        logger.info("Stand %s joined kermesse %s", stand.id, kermesse.id)

    def get_kermesse(self, principal: Principal, kermesse_id: UUID) -> KermesseWithStats:
        principal = require_principal(principal)
        with self._uow.atomic():
            kermesse = self._uow.kermesses.get_kermesse(kermesse_id)
            if kermesse is None:
                raise KermesseNotFoundError(kermesse_id)
            stats = self._uow.kermesses.stats(
                kermesse.id, **_stats_scope(principal)
            )
        return KermesseWithStats(kermesse=kermesse, stats=stats)

    def list_kermesses(self, principal: Principal) -> list[Kermesse]:
        principal = require_principal(principal)
        scope: dict[str, UUID] = {}
        if principal.role is Role.ORGANIZER:
            scope["organizer_id"] = principal.user_id
        elif principal.role in (Role.PARENT, Role.CHILD):
            scope["member_id"] = principal.user_id
        elif principal.role is Role.STAND_HOLDER:
            scope["stand_holder_id"] = principal.user_id
        with self._uow.atomic():
            return self._uow.kermesses.list_kermesses(**scope)

    def list_invitable_children(
        self, principal: Principal, kermesse_id: UUID
    ) -> list[User]:
        require_principal(principal)
        with self._uow.atomic():
            return self._uow.users.list_invitable_children(kermesse_id)


def _stats_scope(principal: Principal) -> dict[str, UUID]:
    key = {
        Role.ORGANIZER: "organizer_id",
        Role.PARENT: "parent_id",
        Role.CHILD: "child_id",
        Role.STAND_HOLDER: "stand_holder_id",
    }[principal.role]
    return {key: principal.user_id}
