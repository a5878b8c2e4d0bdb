"""Django ORM implementation of the stores.

Rows are converted to frozen domain models before leaving this module.
Credit and stock only move through ``F()`` expressions so the arithmetic runs
in the database against the locked row.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, F, Q, Sum

from kermesses import models
from kermesses.domain import (
    Credit,
    Interaction,
    InteractionStatus,
    Kermesse,
    KermesseStats,
    KermesseStatus,
    Price,
    Role,
    Stand,
    StandKind,
    Stock,
    Ticket,
    Tombola,
    TombolaStatus,
    User,
)
from kermesses.domain.errors import EmailAlreadyExistsError, StoreUnavailableError
from kermesses.stores.interfaces import (
    InteractionStore,
    KermesseStore,
    StandStore,
    TombolaStore,
    UnitOfWork,
    UserStore,
)

logger = logging.getLogger(__name__)


def _to_user(row: models.User) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        role=Role(row.role),
        credit=Credit(row.credit),
        parent_id=row.parent_id,
        password_hash=row.password,
    )


def _to_stand(row: models.Stand) -> Stand:
    return Stand(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        description=row.description,
        kind=StandKind(row.kind),
        price=Price(row.price),
        stock=Stock(row.stock),
        created_at=row.created_at,
    )


def _to_kermesse(row: models.Kermesse) -> Kermesse:
    return Kermesse(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        description=row.description,
        status=KermesseStatus(row.status),
        created_at=row.created_at,
    )


def _to_interaction(row: models.Interaction) -> Interaction:
    return Interaction(
        id=row.id,
        user_id=row.user_id,
        stand_id=row.stand_id,
        kermesse_id=row.kermesse_id,
        kind=StandKind(row.kind),
        status=InteractionStatus(row.status),
        credit=row.credit,
        quantity=row.quantity,
        point=row.point,
        created_at=row.created_at,
    )


def _to_tombola(row: models.Tombola) -> Tombola:
    return Tombola(
        id=row.id,
        kermesse_id=row.kermesse_id,
        name=row.name,
        price=Price(row.price),
        gift=row.gift,
        status=TombolaStatus(row.status),
        created_at=row.created_at,
    )


def _to_ticket(row: models.Ticket) -> Ticket:
    return Ticket(
        id=row.id,
        user_id=row.user_id,
        tombola_id=row.tombola_id,
        is_winner=row.is_winner,
        created_at=row.created_at,
    )


def _lockable(queryset, for_update: bool):
    return queryset.select_for_update() if for_update else queryset


class DjangoUserStore(UserStore):
    """PostgreSQL-backed user store using Django ORM."""

    def get_user(self, user_id: UUID, *, for_update: bool = False) -> User | None:
        row = _lockable(models.User.objects, for_update).filter(pk=user_id).first()
        return _to_user(row) if row else None

    def lock_users(self, *user_ids: UUID) -> dict[UUID, User]:
        rows = (
            models.User.objects.select_for_update()
            .filter(pk__in=set(user_ids))
            .order_by("pk")
        )
        return {row.id: _to_user(row) for row in rows}

    def get_user_by_email(self, email: str) -> User | None:
        row = models.User.objects.filter(email__iexact=email).first()
        return _to_user(row) if row else None

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        parent_id: UUID | None = None,
    ) -> User:
        try:
            with transaction.atomic():
                row = models.User.objects.create(
                    name=name,
                    email=email,
                    password=password_hash,
                    role=role.value,
                    parent_id=parent_id,
                )
        except IntegrityError as exc:
            raise EmailAlreadyExistsError() from exc
        return _to_user(row)

    def set_password(self, user_id: UUID, password_hash: str) -> None:
        models.User.objects.filter(pk=user_id).update(password=password_hash)

    def adjust_credit(self, user_id: UUID, delta: int) -> None:
        models.User.objects.filter(pk=user_id).update(credit=F("credit") + delta)

    def has_stand(self, user_id: UUID) -> bool:
        return models.Stand.objects.filter(user_id=user_id).exists()

    def list_users(self, kermesse_id: UUID | None = None) -> list[User]:
        queryset = models.User.objects.all()
        if kermesse_id is not None:
            queryset = queryset.filter(memberships__kermesse_id=kermesse_id).distinct()
        return [_to_user(row) for row in queryset]

    def list_children(
        self, parent_id: UUID, kermesse_id: UUID | None = None
    ) -> list[User]:
        queryset = models.User.objects.filter(role=Role.CHILD.value, parent_id=parent_id)
        if kermesse_id is not None:
            queryset = queryset.filter(memberships__kermesse_id=kermesse_id).distinct()
        return [_to_user(row) for row in queryset]

    def list_invitable_children(self, kermesse_id: UUID) -> list[User]:
        queryset = models.User.objects.filter(role=Role.CHILD.value).exclude(
            memberships__kermesse_id=kermesse_id
        )
        return [_to_user(row) for row in queryset]


class DjangoStandStore(StandStore):
    def get_stand(self, stand_id: UUID, *, for_update: bool = False) -> Stand | None:
        row = _lockable(models.Stand.objects, for_update).filter(pk=stand_id).first()
        return _to_stand(row) if row else None

    def get_stand_by_holder(
        self, user_id: UUID, *, for_update: bool = False
    ) -> Stand | None:
        row = (
            _lockable(models.Stand.objects, for_update)
            .filter(user_id=user_id)
            .order_by("created_at")
            .first()
        )
        return _to_stand(row) if row else None

    def create_stand(
        self,
        user_id: UUID,
        name: str,
        description: str,
        kind: StandKind,
        price: int,
        stock: int,
    ) -> Stand:
        row = models.Stand.objects.create(
            user_id=user_id,
            name=name,
            description=description,
            kind=kind.value,
            price=price,
            stock=stock,
        )
        return _to_stand(row)

    def update_stand(
        self, stand_id: UUID, name: str, description: str, price: int
    ) -> Stand:
        row = models.Stand.objects.get(pk=stand_id)
        row.name = name
        row.description = description
        row.price = price
        row.save(update_fields=["name", "description", "price"])
        return _to_stand(row)

    def adjust_stock(self, stand_id: UUID, delta: int) -> None:
        models.Stand.objects.filter(pk=stand_id).update(stock=F("stock") + delta)

    def list_stands(
        self, kermesse_id: UUID | None = None, is_free: bool = False
    ) -> list[Stand]:
        queryset = models.Stand.objects.all()
        if kermesse_id is not None:
            queryset = queryset.filter(
                kermesse_associations__kermesse_id=kermesse_id
            ).distinct()
        if is_free:
            queryset = queryset.exclude(
                kermesse_associations__kermesse__status=KermesseStatus.STARTED.value
            )
        return [_to_stand(row) for row in queryset]


class DjangoKermesseStore(KermesseStore):
    def get_kermesse(
        self, kermesse_id: UUID, *, for_update: bool = False
    ) -> Kermesse | None:
        row = (
            _lockable(models.Kermesse.objects, for_update)
            .filter(pk=kermesse_id)
            .first()
        )
        return _to_kermesse(row) if row else None

    def list_kermesses(
        self,
        *,
        organizer_id: UUID | None = None,
        member_id: UUID | None = None,
        stand_holder_id: UUID | None = None,
    ) -> list[Kermesse]:
        queryset = models.Kermesse.objects.all()
        if organizer_id is not None:
            queryset = queryset.filter(user_id=organizer_id)
        if member_id is not None:
            queryset = queryset.filter(memberships__user_id=member_id)
        if stand_holder_id is not None:
            queryset = queryset.filter(
                stand_associations__stand__user_id=stand_holder_id
            )
        return [_to_kermesse(row) for row in queryset.distinct()]

    def create_kermesse(self, user_id: UUID, name: str, description: str) -> Kermesse:
        row = models.Kermesse.objects.create(
            user_id=user_id, name=name, description=description
        )
        return _to_kermesse(row)

    def update_kermesse(
        self, kermesse_id: UUID, name: str, description: str
    ) -> Kermesse:
        row = models.Kermesse.objects.get(pk=kermesse_id)
        row.name = name
        row.description = description
        row.save(update_fields=["name", "description"])
        return _to_kermesse(row)

    def end_kermesse(self, kermesse_id: UUID) -> Kermesse:
        row = models.Kermesse.objects.get(pk=kermesse_id)
        row.status = KermesseStatus.ENDED.value
        row.save(update_fields=["status"])
        return _to_kermesse(row)

    def has_started_tombola(self, kermesse_id: UUID) -> bool:
        return models.Tombola.objects.filter(
            kermesse_id=kermesse_id, status=TombolaStatus.STARTED.value
        ).exists()

    def add_member(self, kermesse_id: UUID, user_id: UUID) -> None:
        models.Membership.objects.create(kermesse_id=kermesse_id, user_id=user_id)

    def is_member(self, kermesse_id: UUID, user_id: UUID) -> bool:
        return models.Membership.objects.filter(
            kermesse_id=kermesse_id, user_id=user_id
        ).exists()

    def is_stand_in_started_kermesse(self, stand_id: UUID) -> bool:
        return models.StandAssociation.objects.filter(
            stand_id=stand_id, kermesse__status=KermesseStatus.STARTED.value
        ).exists()

    def add_stand(self, kermesse_id: UUID, stand_id: UUID) -> None:
        models.StandAssociation.objects.create(kermesse_id=kermesse_id, stand_id=stand_id)

    def find_shared_kermesse_id(self, user_id: UUID, stand_id: UUID) -> UUID | None:
        shared = models.Kermesse.objects.filter(
            stand_associations__stand_id=stand_id, memberships__user_id=user_id
        )
        started = (
            shared.filter(status=KermesseStatus.STARTED.value)
            .values_list("id", flat=True)
            .first()
        )
        if started is not None:
            return started
        return shared.values_list("id", flat=True).first()

    def stats(
        self,
        kermesse_id: UUID,
        *,
        organizer_id: UUID | None = None,
        parent_id: UUID | None = None,
        child_id: UUID | None = None,
        stand_holder_id: UUID | None = None,
    ) -> KermesseStats:
        counters: dict[str, int] = {
            "stand_count": models.StandAssociation.objects.filter(
                kermesse_id=kermesse_id
            ).count(),
        }

        if organizer_id is not None:
            counters["tombola_count"] = models.Tombola.objects.filter(
                kermesse_id=kermesse_id
            ).count()
            counters["tombola_income"] = (
                models.Ticket.objects.filter(tombola__kermesse_id=kermesse_id).aggregate(
                    total=Sum("tombola__price")
                )["total"]
                or 0
            )

        if organizer_id is not None or parent_id is not None:
            members = models.Membership.objects.filter(kermesse_id=kermesse_id)
            if parent_id is not None:
                members = members.filter(
                    user__role=Role.CHILD.value, user__parent_id=parent_id
                )
            counters["user_count"] = members.count()

        if organizer_id is not None or stand_holder_id is not None:
            interactions = models.Interaction.objects.filter(kermesse_id=kermesse_id)
            if stand_holder_id is not None:
                interactions = interactions.filter(stand__user_id=stand_holder_id)
            totals = interactions.aggregate(count=Count("id"), income=Sum("credit"))
            counters["interaction_count"] = totals["count"]
            counters["interaction_income"] = totals["income"] or 0

        if child_id is not None:
            counters["points"] = (
                models.Interaction.objects.filter(
                    kermesse_id=kermesse_id, user_id=child_id
                ).aggregate(total=Sum("point"))["total"]
                or 0
            )

        return KermesseStats(**counters)


class DjangoInteractionStore(InteractionStore):
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
        row = models.Interaction.objects.create(
            user_id=user_id,
            stand_id=stand_id,
            kermesse_id=kermesse_id,
            kind=kind.value,
            status=status.value,
            credit=credit,
            quantity=quantity,
        )
        return _to_interaction(row)

    def get_interaction(
        self, interaction_id: UUID, *, for_update: bool = False
    ) -> Interaction | None:
        row = (
            _lockable(models.Interaction.objects, for_update)
            .filter(pk=interaction_id)
            .first()
        )
        return _to_interaction(row) if row else None

    def settle_interaction(self, interaction_id: UUID, point: int) -> Interaction:
        row = models.Interaction.objects.get(pk=interaction_id)
        row.status = InteractionStatus.ENDED.value
        row.point = point
        row.save(update_fields=["status", "point"])
        return _to_interaction(row)

    def list_interactions(
        self,
        *,
        parent_id: UUID | None = None,
        child_id: UUID | None = None,
        stand_holder_id: UUID | None = None,
        kermesse_id: UUID | None = None,
    ) -> list[Interaction]:
        filters = Q()
        if parent_id is not None:
            filters &= Q(user__parent_id=parent_id)
        if child_id is not None:
            filters &= Q(user_id=child_id)
        if stand_holder_id is not None:
            filters &= Q(stand__user_id=stand_holder_id)
        if kermesse_id is not None:
            filters &= Q(kermesse_id=kermesse_id)
        return [_to_interaction(row) for row in models.Interaction.objects.filter(filters)]


class DjangoTombolaStore(TombolaStore):
    def get_tombola(
        self, tombola_id: UUID, *, for_update: bool = False
    ) -> Tombola | None:
        row = (
            _lockable(models.Tombola.objects, for_update).filter(pk=tombola_id).first()
        )
        return _to_tombola(row) if row else None

    def list_tombolas(self, kermesse_id: UUID | None = None) -> list[Tombola]:
        queryset = models.Tombola.objects.all()
        if kermesse_id is not None:
            queryset = queryset.filter(kermesse_id=kermesse_id)
        return [_to_tombola(row) for row in queryset]

    def create_tombola(
        self, kermesse_id: UUID, name: str, price: int, gift: str
    ) -> Tombola:
        row = models.Tombola.objects.create(
            kermesse_id=kermesse_id, name=name, price=price, gift=gift
        )
        return _to_tombola(row)

    def update_tombola(
        self, tombola_id: UUID, name: str, price: int, gift: str
    ) -> Tombola:
        row = models.Tombola.objects.get(pk=tombola_id)
        row.name = name
        row.price = price
        row.gift = gift
        row.save(update_fields=["name", "price", "gift"])
        return _to_tombola(row)

    def end_tombola(self, tombola_id: UUID) -> Tombola:
        row = models.Tombola.objects.get(pk=tombola_id)
        row.status = TombolaStatus.ENDED.value
        row.save(update_fields=["status"])
        return _to_tombola(row)

    def draw_winner(self, tombola_id: UUID) -> Ticket | None:
        # ORDER BY RANDOM() in the same transaction as the status flip.
        row = models.Ticket.objects.filter(tombola_id=tombola_id).order_by("?").first()
        if row is None:
            return None
        row.is_winner = True
        row.save(update_fields=["is_winner"])
        return _to_ticket(row)

    def create_ticket(self, user_id: UUID, tombola_id: UUID) -> Ticket:
        row = models.Ticket.objects.create(user_id=user_id, tombola_id=tombola_id)
        return _to_ticket(row)

    def get_ticket(self, ticket_id: UUID) -> Ticket | None:
        row = models.Ticket.objects.filter(pk=ticket_id).first()
        return _to_ticket(row) if row else None

    def list_tickets(
        self,
        *,
        organizer_id: UUID | None = None,
        parent_id: UUID | None = None,
        child_id: UUID | None = None,
        tombola_id: UUID | None = None,
    ) -> list[Ticket]:
        filters = Q()
        if organizer_id is not None:
            filters &= Q(tombola__kermesse__user_id=organizer_id)
        if parent_id is not None:
            filters &= Q(user__parent_id=parent_id)
        if child_id is not None:
            filters &= Q(user_id=child_id)
        if tombola_id is not None:
            filters &= Q(tombola_id=tombola_id)
        return [_to_ticket(row) for row in models.Ticket.objects.filter(filters)]


class DjangoUnitOfWork(UnitOfWork):
    """All Django stores, sharing the default database connection."""

    def __init__(self, using: str = "default") -> None:
        self._using = using
        self.users = DjangoUserStore()
        self.stands = DjangoStandStore()
        self.kermesses = DjangoKermesseStore()
        self.interactions = DjangoInteractionStore()
        self.tombolas = DjangoTombolaStore()

    @contextmanager
    def atomic(self) -> Iterator["DjangoUnitOfWork"]:
        try:
            with transaction.atomic(using=self._using):
                yield self
        except DatabaseError as exc:
            logger.exception("Transaction rolled back after a store failure")
            raise StoreUnavailableError() from exc
