"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models

from kermesses.domain.value_objects import (
    InteractionStatus,
    KermesseStatus,
    Role,
    StandKind,
    TombolaStatus,
)


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.value) for member in enum_cls]


class User(models.Model):
    """Persistence model for accounts of every role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        related_name="children",
        blank=True,
        null=True,
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True)
    password = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=_choices(Role))
    credit = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["role", "parent"], name="user_role_parent_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"


class Stand(models.Model):
    """Persistence model for stands."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="stands")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    kind = models.CharField(max_length=20, choices=_choices(StandKind))
    price = models.PositiveIntegerField()
    stock = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["user"], name="stand_user_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Kermesse(models.Model):
    """Persistence model for kermesses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="organized_kermesses"
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=_choices(KermesseStatus),
        default=KermesseStatus.STARTED.value,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="kermesse_created_idx"),
            models.Index(fields=["status"], name="kermesse_status_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Membership(models.Model):
    """A user taking part in a kermesse. No uniqueness on the pair."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kermesse = models.ForeignKey(
        Kermesse, on_delete=models.CASCADE, related_name="memberships"
    )
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="memberships")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["kermesse", "user"], name="membership_kermesse_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} in {self.kermesse_id}"


class StandAssociation(models.Model):
    """A stand running in a kermesse."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kermesse = models.ForeignKey(
        Kermesse, on_delete=models.CASCADE, related_name="stand_associations"
    )
    stand = models.ForeignKey(
        Stand, on_delete=models.CASCADE, related_name="kermesse_associations"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["stand", "kermesse"], name="association_stand_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.stand_id} in {self.kermesse_id}"


class Interaction(models.Model):
    """Persistence model for purchases and activity participations."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="interactions")
    stand = models.ForeignKey(
        Stand, on_delete=models.CASCADE, related_name="interactions"
    )
    kermesse = models.ForeignKey(
        Kermesse, on_delete=models.CASCADE, related_name="interactions"
    )
    kind = models.CharField(max_length=20, choices=_choices(StandKind))
    status = models.CharField(max_length=20, choices=_choices(InteractionStatus))
    credit = models.PositiveIntegerField()
    quantity = models.PositiveIntegerField(default=1)
    point = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["kermesse", "stand"], name="interaction_kermesse_idx"),
            models.Index(fields=["user"], name="interaction_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.kind} {self.credit} at {self.stand_id}"


class Tombola(models.Model):
    """Persistence model for raffles."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kermesse = models.ForeignKey(
        Kermesse, on_delete=models.CASCADE, related_name="tombolas"
    )
    name = models.CharField(max_length=255)
    price = models.PositiveIntegerField()
    gift = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=_choices(TombolaStatus),
        default=TombolaStatus.STARTED.value,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["kermesse", "status"], name="tombola_kermesse_status_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Ticket(models.Model):
    """Persistence model for raffle tickets."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="tickets")
    tombola = models.ForeignKey(
        Tombola, on_delete=models.CASCADE, related_name="tickets"
    )
    is_winner = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["tombola"], name="ticket_tombola_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tombola"],
                condition=models.Q(is_winner=True),
                name="one_winner_per_tombola",
            ),
        ]

    def __str__(self) -> str:
        return f"Ticket {self.id} for {self.tombola_id}"
