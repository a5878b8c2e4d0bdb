import uuid

import django.db.models.deletion
from django.db import migrations, models


ROLE_CHOICES = [
    ("ORGANIZER", "ORGANIZER"),
    ("STAND_HOLDER", "STAND_HOLDER"),
    ("PARENT", "PARENT"),
    ("CHILD", "CHILD"),
]
STAND_KIND_CHOICES = [("CONSUMPTION", "CONSUMPTION"), ("ACTIVITY", "ACTIVITY")]
STATUS_CHOICES = [("STARTED", "STARTED"), ("ENDED", "ENDED")]
INTERACTION_STATUS_CHOICES = [("OPEN", "OPEN"), ("ENDED", "ENDED")]


def uuid_pk():
    return models.UUIDField(
        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", uuid_pk()),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=255, unique=True)),
                ("password", models.CharField(max_length=255)),
                ("role", models.CharField(choices=ROLE_CHOICES, max_length=20)),
                ("credit", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="kermesses.user",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["role", "parent"], name="user_role_parent_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="Stand",
            fields=[
                ("id", uuid_pk()),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("kind", models.CharField(choices=STAND_KIND_CHOICES, max_length=20)),
                ("price", models.PositiveIntegerField()),
                ("stock", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stands",
                        to="kermesses.user",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["user"], name="stand_user_idx")],
            },
        ),
        migrations.CreateModel(
            name="Kermesse",
            fields=[
                ("id", uuid_pk()),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES, default="STARTED", max_length=20
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="organized_kermesses",
                        to="kermesses.user",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="kermesse_created_idx"),
                    models.Index(fields=["status"], name="kermesse_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Membership",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "kermesse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="kermesses.kermesse",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="kermesses.user",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["kermesse", "user"], name="membership_kermesse_user_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="StandAssociation",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "kermesse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stand_associations",
                        to="kermesses.kermesse",
                    ),
                ),
                (
                    "stand",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="kermesse_associations",
                        to="kermesses.stand",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["stand", "kermesse"], name="association_stand_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Interaction",
            fields=[
                ("id", uuid_pk()),
                ("kind", models.CharField(choices=STAND_KIND_CHOICES, max_length=20)),
                (
                    "status",
                    models.CharField(choices=INTERACTION_STATUS_CHOICES, max_length=20),
                ),
                ("credit", models.PositiveIntegerField()),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("point", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "kermesse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="interactions",
                        to="kermesses.kermesse",
                    ),
                ),
                (
                    "stand",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="interactions",
                        to="kermesses.stand",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="interactions",
                        to="kermesses.user",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["kermesse", "stand"], name="interaction_kermesse_idx"
                    ),
                    models.Index(fields=["user"], name="interaction_user_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Tombola",
            fields=[
                ("id", uuid_pk()),
                ("name", models.CharField(max_length=255)),
                ("price", models.PositiveIntegerField()),
                ("gift", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES, default="STARTED", max_length=20
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "kermesse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tombolas",
                        to="kermesses.kermesse",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["kermesse", "status"], name="tombola_kermesse_status_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", uuid_pk()),
                ("is_winner", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "tombola",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tickets",
                        to="kermesses.tombola",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tickets",
                        to="kermesses.user",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["tombola"], name="ticket_tombola_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_winner", True)),
                        fields=("tombola",),
                        name="one_winner_per_tombola",
                    )
                ],
            },
        ),
    ]
