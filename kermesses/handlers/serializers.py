"""Serializers for request payloads and API responses.

Input serializers validate the wire format and build command objects; they
hold no business rules. Output serializers read frozen domain models.
"""

from rest_framework import serializers

from kermesses.domain import Role, StandKind
from kermesses.domain import commands


def _enum_choices(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


# Input


class SignUpSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=_enum_choices(Role))

    def to_command(self) -> commands.SignUp:
        data = self.validated_data
        return commands.SignUp(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            role=Role(data["role"]),
        )


class SignInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def to_command(self) -> commands.SignIn:
        return commands.SignIn(**self.validated_data)


class UpdatePasswordSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def to_command(self, user_id) -> commands.UpdatePassword:
        return commands.UpdatePassword(user_id=user_id, **self.validated_data)


class InviteChildSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=255)

    def to_command(self) -> commands.InviteChild:
        return commands.InviteChild(**self.validated_data)


class PayChildSerializer(serializers.Serializer):
    child_id = serializers.UUIDField()
    amount = serializers.IntegerField()

    def to_command(self) -> commands.PayChild:
        return commands.PayChild(**self.validated_data)


class StandInputSerializer(serializers.Serializer):
    """Stand payload. ``type`` is only read on creation."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, default="")
    type = serializers.ChoiceField(choices=_enum_choices(StandKind), required=False)
    price = serializers.IntegerField()
    stock = serializers.IntegerField(required=False)

    def validate(self, attrs):
        if self.context.get("creating") and "type" not in attrs:
            raise serializers.ValidationError({"type": "This field is required."})
        return attrs

    def to_create_command(self) -> commands.CreateStand:
        data = self.validated_data
        return commands.CreateStand(
            name=data["name"],
            description=data["description"],
            kind=StandKind(data["type"]),
            price=data["price"],
            stock=data.get("stock", 0),
        )

    def to_update_command(self, stand_id=None) -> commands.UpdateStand:
        data = self.validated_data
        return commands.UpdateStand(
            name=data["name"],
            description=data["description"],
            price=data["price"],
            stock=data.get("stock"),
            stand_id=stand_id,
        )


class KermesseInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, default="")


class AddMemberSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()


class AddStandSerializer(serializers.Serializer):
    stand_id = serializers.UUIDField()


class CreateInteractionSerializer(serializers.Serializer):
    stand_id = serializers.UUIDField()
    quantity = serializers.IntegerField(required=False, allow_null=True)

    def to_command(self) -> commands.CreateInteraction:
        data = self.validated_data
        return commands.CreateInteraction(
            stand_id=data["stand_id"], quantity=data.get("quantity")
        )


class SettleActivitySerializer(serializers.Serializer):
    point = serializers.IntegerField(min_value=0)


class CreateTombolaSerializer(serializers.Serializer):
    kermesse_id = serializers.UUIDField()
    name = serializers.CharField(max_length=255)
    price = serializers.IntegerField()
    gift = serializers.CharField(max_length=255)

    def to_command(self) -> commands.CreateTombola:
        return commands.CreateTombola(**self.validated_data)


class UpdateTombolaSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    price = serializers.IntegerField()
    gift = serializers.CharField(max_length=255)


class SellTicketSerializer(serializers.Serializer):
    tombola_id = serializers.UUIDField()

    def to_command(self) -> commands.SellTicket:
        return commands.SellTicket(**self.validated_data)


class ListFilterSerializer(serializers.Serializer):
    """Query-string filters shared by the list endpoints."""

    kermesse_id = serializers.UUIDField(required=False)
    tombola_id = serializers.UUIDField(required=False)
    is_free = serializers.BooleanField(required=False, default=False)


# Output


class UserSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField(source="role.value")
    credit = serializers.IntegerField()
    parent_id = serializers.UUIDField(allow_null=True)


class ProfileSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="user.id")
    name = serializers.CharField(source="user.name")
    email = serializers.EmailField(source="user.email")
    role = serializers.CharField(source="user.role.value")
    credit = serializers.IntegerField(source="user.credit")
    has_stand = serializers.BooleanField()
    token = serializers.CharField()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not data["token"]:
            data.pop("token")
        return data


class StandSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField()
    type = serializers.CharField(source="kind.value")
    price = serializers.IntegerField()
    stock = serializers.IntegerField()
    created_at = serializers.DateTimeField()


class KermesseSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField()
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()


class KermesseStatsSerializer(serializers.Serializer):
    stand_count = serializers.IntegerField()
    tombola_count = serializers.IntegerField()
    user_count = serializers.IntegerField()
    interaction_count = serializers.IntegerField()
    interaction_income = serializers.IntegerField()
    tombola_income = serializers.IntegerField()
    points = serializers.IntegerField()


class KermesseDetailSerializer(serializers.Serializer):
    def to_representation(self, instance):
        data = KermesseSerializer(instance.kermesse).data
        data.update(KermesseStatsSerializer(instance.stats).data)
        return data


class InteractionSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    stand_id = serializers.UUIDField()
    kermesse_id = serializers.UUIDField()
    type = serializers.CharField(source="kind.value")
    status = serializers.CharField(source="status.value")
    credit = serializers.IntegerField()
    quantity = serializers.IntegerField()
    point = serializers.IntegerField()
    created_at = serializers.DateTimeField()


class TombolaSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    kermesse_id = serializers.UUIDField()
    name = serializers.CharField()
    price = serializers.IntegerField()
    gift = serializers.CharField()
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()


class TicketSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    tombola_id = serializers.UUIDField()
    is_winner = serializers.BooleanField()
    created_at = serializers.DateTimeField()
