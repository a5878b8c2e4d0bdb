"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave error mapping to ``handlers.exceptions``
- Never contain business logic
"""

from uuid import UUID

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from kermesses.cache_keys import kermesse_tombolas_key
from kermesses.domain import Principal
from kermesses.domain import commands
from kermesses.domain.errors import InvalidInputError
from kermesses.domain.value_objects import parse_id
from kermesses.handlers import dependencies
from kermesses.handlers import serializers as s


def _path_id(value: str) -> UUID:
    try:
        return parse_id(value)
    except ValueError as exc:
        raise InvalidInputError("Invalid id format") from exc


def _validated(serializer_class, request: Request, **kwargs):
    serializer = serializer_class(data=request.data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer


def _filters(request: Request) -> dict:
    serializer = s.ListFilterSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class PrincipalView(APIView):
    """Base view for authenticated endpoints; ``request.user`` is a Principal."""

    @property
    def principal(self) -> Principal:
        return self.request.user


class HealthView(APIView):
    """Handler for GET /api/health"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        return Response({"status": "ok"})


# Accounts


class RegisterView(APIView):
    """Handler for POST /api/register"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        command = _validated(s.SignUpSerializer, request).to_command()
        user = dependencies.get_user_service().sign_up(command)
        return Response(s.UserSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Handler for POST /api/login"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        command = _validated(s.SignInSerializer, request).to_command()
        profile = dependencies.get_user_service().sign_in(command)
        return Response(s.ProfileSerializer(profile).data)


class ProfileView(PrincipalView):
    """Handler for GET /api/profile"""

    def get(self, request: Request) -> Response:
        profile = dependencies.get_user_service().get_me(self.principal)
        return Response(s.ProfileSerializer(profile).data)


class UserListView(PrincipalView):
    """Handler for GET /api/users"""

    def get(self, request: Request) -> Response:
        filters = _filters(request)
        users = dependencies.get_user_service().list_users(
            self.principal, filters.get("kermesse_id")
        )
        return Response(s.UserSerializer(users, many=True).data)


class ChildListView(PrincipalView):
    """Handler for GET /api/user/children"""

    def get(self, request: Request) -> Response:
        filters = _filters(request)
        children = dependencies.get_user_service().list_children(
            self.principal, filters.get("kermesse_id")
        )
        return Response(s.UserSerializer(children, many=True).data)


class UserDetailView(PrincipalView):
    """Handler for GET|PATCH /api/user/{user_id}"""

    def get(self, request: Request, user_id: str) -> Response:
        user = dependencies.get_user_service().get_user(
            self.principal, _path_id(user_id)
        )
        return Response(s.UserSerializer(user).data)

    def patch(self, request: Request, user_id: str) -> Response:
        serializer = _validated(s.UpdatePasswordSerializer, request)
        dependencies.get_user_service().update_password(
            self.principal, serializer.to_command(_path_id(user_id))
        )
        return Response(status=status.HTTP_202_ACCEPTED)


class InviteChildView(PrincipalView):
    """Handler for POST /api/user/invite"""

    def post(self, request: Request) -> Response:
        command = _validated(s.InviteChildSerializer, request).to_command()
        child = dependencies.get_user_service().invite_child(self.principal, command)
        return Response(s.UserSerializer(child).data, status=status.HTTP_201_CREATED)


class PayChildView(PrincipalView):
    """Handler for PATCH /api/user/pay"""

    def patch(self, request: Request) -> Response:
        command = _validated(s.PayChildSerializer, request).to_command()
        dependencies.get_user_service().pay_child(self.principal, command)
        return Response(status=status.HTTP_202_ACCEPTED)


# Stands


class StandListView(PrincipalView):
    """Handler for GET /api/stands"""

    def get(self, request: Request) -> Response:
        filters = _filters(request)
        stands = dependencies.get_stand_service().list_stands(
            self.principal,
            kermesse_id=filters.get("kermesse_id"),
            is_free=filters["is_free"],
        )
        return Response(s.StandSerializer(stands, many=True).data)


class CurrentStandView(PrincipalView):
    """Handler for GET /api/stand/current"""

    def get(self, request: Request) -> Response:
        stand = dependencies.get_stand_service().get_current_stand(self.principal)
        return Response(s.StandSerializer(stand).data)


class StandView(PrincipalView):
    """Handler for POST|PATCH /api/stand"""

    def post(self, request: Request) -> Response:
        serializer = _validated(
            s.StandInputSerializer, request, context={"creating": True}
        )
        stand = dependencies.get_stand_service().create_stand(
            self.principal, serializer.to_create_command()
        )
        return Response(s.StandSerializer(stand).data, status=status.HTTP_201_CREATED)

    def patch(self, request: Request) -> Response:
        serializer = _validated(s.StandInputSerializer, request)
        stand = dependencies.get_stand_service().update_stand(
            self.principal, serializer.to_update_command()
        )
        return Response(s.StandSerializer(stand).data, status=status.HTTP_202_ACCEPTED)


class StandDetailView(PrincipalView):
    """Handler for GET|PATCH /api/stand/{stand_id}"""

    def get(self, request: Request, stand_id: str) -> Response:
        stand = dependencies.get_stand_service().get_stand(
            self.principal, _path_id(stand_id)
        )
        return Response(s.StandSerializer(stand).data)

    def patch(self, request: Request, stand_id: str) -> Response:
        serializer = _validated(s.StandInputSerializer, request)
        stand = dependencies.get_stand_service().update_stand(
            self.principal, serializer.to_update_command(_path_id(stand_id))
        )
        return Response(s.StandSerializer(stand).data, status=status.HTTP_202_ACCEPTED)


# Kermesses


class KermesseListView(PrincipalView):
    """Handler for GET /api/kermesses"""

    def get(self, request: Request) -> Response:
        kermesses = dependencies.get_kermesse_service().list_kermesses(self.principal)
        return Response(s.KermesseSerializer(kermesses, many=True).data)


class KermesseCreateView(PrincipalView):
    """Handler for POST /api/kermesse"""

    def post(self, request: Request) -> Response:
        data = _validated(s.KermesseInputSerializer, request).validated_data
        kermesse = dependencies.get_kermesse_service().create_kermesse(
            self.principal, commands.CreateKermesse(**data)
        )
        return Response(
            s.KermesseSerializer(kermesse).data, status=status.HTTP_201_CREATED
        )


class KermesseDetailView(PrincipalView):
    """Handler for GET|PATCH /api/kermesse/{kermesse_id}"""

    def get(self, request: Request, kermesse_id: str) -> Response:
        detail = dependencies.get_kermesse_service().get_kermesse(
            self.principal, _path_id(kermesse_id)
        )
        return Response(s.KermesseDetailSerializer(detail).data)

    def patch(self, request: Request, kermesse_id: str) -> Response:
        data = _validated(s.KermesseInputSerializer, request).validated_data
        kermesse = dependencies.get_kermesse_service().update_kermesse(
            self.principal,
            commands.UpdateKermesse(kermesse_id=_path_id(kermesse_id), **data),
        )
        return Response(
            s.KermesseSerializer(kermesse).data, status=status.HTTP_202_ACCEPTED
        )


class KermesseInvitableUsersView(PrincipalView):
    """Handler for GET /api/kermesse/{kermesse_id}/users"""

    def get(self, request: Request, kermesse_id: str) -> Response:
        children = dependencies.get_kermesse_service().list_invitable_children(
            self.principal, _path_id(kermesse_id)
        )
        return Response(s.UserSerializer(children, many=True).data)


class KermesseFinishView(PrincipalView):
    """Handler for PATCH /api/kermesse/{kermesse_id}/finish"""

    def patch(self, request: Request, kermesse_id: str) -> Response:
        kermesse = dependencies.get_kermesse_service().end_kermesse(
            self.principal, _path_id(kermesse_id)
        )
        return Response(
            s.KermesseSerializer(kermesse).data, status=status.HTTP_202_ACCEPTED
        )


class KermesseAddUserView(PrincipalView):
    """Handler for PATCH /api/kermesse/{kermesse_id}/adduser"""

    def patch(self, request: Request, kermesse_id: str) -> Response:
        data = _validated(s.AddMemberSerializer, request).validated_data
        dependencies.get_kermesse_service().add_member(
            self.principal,
            commands.AddMember(kermesse_id=_path_id(kermesse_id), **data),
        )
        return Response(status=status.HTTP_202_ACCEPTED)


class KermesseAddStandView(PrincipalView):
    """Handler for PATCH /api/kermesse/{kermesse_id}/addstand"""

    def patch(self, request: Request, kermesse_id: str) -> Response:
        data = _validated(s.AddStandSerializer, request).validated_data
        dependencies.get_kermesse_service().add_stand(
            self.principal,
            commands.AddStand(kermesse_id=_path_id(kermesse_id), **data),
        )
        return Response(status=status.HTTP_202_ACCEPTED)


# Interactions


class InteractionListView(PrincipalView):
    """Handler for GET /api/interactions"""

    def get(self, request: Request) -> Response:
        filters = _filters(request)
        interactions = dependencies.get_interaction_service().list_interactions(
            self.principal, filters.get("kermesse_id")
        )
        return Response(s.InteractionSerializer(interactions, many=True).data)


class InteractionCreateView(PrincipalView):
    """Handler for POST /api/interaction"""

    def post(self, request: Request) -> Response:
        command = _validated(s.CreateInteractionSerializer, request).to_command()
        interaction = dependencies.get_interaction_service().create_interaction(
            self.principal, command
        )
        return Response(
            s.InteractionSerializer(interaction).data, status=status.HTTP_201_CREATED
        )


class InteractionDetailView(PrincipalView):
    """Handler for GET|PATCH /api/interaction/{interaction_id}"""

    def get(self, request: Request, interaction_id: str) -> Response:
        interaction = dependencies.get_interaction_service().get_interaction(
            self.principal, _path_id(interaction_id)
        )
        return Response(s.InteractionSerializer(interaction).data)

    def patch(self, request: Request, interaction_id: str) -> Response:
        data = _validated(s.SettleActivitySerializer, request).validated_data
        interaction = dependencies.get_interaction_service().settle_activity(
            self.principal,
            commands.SettleActivity(
                interaction_id=_path_id(interaction_id), point=data["point"]
            ),
        )
        return Response(
            s.InteractionSerializer(interaction).data, status=status.HTTP_202_ACCEPTED
        )


# Tombolas and tickets


class TombolaListView(PrincipalView):
    """Handler for GET /api/tombolas

    Listings filtered by kermesse are cached until one of its tombolas changes.
    """

    def get(self, request: Request) -> Response:
        kermesse_id = _filters(request).get("kermesse_id")
        service = dependencies.get_tombola_service()
        if kermesse_id is None:
            tombolas = service.list_tombolas(self.principal)
            return Response(s.TombolaSerializer(tombolas, many=True).data)

        key = kermesse_tombolas_key(kermesse_id)
        data = cache.get(key)
        if data is None:
            tombolas = service.list_tombolas(self.principal, kermesse_id)
            data = s.TombolaSerializer(tombolas, many=True).data
            cache.set(key, data, settings.KERMESSE_CACHE_TIMEOUT)
        return Response(data)


class TombolaCreateView(PrincipalView):
    """Handler for POST /api/tombola"""

    def post(self, request: Request) -> Response:
        command = _validated(s.CreateTombolaSerializer, request).to_command()
        tombola = dependencies.get_tombola_service().create_tombola(
            self.principal, command
        )
        return Response(
            s.TombolaSerializer(tombola).data, status=status.HTTP_201_CREATED
        )


class TombolaDetailView(PrincipalView):
    """Handler for GET|PATCH /api/tombola/{tombola_id}"""

    def get(self, request: Request, tombola_id: str) -> Response:
        tombola = dependencies.get_tombola_service().get_tombola(
            self.principal, _path_id(tombola_id)
        )
        return Response(s.TombolaSerializer(tombola).data)

    def patch(self, request: Request, tombola_id: str) -> Response:
        data = _validated(s.UpdateTombolaSerializer, request).validated_data
        tombola = dependencies.get_tombola_service().update_tombola(
            self.principal,
            commands.UpdateTombola(tombola_id=_path_id(tombola_id), **data),
        )
        return Response(
            s.TombolaSerializer(tombola).data, status=status.HTTP_202_ACCEPTED
        )


class TombolaFinishView(PrincipalView):
    """Handler for PATCH /api/tombola/{tombola_id}/finish"""

    def patch(self, request: Request, tombola_id: str) -> Response:
        tombola = dependencies.get_tombola_service().finish_tombola(
            self.principal, _path_id(tombola_id)
        )
        return Response(
            s.TombolaSerializer(tombola).data, status=status.HTTP_202_ACCEPTED
        )


class TicketListView(PrincipalView):
    """Handler for GET /api/tickets"""

    def get(self, request: Request) -> Response:
        filters = _filters(request)
        tickets = dependencies.get_tombola_service().list_tickets(
            self.principal, filters.get("tombola_id")
        )
        return Response(s.TicketSerializer(tickets, many=True).data)


class TicketDetailView(PrincipalView):
    """Handler for GET /api/ticket/{ticket_id}"""

    def get(self, request: Request, ticket_id: str) -> Response:
        ticket = dependencies.get_tombola_service().get_ticket(
            self.principal, _path_id(ticket_id)
        )
        return Response(s.TicketSerializer(ticket).data)


class TicketCreateView(PrincipalView):
    """Handler for POST /api/ticket"""

    def post(self, request: Request) -> Response:
        command = _validated(s.SellTicketSerializer, request).to_command()
        ticket = dependencies.get_tombola_service().sell_ticket(
            self.principal, command
        )
        return Response(s.TicketSerializer(ticket).data, status=status.HTTP_201_CREATED)
