"""Service wiring for the HTTP handlers."""

from kermesses.notifications import EmailInvitationNotifier
from kermesses.services.interaction_service import InteractionService
from kermesses.services.kermesse_service import KermesseService
from kermesses.services.stand_service import StandService
from kermesses.services.tombola_service import TombolaService
from kermesses.services.user_service import UserService
from kermesses.stores.django_store import DjangoUnitOfWork


def get_user_service() -> UserService:
    return UserService(DjangoUnitOfWork(), EmailInvitationNotifier())


def get_stand_service() -> StandService:
    return StandService(DjangoUnitOfWork())


def get_kermesse_service() -> KermesseService:
    return KermesseService(DjangoUnitOfWork())


def get_interaction_service() -> InteractionService:
    return InteractionService(DjangoUnitOfWork())


def get_tombola_service() -> TombolaService:
    return TombolaService(DjangoUnitOfWork())
