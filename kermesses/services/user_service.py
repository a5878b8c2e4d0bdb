"""Account service - sign-up, sign-in, invitations and parent payments."""

import logging
from uuid import UUID

from django.contrib.auth.hashers import check_password, make_password
from django.utils.crypto import get_random_string

from kermesses.domain import Principal, Profile, Role, User
from kermesses.domain import commands
from kermesses.domain.errors import (
    EmailAlreadyExistsError,
    InvalidAmountError,
    InvalidCredentialsError,
    InvalidPasswordError,
    PermissionDeniedError,
    RoleNotAllowedError,
    UserNotFoundError,
)
from kermesses.notifications import InvitationNotifier
from kermesses.services.access import require_owner, require_principal, require_role
from kermesses.services.ledger import AccountLedger
from kermesses.stores.interfaces import UnitOfWork
from kermesses.tokens import issue_token

logger = logging.getLogger(__name__)

INVITATION_PASSWORD_LENGTH = 8


class UserService:
    """Service for accounts and the parent side of the credit ledger."""

    def __init__(self, uow: UnitOfWork, notifier: InvitationNotifier) -> None:
        self._uow = uow
        self._notifier = notifier
        self._ledger = AccountLedger(uow)

    def _profile(self, user: User, token: str = "") -> Profile:
        return Profile(
            user=user, has_stand=self._uow.users.has_stand(user.id), token=token
        )

    def sign_up(self, command: commands.SignUp) -> User:
        if command.role is Role.CHILD:
            raise RoleNotAllowedError(command.role.value)
        with self._uow.atomic():
            if self._uow.users.get_user_by_email(command.email) is not None:
                raise EmailAlreadyExistsError()
            user = self._uow.users.create_user(
                name=command.name,
                email=command.email,
                password_hash=make_password(command.password),
                role=command.role,
            )
        logger.info("User %s signed up as %s", user.id, user.role.value)
        return user

    def sign_in(self, command: commands.SignIn) -> Profile:
        """Check credentials and issue a bearer token.

        Raises:
            UserNotFoundError: If no account uses the email.
            InvalidCredentialsError: If the password does not match.
        """
        with self._uow.atomic():
            user = self._uow.users.get_user_by_email(command.email)
            if user is None:
                raise UserNotFoundError(command.email)
            if not check_password(command.password, user.password_hash):
                logger.warning("Rejected sign-in for user %s", user.id)
                raise InvalidCredentialsError()
            return self._profile(user, token=issue_token(user))

    def get_me(self, principal: Principal) -> Profile:
        principal = require_principal(principal)
        with self._uow.atomic():
            user = self._uow.users.get_user(principal.user_id)
            if user is None:
                raise UserNotFoundError(principal.user_id)
            return self._profile(user)

    def get_user(self, principal: Principal, user_id: UUID) -> User:
        require_principal(principal)
        with self._uow.atomic():
            user = self._uow.users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def list_users(
        self, principal: Principal, kermesse_id: UUID | None = None
    ) -> list[User]:
        require_principal(principal)
        with self._uow.atomic():
            return self._uow.users.list_users(kermesse_id)

    def list_children(
        self, principal: Principal, kermesse_id: UUID | None = None
    ) -> list[User]:
        principal = require_role(principal, Role.PARENT)
        with self._uow.atomic():
            return self._uow.users.list_children(principal.user_id, kermesse_id)

    def update_password(
        self, principal: Principal, command: commands.UpdatePassword
    ) -> None:
        principal = require_principal(principal)
        with self._uow.atomic():
            user = self._uow.users.get_user(command.user_id, for_update=True)
            if user is None:
                raise UserNotFoundError(command.user_id)
            require_owner(principal, user.id)
            if not check_password(command.password, user.password_hash):
                raise InvalidPasswordError()
            self._uow.users.set_password(user.id, make_password(command.new_password))
        logger.info("User %s changed password", user.id)

    def invite_child(self, principal: Principal, command: commands.InviteChild) -> User:
        """Create a child account for the calling parent and email its password.

        The account is committed before the notifier runs, so a delivery
        failure leaves the child in place.

        Raises:
            EmailAlreadyExistsError: If the email is taken.
            NotificationFailedError: If the invitation could not be sent.
        """
        principal = require_role(principal, Role.PARENT)
        password = get_random_string(INVITATION_PASSWORD_LENGTH)
        with self._uow.atomic():
            if self._uow.users.get_user_by_email(command.email) is not None:
                raise EmailAlreadyExistsError()
            child = self._uow.users.create_user(
                name=command.name,
                email=command.email,
                password_hash=make_password(password),
                role=Role.CHILD,
                parent_id=principal.user_id,
            )
        logger.info("Parent %s invited child %s", principal.user_id, child.id)

        self._notifier.send_invitation(child, password)
        return child

    def pay_child(self, principal: Principal, command: commands.PayChild) -> None:
        """Move credit from the calling parent to one of their children.

        Raises:
            InvalidAmountError: If the amount is not positive.
            UserNotFoundError: If the child does not exist.
            PermissionDeniedError: If the child belongs to another parent.
            NotEnoughCreditError: If the parent cannot cover the amount.
        """
        principal = require_role(principal, Role.PARENT)
        if command.amount <= 0:
            raise InvalidAmountError()
        with self._uow.atomic():
            accounts = self._uow.users.lock_users(principal.user_id, command.child_id)
            child = accounts.get(command.child_id)
            if child is None:
                raise UserNotFoundError(command.child_id)
            if child.parent_id != principal.user_id:
                raise PermissionDeniedError("Child belongs to another parent")
            parent = accounts.get(principal.user_id)
            if parent is None:
                raise UserNotFoundError(principal.user_id)
            self._ledger.transfer(parent, child.id, command.amount)

    def top_up(self, user_id: UUID, amount: int) -> None:
        """Issue server-side credit to a parent account."""
        if amount <= 0:
            raise InvalidAmountError()
        with self._uow.atomic():
            user = self._uow.users.get_user(user_id, for_update=True)
            if user is None:
                raise UserNotFoundError(user_id)
            if user.role is not Role.PARENT:
                raise PermissionDeniedError("Only parent accounts can be topped up")
            self._ledger.top_up(user.id, amount)
