"""Integration tests for accounts, invitations and parent payments.

Run with: pytest tests/test_users.py -v
"""

import re
from unittest import mock

import pytest

from kermesses import models
from kermesses.domain import Role
from kermesses.domain import commands
from kermesses.domain.errors import (
    EmailAlreadyExistsError,
    InvalidAmountError,
    InvalidCredentialsError,
    InvalidPasswordError,
    NotEnoughCreditError,
    NotificationFailedError,
    PermissionDeniedError,
    RoleNotAllowedError,
    UserNotFoundError,
)
from kermesses.notifications import EmailInvitationNotifier, InvitationNotifier
from kermesses.services.user_service import UserService
from kermesses.stores.django_store import DjangoUserStore
from kermesses.tokens import read_token


@pytest.fixture
def service(uow) -> UserService:
    return UserService(uow, EmailInvitationNotifier())


@pytest.mark.django_db
class TestSignUpAndSignIn:
    """Tests for registration and credential checks."""

    def test_sign_up_then_sign_in(self, service):
        user = service.sign_up(
            commands.SignUp(
                name="Ada", email="ada@example.com", password="pw", role=Role.PARENT
            )
        )
        assert int(user.credit) == 0

        profile = service.sign_in(commands.SignIn(email="ada@example.com", password="pw"))

        assert profile.user.id == user.id
        assert profile.has_stand is False
        principal = read_token(profile.token)
        assert principal.user_id == user.id
        assert principal.role is Role.PARENT

    def test_duplicate_email(self, service, make_user):
        make_user(Role.PARENT, email="taken@example.com")
        with pytest.raises(EmailAlreadyExistsError):
            service.sign_up(
                commands.SignUp(
                    name="Bob", email="taken@example.com", password="pw", role=Role.PARENT
                )
            )

    def test_concurrent_sign_up_with_same_email(self, service, make_user):
        make_user(Role.PARENT, email="taken@example.com")
        with mock.patch.object(DjangoUserStore, "get_user_by_email", return_value=None):
            with pytest.raises(EmailAlreadyExistsError):
                service.sign_up(
                    commands.SignUp(
                        name="Bob",
                        email="taken@example.com",
                        password="pw",
                        role=Role.PARENT,
                    )
                )
        assert models.User.objects.filter(email="taken@example.com").count() == 1

    def test_children_cannot_sign_up(self, service):
        with pytest.raises(RoleNotAllowedError):
            service.sign_up(
                commands.SignUp(
                    name="Kid", email="kid@example.com", password="pw", role=Role.CHILD
                )
            )
        assert not models.User.objects.exists()

    def test_unknown_email(self, service):
        with pytest.raises(UserNotFoundError):
            service.sign_in(commands.SignIn(email="nobody@example.com", password="pw"))

    def test_wrong_password(self, service, make_user):
        make_user(Role.PARENT, email="p@example.com", password="right")
        with pytest.raises(InvalidCredentialsError):
            service.sign_in(commands.SignIn(email="p@example.com", password="wrong"))

    def test_profile_reports_stand(self, service, make_user, make_stand, principal_for):
        holder = make_user(Role.STAND_HOLDER)
        make_stand(holder)
        assert service.get_me(principal_for(holder)).has_stand is True


@pytest.mark.django_db
class TestPassword:
    """Tests for password changes."""

    def test_change_password(self, service, make_user, principal_for):
        user = make_user(Role.PARENT, email="p@example.com", password="old")
        service.update_password(
            principal_for(user),
            commands.UpdatePassword(user_id=user.pk, password="old", new_password="new"),
        )
        profile = service.sign_in(commands.SignIn(email="p@example.com", password="new"))
        assert profile.user.id == user.pk

    def test_current_password_must_match(self, service, make_user, principal_for):
        user = make_user(Role.PARENT, password="old")
        with pytest.raises(InvalidPasswordError):
            service.update_password(
                principal_for(user),
                commands.UpdatePassword(
                    user_id=user.pk, password="nope", new_password="new"
                ),
            )

    def test_only_the_user_themself(self, service, make_user, principal_for):
        user = make_user(Role.PARENT, password="old")
        other = make_user(Role.PARENT)
        with pytest.raises(PermissionDeniedError):
            service.update_password(
                principal_for(other),
                commands.UpdatePassword(user_id=user.pk, password="old", new_password="x"),
            )


@pytest.mark.django_db
class TestInviteChild:
    """Tests for parents inviting children."""

    def test_invitation_creates_child_and_sends_credentials(
        self, service, fair, mailoutbox
    ):
        child = service.invite_child(
            fair.as_parent, commands.InviteChild(name="Tom", email="tom@example.com")
        )

        assert child.role is Role.CHILD
        assert child.parent_id == fair.parent.pk
        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.to == ["tom@example.com"]

        password = re.search(r"Password: (\S+)", message.body).group(1)
        assert len(password) == 8
        profile = service.sign_in(
            commands.SignIn(email="tom@example.com", password=password)
        )
        assert profile.user.id == child.id

    def test_only_parents_invite(self, service, fair):
        with pytest.raises(PermissionDeniedError):
            service.invite_child(
                fair.as_organizer, commands.InviteChild(name="Tom", email="t@example.com")
            )

    def test_taken_email(self, service, fair):
        with pytest.raises(EmailAlreadyExistsError):
            service.invite_child(
                fair.as_parent,
                commands.InviteChild(name="Tom", email=fair.child.email),
            )

    def test_notifier_failure_keeps_account(self, uow, fair):
        notifier = mock.Mock(spec=InvitationNotifier)
        notifier.send_invitation.side_effect = NotificationFailedError()
        service = UserService(uow, notifier)

        with pytest.raises(NotificationFailedError):
            service.invite_child(
                fair.as_parent, commands.InviteChild(name="Tom", email="tom@example.com")
            )
        assert models.User.objects.filter(email="tom@example.com").exists()


@pytest.mark.django_db
class TestPayChild:
    """Tests for parent-to-child credit transfers."""

    def test_payment_moves_credit(self, service, fair):
        models.User.objects.filter(pk=fair.parent.pk).update(credit=50)

        service.pay_child(
            fair.as_parent, commands.PayChild(child_id=fair.child.pk, amount=30)
        )

        fair.parent.refresh_from_db()
        fair.child.refresh_from_db()
        assert fair.parent.credit == 20
        assert fair.child.credit == 55

    def test_parent_needs_enough_credit(self, service, fair):
        with pytest.raises(NotEnoughCreditError):
            service.pay_child(
                fair.as_parent, commands.PayChild(child_id=fair.child.pk, amount=1)
            )
        fair.child.refresh_from_db()
        assert fair.child.credit == 25

    def test_other_parents_child(self, service, fair, make_user, principal_for):
        other = make_user(Role.PARENT, credit=50)
        with pytest.raises(PermissionDeniedError):
            service.pay_child(
                principal_for(other), commands.PayChild(child_id=fair.child.pk, amount=5)
            )

    @pytest.mark.parametrize("amount", [0, -5])
    def test_amount_must_be_positive(self, service, fair, amount):
        with pytest.raises(InvalidAmountError):
            service.pay_child(
                fair.as_parent, commands.PayChild(child_id=fair.child.pk, amount=amount)
            )


@pytest.mark.django_db
class TestTopUp:
    """Tests for server-issued credit."""

    def test_parent_is_topped_up(self, service, fair):
        service.top_up(fair.parent.pk, 40)
        fair.parent.refresh_from_db()
        assert fair.parent.credit == 40

    def test_only_parents(self, service, fair):
        with pytest.raises(PermissionDeniedError):
            service.top_up(fair.child.pk, 40)
