"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace

import pytest
from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient

from kermesses import models
from kermesses.domain import Principal, Role, StandKind
from kermesses.stores.django_store import DjangoUnitOfWork
from kermesses.tokens import issue_token


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def uow() -> DjangoUnitOfWork:
    return DjangoUnitOfWork()


def principal_of(user: models.User) -> Principal:
    return Principal(user_id=user.pk, role=Role(user.role))


@pytest.fixture
def principal_for():
    return principal_of


@pytest.fixture
def make_user(db):
    counter = iter(range(1, 10_000))

    def _make_user(
        role: Role,
        credit: int = 0,
        parent: models.User | None = None,
        password: str = "secret",
        email: str | None = None,
    ) -> models.User:
        n = next(counter)
        return models.User.objects.create(
            name=f"{role.value.lower()} {n}",
            email=email or f"{role.value.lower()}{n}@example.com",
            password=make_password(password),
            role=role.value,
            credit=credit,
            parent=parent,
        )

    return _make_user


@pytest.fixture
def make_stand(db):
    def _make_stand(
        holder: models.User,
        kind: StandKind = StandKind.CONSUMPTION,
        price: int = 10,
        stock: int = 3,
    ) -> models.Stand:
        return models.Stand.objects.create(
            user=holder,
            name=f"{kind.value.lower()} stand",
            description="",
            kind=kind.value,
            price=price,
            stock=stock,
        )

    return _make_stand


@pytest.fixture
def fair(make_user, make_stand):
    """A started kermesse with a consumption stand and a member family.

    The child holds 25 credit; the stand sells at 10 with 3 in stock.
    """
    organizer = make_user(Role.ORGANIZER)
    holder = make_user(Role.STAND_HOLDER)
    parent = make_user(Role.PARENT)
    child = make_user(Role.CHILD, credit=25, parent=parent)

    kermesse = models.Kermesse.objects.create(
        user=organizer, name="Spring fair", description="School yard"
    )
    stand = make_stand(holder)
    models.StandAssociation.objects.create(kermesse=kermesse, stand=stand)
    models.Membership.objects.create(kermesse=kermesse, user=child)
    models.Membership.objects.create(kermesse=kermesse, user=parent)

    return SimpleNamespace(
        organizer=organizer,
        holder=holder,
        parent=parent,
        child=child,
        kermesse=kermesse,
        stand=stand,
        as_organizer=principal_of(organizer),
        as_holder=principal_of(holder),
        as_parent=principal_of(parent),
        as_child=principal_of(child),
    )


@pytest.fixture
def authenticate(api_client, uow):
    """Attach a bearer token for ``user`` to the shared API client."""

    def _authenticate(user: models.User) -> APIClient:
        token = issue_token(uow.users.get_user(user.pk))
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return api_client

    return _authenticate
