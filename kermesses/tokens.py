"""Signed bearer tokens.

A token is a ``TimestampSigner`` signature over the user id and role. It
expires after ``settings.AUTH_TOKEN_MAX_AGE`` seconds.
"""

from django.conf import settings
from django.core import signing

from kermesses.domain import Principal, Role, User
from kermesses.domain.errors import UnauthenticatedError
from kermesses.domain.value_objects import parse_id

TOKEN_SALT = "kermesses.auth.token"


def _signer() -> signing.TimestampSigner:
    return signing.TimestampSigner(salt=TOKEN_SALT)


def issue_token(user: User) -> str:
    return _signer().sign_object({"id": str(user.id), "role": user.role.value})


def read_token(token: str) -> Principal:
    """Return the principal a token was issued for.

    Raises:
        UnauthenticatedError: If the token is expired, tampered with or malformed.
    """
    try:
        payload = _signer().unsign_object(token, max_age=settings.AUTH_TOKEN_MAX_AGE)
    except signing.SignatureExpired as exc:
        raise UnauthenticatedError("Token expired") from exc
    except signing.BadSignature as exc:
        raise UnauthenticatedError("Invalid token") from exc

    try:
        return Principal(user_id=parse_id(payload["id"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise UnauthenticatedError("Invalid token") from exc
