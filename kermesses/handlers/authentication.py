"""Bearer-token authentication for DRF views."""

from rest_framework import authentication, exceptions

from kermesses.domain.errors import UnauthenticatedError
from kermesses.tokens import read_token

KEYWORD = "Bearer"


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """Resolves ``Authorization: Bearer <token>`` to a ``Principal``.

    ``request.user`` is the principal; requests without the header stay
    anonymous and are turned away by ``IsAuthenticated``.
    """

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != KEYWORD.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid authorization header")

        try:
            token = header[1].decode()
        except UnicodeError as exc:
            raise exceptions.AuthenticationFailed("Invalid token") from exc

        try:
            principal = read_token(token)
        except UnauthenticatedError as exc:
            raise exceptions.AuthenticationFailed(exc.message) from exc
        return principal, token

    def authenticate_header(self, request) -> str:
        return KEYWORD
