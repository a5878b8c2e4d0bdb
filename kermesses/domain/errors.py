"""Domain error codes for the kermesses module."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ErrorKind(Enum):
    """Stable classification surfaced to the transport layer."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    NOT_ENOUGH_STOCK = "NOT_ENOUGH_STOCK"
    NOT_ENOUGH_CREDIT = "NOT_ENOUGH_CREDIT"
    KERMESSE_ENDED = "KERMESSE_ENDED"
    KERMESSE_HAS_OPEN_TOMBOLA = "KERMESSE_HAS_OPEN_TOMBOLA"
    STAND_ALREADY_ASSOCIATED = "STAND_ALREADY_ASSOCIATED"
    STAND_ALREADY_EXISTS = "STAND_ALREADY_EXISTS"
    TOMBOLA_NOT_STARTED = "TOMBOLA_NOT_STARTED"
    INTERACTION_NOT_ACTIVITY = "INTERACTION_NOT_ACTIVITY"
    INTERACTION_ALREADY_ENDED = "INTERACTION_ALREADY_ENDED"
    USER_NOT_CHILD = "USER_NOT_CHILD"
    ROLE_NOT_ALLOWED = "ROLE_NOT_ALLOWED"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    STAND_NOT_FOUND = "STAND_NOT_FOUND"
    KERMESSE_NOT_FOUND = "KERMESSE_NOT_FOUND"
    TOMBOLA_NOT_FOUND = "TOMBOLA_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    INTERACTION_NOT_FOUND = "INTERACTION_NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class BadRequestError(DomainError):
    """Malformed input or a violated business rule."""

    kind = ErrorKind.BAD_REQUEST


class UnauthorizedError(DomainError):
    """No principal, or credentials that do not check out."""

    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(DomainError):
    """Authenticated but not entitled to the resource."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(DomainError):
    """Referenced entity is absent."""

    kind = ErrorKind.NOT_FOUND


class InternalError(DomainError):
    """Store or collaborator failure."""

    kind = ErrorKind.INTERNAL


class InvalidInputError(BadRequestError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class InvalidQuantityError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            message="Quantity must be a positive integer",
        )


class InvalidAmountError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_AMOUNT,
            message="Amount must be a positive integer",
        )


class NotEnoughStockError(BadRequestError):
    """Raised when a stand cannot serve the requested quantity."""

    def __init__(self, stand_id: object, requested: int, available: int) -> None:
        super().__init__(code=ErrorCode.NOT_ENOUGH_STOCK, message="Not enough stock")
        self.stand_id = stand_id
        self.requested = requested
        self.available = available


class NotEnoughCreditError(BadRequestError):
    """Raised when a user cannot pay the requested amount."""

    def __init__(self, user_id: object, required: int, available: int) -> None:
        super().__init__(code=ErrorCode.NOT_ENOUGH_CREDIT, message="Not enough credit")
        self.user_id = user_id
        self.required = required
        self.available = available


class KermesseEndedError(BadRequestError):
    """Raised when a mutation targets an ended kermesse."""

    def __init__(self, kermesse_id: object) -> None:
        super().__init__(code=ErrorCode.KERMESSE_ENDED, message="Kermesse is ended")
        self.kermesse_id = kermesse_id


class KermesseHasOpenTombolaError(BadRequestError):
    """Raised when ending a kermesse that still runs a tombola."""

    def __init__(self, kermesse_id: object) -> None:
        super().__init__(
            code=ErrorCode.KERMESSE_HAS_OPEN_TOMBOLA,
            message="Kermesse can't be ended while a tombola is started",
        )
        self.kermesse_id = kermesse_id


class StandAlreadyAssociatedError(BadRequestError):
    def __init__(self, stand_id: object) -> None:
        super().__init__(
            code=ErrorCode.STAND_ALREADY_ASSOCIATED,
            message="Stand is already associated with a started kermesse",
        )
        self.stand_id = stand_id


class StandAlreadyExistsError(BadRequestError):
    def __init__(self, user_id: object) -> None:
        super().__init__(
            code=ErrorCode.STAND_ALREADY_EXISTS,
            message="User already holds a stand",
        )
        self.user_id = user_id


class TombolaNotStartedError(BadRequestError):
    def __init__(self, tombola_id: object) -> None:
        super().__init__(
            code=ErrorCode.TOMBOLA_NOT_STARTED,
            message="Tombola is not started or already finished",
        )
        self.tombola_id = tombola_id


class InteractionNotActivityError(BadRequestError):
    def __init__(self, interaction_id: object) -> None:
        super().__init__(
            code=ErrorCode.INTERACTION_NOT_ACTIVITY,
            message="Interaction type is not activity",
        )
        self.interaction_id = interaction_id


class InteractionAlreadyEndedError(BadRequestError):
    def __init__(self, interaction_id: object) -> None:
        super().__init__(
            code=ErrorCode.INTERACTION_ALREADY_ENDED,
            message="Interaction is already ended",
        )
        self.interaction_id = interaction_id


class UserNotChildError(BadRequestError):
    def __init__(self, user_id: object) -> None:
        super().__init__(code=ErrorCode.USER_NOT_CHILD, message="User is not a child")
        self.user_id = user_id


class RoleNotAllowedError(BadRequestError):
    def __init__(self, role: str) -> None:
        super().__init__(
            code=ErrorCode.ROLE_NOT_ALLOWED,
            message=f"Role {role} cannot be used here",
        )


class EmailAlreadyExistsError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMAIL_ALREADY_EXISTS,
            message="Email already exists",
        )


class InvalidPasswordError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.INVALID_PASSWORD, message="Invalid password")


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CREDENTIALS,
            message="Invalid credentials",
        )


class UnauthenticatedError(UnauthorizedError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(code=ErrorCode.UNAUTHENTICATED, message=message)


class PermissionDeniedError(ForbiddenError):
    """Raised when the principal has the wrong role or does not own the resource."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: object) -> None:
        super().__init__(code=ErrorCode.USER_NOT_FOUND, message="User not found")
        self.user_id = user_id


class StandNotFoundError(NotFoundError):
    def __init__(self, stand_id: object) -> None:
        super().__init__(code=ErrorCode.STAND_NOT_FOUND, message="Stand not found")
        self.stand_id = stand_id


class KermesseNotFoundError(NotFoundError):
    def __init__(self, kermesse_id: object) -> None:
        super().__init__(
            code=ErrorCode.KERMESSE_NOT_FOUND,
            message="Kermesse not found",
        )
        self.kermesse_id = kermesse_id


class TombolaNotFoundError(NotFoundError):
    def __init__(self, tombola_id: object) -> None:
        super().__init__(code=ErrorCode.TOMBOLA_NOT_FOUND, message="Tombola not found")
        self.tombola_id = tombola_id


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: object) -> None:
        super().__init__(code=ErrorCode.TICKET_NOT_FOUND, message="Ticket not found")
        self.ticket_id = ticket_id


class InteractionNotFoundError(NotFoundError):
    def __init__(self, interaction_id: object) -> None:
        super().__init__(
            code=ErrorCode.INTERACTION_NOT_FOUND,
            message="Interaction not found",
        )
        self.interaction_id = interaction_id


class StoreUnavailableError(InternalError):
    """Raised when a transaction could not complete and was rolled back."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Internal server error",
        )


class NotificationFailedError(InternalError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOTIFICATION_FAILED,
            message="Internal server error",
        )
