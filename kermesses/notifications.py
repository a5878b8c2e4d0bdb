"""Outbound notifications."""

import logging
from abc import ABC, abstractmethod
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import send_mail

from kermesses.domain import User
from kermesses.domain.errors import NotificationFailedError

logger = logging.getLogger(__name__)

INVITATION_SUBJECT = "Invitation to join the kermesse"
INVITATION_BODY = """Hello {name},

Your parent invited you to join the kermesse platform.
Here are your credentials:

Email: {email}
Password: {password}
"""


class InvitationNotifier(ABC):
    @abstractmethod
    def send_invitation(self, child: User, password: str) -> None:
        """Deliver the generated credential to a freshly invited child.

        Raises:
            NotificationFailedError: If the message could not be handed off.
        """
        ...


class EmailInvitationNotifier(InvitationNotifier):
    """Sends invitations through the configured Django email backend."""

    def send_invitation(self, child: User, password: str) -> None:
        body = INVITATION_BODY.format(
            name=child.name, email=child.email, password=password
        )
        try:
            send_mail(
                INVITATION_SUBJECT,
                body,
                settings.DEFAULT_FROM_EMAIL,
                [child.email],
            )
        except (SMTPException, OSError) as exc:
            logger.exception("Could not send invitation to %s", child.id)
            raise NotificationFailedError() from exc
        logger.info("Invitation sent to %s", child.id)
