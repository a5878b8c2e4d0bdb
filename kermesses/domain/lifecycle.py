"""Lifecycle rules for kermesses, tombolas and activity interactions.

Pure functions: no database access, no side effects. Services call them on
rows they have locked, before mutating anything.
"""

from kermesses.domain.errors import (
    InteractionAlreadyEndedError,
    InteractionNotActivityError,
    KermesseEndedError,
    KermesseHasOpenTombolaError,
    TombolaNotStartedError,
)
from kermesses.domain.models import Interaction, Kermesse, Tombola
from kermesses.domain.value_objects import (
    InteractionStatus,
    KermesseStatus,
    StandKind,
    TombolaStatus,
)

KERMESSE_TRANSITIONS = {
    KermesseStatus.STARTED: {KermesseStatus.ENDED},
}

TOMBOLA_TRANSITIONS = {
    TombolaStatus.STARTED: {TombolaStatus.ENDED},
}

INTERACTION_TRANSITIONS = {
    InteractionStatus.OPEN: {InteractionStatus.ENDED},
}


def can_transition(transitions: dict, from_status, to_status) -> bool:
    return to_status in transitions.get(from_status, set())


def ensure_kermesse_open(kermesse: Kermesse) -> None:
    """Reject any mutation against an ended kermesse."""
    if kermesse.is_ended:
        raise KermesseEndedError(kermesse.id)


def ensure_can_end(kermesse: Kermesse, has_started_tombola: bool) -> None:
    """A kermesse ends once, and only after all of its tombolas are finished."""
    if not can_transition(KERMESSE_TRANSITIONS, kermesse.status, KermesseStatus.ENDED):
        raise KermesseEndedError(kermesse.id)
    if has_started_tombola:
        raise KermesseHasOpenTombolaError(kermesse.id)


def ensure_tombola_started(tombola: Tombola) -> None:
    if not can_transition(TOMBOLA_TRANSITIONS, tombola.status, TombolaStatus.ENDED):
        raise TombolaNotStartedError(tombola.id)


def ensure_activity_open(interaction: Interaction) -> None:
    if interaction.kind is not StandKind.ACTIVITY:
        raise InteractionNotActivityError(interaction.id)
    if not can_transition(
        INTERACTION_TRANSITIONS, interaction.status, InteractionStatus.ENDED
    ):
        raise InteractionAlreadyEndedError(interaction.id)


def initial_interaction_status(kind: StandKind) -> InteractionStatus:
    """Activities wait for the stand holder to settle them; purchases are done."""
    if kind is StandKind.ACTIVITY:
        return InteractionStatus.OPEN
    return InteractionStatus.ENDED
