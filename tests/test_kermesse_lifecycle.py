"""Integration tests for the kermesse lifecycle and the membership graph.

Run with: pytest tests/test_kermesse_lifecycle.py -v
"""

import pytest

from kermesses import models
from kermesses.domain import KermesseStatus, Role
from kermesses.domain import commands
from kermesses.domain.errors import (
    KermesseEndedError,
    KermesseHasOpenTombolaError,
    KermesseNotFoundError,
    PermissionDeniedError,
    StandAlreadyAssociatedError,
    UserNotChildError,
    UserNotFoundError,
)
from kermesses.services.interaction_service import InteractionService
from kermesses.services.kermesse_service import KermesseService
from kermesses.services.tombola_service import TombolaService


@pytest.fixture
def service(uow) -> KermesseService:
    return KermesseService(uow)


@pytest.mark.django_db
class TestKermesseLifecycle:
    """Tests for creating, updating and ending kermesses."""

    def test_organizer_creates_started_kermesse(self, service, make_user, principal_for):
        organizer = make_user(Role.ORGANIZER)
        kermesse = service.create_kermesse(
            principal_for(organizer),
            commands.CreateKermesse(name="Summer fair", description="Park"),
        )
        assert kermesse.status is KermesseStatus.STARTED
        assert kermesse.user_id == organizer.pk

    def test_parent_cannot_create(self, service, fair):
        with pytest.raises(PermissionDeniedError):
            service.create_kermesse(
                fair.as_parent, commands.CreateKermesse(name="x", description="")
            )

    def test_started_tombola_blocks_end(self, service, fair, uow):
        """Ending waits until every tombola is finished."""
        tombola = models.Tombola.objects.create(
            kermesse=fair.kermesse, name="Raffle", price=1, gift="Cake"
        )

        with pytest.raises(KermesseHasOpenTombolaError):
            service.end_kermesse(fair.as_organizer, fair.kermesse.pk)
        fair.kermesse.refresh_from_db()
        assert fair.kermesse.status == KermesseStatus.STARTED.value

        TombolaService(uow).finish_tombola(fair.as_organizer, tombola.pk)
        ended = service.end_kermesse(fair.as_organizer, fair.kermesse.pk)
        assert ended.status is KermesseStatus.ENDED

    def test_end_twice_is_rejected(self, service, fair):
        service.end_kermesse(fair.as_organizer, fair.kermesse.pk)
        with pytest.raises(KermesseEndedError):
            service.end_kermesse(fair.as_organizer, fair.kermesse.pk)

    def test_other_organizer_cannot_end(self, service, fair, make_user, principal_for):
        other = make_user(Role.ORGANIZER)
        with pytest.raises(PermissionDeniedError):
            service.end_kermesse(principal_for(other), fair.kermesse.pk)

    def test_unknown_kermesse(self, service, fair):
        with pytest.raises(KermesseNotFoundError):
            service.end_kermesse(fair.as_organizer, fair.stand.pk)


@pytest.mark.django_db
class TestEndedKermesseIsFrozen:
    """Once ended, every mutation against the kermesse is rejected."""

    @pytest.fixture
    def ended(self, service, fair):
        service.end_kermesse(fair.as_organizer, fair.kermesse.pk)
        return fair

    def test_update(self, service, ended):
        with pytest.raises(KermesseEndedError):
            service.update_kermesse(
                ended.as_organizer,
                commands.UpdateKermesse(
                    kermesse_id=ended.kermesse.pk, name="Renamed", description=""
                ),
            )

    def test_add_member(self, service, ended, make_user):
        child = make_user(Role.CHILD)
        with pytest.raises(KermesseEndedError):
            service.add_member(
                ended.as_organizer,
                commands.AddMember(kermesse_id=ended.kermesse.pk, user_id=child.pk),
            )

    def test_add_stand(self, service, ended, make_user, make_stand):
        stand = make_stand(make_user(Role.STAND_HOLDER))
        with pytest.raises(KermesseEndedError):
            service.add_stand(
                ended.as_organizer,
                commands.AddStand(kermesse_id=ended.kermesse.pk, stand_id=stand.pk),
            )

    def test_create_tombola(self, uow, ended):
        with pytest.raises(KermesseEndedError):
            TombolaService(uow).create_tombola(
                ended.as_organizer,
                commands.CreateTombola(
                    kermesse_id=ended.kermesse.pk, name="Late", price=1, gift="x"
                ),
            )

    def test_create_interaction(self, uow, ended):
        with pytest.raises(KermesseEndedError):
            InteractionService(uow).create_interaction(
                ended.as_child,
                commands.CreateInteraction(stand_id=ended.stand.pk, quantity=1),
            )

    def test_status_never_reverts(self, service, ended):
        kermesse = service.get_kermesse(ended.as_organizer, ended.kermesse.pk).kermesse
        assert kermesse.status is KermesseStatus.ENDED


@pytest.mark.django_db
class TestMembership:
    """Tests for inviting children and associating stands."""

    def test_child_with_parent_adds_two_rows(self, service, fair, make_user):
        parent = make_user(Role.PARENT)
        child = make_user(Role.CHILD, parent=parent)

        service.add_member(
            fair.as_organizer,
            commands.AddMember(kermesse_id=fair.kermesse.pk, user_id=child.pk),
        )

        rows = models.Membership.objects.filter(
            kermesse=fair.kermesse, user__in=[child, parent]
        )
        assert sorted(row.user_id for row in rows) == sorted([child.pk, parent.pk])

    def test_child_without_parent_adds_one_row(self, service, fair, make_user):
        child = make_user(Role.CHILD)
        service.add_member(
            fair.as_organizer,
            commands.AddMember(kermesse_id=fair.kermesse.pk, user_id=child.pk),
        )
        assert models.Membership.objects.filter(user=child).count() == 1

    def test_duplicates_are_tolerated(self, service, fair):
        before = models.Membership.objects.count()
        command = commands.AddMember(kermesse_id=fair.kermesse.pk, user_id=fair.child.pk)

        service.add_member(fair.as_organizer, command)

        assert models.Membership.objects.count() == before + 2

    def test_only_children_are_invited(self, service, fair):
        with pytest.raises(UserNotChildError):
            service.add_member(
                fair.as_organizer,
                commands.AddMember(kermesse_id=fair.kermesse.pk, user_id=fair.parent.pk),
            )

    def test_unknown_user(self, service, fair):
        with pytest.raises(UserNotFoundError):
            service.add_member(
                fair.as_organizer,
                commands.AddMember(kermesse_id=fair.kermesse.pk, user_id=fair.stand.pk),
            )

    def test_stand_in_started_kermesse_cannot_join_another(self, service, fair):
        other = service.create_kermesse(
            fair.as_organizer, commands.CreateKermesse(name="Other", description="")
        )
        with pytest.raises(StandAlreadyAssociatedError):
            service.add_stand(
                fair.as_organizer,
                commands.AddStand(kermesse_id=other.id, stand_id=fair.stand.pk),
            )

    def test_stand_cannot_join_same_kermesse_twice(self, service, fair):
        with pytest.raises(StandAlreadyAssociatedError):
            service.add_stand(
                fair.as_organizer,
                commands.AddStand(kermesse_id=fair.kermesse.pk, stand_id=fair.stand.pk),
            )

    def test_stand_is_free_after_kermesse_ends(self, service, fair):
        service.end_kermesse(fair.as_organizer, fair.kermesse.pk)
        other = service.create_kermesse(
            fair.as_organizer, commands.CreateKermesse(name="Next", description="")
        )

        service.add_stand(
            fair.as_organizer,
            commands.AddStand(kermesse_id=other.id, stand_id=fair.stand.pk),
        )
        assert models.StandAssociation.objects.filter(stand=fair.stand).count() == 2

    def test_invitable_children_exclude_members(self, service, fair, make_user):
        outsider = make_user(Role.CHILD)
        children = service.list_invitable_children(fair.as_organizer, fair.kermesse.pk)
        assert [c.id for c in children] == [outsider.pk]


@pytest.mark.django_db
class TestKermesseReads:
    """Tests for role-scoped reads and statistics."""

    def test_organizer_stats(self, service, fair, uow):
        InteractionService(uow).create_interaction(
            fair.as_child, commands.CreateInteraction(stand_id=fair.stand.pk, quantity=2)
        )
        models.Tombola.objects.create(
            kermesse=fair.kermesse, name="Raffle", price=1, gift="Cake"
        )

        stats = service.get_kermesse(fair.as_organizer, fair.kermesse.pk).stats

        assert stats.stand_count == 1
        assert stats.tombola_count == 1
        assert stats.user_count == 2
        assert stats.interaction_count == 1
        assert stats.interaction_income == 20
        assert stats.points == 0

    def test_parent_sees_only_their_children(self, service, fair):
        stats = service.get_kermesse(fair.as_parent, fair.kermesse.pk).stats
        assert stats.user_count == 1
        assert stats.tombola_count == 0

    def test_listing_is_scoped_by_role(self, service, fair, make_user, principal_for):
        other = make_user(Role.ORGANIZER)
        service.create_kermesse(
            principal_for(other), commands.CreateKermesse(name="Other", description="")
        )

        assert [k.id for k in service.list_kermesses(fair.as_organizer)] == [
            fair.kermesse.pk
        ]
        assert [k.id for k in service.list_kermesses(fair.as_child)] == [
            fair.kermesse.pk
        ]
        assert [k.id for k in service.list_kermesses(fair.as_holder)] == [
            fair.kermesse.pk
        ]
