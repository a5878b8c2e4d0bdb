from django.contrib import admin, messages

from kermesses.domain.errors import DomainError
from kermesses.handlers.dependencies import get_user_service
from kermesses.models import (
    Interaction,
    Kermesse,
    Membership,
    Stand,
    StandAssociation,
    Ticket,
    Tombola,
    User,
)

TOP_UP_AMOUNT = 100


class MembershipInline(admin.TabularInline):
    model = Membership
    extra = 0


class StandAssociationInline(admin.TabularInline):
    model = StandAssociation
    extra = 0


class TombolaInline(admin.TabularInline):
    model = Tombola
    extra = 0


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "role", "credit", "parent", "created_at"]
    list_filter = ["role"]
    search_fields = ["name", "email"]
    exclude = ["password"]
    readonly_fields = ["credit"]
    actions = ["top_up_credit"]

    @admin.action(description=f"Top up {TOP_UP_AMOUNT} credit (parents only)")
    def top_up_credit(self, request, queryset):
        service = get_user_service()
        for user in queryset:
            try:
                service.top_up(user.pk, TOP_UP_AMOUNT)
            except DomainError as exc:
                self.message_user(request, f"{user}: {exc.message}", messages.ERROR)
            else:
                self.message_user(request, f"{user}: +{TOP_UP_AMOUNT} credit")


@admin.register(Stand)
class StandAdmin(admin.ModelAdmin):
    list_display = ["name", "user", "kind", "price", "stock"]
    list_filter = ["kind"]
    search_fields = ["name"]
    readonly_fields = ["stock"]


@admin.register(Kermesse)
class KermesseAdmin(admin.ModelAdmin):
    list_display = ["name", "user", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["name"]
    inlines = [MembershipInline, StandAssociationInline, TombolaInline]


@admin.register(Interaction)
class InteractionAdmin(admin.ModelAdmin):
    list_display = ["user", "stand", "kermesse", "kind", "status", "credit", "point"]
    list_filter = ["kind", "status", "kermesse"]


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0


@admin.register(Tombola)
class TombolaAdmin(admin.ModelAdmin):
    list_display = ["name", "kermesse", "price", "gift", "status"]
    list_filter = ["status", "kermesse"]
    inlines = [TicketInline]
