from kermesses.handlers.views import (
    ChildListView,
    CurrentStandView,
    HealthView,
    InteractionCreateView,
    InteractionDetailView,
    InteractionListView,
    InviteChildView,
    KermesseAddStandView,
    KermesseAddUserView,
    KermesseCreateView,
    KermesseDetailView,
    KermesseFinishView,
    KermesseInvitableUsersView,
    KermesseListView,
    LoginView,
    PayChildView,
    ProfileView,
    RegisterView,
    StandDetailView,
    StandListView,
    StandView,
    TicketCreateView,
    TicketDetailView,
    TicketListView,
    TombolaCreateView,
    TombolaDetailView,
    TombolaFinishView,
    TombolaListView,
    UserDetailView,
    UserListView,
)

__all__ = [
    "ChildListView",
    "CurrentStandView",
    "HealthView",
    "InteractionCreateView",
    "InteractionDetailView",
    "InteractionListView",
    "InviteChildView",
    "KermesseAddStandView",
    "KermesseAddUserView",
    "KermesseCreateView",
    "KermesseDetailView",
    "KermesseFinishView",
    "KermesseInvitableUsersView",
    "KermesseListView",
    "LoginView",
    "PayChildView",
    "ProfileView",
    "RegisterView",
    "StandDetailView",
    "StandListView",
    "StandView",
    "TicketCreateView",
    "TicketDetailView",
    "TicketListView",
    "TombolaCreateView",
    "TombolaDetailView",
    "TombolaFinishView",
    "TombolaListView",
    "UserDetailView",
    "UserListView",
]
