from django.urls import path

from kermesses import handlers

urlpatterns = [
    path("health", handlers.HealthView.as_view(), name="health"),
    path("register", handlers.RegisterView.as_view(), name="register"),
    path("login", handlers.LoginView.as_view(), name="login"),
    path("profile", handlers.ProfileView.as_view(), name="profile"),
    path("users", handlers.UserListView.as_view(), name="user-list"),
    path("user/children", handlers.ChildListView.as_view(), name="child-list"),
    path("user/invite", handlers.InviteChildView.as_view(), name="user-invite"),
    path("user/pay", handlers.PayChildView.as_view(), name="user-pay"),
    path("user/<str:user_id>", handlers.UserDetailView.as_view(), name="user-detail"),
    path("stands", handlers.StandListView.as_view(), name="stand-list"),
    path("stand", handlers.StandView.as_view(), name="stand"),
    path("stand/current", handlers.CurrentStandView.as_view(), name="stand-current"),
    path(
        "stand/<str:stand_id>", handlers.StandDetailView.as_view(), name="stand-detail"
    ),
    path("kermesses", handlers.KermesseListView.as_view(), name="kermesse-list"),
    path("kermesse", handlers.KermesseCreateView.as_view(), name="kermesse-create"),
    path(
        "kermesse/<str:kermesse_id>",
        handlers.KermesseDetailView.as_view(),
        name="kermesse-detail",
    ),
    path(
        "kermesse/<str:kermesse_id>/users",
        handlers.KermesseInvitableUsersView.as_view(),
        name="kermesse-users",
    ),
    path(
        "kermesse/<str:kermesse_id>/finish",
        handlers.KermesseFinishView.as_view(),
        name="kermesse-finish",
    ),
    path(
        "kermesse/<str:kermesse_id>/adduser",
        handlers.KermesseAddUserView.as_view(),
        name="kermesse-adduser",
    ),
    path(
        "kermesse/<str:kermesse_id>/addstand",
        handlers.KermesseAddStandView.as_view(),
        name="kermesse-addstand",
    ),
    path(
        "interactions", handlers.InteractionListView.as_view(), name="interaction-list"
    ),
    path(
        "interaction",
        handlers.InteractionCreateView.as_view(),
        name="interaction-create",
    ),
    path(
        "interaction/<str:interaction_id>",
        handlers.InteractionDetailView.as_view(),
        name="interaction-detail",
    ),
    path("tombolas", handlers.TombolaListView.as_view(), name="tombola-list"),
    path("tombola", handlers.TombolaCreateView.as_view(), name="tombola-create"),
    path(
        "tombola/<str:tombola_id>",
        handlers.TombolaDetailView.as_view(),
        name="tombola-detail",
    ),
    path(
        "tombola/<str:tombola_id>/finish",
        handlers.TombolaFinishView.as_view(),
        name="tombola-finish",
    ),
    path("tickets", handlers.TicketListView.as_view(), name="ticket-list"),
    path("ticket", handlers.TicketCreateView.as_view(), name="ticket-create"),
    path(
        "ticket/<str:ticket_id>", handlers.TicketDetailView.as_view(), name="ticket-detail"
    ),
]
