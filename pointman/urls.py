from django.urls import path

from .views import AccrueView, ActivityView, BalanceView, RedeemView, TierView

app_name = "pointman"

urlpatterns = [
    path("accrue/", AccrueView.as_view(), name="accrue"),
    path("redeem/", RedeemView.as_view(), name="redeem"),
    path("balance/<str:account_ref>/", BalanceView.as_view(), name="balance"),
    path("tier/<str:account_ref>/", TierView.as_view(), name="tier"),
    path("activity/<str:account_ref>/", ActivityView.as_view(), name="activity"),
]
