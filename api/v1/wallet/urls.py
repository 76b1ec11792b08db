"""
URL configuration for wallet API endpoints.
"""

from django.urls import path

from api.v1.wallet import views

app_name = "wallet"

urlpatterns = [
    path("balance", views.BalanceView.as_view(), name="balance"),
    path("reload", views.ReloadWalletView.as_view(), name="reload"),
    path("pay", views.ProcessPaymentView.as_view(), name="pay"),
    path(
        "daily-reload-total",
        views.DailyReloadTotalView.as_view(),
        name="daily-reload-total",
    ),
    path("transactions", views.TransactionHistoryView.as_view(), name="transactions"),
    path("account-status", views.AccountStatusView.as_view(), name="account-status"),
]
