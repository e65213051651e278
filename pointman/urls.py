from django.urls import path

from .views import AddPointsView, BalancesView, SpendPointsView, StatementsView

app_name = "pointman"

urlpatterns = [
    path("add-points/", AddPointsView.as_view(), name="add-points"),
    path("spend-points/", SpendPointsView.as_view(), name="spend-points"),
    path("balances/", BalancesView.as_view(), name="balances"),
    path("statements/", StatementsView.as_view(), name="statements"),
]
