from django.urls import path

from .views import (
    BuyRateDetailView,
    BuyRateListView,
    PortListView,
    ScheduleDetailView,
    ScheduleListView,
    ScheduleRateSearchView,
)

urlpatterns = [
    path('buy-rates/', BuyRateListView.as_view(), name='buy-rate-list'),
    path('buy-rates/<str:record_id>/', BuyRateDetailView.as_view(), name='buy-rate-detail'),
    path('schedules/', ScheduleListView.as_view(), name='schedule-list'),
    path('schedules/<str:record_id>/', ScheduleDetailView.as_view(), name='schedule-detail'),
    path('ports/', PortListView.as_view(), name='port-list'),
    path('schedule-rates/search', ScheduleRateSearchView.as_view(), name='schedule-rate-search'),
]
