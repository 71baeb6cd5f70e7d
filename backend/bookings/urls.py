from django.urls import path

from .views import (
    BookingDetailView,
    BookingListView,
    BookingWizardActionView,
    BookingWizardStartView,
    BookingWizardView,
)

urlpatterns = [
    path('bookings/', BookingListView.as_view(), name='booking-list'),
    path('bookings/wizard/', BookingWizardStartView.as_view(), name='booking-wizard-start'),
    path('bookings/wizard/<str:session_id>/', BookingWizardView.as_view(), name='booking-wizard'),
    path('bookings/wizard/<str:session_id>/<str:action>', BookingWizardActionView.as_view(), name='booking-wizard-action'),
    path('bookings/<str:record_id>/', BookingDetailView.as_view(), name='booking-detail'),
]
