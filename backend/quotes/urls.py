from django.urls import path

from .views import (
    QuotationDetailView,
    QuotationListView,
    QuotationWizardActionView,
    QuotationWizardStartView,
    QuotationWizardView,
)

urlpatterns = [
    path('quotations/', QuotationListView.as_view(), name='quotation-list'),
    path('quotations/wizard/', QuotationWizardStartView.as_view(), name='quotation-wizard-start'),
    path('quotations/wizard/<str:session_id>/', QuotationWizardView.as_view(), name='quotation-wizard'),
    path('quotations/wizard/<str:session_id>/<str:action>', QuotationWizardActionView.as_view(), name='quotation-wizard-action'),
    path('quotations/<str:record_id>/', QuotationDetailView.as_view(), name='quotation-detail'),
]
