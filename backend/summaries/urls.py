from django.urls import path

from .views import QuotationSummaryView

urlpatterns = [
    path('summaries/quotation', QuotationSummaryView.as_view(), name='quotation-summary'),
]
