# quotes/views.py
from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.response import Response

from accounts.permissions import Action
from pricing.api import WizardActionView, WizardSessionView, WizardStartView
from pricing.sessions import WizardSessions
from records.api import CollectionDetailView, CollectionListView

from .serializers import QuotationDraftSerializer, QuotationSerializer, QuotationUpdateSerializer
from .services import delete_quotation, update_quotation
from .workflow import QuotationWorkflow

VIEW_OR_MANAGE = {
    "GET": Action.VIEW_QUOTATIONS,
    "PATCH": Action.MANAGE_QUOTATIONS,
    "DELETE": Action.MANAGE_QUOTATIONS,
}
MANAGE = {method: Action.MANAGE_QUOTATIONS for method in ("GET", "POST", "PATCH", "DELETE")}

quotation_sessions = WizardSessions("quotation")


# ---- Records ----
class QuotationListView(CollectionListView):
    collection_name = "quotations"
    entity = "Quotation"
    serializer_class = QuotationSerializer
    required_actions = {"GET": Action.VIEW_QUOTATIONS}
    http_method_names = ["get", "options"]


class QuotationDetailView(CollectionDetailView):
    collection_name = "quotations"
    entity = "Quotation"
    serializer_class = QuotationSerializer
    write_serializer_class = QuotationUpdateSerializer
    required_actions = VIEW_OR_MANAGE

    def perform_update(self, record_id, data):
        return async_to_sync(update_quotation)(self.store, record_id, data)

    def perform_destroy(self, record_id):
        async_to_sync(delete_quotation)(self.store, record_id)


# ---- Pricing wizard ----
class QuotationWizardMixin:
    workflow_class = QuotationWorkflow
    draft_serializer_class = QuotationDraftSerializer
    sessions = quotation_sessions
    required_actions = MANAGE

    def extra_state(self, workflow):
        return {"searched": workflow.state.searched}


class QuotationWizardStartView(QuotationWizardMixin, WizardStartView):
    record_param = "quotation_id"


class QuotationWizardView(QuotationWizardMixin, WizardSessionView):
    pass


class QuotationWizardActionView(QuotationWizardMixin, WizardActionView):
    actions = {
        "advance": "advance",
        "back": "back",
        "goto": "goto",
        "search-rates": "search_rates",
        "select-rate": "select_rate",
        "deselect-rate": "deselect_rate",
        "summary": "summary",
        "submit": "submit",
    }

    def summary(self, request, session_id, workflow):
        async_to_sync(workflow.generate_summary)()

    def submit(self, request, session_id, workflow):
        created = not workflow.state.editing
        record = async_to_sync(workflow.submit)()
        self.sessions.discard(session_id)
        return Response(
            {"quotation": QuotationSerializer(record).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
