from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.response import Response

from accounts.permissions import Action
from pricing.api import WizardActionView, WizardSessionView, WizardStartView
from pricing.sessions import WizardSessions
from records.api import CollectionDetailView, CollectionListView

from .saga import DeleteBookingSaga
from .serializers import BookingDraftSerializer, BookingSerializer, BookingUpdateSerializer, QuotationPickSerializer
from .services import update_booking
from .workflow import BookingWorkflow

VIEW_OR_MANAGE = {
    "GET": Action.VIEW_BOOKINGS,
    "PATCH": Action.MANAGE_BOOKINGS,
    "DELETE": Action.MANAGE_BOOKINGS,
}
MANAGE = {method: Action.MANAGE_BOOKINGS for method in ("GET", "POST", "PATCH", "DELETE")}

booking_sessions = WizardSessions("booking")


class BookingListView(CollectionListView):
    collection_name = "bookings"
    entity = "Booking"
    serializer_class = BookingSerializer
    required_actions = {"GET": Action.VIEW_BOOKINGS}
    http_method_names = ["get", "options"]


class BookingDetailView(CollectionDetailView):
    collection_name = "bookings"
    entity = "Booking"
    serializer_class = BookingSerializer
    write_serializer_class = BookingUpdateSerializer
    required_actions = VIEW_OR_MANAGE

    def perform_update(self, record_id, data):
        return async_to_sync(update_booking)(self.store, record_id, data)

    def perform_destroy(self, record_id):
        async_to_sync(DeleteBookingSaga(self.store).run)(record_id)


class BookingWizardMixin:
    workflow_class = BookingWorkflow
    draft_serializer_class = BookingDraftSerializer
    sessions = booking_sessions
    required_actions = MANAGE

    def extra_state(self, workflow):
        state = workflow.state
        return {
            "quotation": QuotationPickSerializer(state.quotation).data if state.quotation else None,
            "quotation_results": QuotationPickSerializer(state.quotation_results, many=True).data,
        }


class BookingWizardStartView(BookingWizardMixin, WizardStartView):
    record_param = "booking_id"


class BookingWizardView(BookingWizardMixin, WizardSessionView):
    pass


class BookingWizardActionView(BookingWizardMixin, WizardActionView):
    actions = {
        "advance": "advance",
        "back": "back",
        "goto": "goto",
        "search-quotations": "search_quotations",
        "select-quotation": "select_quotation",
        "search-rates": "search_rates",
        "select-rate": "select_rate",
        "deselect-rate": "deselect_rate",
        "buy-rate": "buy_rate",
        "submit": "submit",
    }

    def search_quotations(self, request, session_id, workflow):
        async_to_sync(workflow.search_quotations)(str(request.data.get("term") or ""))

    def select_quotation(self, request, session_id, workflow):
        async_to_sync(workflow.select_quotation)(str(request.data.get("quotation_id") or ""))

    def buy_rate(self, request, session_id, workflow):
        workflow.set_buy_rate(request.data.get("buy_rate"))

    def submit(self, request, session_id, workflow):
        created = not workflow.state.editing
        record = async_to_sync(workflow.submit)()
        self.sessions.discard(session_id)
        return Response(
            {"booking": BookingSerializer(record).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
