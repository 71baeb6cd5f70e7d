from rest_framework import views
from rest_framework.response import Response

from accounts.permissions import Action, HasAction

from .serializers import SummaryRequestSerializer
from .services import generate_summary


class QuotationSummaryView(views.APIView):
    """Standalone summary generation; the wizards call the same service."""
    permission_classes = [HasAction]
    required_actions = {"POST": Action.GENERATE_SUMMARY}

    def post(self, request):
        ser = SummaryRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response({"summary": generate_summary(ser.validated_data)})
