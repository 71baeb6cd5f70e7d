from asgiref.sync import async_to_sync
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import Action, HasAction
from records.api import CollectionDetailView, CollectionListView
from records.store import get_store

from .serializers import BuyRateSerializer, PortSerializer, ScheduleRateSerializer, ScheduleSerializer

READ = {"GET": Action.VIEW_REFERENCE_DATA}
READ_WRITE = {
    "GET": Action.VIEW_REFERENCE_DATA,
    "POST": Action.MANAGE_REFERENCE_DATA,
    "PATCH": Action.MANAGE_REFERENCE_DATA,
    "DELETE": Action.MANAGE_REFERENCE_DATA,
}


class BuyRateListView(CollectionListView):
    collection_name = "buy_rates"
    entity = "BuyRate"
    serializer_class = BuyRateSerializer
    write_serializer_class = BuyRateSerializer
    required_actions = READ_WRITE


class BuyRateDetailView(CollectionDetailView):
    collection_name = "buy_rates"
    entity = "BuyRate"
    serializer_class = BuyRateSerializer
    write_serializer_class = BuyRateSerializer
    required_actions = READ_WRITE


class ScheduleListView(CollectionListView):
    collection_name = "schedules"
    entity = "Schedule"
    serializer_class = ScheduleSerializer
    write_serializer_class = ScheduleSerializer
    required_actions = READ_WRITE


class ScheduleDetailView(CollectionDetailView):
    collection_name = "schedules"
    entity = "Schedule"
    serializer_class = ScheduleSerializer
    write_serializer_class = ScheduleSerializer
    required_actions = READ_WRITE


class PortListView(APIView):
    permission_classes = [HasAction]
    required_actions = READ

    def get(self, request):
        ports = async_to_sync(get_store().ports.all)()
        return Response(PortSerializer(ports, many=True).data)


class ScheduleRateSearchView(APIView):
    """GET ?origin=&destination= : substring match on port code or name."""
    permission_classes = [HasAction]
    required_actions = READ

    def get(self, request):
        origin = request.query_params.get("origin", "")
        destination = request.query_params.get("destination", "")
        rates = async_to_sync(get_store().search_rates)(origin=origin, destination=destination)
        return Response({
            "origin": origin,
            "destination": destination,
            "count": len(rates),
            "results": ScheduleRateSerializer(rates, many=True).data,
        })
