"""
Generic list/detail endpoints over one record-store collection.

Subclasses name the collection and the serializers and may override the
``perform_*`` hooks where a write has business rules attached.
"""

from __future__ import annotations

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAction
from core.exceptions import NotFoundError, ValidationError

from .store import get_store


def _positive_int(raw, name, default=None):
    if raw in (None, ""):
        return default
    try:
        val = int(raw)
    except (TypeError, ValueError):
        val = 0
    if val < 1:
        raise ValidationError({name: ["A positive integer is required."]})
    return val


class CollectionViewMixin:
    permission_classes = [HasAction]
    collection_name = ""
    entity = "Record"
    serializer_class = None
    write_serializer_class = None

    @property
    def store(self):
        return get_store()

    @property
    def collection(self):
        return getattr(self.store, self.collection_name)

    def validated(self, request, partial=False):
        ser = self.write_serializer_class(data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        return ser.validated_data


class CollectionListView(CollectionViewMixin, APIView):
    def get(self, request):
        page = _positive_int(request.query_params.get("page"), "page", 1)
        page_size = _positive_int(request.query_params.get("page_size"), "page_size", self.store.page_size)
        result = async_to_sync(self.collection.list)(
            page=page, page_size=page_size, filter_term=request.query_params.get("search")
        )
        return Response({
            "count": result.total_count,
            "page": page,
            "page_size": page_size,
            "results": self.serializer_class(result.items, many=True).data,
        })

    def perform_create(self, data):
        return async_to_sync(self.collection.create)(data)

    def post(self, request):
        record = self.perform_create(self.validated(request))
        return Response(self.serializer_class(record).data, status=status.HTTP_201_CREATED)


class CollectionDetailView(CollectionViewMixin, APIView):
    def get_record(self, record_id):
        record = async_to_sync(self.collection.get)(record_id)
        if record is None:
            raise NotFoundError(self.entity, record_id)
        return record

    def get(self, request, record_id):
        return Response(self.serializer_class(self.get_record(record_id)).data)

    def perform_update(self, record_id, data):
        record = async_to_sync(self.collection.update)(record_id, data)
        if record is None:
            raise NotFoundError(self.entity, record_id)
        return record

    def patch(self, request, record_id):
        record = self.perform_update(record_id, self.validated(request, partial=True))
        return Response(self.serializer_class(record).data)

    def perform_destroy(self, record_id):
        if not async_to_sync(self.collection.delete)(record_id):
            raise NotFoundError(self.entity, record_id)

    def delete(self, request, record_id):
        self.perform_destroy(record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
