from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from rest_framework import status, views
from rest_framework.response import Response

from accounts.permissions import Action, HasAction
from records.store import get_store, reset_store

from .dashboard import bookings_by_month, quotation_status_summary

logger = logging.getLogger(__name__)


class DashboardView(views.APIView):
    permission_classes = [HasAction]
    required_actions = {"GET": Action.VIEW_DASHBOARD}

    def get(self, request):
        store = get_store()
        return Response({
            "quotation_status_summary": async_to_sync(quotation_status_summary)(store),
            "bookings_by_month": async_to_sync(bookings_by_month)(store),
        })


class ReseedView(views.APIView):
    """Clear every record and load the seed data again (Admin only)."""
    permission_classes = [HasAction]
    required_actions = {"POST": Action.RESEED_DATA}

    def post(self, request):
        store = reset_store()
        logger.warning("Record store reseeded by %s", request.user.username)
        return Response(
            {
                "quotations": len(store.quotations),
                "bookings": len(store.bookings),
                "buy_rates": len(store.buy_rates),
                "schedules": len(store.schedules),
            },
            status=status.HTTP_200_OK,
        )
