"""
DRF plumbing shared by the quotation and booking wizard endpoints.

Wizard coroutines run through ``async_to_sync``; the state is written back to
the session cache after every action, including actions that fail, so field
errors and notices survive to the next GET.
"""

from __future__ import annotations

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAction
from core.exceptions import NotFoundError
from rates.serializers import ScheduleRateSerializer
from records.store import get_store

from .sessions import WizardSessions


class WizardViewMixin:
    permission_classes = [HasAction]
    workflow_class = None
    draft_serializer_class = None
    sessions: WizardSessions

    def load_workflow(self, request, session_id):
        state = self.sessions.load(session_id, request.user.pk)
        return self.workflow_class(get_store(), state)

    def save(self, request, session_id, workflow):
        self.sessions.save(session_id, request.user.pk, workflow.state)

    def extra_state(self, workflow) -> dict:
        return {}

    def render(self, session_id, workflow) -> dict:
        state = workflow.state
        payload = {
            "session_id": session_id,
            "step": state.step,
            "steps": list(workflow.machine.steps),
            "can_advance": workflow.can_advance(),
            "record_id": state.record_id,
            "errors": state.errors,
            "notices": state.notices,
            "draft": self.draft_serializer_class(state.draft).data,
            "candidates": ScheduleRateSerializer(state.candidates, many=True).data,
        }
        payload.update(self.extra_state(workflow))
        return payload


class WizardStartView(WizardViewMixin, APIView):
    record_param = "id"

    def post(self, request):
        record_id = request.data.get(self.record_param) or None
        workflow = async_to_sync(self.workflow_class.start)(get_store(), record_id)
        session_id = self.sessions.create(request.user.pk, workflow.state)
        return Response(self.render(session_id, workflow), status=status.HTTP_201_CREATED)


class WizardSessionView(WizardViewMixin, APIView):
    def get(self, request, session_id):
        workflow = self.load_workflow(request, session_id)
        return Response(self.render(session_id, workflow))

    def patch(self, request, session_id):
        workflow = self.load_workflow(request, session_id)
        ser = self.draft_serializer_class(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        workflow.dismiss_notices()
        try:
            workflow.set_fields(ser.validated_data)
        finally:
            self.save(request, session_id, workflow)
        return Response(self.render(session_id, workflow))

    def delete(self, request, session_id):
        self.sessions.load(session_id, request.user.pk)
        self.sessions.discard(session_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WizardActionView(WizardViewMixin, APIView):
    """POST ``<session>/<action>``; ``actions`` maps URL names to handler methods.

    A handler returns None to get the refreshed state back, or its own
    Response when it finished the session.
    """

    actions: dict = {}

    def post(self, request, session_id, action):
        handler_name = self.actions.get(action)
        if handler_name is None:
            raise NotFoundError("Wizard action", action)
        workflow = self.load_workflow(request, session_id)
        workflow.dismiss_notices()
        try:
            response = getattr(self, handler_name)(request, session_id, workflow)
        except Exception:
            self.save(request, session_id, workflow)
            raise
        if response is not None:
            return response
        self.save(request, session_id, workflow)
        return Response(self.render(session_id, workflow))

    # handlers common to both wizards

    def advance(self, request, session_id, workflow):
        async_to_sync(workflow.advance)()

    def back(self, request, session_id, workflow):
        workflow.back()

    def goto(self, request, session_id, workflow):
        async_to_sync(workflow.goto)(str(request.data.get("step") or ""))

    def search_rates(self, request, session_id, workflow):
        async_to_sync(workflow.search_rates)()

    def select_rate(self, request, session_id, workflow):
        workflow.select_rate(str(request.data.get("rate_id") or ""))

    def deselect_rate(self, request, session_id, workflow):
        workflow.deselect_rate()
