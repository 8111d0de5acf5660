"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call the facade for everything else
- Map domain error codes to HTTP status codes
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from calendar_events.domain.errors import ErrorCode
from calendar_events.handlers.serializers import BulkEventsSerializer, EventPayloadSerializer
from calendar_events.services import FacadeResponse, get_event_facade

STATUS_BY_ERROR = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.IMMUTABLE_FIELD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.LOCK_TIMEOUT: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INVALID_BODY = {"success": False, "error": "Invalid request body"}


def _respond(result: FacadeResponse) -> Response:
    if result.success:
        return Response(result.to_dict(), status=status.HTTP_200_OK)
    code = STATUS_BY_ERROR.get(result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(result.to_dict(), status=code)


class EventListView(APIView):
    """Handler for GET and POST /api/events"""

    def get(self, request: Request) -> Response:
        return _respond(get_event_facade().list_events())

    def post(self, request: Request) -> Response:
        serializer = EventPayloadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(INVALID_BODY, status=status.HTTP_400_BAD_REQUEST)
        return _respond(get_event_facade().create_event(serializer.validated_data))


class EventDetailView(APIView):
    """Handler for PUT and DELETE /api/events/{event_id}"""

    def put(self, request: Request, event_id: str) -> Response:
        serializer = EventPayloadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(INVALID_BODY, status=status.HTTP_400_BAD_REQUEST)
        return _respond(get_event_facade().update_event(event_id, serializer.validated_data))

    def delete(self, request: Request, event_id: str) -> Response:
        return _respond(get_event_facade().delete_event(event_id))


class RecurringGroupView(APIView):
    """Handler for DELETE /api/events/recurring/{group_id}"""

    def delete(self, request: Request, group_id: str) -> Response:
        return _respond(get_event_facade().delete_event_group(group_id))


class BulkEventsView(APIView):
    """Handler for POST /api/events/bulk"""

    def post(self, request: Request) -> Response:
        serializer = BulkEventsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(INVALID_BODY, status=status.HTTP_400_BAD_REQUEST)
        return _respond(get_event_facade().bulk_create_events(serializer.validated_data["events"]))


class HealthView(APIView):
    """Handler for GET /api/health"""

    def get(self, request: Request) -> Response:
        return _respond(get_event_facade().health_check())
