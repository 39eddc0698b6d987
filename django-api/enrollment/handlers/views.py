"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import structlog
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from enrollment.cache import cache_event, event_generation, get_cached_event
from enrollment.domain import EventId
from enrollment.domain.errors import DomainError, ErrorCode, InvalidEventIdError
from enrollment.handlers.serializers import (
    CapacityChangeSerializer,
    EventSerializer,
    ParticipantRefSerializer,
    ParticipantSerializer,
)
from enrollment.services.factory import get_enrollment_service
from enrollment.stores.interfaces import StoreError

logger = structlog.get_logger(__name__)

_STATUS_BY_CODE = {
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PARTICIPANT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CAPACITY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VIP_ONLY_EVENT: status.HTTP_403_FORBIDDEN,
    ErrorCode.SPEAKER_OF_EVENT: status.HTTP_403_FORBIDDEN,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PARTICIPANT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ROOM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INCONSISTENT_STATE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=_STATUS_BY_CODE.get(error.code, status.HTTP_409_CONFLICT),
    )


def _store_unavailable() -> Response:
    logger.exception("enrollment_store_unavailable")
    return Response(
        {"code": "STORE_UNAVAILABLE", "message": "Please try again later"},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


class EventDetailView(APIView):
    """Handler for GET/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            cache_id = str(EventId.from_string(event_id))
        except ValueError:
            return _error_response(InvalidEventIdError())
        data = get_cached_event(cache_id)
        if data is not None:
            return Response(data)
        generation = event_generation(cache_id)
        try:
            event = get_enrollment_service().get_event(event_id)
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        data = dict(EventSerializer(event).data)
        cache_event(cache_id, generation, data)
        return Response(data)

    def delete(self, request: Request, event_id: str) -> Response:
        try:
            get_enrollment_service().cancel_event(event_id)
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        return Response(status=status.HTTP_204_NO_CONTENT)


class EnrollmentListView(APIView):
    """Handler for POST /api/events/{event_id}/enrollments"""

    def post(self, request: Request, event_id: str) -> Response:
        body = ParticipantRefSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        try:
            get_enrollment_service().sign_up(event_id, body.validated_data["participant_id"])
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        return Response(status=status.HTTP_201_CREATED)


class EnrollmentDetailView(APIView):
    """Handler for DELETE /api/events/{event_id}/enrollments/{participant_id}"""

    def delete(self, request: Request, event_id: str, participant_id: str) -> Response:
        try:
            promoted = get_enrollment_service().cancel_enrollment(event_id, participant_id)
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        return Response({"promoted": str(promoted) if promoted else None})


class WaitlistView(APIView):
    """Handler for POST /api/events/{event_id}/waitlist"""

    def post(self, request: Request, event_id: str) -> Response:
        body = ParticipantRefSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        try:
            get_enrollment_service().join_waitlist(event_id, body.validated_data["participant_id"])
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        return Response(status=status.HTTP_201_CREATED)


class WaitlistDetailView(APIView):
    """Handler for DELETE /api/events/{event_id}/waitlist/{participant_id}"""

    def delete(self, request: Request, event_id: str, participant_id: str) -> Response:
        try:
            get_enrollment_service().leave_waitlist(event_id, participant_id)
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        return Response(status=status.HTTP_204_NO_CONTENT)


class CapacityView(APIView):
    """Handler for PUT /api/events/{event_id}/capacity"""

    def put(self, request: Request, event_id: str) -> Response:
        body = CapacityChangeSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        try:
            promoted = get_enrollment_service().change_capacity(event_id, body.validated_data["capacity"])
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        return Response({"promoted": [str(participant_id) for participant_id in promoted]})


class ParticipantDetailView(APIView):
    """Handler for GET /api/participants/{participant_id}"""

    def get(self, request: Request, participant_id: str) -> Response:
        try:
            participant = get_enrollment_service().get_participant(participant_id)
        except DomainError as error:
            return _error_response(error)
        except StoreError:
            return _store_unavailable()
        return Response(ParticipantSerializer(participant).data)
