from functools import lru_cache
import logging
import uuid

from fastapi import Depends, Request, Response

from expert_booking.application.ports.auth_api import AuthApiPort
from expert_booking.application.ports.booking_api import BookingApiPort
from expert_booking.application.ports.event_bus import EventBusPort
from expert_booking.application.ports.session_store import SessionStorePort
from expert_booking.application.ports.workflow_store import WorkflowStorePort
from expert_booking.application.use_cases.authenticate import AuthenticateUseCase
from expert_booking.application.use_cases.browse_experts import BrowseExpertsUseCase
from expert_booking.application.use_cases.manage_bookings import ManageBookingsUseCase
from expert_booking.application.use_cases.sync_booking_events import SyncBookingEventsUseCase
from expert_booking.application.use_cases.workflows import WorkflowService
from expert_booking.core.config import settings
from expert_booking.infrastructure.api.auth_api import HttpAuthApi
from expert_booking.infrastructure.api.booking_api import HttpBookingApi
from expert_booking.infrastructure.api.http_client import ApiClient
from expert_booking.infrastructure.api.mock_auth_api import MockAuthApi
from expert_booking.infrastructure.api.mock_booking_api import MockBookingApi
from expert_booking.infrastructure.events.memory_event_bus import MemoryEventBus
from expert_booking.infrastructure.store.memory_session_store import MemorySessionRegistry
from expert_booking.infrastructure.store.memory_workflow_store import MemoryWorkflowStore

SESSION_COOKIE = "session_id"
SESSION_HEADER = "X-Session-Id"


def _use_mock_api() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_session_registry() -> MemorySessionRegistry:
    return MemorySessionRegistry()


def get_session_id(request: Request, response: Response) -> str:
    """Caller identity: X-Session-Id header, else the session cookie, else a fresh id."""
    session_id = request.headers.get(SESSION_HEADER) or request.cookies.get(SESSION_COOKIE)
    if not session_id:
        session_id = uuid.uuid4().hex
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    response.headers[SESSION_HEADER] = session_id
    return session_id


def get_session_store(
    session_id: str = Depends(get_session_id),
    registry: MemorySessionRegistry = Depends(get_session_registry),
) -> SessionStorePort:
    return registry.store_for(session_id)


@lru_cache
def get_api_client() -> ApiClient:
    return ApiClient(base_url=settings.API_BASE_URL, timeout=settings.API_TIMEOUT_SECONDS)


@lru_cache
def get_mock_booking_api() -> MockBookingApi:
    logging.getLogger(__name__).info("Using MockBookingApi (ENV=%s)", settings.ENV)
    return MockBookingApi()


def get_booking_api(sessions: SessionStorePort = Depends(get_session_store)) -> BookingApiPort:
    if _use_mock_api():
        return get_mock_booking_api()
    return HttpBookingApi(client=get_api_client().bind(sessions))


def get_auth_api(sessions: SessionStorePort = Depends(get_session_store)) -> AuthApiPort:
    if _use_mock_api():
        return MockAuthApi()
    return HttpAuthApi(client=get_api_client().bind(sessions))


@lru_cache
def get_workflow_store() -> WorkflowStorePort:
    return MemoryWorkflowStore(max_workflows=settings.MAX_WORKFLOWS)


@lru_cache
def get_browse_experts_use_case() -> BrowseExpertsUseCase:
    # Browsing is public: the shared client sends no caller's token.
    if _use_mock_api():
        return BrowseExpertsUseCase(api=get_mock_booking_api())
    return BrowseExpertsUseCase(api=HttpBookingApi(client=get_api_client()))


@lru_cache
def get_event_bus() -> EventBusPort:
    bus = MemoryEventBus()
    SyncBookingEventsUseCase(store=get_workflow_store()).attach(bus)
    get_browse_experts_use_case().attach(bus)
    return bus


def get_workflow_service(api: BookingApiPort = Depends(get_booking_api)) -> WorkflowService:
    return WorkflowService(
        api=api,
        store=get_workflow_store(),
        default_timezone=settings.DEFAULT_TIMEZONE,
    )


def get_manage_bookings_use_case(api: BookingApiPort = Depends(get_booking_api)) -> ManageBookingsUseCase:
    return ManageBookingsUseCase(api=api)


def get_authenticate_use_case(
    auth_api: AuthApiPort = Depends(get_auth_api),
    sessions: SessionStorePort = Depends(get_session_store),
) -> AuthenticateUseCase:
    return AuthenticateUseCase(auth_api=auth_api, sessions=sessions)
