"""Request-list controller for parking slot requests.

Owns the admin's view of the slot request list: search text, pagination,
the fetched page and the last error. Searches are debounced; pagination
changes re-fetch immediately; approve/reject patch the affected row in
place instead of re-fetching.

Error handling:
- 401 from any operation clears the session and redirects to login
- 403 on list shows an admin-privileges message
- anything else shows the server's message or a generic fallback
A failed list fetch discards the current page rather than leaving a
mismatched page/list pair.
"""

import logging
from typing import Awaitable, Callable

from pydantic import ValidationError as ModelValidationError

from parking_admin.config import Settings, get_settings
from parking_admin.domain.exceptions import (
    InvalidSearchQueryError,
    RejectionReasonTooLongError,
    ValidationError,
)
from parking_admin.domain.models import (
    ActionResult,
    ErrorState,
    Pagination,
    SlotRequest,
    SlotRequestPage,
)
from parking_admin.domain.sanitization import sanitize_search_input, sanitize_search_query
from parking_admin.domain.services.notification import LoggingNotifier, Notifier
from parking_admin.infra.api.client import SlotRequestApiClient
from parking_admin.infra.api.exceptions import (
    ApiAuthenticationError,
    ApiAuthorizationError,
    ApiError,
)
from parking_admin.infra.debounce import Debouncer
from parking_admin.infra.observability import metrics
from parking_admin.infra.observability.logging import new_correlation_id
from parking_admin.infra.session.store import SessionStore

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "Access denied: Admin privileges required"
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."
LOAD_FAILED_MESSAGE = "Failed to load requests"
APPROVE_FAILED_MESSAGE = "Failed to approve request"
REJECT_FAILED_MESSAGE = "Failed to reject request"
NO_RESULTS_MESSAGE = "No slot requests found for your search"
APPROVED_MESSAGE = "Request approved successfully"
REJECTED_MESSAGE = "Request rejected successfully"
NO_REASON_FALLBACK = "No reason provided"

ReasonPrompt = Callable[[], Awaitable[str | None]]


class SlotRequestController:
    """Controller behind the admin's slot request list.

    Example:
        controller = SlotRequestController(client, session_store, notifier)
        await controller.fetch_requests()

        controller.on_search_input("ABC")   # debounced fetch
        await controller.next_page()        # immediate fetch

        await controller.approve(5)
        await controller.reject(6, "Vehicle not registered")

        controller.close()
    """

    def __init__(
        self,
        api_client: SlotRequestApiClient,
        session_store: SessionStore,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            api_client: Backend client for list/approve/reject
            session_store: Session cleared on 401
            notifier: Sink for admin-facing messages (defaults to logging)
            settings: Application settings (defaults to global settings)
        """
        self.api_client = api_client
        self.session_store = session_store
        self.notifier = notifier or LoggingNotifier()
        self.settings = settings or get_settings()

        self.requests: list[SlotRequest] = []
        self.pagination = self._default_pagination()
        self.search = ""
        self.errors = ErrorState()

        self._fetch_sequence = 0
        self._closed = False
        self._debouncer = Debouncer(self.settings.search_debounce_seconds, self._fetch_current_search)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def search_pending(self) -> bool:
        """True while a debounced search is waiting to fire."""
        return self._debouncer.pending

    def _default_pagination(self) -> Pagination:
        return Pagination(limit=self.settings.default_page_limit)

    # ========================================
    # Fetch
    # ========================================

    async def fetch_requests(self, query: str = "") -> None:
        """Fetch the current page, filtered by ``query``.

        Page and limit come from the current pagination. Stale responses
        (a newer fetch was issued meanwhile) are discarded.

        Args:
            query: Raw search text
        """
        if self._closed:
            return
        new_correlation_id()

        try:
            sanitized = self._clean_query(query)
        except ValidationError as e:
            logger.info("Rejected search query", extra={"operation": "list", "search": query})
            self.notifier.error(e.message)
            return

        self._fetch_sequence += 1
        sequence = self._fetch_sequence
        page, limit = self.pagination.page, self.pagination.limit

        logger.debug(
            "Fetching slot requests",
            extra={
                "operation": "list",
                "page": page,
                "limit": limit,
                "search": sanitized,
                "sequence": sequence,
            },
        )

        try:
            body = await self.api_client.get_slot_requests(page=page, limit=limit, search=sanitized)
            result = SlotRequestPage.from_response(
                body, default_limit=self.settings.default_page_limit
            )
        except ApiError as e:
            if self._discard_if_stale(sequence):
                return
            self._handle_fetch_error(e)
            return
        except ModelValidationError as e:
            if self._discard_if_stale(sequence):
                return
            logger.warning(
                f"Malformed slot request list: {e.error_count()} error(s)",
                extra={"operation": "list"},
            )
            self._fail_fetch(LOAD_FAILED_MESSAGE)
            self.notifier.error(LOAD_FAILED_MESSAGE)
            return

        if self._discard_if_stale(sequence):
            return

        self.requests = result.data
        self.pagination = result.pagination
        self.errors = ErrorState()

        logger.info(
            f"Loaded {len(self.requests)} slot request(s)",
            extra={
                "operation": "list",
                "page": self.pagination.page,
                "limit": self.pagination.limit,
                "sequence": sequence,
            },
        )

        if not self.requests and sanitized:
            self.notifier.info(NO_RESULTS_MESSAGE)

    def _clean_query(self, query: str) -> str:
        sanitized, is_valid = sanitize_search_query(query, self.settings.max_search_query_length)
        if not is_valid and query:
            raise InvalidSearchQueryError(query, sanitized)
        return sanitized

    def _discard_if_stale(self, sequence: int) -> bool:
        if self._closed:
            return True
        if sequence != self._fetch_sequence:
            logger.debug(
                "Discarding stale list response",
                extra={"operation": "list", "sequence": sequence},
            )
            if self.settings.metrics_enabled:
                metrics.record_stale_response()
            return True
        return False

    def _handle_fetch_error(self, error: ApiError) -> None:
        logger.warning(
            f"Failed to load slot requests: {error}",
            extra={"operation": "list", "status_code": error.status_code},
        )

        if isinstance(error, ApiAuthorizationError):
            message = ACCESS_DENIED_MESSAGE
            self.notifier.error(message)
        elif isinstance(error, ApiAuthenticationError):
            message = SESSION_EXPIRED_MESSAGE
        else:
            message = error.server_message or LOAD_FAILED_MESSAGE
            self.notifier.error(message)

        self._fail_fetch(message)

        if isinstance(error, ApiAuthenticationError):
            self._expire_session()

    def _fail_fetch(self, message: str) -> None:
        self.errors = ErrorState(api=message)
        self.pagination = self._default_pagination()
        self.requests = []

    def _expire_session(self) -> None:
        """Clear the session, redirect to login and tear down the controller."""
        self.session_store.clear()
        self.session_store.redirect_to_login()
        self.close()

    # ========================================
    # Search
    # ========================================

    def on_search_input(self, text: str) -> None:
        """Record a keystroke and (re)schedule the debounced search fetch."""
        self.search = text
        self._debouncer.schedule()

    async def clear_search(self) -> None:
        """Empty the search box and fetch the unfiltered list immediately."""
        self.search = ""
        self._debouncer.cancel()
        await self.fetch_requests("")

    async def _fetch_current_search(self) -> None:
        await self.fetch_requests(self.search)

    async def wait_for_search(self) -> None:
        """Wait until any debounced search has fired and completed."""
        await self._debouncer.join()

    # ========================================
    # Pagination
    # ========================================

    async def set_page(self, page: int) -> None:
        """Move to ``page`` and re-fetch with the current search."""
        self.pagination = self.pagination.model_copy(update={"page": max(1, int(page))})
        await self._refetch()

    async def set_limit(self, limit: int) -> None:
        """Change rows per page, go back to page 1 and re-fetch."""
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        self.pagination = self.pagination.model_copy(update={"page": 1, "limit": int(limit)})
        await self._refetch()

    async def next_page(self) -> None:
        """Advance one page; no-op on the last page."""
        if not self.pagination.has_next:
            return
        await self.set_page(min(self.pagination.pages, self.pagination.page + 1))

    async def previous_page(self) -> None:
        """Go back one page; no-op on the first page."""
        if not self.pagination.has_previous:
            return
        await self.set_page(max(1, self.pagination.page - 1))

    async def _refetch(self) -> None:
        # A pending search timer would only repeat this fetch
        self._debouncer.cancel()
        await self.fetch_requests(self.search)

    # ========================================
    # Approve / Reject
    # ========================================

    async def approve(self, request_id: int | str) -> SlotRequest | None:
        """Approve a request and patch its status and slot number in place.

        Returns:
            The patched request, or None on failure or if it is not on this page
        """
        if self._closed:
            return None
        new_correlation_id()

        try:
            body = await self.api_client.approve_slot_request(request_id)
        except ApiError as e:
            self._handle_action_error(e, "approve", APPROVE_FAILED_MESSAGE)
            return None

        result = ActionResult.from_response(body)
        self._record_action("approve", True)
        if self._closed:
            return None

        updated = self._patch_request(
            request_id,
            request_status=result.request_status,
            slot_number=result.slot_number,
        )
        self.errors = ErrorState()
        logger.info(
            "Slot request approved",
            extra={"operation": "approve", "request_id": str(request_id)},
        )
        self.notifier.success(APPROVED_MESSAGE)
        return updated

    async def reject(self, request_id: int | str, reason: str | None = None) -> SlotRequest | None:
        """Reject a request with a reason and patch its status in place.

        An empty or missing reason becomes "No reason provided". The reason
        is cleaned before sending; if it is still too long nothing is sent.

        Returns:
            The patched request, or None on failure or if it is not on this page
        """
        if self._closed:
            return None
        new_correlation_id()

        try:
            cleaned = self._clean_reason(reason or NO_REASON_FALLBACK)
        except ValidationError as e:
            logger.info(
                e.message,
                extra={"operation": "reject", "request_id": str(request_id)},
            )
            self.notifier.error(e.message)
            return None

        try:
            body = await self.api_client.reject_slot_request(request_id, cleaned)
        except ApiError as e:
            self._handle_action_error(e, "reject", REJECT_FAILED_MESSAGE)
            return None

        result = ActionResult.from_response(body)
        self._record_action("reject", True)
        if self._closed:
            return None

        updated = self._patch_request(request_id, request_status=result.request_status)
        self.errors = ErrorState()
        logger.info(
            "Slot request rejected",
            extra={"operation": "reject", "request_id": str(request_id)},
        )
        self.notifier.success(REJECTED_MESSAGE)
        return updated

    async def reject_with_prompt(
        self, request_id: int | str, prompt: ReasonPrompt
    ) -> SlotRequest | None:
        """Ask for a rejection reason, then reject.

        Args:
            request_id: Request to reject
            prompt: Async callable returning the reason, or None if cancelled

        Returns:
            The patched request, or None if cancelled or failed
        """
        reason = await prompt()
        if reason is None:
            logger.info(
                "Rejection cancelled",
                extra={"operation": "reject", "request_id": str(request_id)},
            )
            return None
        return await self.reject(request_id, reason)

    def _clean_reason(self, reason: str) -> str:
        cleaned = sanitize_search_input(reason)
        max_length = self.settings.max_rejection_reason_length
        if len(cleaned) > max_length:
            raise RejectionReasonTooLongError(len(cleaned), max_length)
        return cleaned

    def _patch_request(self, request_id: int | str, **fields: object) -> SlotRequest | None:
        # Looked up after the await so concurrent actions only touch their own row
        for index, request in enumerate(self.requests):
            if request.matches_id(request_id):
                updated = request.model_copy(update=fields)
                self.requests[index] = updated
                return updated
        return None

    def _handle_action_error(self, error: ApiError, action: str, fallback: str) -> None:
        self._record_action(action, False)
        logger.warning(
            f"Failed to {action} slot request: {error}",
            extra={"operation": action, "status_code": error.status_code},
        )
        if self._closed:
            return

        if isinstance(error, ApiAuthenticationError):
            self.errors = ErrorState(api=SESSION_EXPIRED_MESSAGE)
            self._expire_session()
            return

        message = error.server_message or fallback
        self.errors = ErrorState(api=message)
        self.notifier.error(message)

    def _record_action(self, action: str, success: bool) -> None:
        if self.settings.metrics_enabled:
            metrics.record_admin_action(action, success)

    # ========================================
    # Lifecycle
    # ========================================

    def close(self) -> None:
        """Tear down: cancel any pending search and ignore later responses."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.close()
        logger.debug("Slot request controller closed")

    async def __aenter__(self) -> "SlotRequestController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
