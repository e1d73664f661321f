"""
HTTP clients for the external services.

- CourseSearchClient: paginated, filterable course search (`/api/query`)
- SubscriptionClient: course/section notification subscriptions

Both are thin wrappers around `requests`; responses are parsed into
badgerbase.model objects (search) or returned as decoded JSON (subscriptions).
Failures are raised as badgerbase.errors.ApiError.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from badgerbase.config import DEFAULT_TIMEOUT, Settings
from badgerbase.errors import ApiError, AuthError, ConfigError
from badgerbase.filters import FilterState
from badgerbase.model import SearchPage


logger = logging.getLogger(__name__)

MAX_RETRIES = 3
INITIAL_RETRY_DELAY = 1.0


def _decode_json(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _error_message(payload: Any, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("error", "detail", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return default


# ---------------------------------------------------------------------------
# Course search
# ---------------------------------------------------------------------------


class CourseSearchClient:
    """
    Client for the course-search API.
    """

    def __init__(
        self,
        base_url: str,
        client_secret: str = "",
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client_secret = client_secret
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "CourseSearchClient":
        return cls(settings.api_url, settings.client_secret, settings.api_key, settings.timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.client_secret:
            headers["x-client-secret"] = self.client_secret
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def search(self, filters: Optional[FilterState] = None, page: int = 1) -> SearchPage:
        """
        Fetch one page of courses matching `filters`.
        """
        if not self.base_url:
            raise ConfigError("Course search API URL is not configured (BADGERBASE_API_URL)")
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        params = (filters or FilterState()).to_params(page)
        url = f"{self.base_url}/api/query"
        logger.debug("GET %s params=%s", url, params)

        try:
            resp = requests.request("GET", url, params=params, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Course search failed: %s", exc)
            raise ApiError(f"Failed to fetch data from API: {exc}") from exc

        payload = _decode_json(resp)
        if not resp.ok:
            raise ApiError(_error_message(payload, "Course search failed"), status=resp.status_code)
        if not isinstance(payload, dict):
            raise ApiError("Course search returned an invalid response", status=resp.status_code)

        result = SearchPage.from_dict(payload)
        logger.info("Fetched page %d: %d of %d courses", page, len(result.courses), result.total_count)
        return result


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


class SubscriptionClient:
    """
    Client for the subscription backend.

    Every call is made on behalf of the logged-in user: the bearer token
    and email must be set, otherwise AuthError is raised.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str = "",
        email: str = "",
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = INITIAL_RETRY_DELAY,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.access_token = access_token
        self.email = email
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @classmethod
    def from_settings(cls, settings: Settings) -> "SubscriptionClient":
        return cls(
            settings.subscription_url,
            access_token=settings.access_token,
            email=settings.email,
            api_key=settings.subscription_api_key,
            timeout=settings.timeout,
        )

    def _check_ready(self, action: str) -> None:
        if not self.access_token:
            raise AuthError(f"Unauthorized: Please log in to {action}")
        if not self.email:
            raise AuthError("User email not found in session")
        if not self.base_url:
            raise ConfigError("Subscription backend URL is not configured (SUBSCRIPTION_URL)")

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.access_token}",
            "X-API-Key": self.api_key,
        }

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        return requests.request(
            method, f"{self.base_url}{path}", headers=self._headers(), timeout=self.timeout, **kwargs
        )

    def _send_with_retry(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """
        Send a request, retrying server errors and network failures with
        exponential backoff. Client errors (4xx) are returned immediately.
        """
        for attempt in range(self.max_retries + 1):
            last_attempt = attempt >= self.max_retries
            try:
                resp = self._send(method, path, **kwargs)
            except requests.Timeout as exc:
                if last_attempt:
                    raise ApiError(
                        "Request timeout: The server took too long to respond. Please try again."
                    ) from exc
                logger.warning("%s %s timed out (attempt %d)", method, path, attempt + 1)
            except requests.ConnectionError as exc:
                if last_attempt:
                    raise ApiError(
                        "Network error: Unable to connect to the server. "
                        "Please check your connection and try again."
                    ) from exc
                logger.warning("%s %s connection failed (attempt %d): %s", method, path, attempt + 1, exc)
            except requests.RequestException as exc:
                if last_attempt:
                    raise ApiError(f"Request failed: {exc}") from exc
                logger.warning("%s %s failed (attempt %d): %s", method, path, attempt + 1, exc)
            else:
                if resp.status_code < 500 or last_attempt:
                    return resp
                logger.warning("%s %s returned %d (attempt %d)", method, path, resp.status_code, attempt + 1)

            time.sleep(self.retry_delay * (2 ** attempt))

        # max_retries < 0 leaves the loop without a request
        raise ApiError("Request failed after multiple attempts")

    def _result(self, resp: requests.Response, default_error: str) -> Any:
        payload = _decode_json(resp)
        if not resp.ok:
            raise ApiError(_error_message(payload, default_error), status=resp.status_code)
        return payload

    def list_subscriptions(self) -> Any:
        """
        Return the user's course and section subscriptions as decoded JSON.
        """
        self._check_ready("view subscriptions")
        try:
            resp = self._send("GET", "/subscriptions", params={"email": self.email})
        except requests.RequestException as exc:
            raise ApiError(f"Failed to fetch subscriptions: {exc}") from exc
        return self._result(resp, "Failed to fetch subscriptions")

    def subscribe_course(self, course_id: str) -> Any:
        return self._course_call("POST", course_id, "subscribe to courses", "Failed to subscribe to course")

    def unsubscribe_course(self, course_id: str) -> Any:
        return self._course_call(
            "DELETE", course_id, "unsubscribe from courses", "Failed to unsubscribe from course"
        )

    def _course_call(self, method: str, course_id: str, action: str, default_error: str) -> Any:
        self._check_ready(action)
        if not str(course_id or "").strip():
            raise ValueError("course_id is required")
        body = {"course_id": str(course_id).strip(), "email": self.email}
        try:
            resp = self._send(method, "/course-subscription", json=body)
        except requests.RequestException as exc:
            raise ApiError(f"{default_error}: {exc}") from exc
        return self._result(resp, default_error)

    def subscribe_section(
        self,
        section_id: str,
        section_names: Optional[List[str]] = None,
        course_title: Optional[str] = None,
    ) -> Any:
        """
        Subscribe to availability notifications for one section.

        `section_names` (e.g. ["LEC 001", "DIS 302"]) and `course_title` are
        only used by the backend to word the notification.
        """
        self._check_ready("subscribe to sections")
        if not str(section_id or "").strip():
            raise ValueError("section_id is required")
        body: Dict[str, Any] = {
            "section_id": str(section_id).strip(),
            "email": self.email,
            "section_names": section_names,
            "course_title": course_title,
        }
        resp = self._send_with_retry("POST", "/section-subscription", json=body)
        return self._result(resp, "Failed to subscribe to section")

    def unsubscribe_section(self, section_id: str) -> Any:
        self._check_ready("unsubscribe from sections")
        if not str(section_id or "").strip():
            raise ValueError("section_id is required")
        body = {"section_id": str(section_id).strip(), "email": self.email}
        resp = self._send_with_retry("DELETE", "/section-subscription", json=body)
        return self._result(resp, "Failed to unsubscribe from section")
