"""
Unit tests for the HTTP clients.

`requests.request` is patched, no network access happens.
"""

import unittest
from unittest import mock

import requests

from badgerbase.api import CourseSearchClient, SubscriptionClient
from badgerbase.errors import ApiError, AuthError, ConfigError
from badgerbase.filters import FilterState


def _response(status: int, payload=None) -> mock.Mock:
    resp = mock.Mock(spec=requests.Response)
    resp.status_code = status
    resp.ok = 200 <= status < 400
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class TestCourseSearchClient(unittest.TestCase):
    def test_search_sends_filters_and_parses_page(self) -> None:
        payload = {"data": [{"course_id": 1, "course_title": "Calculus"}], "total_count": 1, "has_more": False}
        client = CourseSearchClient("https://api.example.com/", client_secret="s3cret", api_key="k")

        with mock.patch("badgerbase.api.requests.request", return_value=_response(200, payload)) as req:
            page = client.search(FilterState(search_param="calc"), page=2)

        self.assertEqual(page.courses[0].course_title, "Calculus")
        args, kwargs = req.call_args
        self.assertEqual(args, ("GET", "https://api.example.com/api/query"))
        self.assertEqual(kwargs["params"][0], ("page", "2"))
        self.assertIn(("search_param", "calc"), kwargs["params"])
        self.assertEqual(kwargs["headers"]["x-client-secret"], "s3cret")
        self.assertEqual(kwargs["headers"]["x-api-key"], "k")

    def test_http_error_raises_api_error(self) -> None:
        client = CourseSearchClient("https://api.example.com")
        with mock.patch("badgerbase.api.requests.request", return_value=_response(401)):
            with self.assertRaises(ApiError) as ctx:
                client.search()
        self.assertEqual(ctx.exception.status, 401)

    def test_network_error_raises_api_error(self) -> None:
        client = CourseSearchClient("https://api.example.com")
        with mock.patch("badgerbase.api.requests.request", side_effect=requests.ConnectionError("down")):
            with self.assertRaises(ApiError) as ctx:
                client.search()
        self.assertIsNone(ctx.exception.status)

    def test_invalid_page(self) -> None:
        with self.assertRaises(ValueError):
            CourseSearchClient("https://api.example.com").search(page=0)


class TestSubscriptionClient(unittest.TestCase):
    def _client(self, **kwargs) -> SubscriptionClient:
        defaults = dict(access_token="tok", email="bucky@wisc.edu", api_key="key", retry_delay=0)
        defaults.update(kwargs)
        return SubscriptionClient("https://subs.example.com", **defaults)

    def test_requires_login(self) -> None:
        with self.assertRaises(AuthError):
            self._client(access_token="").subscribe_course("123")
        with self.assertRaises(AuthError):
            self._client(email="").list_subscriptions()

    def test_requires_backend_url(self) -> None:
        client = SubscriptionClient("", access_token="tok", email="bucky@wisc.edu")
        with self.assertRaises(ConfigError):
            client.subscribe_section("1")

    def test_requires_id(self) -> None:
        with self.assertRaises(ValueError):
            self._client().subscribe_section(" ")

    def test_subscribe_course(self) -> None:
        with mock.patch("badgerbase.api.requests.request", return_value=_response(201, {"ok": True})) as req:
            result = self._client().subscribe_course("123")

        self.assertEqual(result, {"ok": True})
        args, kwargs = req.call_args
        self.assertEqual(args, ("POST", "https://subs.example.com/course-subscription"))
        self.assertEqual(kwargs["json"], {"course_id": "123", "email": "bucky@wisc.edu"})
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer tok")
        self.assertEqual(kwargs["headers"]["X-API-Key"], "key")

    def test_list_subscriptions_passes_email(self) -> None:
        with mock.patch("badgerbase.api.requests.request", return_value=_response(200, {"course_subscriptions": []})) as req:
            self._client().list_subscriptions()
        args, kwargs = req.call_args
        self.assertEqual(args, ("GET", "https://subs.example.com/subscriptions"))
        self.assertEqual(kwargs["params"], {"email": "bucky@wisc.edu"})

    def test_backend_error_message_is_surfaced(self) -> None:
        with mock.patch("badgerbase.api.requests.request", return_value=_response(409, {"error": "Already subscribed"})):
            with self.assertRaises(ApiError) as ctx:
                self._client().unsubscribe_course("123")
        self.assertEqual(ctx.exception.message, "Already subscribed")
        self.assertEqual(ctx.exception.status, 409)

    def test_section_retries_server_errors(self) -> None:
        responses = [_response(502), _response(503), _response(200, {"subscribed": True})]
        with mock.patch("badgerbase.api.requests.request", side_effect=responses) as req, mock.patch(
            "badgerbase.api.time.sleep"
        ) as sleep:
            result = self._client(retry_delay=1.0).subscribe_section("41001", ["LEC 001"], "Programming III")

        self.assertEqual(result, {"subscribed": True})
        self.assertEqual(req.call_count, 3)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.0, 2.0])
        body = req.call_args.kwargs["json"]
        self.assertEqual(body["section_names"], ["LEC 001"])
        self.assertEqual(body["course_title"], "Programming III")

    def test_section_does_not_retry_client_errors(self) -> None:
        with mock.patch("badgerbase.api.requests.request", return_value=_response(400, {"error": "bad"})) as req:
            with self.assertRaises(ApiError):
                self._client().unsubscribe_section("41001")
        self.assertEqual(req.call_count, 1)

    def test_section_gives_up_after_max_retries(self) -> None:
        with mock.patch("badgerbase.api.requests.request", return_value=_response(500)) as req:
            with self.assertRaises(ApiError) as ctx:
                self._client(max_retries=2).subscribe_section("41001")
        self.assertEqual(req.call_count, 3)
        self.assertEqual(ctx.exception.status, 500)

    def test_section_timeout_message(self) -> None:
        with mock.patch("badgerbase.api.requests.request", side_effect=requests.Timeout("slow")) as req:
            with self.assertRaises(ApiError) as ctx:
                self._client(max_retries=1).subscribe_section("41001")
        self.assertEqual(req.call_count, 2)
        self.assertIn("Request timeout", str(ctx.exception))

    def test_section_network_error_message(self) -> None:
        with mock.patch("badgerbase.api.requests.request", side_effect=requests.ConnectionError("refused")):
            with self.assertRaises(ApiError) as ctx:
                self._client(max_retries=0).subscribe_section("41001")
        self.assertIn("Network error", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
