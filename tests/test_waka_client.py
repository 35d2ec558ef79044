import base64
from datetime import date

import pytest
import requests

from wakamonth.core.errors import AuthenticationFailure, ConfigurationError, FetchError
from wakamonth.core.mappers import extract_result_sets, map_user
from wakamonth.core.waka_client import WakaAPI


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.headers = {}
        self.response = response or FakeResponse(payload={"data": []})
        self.exc = exc
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.exc:
            raise self.exc
        return self.response


def test_wakatime_day_request():
    session = FakeSession()
    api = WakaAPI("https://api.wakatime.com/api", "secret", "wakatime", session=session)
    api.fetch_day("u-1", date(2024, 3, 5), "demo")
    url, params, timeout = session.requests[0]
    assert url == "https://api.wakatime.com/api/v1/users/u-1/summaries"
    assert params == {"start": "2024-03-05", "end": "2024-03-05", "project": "demo"}
    assert timeout == api.timeout


def test_wakapi_uses_compat_prefix_and_omits_empty_project():
    session = FakeSession()
    api = WakaAPI("https://wakapi.dev/api/", "secret", "wakapi", session=session)
    api.fetch_day("u-1", date(2024, 3, 5))
    url, params, _ = session.requests[0]
    assert url == "https://wakapi.dev/api/compat/wakatime/v1/users/u-1/summaries"
    assert "project" not in params


def test_basic_auth_header():
    session = FakeSession()
    WakaAPI("https://api.wakatime.com/api", "secret", session=session)
    expected = base64.b64encode(b"secret").decode("ascii")
    assert session.headers["Authorization"] == f"Basic {expected}"


@pytest.mark.parametrize("status", [401, 403])
def test_unauthorized_raises(status):
    api = WakaAPI("https://x/api", "k", session=FakeSession(FakeResponse(status)))
    with pytest.raises(AuthenticationFailure):
        api.fetch_user("current")


def test_server_error_raises_fetch_error():
    api = WakaAPI("https://x/api", "k", session=FakeSession(FakeResponse(500, text="boom")))
    with pytest.raises(FetchError):
        api.fetch_day("u", date(2024, 1, 1))


def test_transport_error_and_bad_json_raise_fetch_error():
    api = WakaAPI("https://x/api", "k", session=FakeSession(exc=requests.ConnectionError("down")))
    with pytest.raises(FetchError):
        api.fetch_user("current")
    api = WakaAPI("https://x/api", "k", session=FakeSession(FakeResponse(200, payload=None)))
    with pytest.raises(FetchError):
        api.fetch_user("current")


def test_unknown_backend_rejected():
    with pytest.raises(ConfigurationError):
        WakaAPI("https://x/api", "k", "toggl", session=FakeSession())


def test_map_user_and_result_sets():
    user = map_user({"data": {"id": 42, "display_name": "Alice A"}})
    assert user.id == "42"
    assert user.username == "Alice A"
    with pytest.raises(FetchError):
        map_user({"data": {}})
    assert extract_result_sets({"data": {"branches": []}}) == [{"branches": []}]
    assert extract_result_sets(None) == []
