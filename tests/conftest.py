import json
from typing import Any

import httpx
import pytest

from lead_capture.config.settings import KajabiSettings, reset_settings


class FakeClock:
    """Manually advanced clock for token expiry tests."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeKajabi:
    """
    In-memory stand-in for the Kajabi API behind an httpx.MockTransport.

    Search returns every stored contact, like the fuzzy upstream filter.
    """

    def __init__(self, contacts: list[dict[str, Any]] | None = None, expires_in: Any = 7200):
        self.contacts = list(contacts or [])
        self.expires_in = expires_in
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.search_status = 200
        self.create_status = 201
        self.tag_status = 200
        self._next_id = 5000

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def calls(self, method: str, path_suffix: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.endswith(path_suffix)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/oauth/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            body = {"access_token": f"token-{len(self.calls('POST', '/oauth/token'))}"}
            if self.expires_in is not None:
                body["expires_in"] = self.expires_in
            return httpx.Response(200, json=body)

        if path == "/v1/contacts" and request.method == "GET":
            if self.search_status != 200:
                return httpx.Response(self.search_status, text="search unavailable")
            return httpx.Response(200, json={
                "data": [
                    {"id": c["id"], "type": "contacts", "attributes": {"email": c["email"]}}
                    for c in self.contacts
                ]
            })

        if path == "/v1/contacts" and request.method == "POST":
            if self.create_status >= 400:
                return httpx.Response(self.create_status, text="email is invalid")
            attributes = json.loads(request.content)["data"]["attributes"]
            self._next_id += 1
            contact = {"id": str(self._next_id), "email": attributes["email"]}
            self.contacts.append(contact)
            return httpx.Response(self.create_status, json={
                "data": {"id": contact["id"], "type": "contacts", "attributes": attributes}
            })

        if path.endswith("/relationships/tags"):
            if self.tag_status >= 400:
                return httpx.Response(self.tag_status, text="tag not found")
            return httpx.Response(self.tag_status, json={"data": []})

        return httpx.Response(404, text="not found")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_kajabi() -> FakeKajabi:
    return FakeKajabi()


@pytest.fixture
def kajabi_settings() -> KajabiSettings:
    return KajabiSettings(
        client_id="client-abc",
        client_secret="secret-xyz",
        site_id="site-1",
        tag_id_contractor="111",
        tag_id_diy="222",
        tag_id_waitlist="333",
    )


@pytest.fixture
def kajabi_env(monkeypatch):
    """Environment for handlers that read settings themselves."""
    env = {
        "KAJABI_CLIENT_ID": "client-abc",
        "KAJABI_CLIENT_SECRET": "secret-xyz",
        "KAJABI_SITE_ID": "site-1",
        "KAJABI_TAG_ID_CONTRACTOR": "111",
        "KAJABI_TAG_ID_DIY": "222",
        "KAJABI_TAG_ID_WAITLIST": "333",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    reset_settings()
    yield env
    reset_settings()
