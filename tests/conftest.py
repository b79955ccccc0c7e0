"""Shared fixtures for the jschema test suite."""
import pytest
import requests

from jschema import infer_text

WIDGET_SCHEMA = """{
    "name": "string",
    "tags": ["string"],
    "address": {"street": "string", "zip": "int"},
    "status": {"enum": ["active", "in-progress"]},
    "parts": [{"id": "int", "label": "string"}]
}"""


class FakeResponse:
    """Stand-in for requests.Response with just what the transport reads."""

    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


@pytest.fixture
def widget_registry():
    return infer_text(WIDGET_SCHEMA, "com.example.Widget")


@pytest.fixture
def fake_http(monkeypatch):
    """
    Replace requests.get/post. Returns a dict the test fills with the
    response to serve; every call is recorded under ``calls``.
    """
    state = {"response": FakeResponse("{}"), "calls": []}

    def fake(method):
        def call(url, **kwargs):
            state["calls"].append((method, url, kwargs))
            response = state["response"]
            if isinstance(response, Exception):
                raise response
            return response
        return call

    monkeypatch.setattr(requests, "get", fake("get"))
    monkeypatch.setattr(requests, "post", fake("post"))
    state["make"] = FakeResponse
    return state
