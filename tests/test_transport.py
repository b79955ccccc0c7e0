"""
Tests for the requests-backed transport.
"""

import pytest
import requests

from jschema.errors import TransportError
from jschema.transport import http_get, http_post, stringify_args


class TestStringifyArgs:

    def test_values_become_strings(self):
        assert stringify_args({"n": 1, "b": True, "s": "x"}) == {"n": "1", "b": "True", "s": "x"}

    def test_empty(self):
        assert stringify_args(None) == {}


class TestHttp:

    def test_get(self, fake_http):
        fake_http["response"] = fake_http["make"]("body")

        assert http_get("http://example.com", {"page": 2}, headers={"Accept": "application/json"}, timeout=5) == "body"

        method, url, kwargs = fake_http["calls"][0]
        assert method == "get"
        assert kwargs == {"params": {"page": "2"}, "headers": {"Accept": "application/json"}, "timeout": 5}

    def test_post(self, fake_http):
        fake_http["response"] = fake_http["make"]("ok")

        assert http_post("http://example.com", {"a": 1}) == "ok"
        assert fake_http["calls"][0][2]["data"] == {"a": "1"}

    def test_connection_error(self, fake_http):
        fake_http["response"] = requests.ConnectionError("refused")

        with pytest.raises(TransportError) as info:
            http_get("http://example.com")
        assert "refused" in info.value.reason

    def test_error_status(self, fake_http):
        fake_http["response"] = fake_http["make"]("", status_code=500)

        with pytest.raises(TransportError):
            http_post("http://example.com")
