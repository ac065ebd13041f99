import io
import json
from unittest.mock import Mock, patch
from urllib.error import HTTPError

import pytest

from connectors.nerdgraph.client import NerdGraphHttpError, NerdGraphQueryError, nerdgraph_query
from connectors.nerdgraph.config import NerdGraphConfig


def _config() -> NerdGraphConfig:
    return NerdGraphConfig(region="us", endpoint="https://api.newrelic.com/graphql", api_key="NRAK-test")


def _response(payload: dict) -> Mock:
    response = Mock()
    response.read.return_value = json.dumps(payload).encode("utf-8")
    response.__enter__ = Mock(return_value=response)
    response.__exit__ = Mock(return_value=False)
    return response


def test_query_posts_json_with_api_key():
    captured = {}

    def _fake_urlopen(req, timeout=30):
        captured["url"] = req.full_url
        captured["method"] = req.get_method()
        captured["key"] = req.get_header("Api-key")
        captured["body"] = json.loads(req.data.decode("utf-8"))
        return _response({"data": {"actor": {"accounts": []}}})

    with patch("connectors.nerdgraph.client.urlopen", _fake_urlopen):
        out = nerdgraph_query(_config(), "{ actor { accounts { id } } }", variables={"x": 1})

    assert out == {"actor": {"accounts": []}}
    assert captured["url"] == "https://api.newrelic.com/graphql"
    assert captured["method"] == "POST"
    assert captured["key"] == "NRAK-test"
    assert captured["body"]["variables"] == {"x": 1}


def test_graphql_errors_without_data_raise():
    with patch(
        "connectors.nerdgraph.client.urlopen",
        return_value=_response({"errors": [{"message": "Not authorized"}]}),
    ):
        with pytest.raises(NerdGraphQueryError) as excinfo:
            nerdgraph_query(_config(), "{ actor { user { id } } }")
    assert "Not authorized" in str(excinfo.value)


def test_partial_data_with_errors_is_returned():
    payload = {"data": {"actor": {"account": None}}, "errors": [{"message": "script missing"}]}
    with patch("connectors.nerdgraph.client.urlopen", return_value=_response(payload)):
        out = nerdgraph_query(_config(), "{ actor { account(id: 1) { id } } }")
    assert out == {"actor": {"account": None}}


def test_retries_transient_http_errors():
    calls = {"n": 0}

    def _flaky(req, timeout=30):
        calls["n"] += 1
        if calls["n"] == 1:
            raise HTTPError(req.full_url, 503, "Service Unavailable", {}, io.BytesIO(b""))
        return _response({"data": {"ok": True}})

    with patch("connectors.nerdgraph.client.urlopen", _flaky), patch("connectors.nerdgraph.client.time.sleep"):
        out = nerdgraph_query(_config(), "{ ok }")

    assert out == {"ok": True}
    assert calls["n"] == 2


def test_non_retryable_http_error_raises():
    def _forbidden(req, timeout=30):
        raise HTTPError(req.full_url, 403, "Forbidden", {}, io.BytesIO(b'{"error": "bad key"}'))

    with patch("connectors.nerdgraph.client.urlopen", _forbidden):
        with pytest.raises(NerdGraphHttpError) as excinfo:
            nerdgraph_query(_config(), "{ ok }")
    assert excinfo.value.status == 403
    assert "bad key" in (excinfo.value.body or "")
