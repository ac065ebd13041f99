import pytest

from common.rules_engine.models import Severity
from common.rules_engine.rules.node_legacy_request import NODE_LEGACY_REQUEST


@pytest.mark.parametrize(
    "snippet",
    [
        "const request = require('request');",
        'const request = require("request");',
        "const request = require ( 'request' );",
        "const request = require(`request`);",
        "import request from 'request';",
        "import 'request';",
    ],
)
def test_request_module_detected(snippet):
    issue = NODE_LEGACY_REQUEST().evaluate(snippet)
    assert issue is not None
    assert issue.severity == Severity.CRITICAL
    assert "'request'" in issue.message


@pytest.mark.parametrize(
    "snippet",
    [
        "const got = require('got');",
        "const rp = require('request-promise');",
        "$http.get('https://example.com/request');",
    ],
)
def test_request_module_not_detected(snippet):
    assert NODE_LEGACY_REQUEST().evaluate(snippet) is None


def test_request_module_detected_inside_comment():
    # Lexical check: commented-out code still counts.
    assert NODE_LEGACY_REQUEST().matches("// const r = require('request');")
