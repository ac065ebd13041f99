# Import order is detection order: every verdict lists its issues in this sequence.
from .node_legacy_request import NODE_LEGACY_REQUEST
from .node_legacy_unirest import NODE_LEGACY_UNIREST
from .selenium_legacy_control_flow import SELENIUM_LEGACY_CONTROL_FLOW
from .node_legacy_bluebird import NODE_LEGACY_BLUEBIRD
from .node_crypto_md5 import NODE_CRYPTO_MD5
from .node_url_parse import NODE_URL_PARSE

__all__ = [
    "NODE_LEGACY_REQUEST",
    "NODE_LEGACY_UNIREST",
    "SELENIUM_LEGACY_CONTROL_FLOW",
    "NODE_LEGACY_BLUEBIRD",
    "NODE_CRYPTO_MD5",
    "NODE_URL_PARSE",
]
