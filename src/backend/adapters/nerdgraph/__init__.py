from .accounts import accounts_from_payload
from .monitors import NerdGraphAdapterError, monitors_from_entities
from .runtime import RuntimeInfo, runtime_info, runtime_text

__all__ = [
    "NerdGraphAdapterError",
    "RuntimeInfo",
    "accounts_from_payload",
    "monitors_from_entities",
    "runtime_info",
    "runtime_text",
]
