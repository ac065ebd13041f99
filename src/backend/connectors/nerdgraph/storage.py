from __future__ import annotations

from typing import Any

from .client import nerdgraph_query
from .config import NerdGraphConfig

DOCUMENT_QUERY = """
query($accountId: Int!, $collection: String!, $documentId: String!) {
  actor {
    account(id: $accountId) {
      nerdStorage {
        document(collection: $collection, documentId: $documentId)
      }
    }
  }
}
"""

WRITE_DOCUMENT_MUTATION = """
mutation($accountId: String!, $collection: String!, $documentId: String!, $document: NerdStorageDocument!) {
  nerdStorageWriteDocument(
    scope: { name: ACCOUNT, id: $accountId }
    collection: $collection
    documentId: $documentId
    document: $document
  )
}
"""


def read_account_document(
    config: NerdGraphConfig,
    account_id: int | str,
    *,
    collection: str,
    document_id: str,
) -> dict[str, Any] | None:
    """
    Read a whole account-scoped NerdStorage document; None when it does not exist.
    """
    data = nerdgraph_query(
        config,
        DOCUMENT_QUERY,
        variables={
            "accountId": int(account_id),
            "collection": collection,
            "documentId": document_id,
        },
    )
    account = (data.get("actor") or {}).get("account") or {}
    document = (account.get("nerdStorage") or {}).get("document")
    return document if isinstance(document, dict) else None


def write_account_document(
    config: NerdGraphConfig,
    account_id: int | str,
    *,
    collection: str,
    document_id: str,
    document: dict[str, Any],
) -> None:
    """
    Replace a whole account-scoped NerdStorage document (last writer wins).
    """
    nerdgraph_query(
        config,
        WRITE_DOCUMENT_MUTATION,
        variables={
            "accountId": str(account_id),
            "collection": collection,
            "documentId": document_id,
            "document": document,
        },
    )
