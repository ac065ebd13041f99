from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from connectors.nerdgraph.config import NerdGraphConfig, get_nerdgraph_config
from connectors.nerdgraph.storage import read_account_document, write_account_document

COLLECTION_ID = "synthetics_migration_v1"
DOCUMENT_ID = "analysis_results"


class DocumentStore(Protocol):
    def read_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        ...

    def write_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
        document: dict[str, Any],
    ) -> None:
        ...


@dataclass(frozen=True)
class LocalDocumentStore:
    root_dir: Path

    def _path(self, account_id: int, collection: str, document_id: str) -> Path:
        return self.root_dir / str(account_id) / collection / f"{document_id}.json"

    def read_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        path = self._path(account_id, collection, document_id)
        if not path.exists():
            return None
        raw = json.loads(path.read_text(encoding="utf-8"))
        return raw if isinstance(raw, dict) else None

    def write_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
        document: dict[str, Any],
    ) -> None:
        path = self._path(account_id, collection, document_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")


class NerdStorageDocumentStore:
    """Account-scoped NerdStorage, the store the dashboard widget itself reads."""

    def __init__(self, *, config: NerdGraphConfig | None = None) -> None:
        self._config = config or get_nerdgraph_config()

    def read_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        return read_account_document(
            self._config,
            account_id,
            collection=collection,
            document_id=document_id,
        )

    def write_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
        document: dict[str, Any],
    ) -> None:
        write_account_document(
            self._config,
            account_id,
            collection=collection,
            document_id=document_id,
            document=document,
        )


class BlobDocumentStore:
    def __init__(
        self,
        *,
        container_name: str = "migration-results",
        account_url: str | None = None,
    ) -> None:
        try:
            from azure.identity import DefaultAzureCredential
            from azure.storage.blob import BlobServiceClient
        except ImportError as exc:
            raise RuntimeError(
                "azure-storage-blob is not installed; cannot enable blob result documents."
            ) from exc

        account_url = account_url or os.getenv("AZURE_STORAGE_ACCOUNT_URL", "").strip()
        if not account_url:
            account_name = os.getenv("AZURE_STORAGE_ACCOUNT_NAME", "").strip()
            if not account_name:
                raise RuntimeError(
                    "AZURE_STORAGE_ACCOUNT_URL or AZURE_STORAGE_ACCOUNT_NAME is required for blob result documents."
                )
            account_url = f"https://{account_name}.blob.core.windows.net"

        credential = DefaultAzureCredential()
        self._client = BlobServiceClient(account_url=account_url, credential=credential)
        self._container = container_name

    def read_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        from azure.core.exceptions import ResourceNotFoundError

        container = self._client.get_container_client(self._container)
        try:
            raw = container.download_blob(f"{account_id}/{collection}/{document_id}.json").readall()
        except ResourceNotFoundError:
            return None
        parsed = json.loads(raw)
        return parsed if isinstance(parsed, dict) else None

    def write_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
        document: dict[str, Any],
    ) -> None:
        key = f"{account_id}/{collection}/{document_id}.json"
        container = self._client.get_container_client(self._container)
        container.upload_blob(
            key,
            json.dumps(document, indent=2),
            overwrite=True,
        )


@dataclass(frozen=True)
class MultiDocumentStore:
    """Writes fan out to every store; reads come from the first store that has the document."""

    stores: tuple[DocumentStore, ...]

    def read_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        for store in self.stores:
            document = store.read_document(
                account_id=account_id,
                collection=collection,
                document_id=document_id,
            )
            if document is not None:
                return document
        return None

    def write_document(
        self,
        *,
        account_id: int,
        collection: str,
        document_id: str,
        document: dict[str, Any],
    ) -> None:
        for store in self.stores:
            store.write_document(
                account_id=account_id,
                collection=collection,
                document_id=document_id,
                document=document,
            )


def default_local_document_store() -> LocalDocumentStore:
    override = os.getenv("MIGRATION_SNAPSHOT_DIR", "").strip()
    if override:
        return LocalDocumentStore(root_dir=Path(override).expanduser())
    root = Path(__file__).resolve().parents[3] / "data" / "snapshots"
    return LocalDocumentStore(root_dir=root)


def default_document_store(data_source: str) -> DocumentStore:
    """NerdStorage (plus optional blob copy) for live runs; local JSON for fixtures."""
    if (data_source or "").strip().lower() != "live":
        return default_local_document_store()
    stores: list[DocumentStore] = [NerdStorageDocumentStore()]
    if os.getenv("MIGRATION_BLOB_SNAPSHOTS", "").strip().lower() in ("1", "true", "yes"):
        stores.append(BlobDocumentStore())
    if len(stores) == 1:
        return stores[0]
    return MultiDocumentStore(stores=tuple(stores))
