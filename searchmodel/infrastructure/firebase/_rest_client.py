"""Thin Firestore REST API client for reading documents (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Only the read path the document fetcher needs is implemented.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx

from searchmodel.infrastructure.firebase._rest_encoding import decode_fields

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    if not credentials.valid:
        from google.auth.transport.requests import Request

        credentials.refresh(Request())
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method == "GET":
        resp = await client.get(url, headers=headers)
    elif method == "POST":
        resp = await client.post(url, headers=headers, json=body)
    else:
        raise ValueError(f"Unsupported method: {method!r}")
    if resp.status_code == 404:
        return None
    if resp.status_code != 200:
        resp.raise_for_status()
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


def _doc_id(name: str) -> str:
    return name.rsplit("/", 1)[-1] if name else ""


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data

    def __repr__(self) -> str:
        return f"DocumentSnapshot(id={self.id!r})"


class FirestoreRESTClient:
    """Lightweight Firestore read client using the REST API."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        database: str = "(default)",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._database_path = f"projects/{project_id}/databases/{database}"
        self._prefix = f"{self._database_path}/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def document_name(self, collection_id: str, document_id: str) -> str:
        """Full resource name of a document."""
        return f"{self._prefix}/{collection_id.strip('/')}/{document_id}"

    async def get_document(
        self, collection_id: str, document_id: str
    ) -> DocumentSnapshot | None:
        """Fetch one document; returns None if not found."""
        url = f"{_BASE}/{self.document_name(collection_id, document_id)}"
        out = await _request_async(self._http, url, access_token=await self.get_token())
        if not out:
            return None
        return DocumentSnapshot(document_id, decode_fields(out.get("fields")))

    async def batch_get(
        self, collection_id: str, document_ids: Sequence[str]
    ) -> AsyncIterator[DocumentSnapshot]:
        """Fetch many documents in one documents:batchGet call; missing ones are skipped."""
        if not document_ids:
            return
        url = f"{_BASE}/{self._database_path}/documents:batchGet"
        body = {
            "documents": [self.document_name(collection_id, d) for d in document_ids]
        }
        resp = await _request_async(
            self._http,
            url,
            method="POST",
            body=body,
            access_token=await self.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            found = item.get("found")
            if not found:
                continue
            yield DocumentSnapshot(
                _doc_id(found.get("name", "")), decode_fields(found.get("fields"))
            )
