"""Firestore client (REST-based, no firebase-admin).

Initialized on demand from SEARCHMODEL_FIREBASE_SERVICE_ACCOUNT_KEY (JSON
string) or SEARCHMODEL_FIREBASE_SERVICE_ACCOUNT_PATH (file path).
"""

import json
from pathlib import Path

from searchmodel.core.config import get_settings
from searchmodel.domain.exceptions import BackendNotConfiguredException
from searchmodel.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)
from searchmodel.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_firestore_client: FirestoreRESTClient | None = None


def _load_key_dict() -> dict | None:
    """Return service account dict from env key or file path."""
    settings = get_settings()
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def init_firestore() -> bool:
    """Initialize the shared Firestore client. Idempotent.

    Safe to call when no service account is configured (no-op). On invalid
    credentials, logs the exception and returns False.

    Returns:
        True if Firestore is initialized, False if not configured or on error.
    """
    global _firestore_client
    if _firestore_client is not None:
        return True
    try:
        key_dict = _load_key_dict()
        if not key_dict:
            return False

        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return False

        cred = _get_credentials(key_dict)
        _firestore_client = FirestoreRESTClient(project_id, cred)
        logger.info("Firestore client initialized for project %s", project_id)
        return True
    except Exception:
        logger.exception("Firestore initialization failed")
        return False


def get_firestore_client() -> FirestoreRESTClient:
    """Return the shared Firestore client, initializing it on first use."""
    if _firestore_client is None and not init_firestore():
        raise BackendNotConfiguredException("document")
    assert _firestore_client is not None
    return _firestore_client


async def close_firestore() -> None:
    """Close the Firestore client's HTTP connection pool. Call from app shutdown."""
    global _firestore_client
    if _firestore_client is not None:
        await _firestore_client.aclose()
        _firestore_client = None
        logger.info("Firestore HTTP client closed")
