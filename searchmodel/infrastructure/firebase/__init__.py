"""Document backend: Firestore over its REST API."""

from searchmodel.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
)
from searchmodel.infrastructure.firebase.client import (
    close_firestore,
    get_firestore_client,
    init_firestore,
)
from searchmodel.infrastructure.firebase.fetcher import FirestoreRecordFetcher

__all__ = [
    "DocumentSnapshot",
    "FirestoreRESTClient",
    "FirestoreRecordFetcher",
    "close_firestore",
    "get_firestore_client",
    "init_firestore",
]
