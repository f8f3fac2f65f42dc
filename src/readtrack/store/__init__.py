# ABOUTME: Public API for the readtrack storage layer.
# ABOUTME: Exports the store protocols and the local and Firebase implementations.

from readtrack.store.connection import open_store
from readtrack.store.directory import DirectoryObjectStore
from readtrack.store.firebase_storage import FirebaseStorage
from readtrack.store.firestore import FirestoreRecordStore
from readtrack.store.http import FirebaseHttpClient, FirebaseRequestError
from readtrack.store.protocols import ObjectStore, RecordStore
from readtrack.store.sqlite import SqliteRecordStore

__all__ = [
    "DirectoryObjectStore",
    "FirebaseHttpClient",
    "FirebaseRequestError",
    "FirebaseStorage",
    "FirestoreRecordStore",
    "ObjectStore",
    "RecordStore",
    "SqliteRecordStore",
    "open_store",
]
