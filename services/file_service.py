# services/file_service.py
from clients.blob_store import BlobStore, StoredObject
from services.errors import NotFoundError, StorageError


def get_file(store: BlobStore, key: str) -> StoredObject:
    try:
        obj = store.get(key)
    except Exception as e:
        raise StorageError(f"Failed to read blob {key}: {e}") from e

    if obj is None:
        raise NotFoundError("File not found")
    return obj
