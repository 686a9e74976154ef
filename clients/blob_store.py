# clients/blob_store.py
import json
import hashlib
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, Optional
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class StoredObject:
    key: str
    body: Iterator[bytes]
    content_type: str = "application/octet-stream"
    etag: Optional[str] = None
    size: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)


class BlobStore:
    """Minimal object store interface: put, get and delete by key."""

    def put(self, key: str, stream: BinaryIO, content_type: str, filename: str) -> int:
        """Stores the stream under key and returns the number of bytes written."""
        raise NotImplementedError

    def get(self, key: str) -> Optional[StoredObject]:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


def _content_disposition(filename: str) -> str:
    # Header values must be latin-1; non-ASCII names go in filename* (RFC 6266)
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "").strip() or "download.pdf"
    if ascii_name.startswith("."):
        ascii_name = "download" + ascii_name
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{ascii_name}"'
    return f"attachment; filename=\"{ascii_name}\"; filename*=utf-8''{quoted}"


class LocalBlobStore(BlobStore):
    """
    Keeps blobs as plain files under root, with a JSON sidecar holding the
    HTTP metadata (content type, disposition, etag).
    """

    META_SUFFIX = ".meta.json"

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if key.endswith(self.META_SUFFIX):
            # Sidecars are internal and never addressable as blobs
            raise ValueError(f"Invalid blob key: {key}")
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Invalid blob key: {key}")
        return path

    def put(self, key: str, stream: BinaryIO, content_type: str, filename: str) -> int:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        digest = hashlib.md5()
        size = 0
        with open(path, "wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                digest.update(chunk)
                size += len(chunk)
                out.write(chunk)

        meta = {
            "content_type": content_type,
            "content_disposition": _content_disposition(filename),
            "etag": f'"{digest.hexdigest()}"',
        }
        Path(str(path) + self.META_SUFFIX).write_text(json.dumps(meta), encoding="utf-8")
        return size

    def get(self, key: str) -> Optional[StoredObject]:
        try:
            path = self._path(key)
        except ValueError:
            return None
        if not path.is_file():
            return None

        meta_path = Path(str(path) + self.META_SUFFIX)
        meta = json.loads(meta_path.read_text(encoding="utf-8")) if meta_path.exists() else {}

        def _iter():
            with open(path, "rb") as f:
                while True:
                    chunk = f.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk

        headers = {}
        if meta.get("content_disposition"):
            headers["content-disposition"] = meta["content_disposition"]

        return StoredObject(
            key=key,
            body=_iter(),
            content_type=meta.get("content_type") or "application/octet-stream",
            etag=meta.get("etag"),
            size=path.stat().st_size,
            headers=headers,
        )

    def delete(self, key: str) -> None:
        try:
            path = self._path(key)
        except ValueError:
            return
        if path.exists():
            path.unlink()
        meta_path = Path(str(path) + self.META_SUFFIX)
        if meta_path.exists():
            meta_path.unlink()


class S3BlobStore(BlobStore):
    """Blob store backed by an S3 (or S3-compatible) bucket."""

    def __init__(self, bucket: str, endpoint_url: Optional[str] = None, region: Optional[str] = None):
        self.bucket = bucket
        self.s3 = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region,
            config=Config(retries={"max_attempts": 1}),
        )

    def put(self, key: str, stream: BinaryIO, content_type: str, filename: str) -> int:
        # upload_fileobj streams in parts, so the file is never held in memory
        counter = _CountingReader(stream)
        self.s3.upload_fileobj(
            counter,
            self.bucket,
            key,
            ExtraArgs={
                "ContentType": content_type,
                "ContentDisposition": _content_disposition(filename),
            },
        )
        return counter.count

    def get(self, key: str) -> Optional[StoredObject]:
        try:
            response = self.s3.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404", "NotFound"):
                return None
            raise

        headers = {}
        if response.get("ContentDisposition"):
            headers["content-disposition"] = response["ContentDisposition"]

        return StoredObject(
            key=key,
            body=response["Body"].iter_chunks(CHUNK_SIZE),
            content_type=response.get("ContentType") or "application/octet-stream",
            etag=response.get("ETag"),
            size=response.get("ContentLength"),
            headers=headers,
        )

    def delete(self, key: str) -> None:
        self.s3.delete_object(Bucket=self.bucket, Key=key)


class _CountingReader:
    """File-like wrapper that tallies bytes read through it."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.count = 0

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self.count += len(data)
        return data


_store: Optional[BlobStore] = None


def build_blob_store() -> BlobStore:
    backend = os.getenv("BLOB_BACKEND", "local").lower()
    if backend == "s3":
        bucket = os.getenv("S3_BUCKET")
        if not bucket:
            raise ValueError("S3_BUCKET must be set when BLOB_BACKEND=s3")
        logger.info(f"Using S3 blob store (bucket={bucket})")
        return S3BlobStore(
            bucket,
            endpoint_url=os.getenv("S3_ENDPOINT_URL") or None,
            region=os.getenv("AWS_REGION") or None,
        )
    if backend != "local":
        raise ValueError(f"Unknown BLOB_BACKEND: {backend}")

    root = Path(os.getenv("BLOB_LOCAL_DIR", "./data/blobs"))
    logger.info(f"Using local blob store at {root}")
    return LocalBlobStore(root)


def get_blob_store() -> BlobStore:
    global _store
    if _store is None:
        _store = build_blob_store()
    return _store
