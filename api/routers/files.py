# File: api/routers/files.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from api.dependencies.database import get_store
from api.errors import INTERNAL_ERROR, to_http_exception
from clients.blob_store import BlobStore
from services.errors import RecordServiceError
from services.file_service import get_file

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/files/{key:path}")
def download_file(key: str, store: BlobStore = Depends(get_store)):
    try:
        obj = get_file(store, key)
    except RecordServiceError as e:
        raise to_http_exception(e, f"download_file {key}")
    except Exception:
        logger.error(f"Error downloading file {key}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    headers = dict(obj.headers)
    if obj.etag:
        headers["etag"] = obj.etag
    if obj.size is not None:
        headers["content-length"] = str(obj.size)

    return StreamingResponse(obj.body, media_type=obj.content_type, headers=headers)
