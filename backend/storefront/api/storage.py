"""
Blob storage API endpoints
"""
import logging
import uuid
from pathlib import PurePosixPath

from fastapi import APIRouter, Depends, File, Request, UploadFile
from pydantic import BaseModel

from storefront.core.auth import TokenUser, get_current_user
from storefront.core.errors import BadRequestError, StorageError
from storefront.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


class StoredFile(BaseModel):
    key: str
    url: str


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


@router.post("/upload", response_model=StoredFile)
def upload_file(
    file: UploadFile = File(...),
    user: TokenUser = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service),
):
    """Upload a file under uploads/<user id>/ and return a signed URL"""
    name = PurePosixPath(file.filename or "").name
    if not name:
        raise BadRequestError("File name is required")

    data = file.file.read()
    key = f"uploads/{user.id}/{uuid.uuid4().hex}-{name}"

    url = storage.upload(key, data, file.content_type or "application/octet-stream")
    if url is None:
        raise StorageError("Blob storage is not configured")

    logger.info(f"User {user.id} uploaded {key}")
    return StoredFile(key=key, url=url)


@router.get("/url/{key:path}", response_model=StoredFile)
def get_signed_url(
    key: str,
    _: TokenUser = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service),
):
    return StoredFile(key=key, url=storage.get_url(key))
