"""Upload endpoint: accept one image (multipart field `image`) and store it."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.v1.auth import get_current_user
from app.core.config import Settings, get_settings
from app.core.errors import UploadError
from app.schemas.auth import CurrentUser
from app.schemas.upload import UploadResponse
from app.services.storage import upload_image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UploadResponse)
async def upload(
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    image: Annotated[UploadFile | None, File()] = None,
) -> UploadResponse:
    """
    Store an image and return its durable URL.

    Send `Content-Type: multipart/form-data` with the file in a field named
    `image`. Only the configured image formats are accepted.
    """
    if image is None:
        raise UploadError("No file uploaded")
    # Read one byte past the limit so oversize files are rejected without buffering them whole.
    data = await image.read(settings.UPLOAD_MAX_BYTES + 1)
    url = await upload_image(data, image.filename, settings)
    logger.info("User id=%s uploaded %s", user.id, image.filename)
    return UploadResponse(url=url)
