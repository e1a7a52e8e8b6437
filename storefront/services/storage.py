import logging
from typing import Optional

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.models import ImageOrm
from storefront.utils.date_utils import ServerDateTime

logger = logging.getLogger(__name__)


class ImageRejectedError(Exception):
    """The upload is not something we store (wrong type, too large, empty)."""
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def image_url(image_id: str) -> str:
    return f"/api/images/{image_id}"


def upload_file(db: Session, data: bytes, filename: Optional[str], content_type: Optional[str]) -> ImageOrm:
    """
    Validate and persist an uploaded image in the database.
    Uploads live in the datastore so they survive on hosts without a persistent filesystem.
    """
    content_type = content_type or "application/octet-stream"
    if not content_type.startswith("image/"):
        raise ImageRejectedError("Only image uploads are supported")
    size = len(data)
    if size == 0:
        raise ImageRejectedError("Uploaded file is empty")
    if size > settings.MAX_UPLOAD_BYTES:
        raise ImageRejectedError(
            f"File too large; maximum size is {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB",
            status_code=413,
        )

    image = ImageOrm(
        filename=filename or f"upload-{int(ServerDateTime.now().timestamp() * 1000)}",
        content_type=content_type,
        size=size,
        data=data,
    )
    db.add(image)
    db.commit()
    db.refresh(image)
    logger.info("Stored image %s (%s, %d bytes)", image.id, content_type, size)
    return image


def get_image(db: Session, image_id: str) -> Optional[ImageOrm]:
    return db.query(ImageOrm).filter(ImageOrm.id == image_id).one_or_none()
