import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy.orm import Session

from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm
from storefront.dependencies.auth import get_current_admin
from storefront.models.schemas import ImageUploadResponseSchema
from storefront.services.storage import ImageRejectedError, get_image, image_url, upload_file

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Uploads"])


@router.post("/upload", response_model=ImageUploadResponseSchema, summary="Upload an image")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    if file is None:
        raise HTTPException(400, "Missing form field: file")

    file_bytes = await file.read()
    try:
        image = await run_in_threadpool(upload_file, db, file_bytes, file.filename, file.content_type)
    except ImageRejectedError as e:
        logger.info(f"Upload '{file.filename}' rejected: {e.message}")
        raise HTTPException(e.status_code, e.message)

    return ImageUploadResponseSchema(id=image.id, url=image_url(image.id))


@router.get("/images/{image_id}", summary="Serve a stored image")
def serve_image(image_id: str, db: Session = Depends(get_db)):
    image = get_image(db, image_id)
    if not image:
        raise HTTPException(404, "Image not found")
    return Response(
        content=image.data,
        media_type=image.content_type,
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
