import logging

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from products_manager.models.media import Media
from products_manager.models.user import get_db
from products_manager.schemas.media import MediaOut
from products_manager.utils.errors import BadRequest, NotFound, RestError
from products_manager.utils.security import require_edit_capability
from products_manager.utils.storage import delete_media_file, is_image_upload, save_upload_file

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_edit_capability)])


def _to_out(m: Media) -> MediaOut:
    return MediaOut(id=m.id, url=m.file_url, thumbnail_url=m.display_url)


@router.post("/media", response_model=MediaOut, status_code=201)
def upload_media(file: UploadFile = File(...), db: Session = Depends(get_db)):
    if not is_image_upload(file):
        raise BadRequest("Only image uploads are allowed.", code="rest_upload_invalid_type")
    url = save_upload_file(file, subdir="products")
    media = Media(file_url=url, thumbnail_url=url, mime_type=file.content_type)
    db.add(media)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        delete_media_file(url)
        logger.error("Failed to record upload %s: %s", url, e)
        raise RestError("Could not save the upload.", code="rest_upload_failed", status_code=500)
    db.refresh(media)
    logger.info("Stored media %s at %s", media.id, url)
    return _to_out(media)


@router.get("/media/{id}", response_model=MediaOut)
def get_media(id: int, db: Session = Depends(get_db)):
    media = db.get(Media, id)
    if not media:
        raise NotFound("Media not found.")
    return _to_out(media)
