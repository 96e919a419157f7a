"""Menu image storage on the local upload directory."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import MenuImage
from app.services.errors import ValidationError
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

PUBLIC_IMAGE_LIMIT = 5
UPLOAD_URL_PREFIX = "/uploads/"


def upload_dir() -> Path:
    path = Path(settings.upload_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_menu_image(db: Session, filename: str | None, content: bytes) -> MenuImage:
    """Store an uploaded image under a random name and record its public URL."""
    if not content:
        raise ValidationError("Image file is required", code="FILE_REQUIRED")
    suffix = Path(filename or "").suffix.lower()
    stored_name = f"{uuid.uuid4()}{suffix}"
    (upload_dir() / stored_name).write_bytes(content)

    image = MenuImage(url=f"{UPLOAD_URL_PREFIX}{stored_name}", uploaded_at=utc_now())
    db.add(image)
    db.commit()
    db.refresh(image)
    logger.info("[MENU_IMAGES] Stored %s", image.url)
    return image


def list_menu_images(db: Session, limit: int | None = None) -> list[MenuImage]:
    statement = select(MenuImage).order_by(MenuImage.uploaded_at.desc(), MenuImage.id.desc())
    if limit is not None:
        statement = statement.limit(limit)
    return list(db.scalars(statement).all())


def delete_menu_image(db: Session, image_id: int) -> bool:
    """Remove the record and its file; a missing id is not an error."""
    image = db.get(MenuImage, image_id)
    if image is None:
        return False
    file_path = upload_dir() / Path(image.url).name
    file_path.unlink(missing_ok=True)
    db.delete(image)
    db.commit()
    return True
