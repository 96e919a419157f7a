"""Menu image endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.api.v1.errors import DOMAIN_ERRORS, to_http_exception
from app.db.session import get_db
from app.models import MenuImage
from app.schemas.auth import OkResponse
from app.schemas.menu_image import MenuImageRead
from app.services import menu_image_service

router: APIRouter = APIRouter()
admin_router: APIRouter = APIRouter()


@router.get("/menu-images", response_model=list[MenuImageRead])
def latest_menu_images(db: Session = Depends(get_db)) -> list[MenuImage]:
    return menu_image_service.list_menu_images(db, limit=menu_image_service.PUBLIC_IMAGE_LIMIT)


@admin_router.get("/menu-images", response_model=list[MenuImageRead])
def all_menu_images(db: Session = Depends(get_db)) -> list[MenuImage]:
    return menu_image_service.list_menu_images(db)


@admin_router.post("/menu-images", response_model=MenuImageRead)
async def upload_menu_image(image: UploadFile | None = File(default=None), db: Session = Depends(get_db)) -> MenuImage:
    if image is None:
        raise HTTPException(status_code=400, detail={"error": "FILE_REQUIRED", "message": "image file is required"})
    content = await image.read()
    try:
        return menu_image_service.save_menu_image(db, image.filename, content)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@admin_router.delete("/menu-images/{image_id}", response_model=OkResponse)
def delete_menu_image(image_id: int, db: Session = Depends(get_db)) -> OkResponse:
    menu_image_service.delete_menu_image(db, image_id)
    return OkResponse()
