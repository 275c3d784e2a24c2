# dictionary_backend/app/api/images.py
import logging
from typing import List

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.schemas.image import (
    ImageAssign,
    ImageMetadataUpdate,
    ImageOut,
    ImageSearchOut,
    ImageStats,
)
from dictionary_backend.app.services.image_service import ImageNotFound, ImageService
from dictionary_backend.app.services.pexels_client import (
    ORIENTATIONS,
    SIZES,
    PexelsConfigError,
    invalidate_search_cache,
    search_photos_or_empty,
)
from dictionary_backend.app.utils.http_client import get_http_client
from learning_backend.routes.auth_utils import get_current_admin_user, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

# 代理出去的图片让浏览器 / CDN 缓存一年
IMAGE_CACHE_CONTROL = "public, max-age=31536000, immutable"


def get_image_service(db: Session = Depends(get_db)) -> ImageService:
    return ImageService(db)


def _not_configured():
    return HTTPException(status_code=503, detail="Image search is not configured")


@router.get("/search", response_model=ImageSearchOut)
async def search_images(
    query: str = Query(..., min_length=1),
    orientation: str = Query("landscape"),
    size: str = Query("medium"),
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=80),
    current_user=Depends(get_current_user),
):
    if orientation not in ORIENTATIONS:
        raise HTTPException(status_code=400, detail=f"orientation must be one of {', '.join(ORIENTATIONS)}")
    if size not in SIZES:
        raise HTTPException(status_code=400, detail=f"size must be one of {', '.join(SIZES)}")
    try:
        return await search_photos_or_empty(query, orientation, size, page, per_page)
    except PexelsConfigError:
        raise _not_configured()


@router.delete("/search/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_search_cache(current_user=Depends(get_current_admin_user)):
    await invalidate_search_cache()
    logger.info("Image search cache cleared by %s", current_user.email)


@router.get("/stats", response_model=ImageStats)
def image_stats(service: ImageService = Depends(get_image_service), current_user=Depends(get_current_admin_user)):
    return service.stats()


@router.post("/assign", response_model=ImageOut, status_code=status.HTTP_201_CREATED)
def assign_pexels_photo(
    payload: ImageAssign,
    service: ImageService = Depends(get_image_service),
    current_user=Depends(get_current_admin_user),
):
    try:
        image = service.create_from_pexels(payload.photo.model_dump(), payload.definition_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if image is None:
        raise HTTPException(status_code=404, detail="Definition not found")
    return image


@router.post("/definitions/{definition_id}/generate", response_model=ImageOut)
async def generate_definition_image(
    definition_id: int,
    service: ImageService = Depends(get_image_service),
    current_user=Depends(get_current_admin_user),
):
    try:
        image = await service.get_or_create_definition_image(definition_id)
    except ImageNotFound:
        raise HTTPException(status_code=404, detail="Definition not found")
    except PexelsConfigError:
        raise _not_configured()
    if image is None:
        raise HTTPException(status_code=404, detail="No image found for this definition")
    return image


@router.get("/definitions/{definition_id}", response_model=List[ImageOut])
def images_for_definition(
    definition_id: int,
    service: ImageService = Depends(get_image_service),
    current_user=Depends(get_current_user),
):
    try:
        return service.get_images_by_definition(definition_id)
    except ImageNotFound:
        raise HTTPException(status_code=404, detail="Definition not found")


@router.put("/definitions/{definition_id}/image/{image_id}")
def assign_existing_image(
    definition_id: int,
    image_id: int,
    service: ImageService = Depends(get_image_service),
    current_user=Depends(get_current_admin_user),
):
    try:
        definition = service.assign(definition_id, image_id)
    except ImageNotFound:
        raise HTTPException(status_code=404, detail="Definition or image not found")
    return {"definition_id": definition.id, "image_id": definition.image_id}


@router.delete("/words/{word_id}")
def delete_word_images(
    word_id: int,
    service: ImageService = Depends(get_image_service),
    current_user=Depends(get_current_admin_user),
):
    return {"deleted": service.delete_word_images(word_id)}


@router.patch("/{image_id}", response_model=ImageOut)
def update_image_metadata(
    image_id: int,
    payload: ImageMetadataUpdate,
    service: ImageService = Depends(get_image_service),
    current_user=Depends(get_current_admin_user),
):
    try:
        return service.update_metadata(image_id, payload.description)
    except ImageNotFound:
        raise HTTPException(status_code=404, detail="Image not found")


@router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_image(
    image_id: int,
    service: ImageService = Depends(get_image_service),
    current_user=Depends(get_current_admin_user),
):
    try:
        service.delete_image(image_id)
    except ImageNotFound:
        raise HTTPException(status_code=404, detail="Image not found")
    return None


@router.get("/{image_id}")
async def proxy_image(image_id: int, service: ImageService = Depends(get_image_service)):
    """把存下来的图片 url 代理成本站地址，并带上长缓存头"""
    try:
        image = service.get_image(image_id)
    except ImageNotFound:
        raise HTTPException(status_code=404, detail="Image not found")

    try:
        async with get_http_client(follow_redirects=True) as client:
            upstream = await client.get(image.url)
            upstream.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Image proxy failed for %s (%s): %s", image_id, image.url, e)
        raise HTTPException(status_code=502, detail="Failed to fetch image")

    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("content-type", "image/jpeg"),
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )
