from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PexelsPhotoSrc(BaseModel):
    original: Optional[str] = None
    large: Optional[str] = None
    medium: Optional[str] = None
    small: Optional[str] = None


class PexelsPhoto(BaseModel):
    id: int
    width: Optional[int] = None
    height: Optional[int] = None
    url: Optional[str] = None
    photographer: Optional[str] = None
    alt: Optional[str] = None
    src: PexelsPhotoSrc


class ImageSearchOut(BaseModel):
    total_results: int = 0
    page: int = 1
    per_page: int = 0
    photos: List[Dict[str, Any]] = Field(default_factory=list)


class ImageAssign(BaseModel):
    definition_id: int
    photo: PexelsPhoto


class ImageMetadataUpdate(BaseModel):
    description: Optional[str] = None


class ImageOut(BaseModel):
    id: int
    url: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ImageStats(BaseModel):
    total_images: int
    definitions_with_images: int
    definitions_without_images: int
    recently_created: int
