"""Photo API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from planera.core.deps import ActiveUser
from planera.domains.trip.images import GALLERY_SIZE, ImageService
from planera.domains.trip.schemas import Photo

router = APIRouter(prefix="/images", tags=["Images"])


def get_image_service() -> ImageService:
    """Dependency for getting ImageService."""
    return ImageService()


ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]
Text = Annotated[str, Query(min_length=1, max_length=200)]


def _photo(image: dict | None) -> Photo | None:
    return Photo.model_validate(image) if image is not None else None


@router.get(
    "/destination",
    response_model=Photo | None,
    response_model_by_alias=True,
    summary="Destination photo",
)
async def destination_image(destination: Text, user: ActiveUser, service: ImageServiceDep) -> Photo | None:
    """Top landscape photo for a destination; null when none is available."""
    return _photo(await service.destination_image(destination))


@router.get(
    "/destination/gallery",
    response_model=list[Photo],
    response_model_by_alias=True,
    summary="Destination photo gallery",
)
async def destination_gallery(
    destination: Text,
    user: ActiveUser,
    service: ImageServiceDep,
    count: Annotated[int, Query(ge=1, le=20)] = GALLERY_SIZE,
) -> list[Photo]:
    return [Photo.model_validate(i) for i in await service.destination_gallery(destination, count)]


@router.get(
    "/activity",
    response_model=Photo | None,
    response_model_by_alias=True,
    summary="Activity photo",
)
async def activity_image(
    activity: Text,
    destination: Text,
    user: ActiveUser,
    service: ImageServiceDep,
) -> Photo | None:
    return _photo(await service.activity_image(activity, destination))


@router.get(
    "/restaurant",
    response_model=Photo | None,
    response_model_by_alias=True,
    summary="Restaurant photo",
)
async def restaurant_image(
    cuisine: Text,
    destination: Text,
    user: ActiveUser,
    service: ImageServiceDep,
) -> Photo | None:
    return _photo(await service.restaurant_image(cuisine, destination))
