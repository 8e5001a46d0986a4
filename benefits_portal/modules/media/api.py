from fastapi import APIRouter, Depends
import logging

from benefits_portal.core.config import settings
from benefits_portal.core.dependencies import get_current_user
from benefits_portal.core.exceptions import ValidationError
from benefits_portal.models.user_model import Users
from benefits_portal.schemas import website_schema
from benefits_portal.utils import image_utils

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Media"],
)


@router.post("/resize-image", response_model=website_schema.ImageResizeResponse)
async def resize_image(
    request: website_schema.ImageResizeRequest,
    current_user: Users = Depends(get_current_user),
):
    """Shrinks a base64 image (data URL or bare) to a JPEG that fits the given box."""
    if image_utils.is_image_too_large(request.image, settings.MAX_IMAGE_SIZE_KB):
        raise ValidationError(f"Image exceeds the maximum size of {settings.MAX_IMAGE_SIZE_KB} KB")

    original_size_kb = image_utils.get_base64_image_size_kb(request.image)
    resized = image_utils.resize_image_from_base64(
        request.image,
        max_width=request.max_width,
        max_height=request.max_height,
        quality=request.quality,
    )
    resized_size_kb = image_utils.get_base64_image_size_kb(resized)
    logger.info(f"Resized image from {original_size_kb} KB to {resized_size_kb} KB")
    return website_schema.ImageResizeResponse(
        image=resized,
        original_size_kb=original_size_kb,
        resized_size_kb=resized_size_kb,
    )
