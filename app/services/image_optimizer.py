"""
Image Optimization Service
Validate uploaded pictures, cap their size and strip metadata
"""

from io import BytesIO
from typing import Tuple

from fastapi import HTTPException, status
from PIL import Image, UnidentifiedImageError


class ImageOptimizer:
    """Resize to a maximum dimension and re-encode without EXIF"""

    MAX_DIMENSION = 2048  # Max width or height

    @staticmethod
    def optimize(image_bytes: bytes) -> Tuple[bytes, str, str]:
        """
        Re-encode an uploaded image

        Animated GIFs are kept as they are. Transparent images become PNG,
        everything else becomes JPEG.

        Returns:
            Tuple of (optimized_bytes, content_type, file_extension)

        Raises:
            HTTPException: 400 when the bytes are not a readable image
        """
        try:
            img = Image.open(BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, OSError):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is not a valid image"
            )

        if img.format == "GIF" and getattr(img, "is_animated", False):
            return image_bytes, "image/gif", ".gif"

        has_transparency = img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info)

        # Resize if larger than max dimension (maintain aspect ratio)
        img.thumbnail((ImageOptimizer.MAX_DIMENSION, ImageOptimizer.MAX_DIMENSION), Image.Resampling.LANCZOS)

        output = BytesIO()
        if has_transparency:
            img.convert("RGBA").save(output, format="PNG", optimize=True)
            return output.getvalue(), "image/png", ".png"

        img.convert("RGB").save(output, format="JPEG", quality=90, optimize=True)
        return output.getvalue(), "image/jpeg", ".jpg"

    @staticmethod
    def get_size_reduction(original_size: int, optimized_size: int) -> str:
        """Get human-readable size reduction"""
        if original_size == 0:
            return "0%"
        reduction = ((original_size - optimized_size) / original_size) * 100
        if reduction > 0:
            return f"-{reduction:.1f}%"
        elif reduction < 0:
            return f"+{abs(reduction):.1f}%"
        return "0%"


# Singleton
image_optimizer = ImageOptimizer()
