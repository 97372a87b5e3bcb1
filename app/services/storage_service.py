"""
Storage Service
Event images and club logos in Supabase Storage, or on local disk in development
"""

import logging
from pathlib import Path
from uuid import uuid4

import httpx
from fastapi import HTTPException, UploadFile, status

from app.config import settings
from app.services.image_optimizer import image_optimizer

logger = logging.getLogger(__name__)

LOCAL_URL_PREFIX = "/uploads"


class StorageService:
    """Upload helper with a Supabase backend and a local-disk fallback"""

    @staticmethod
    def _supabase_enabled() -> bool:
        return bool(settings.SUPABASE_URL and settings.SUPABASE_KEY)

    @staticmethod
    async def upload_bytes(path: str, content: bytes, content_type: str) -> str:
        """Store bytes under path and return their public URL"""
        if not StorageService._supabase_enabled():
            target = Path(settings.UPLOAD_DIR) / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
            return f"{LOCAL_URL_PREFIX}/{path}"

        base = settings.SUPABASE_URL.rstrip("/")
        bucket = settings.STORAGE_BUCKET
        url = f"{base}/storage/v1/object/{bucket}/{path}"

        headers = {
            "Authorization": f"Bearer {settings.SUPABASE_KEY}",
            "apikey": settings.SUPABASE_KEY,
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "true"
        }

        async with httpx.AsyncClient(timeout=30) as client:
            resp = await client.post(url, headers=headers, content=content)

        if resp.status_code not in (200, 201):
            logger.warning(f"Storage upload failed for {path}: {resp.status_code}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Storage upload failed: {resp.text}"
            )

        return f"{base}/storage/v1/object/public/{bucket}/{path}"

    @staticmethod
    async def delete_by_url(file_url: str) -> None:
        """Remove a previously uploaded file; unknown URLs are ignored"""
        if not file_url:
            return

        if file_url.startswith(f"{LOCAL_URL_PREFIX}/"):
            target = Path(settings.UPLOAD_DIR) / file_url[len(LOCAL_URL_PREFIX) + 1:]
            target.unlink(missing_ok=True)
            return

        if not StorageService._supabase_enabled():
            return

        base = settings.SUPABASE_URL.rstrip("/")
        bucket = settings.STORAGE_BUCKET
        prefix = f"{base}/storage/v1/object/public/{bucket}/"
        if not file_url.startswith(prefix):
            return

        headers = {
            "Authorization": f"Bearer {settings.SUPABASE_KEY}",
            "apikey": settings.SUPABASE_KEY
        }
        url = f"{base}/storage/v1/object/{bucket}/{file_url[len(prefix):]}"

        async with httpx.AsyncClient(timeout=30) as client:
            resp = await client.delete(url, headers=headers)

        if resp.status_code not in (200, 204, 404):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Storage delete failed: {resp.text}"
            )

    @staticmethod
    async def upload_image(upload: UploadFile, folder: str) -> str:
        """
        Validate, optimise and store an uploaded image

        Raises:
            HTTPException: 400 for a disallowed type, an oversized file or unreadable image
        """
        if upload.content_type not in settings.allowed_image_types:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported image type. Allowed: {settings.ALLOWED_IMAGE_TYPES}"
            )

        content = await upload.read()
        if not content:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is empty"
            )

        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Image exceeds the {settings.MAX_UPLOAD_SIZE // (1024 * 1024)} MB limit"
            )

        optimized, content_type, extension = image_optimizer.optimize(content)
        logger.info(
            f"Optimised upload {upload.filename}: "
            f"{image_optimizer.get_size_reduction(len(content), len(optimized))}"
        )

        path = f"{folder}/{uuid4().hex}{extension}"
        return await StorageService.upload_bytes(path, optimized, content_type)


storage_service = StorageService()
