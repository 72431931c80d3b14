# charlotte/core/storage_utils.py
import logging
import uuid

from fastapi import HTTPException, status

from charlotte.core.gateway import Gateway, GatewayError

logger = logging.getLogger(__name__)


def extract_path_from_public_url(url: str, bucket: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/estampas/estampas/<id>/a.png
        -> 'estampas/<id>/a.png'

    URLs outside the bucket (e.g. the placeholder image) yield None.
    """
    marker = f"/storage/v1/object/public/{bucket}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    path = url[idx + len(marker) :]
    # get_public_url may append an empty query string
    return path.split("?", 1)[0] or None


def delete_public_url_quietly(gateway: Gateway, url: str | None, bucket: str) -> None:
    """
    Fire-and-forget deletion of a stored file by its public URL.

    Runs after the user-visible operation already succeeded: a failure is
    logged and never retried.
    """
    if not url:
        return
    path = extract_path_from_public_url(url, bucket)
    if not path:
        return
    try:
        gateway.remove([path])
    except GatewayError as exc:
        logger.warning("Could not delete stored file %s: %s", path, exc.message)
    else:
        logger.info("Deleted stored file %s", path)


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"


def validate_image(
    content_type: str,
    file_bytes: bytes,
    allowed: dict[str, str],
    max_bytes: int,
) -> str:
    """
    Check type and size of an uploaded image; return its extension.

    Args:
        allowed: content type -> extension
        max_bytes: size limit

    Raises:
        HTTPException(400): unsupported content type.
        HTTPException(413): file too large.
    """
    if content_type not in allowed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported image type. Allowed: "
            + ", ".join(sorted({ext.upper() for ext in allowed.values()}))
            + ".",
        )

    if len(file_bytes) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image too large (max {max_bytes // (1024 * 1024)}MB).",
        )

    return allowed[content_type]
