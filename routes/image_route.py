"""FastAPI routes for uploading, listing, serving, and deleting images."""

import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import Response

from controllers.image_controller import ImageController
from utils.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["images"])


def _get_controller(request: Request) -> ImageController:
    """Retrieve the shared image controller from the app state."""
    controller = getattr(request.app.state, "image_controller", None)
    if controller is None:
        raise HTTPException(status_code=500, detail="Image storage not initialized.")
    return controller


@router.get("/images")
async def list_images(request: Request):
    """Return all stored images, most recent upload first."""
    try:
        views = await _get_controller(request).list_images()
    except HTTPException:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Error fetching images")
        raise HTTPException(status_code=500, detail="Failed to fetch images") from exc
    return {"images": [view.to_dict() for view in views]}


@router.post("/upload")
async def upload_image(request: Request, file: Optional[UploadFile] = File(None)):
    """Store an uploaded image and return its view model."""
    try:
        content = await file.read() if file is not None else None
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=400, detail="Unable to read uploaded file.") from exc

    try:
        view = await _get_controller(request).upload(
            content,
            file.filename if file is not None else None,
            file.content_type if file is not None else None,
        )
    except HTTPException:
        raise
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Upload error")
        raise HTTPException(status_code=500, detail="Upload failed") from exc
    return {"image": view.to_dict()}


@router.delete("/images/{image_id}")
async def delete_image(request: Request, image_id: str):
    """Delete an image's bytes and its record."""
    try:
        await _get_controller(request).delete(image_id)
    except HTTPException:
        raise
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Image not found") from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Delete error")
        raise HTTPException(status_code=500, detail="Failed to delete image") from exc
    return {"success": True}


@router.get("/files/{filename}")
async def serve_file(request: Request, filename: str):
    """Serve the raw bytes stored under a storage key."""
    try:
        stored = await _get_controller(request).fetch(filename)
    except HTTPException:
        raise
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="File not found") from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("File serve error")
        raise HTTPException(status_code=500, detail="Internal Server Error") from exc
    return Response(content=stored.content, media_type=stored.media_type, headers=stored.headers)
