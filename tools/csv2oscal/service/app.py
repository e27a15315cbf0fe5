"""
HTTP upload/download service

POST /upload converts one control listing and stores the result under its
document id. GET /download/{document_id} serves a stored artifact and
GET /download serves the most recent one.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from ..converter import convert_file
from ..exceptions import ArtifactNotFound, MalformedInput, SerializationFailure, SourceUnavailable
from ..readers import ControlReader
from ..serialization import FORMATS
from ..storage import ArtifactStore, FileSystemArtifactStore
from .config import Settings, get_settings

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "yaml": "application/yaml",
    "json": "application/json"
}


def create_app(settings: Optional[Settings] = None,
               store: Optional[ArtifactStore] = None) -> FastAPI:
    """Build the FastAPI application around an artifact store"""
    settings = settings or get_settings()
    store = store or FileSystemArtifactStore(settings.output_dir)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Control listing to OSCAL component definition converter"
    )

    @app.get("/health")
    async def health_check():
        return {
            "status": "ok",
            "app": settings.app_name,
            "version": settings.version
        }

    @app.post("/upload")
    async def upload_file(
            file: UploadFile = File(...),
            fmt: Optional[str] = Query(None, alias="format")
    ):
        """Convert an uploaded control listing and store the component definition"""
        fmt = (fmt or settings.default_format).lower()
        if fmt not in FORMATS:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported output format '{fmt}'. Expected one of: {', '.join(FORMATS)}"
            )

        filename = Path(file.filename or "").name
        supported = ControlReader.CSV_SUFFIXES + ControlReader.EXCEL_SUFFIXES
        if Path(filename).suffix.lower() not in supported:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type. Expected one of: {', '.join(supported)}"
            )

        content = await file.read()
        if len(content) > settings.max_upload_size:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum: {settings.max_upload_size} bytes"
            )

        with tempfile.TemporaryDirectory(prefix="csv2oscal-upload-") as upload_dir:
            upload_path = Path(upload_dir) / filename
            upload_path.write_bytes(content)

            try:
                conversion = await run_in_threadpool(convert_file, upload_path, fmt)
            except MalformedInput as e:
                logger.warning(f"Rejected {filename}: {e}")
                raise HTTPException(status_code=400, detail=str(e))
            except SourceUnavailable as e:
                logger.warning(f"Rejected {filename}: {e}")
                raise HTTPException(status_code=422, detail=str(e))
            except SerializationFailure as e:
                logger.error(f"Failed to encode {filename}: {e}")
                raise HTTPException(status_code=500, detail=str(e))

        await run_in_threadpool(store.save, conversion.document_id, conversion.content, conversion.fmt)

        return {
            "message": f"File {filename} uploaded and processed successfully.",
            "document_id": conversion.document_id,
            "components": len(conversion.document.components),
            "format": conversion.fmt,
            "content": conversion.content
        }

    @app.get("/download")
    async def download_latest():
        """Serve the most recently produced component definition"""
        document_id = store.latest()
        if document_id is None:
            raise HTTPException(status_code=404, detail="No component definition has been produced yet")
        return _artifact_response(store, document_id)

    @app.get("/download/{document_id}")
    async def download(document_id: str):
        return _artifact_response(store, document_id)

    return app


def _artifact_response(store: ArtifactStore, document_id: str) -> Response:
    try:
        content, fmt = store.load(document_id)
    except ArtifactNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return Response(
        content=content,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="oscal-component{FORMATS[fmt]}"'}
    )
