"""Response marshaling for assembled documents."""

from fastapi import Response
from fastapi.responses import JSONResponse

from .schemas import AssembledDocument, PreviewResponse, RenderMode


def to_response(document: AssembledDocument) -> Response:
    """Binary download for PDF/deck, JSON payload for preview."""
    if document.mode is RenderMode.DECK_PREVIEW:
        payload = PreviewResponse(images=list(document.images), slideCount=document.slide_count)
        return JSONResponse(content=payload.model_dump(by_alias=True))

    data = document.data or b""
    headers = {"Content-Length": str(len(data))}
    if document.filename:
        headers["Content-Disposition"] = f'attachment; filename="{document.filename}"'

    return Response(content=data, media_type=document.mime_type, headers=headers)
