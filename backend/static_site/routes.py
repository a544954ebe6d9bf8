"""
Static Site Routes

Catch-all route serving the bundled web client. Registered after every API
router so it only sees paths nothing else claimed.
"""

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse

from .resolver import CaseInsensitiveResources

router = APIRouter(tags=["Static Site"])


@router.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def serve_static(path: str, request: Request):
    """Serve a bundled file, matching the path case-insensitively."""
    resources: CaseInsensitiveResources = request.app.state.static_resources
    resolved = resources.resolve(path)
    if resolved is None:
        return PlainTextResponse("404 page not found", status_code=404)
    return FileResponse(resolved)
