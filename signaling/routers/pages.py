"""Entry pages for the three roles, served from ``STATIC_DIR``."""
from __future__ import annotations

import os

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from ..constants import PAGES, STATIC_DIR

router = APIRouter(prefix="", tags=["pages"])


def _page_endpoint(filename: str):
    async def serve_page():
        path = os.path.join(STATIC_DIR, filename)
        if not os.path.isfile(path):
            raise HTTPException(status_code=404, detail="Page not found")
        return FileResponse(path)

    serve_page.__name__ = f"serve_{os.path.splitext(filename)[0]}"
    return serve_page


for _route, _filename in PAGES.items():
    router.add_api_route(_route, _page_endpoint(_filename), methods=["GET"], include_in_schema=False)
