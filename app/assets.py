from __future__ import annotations

import os

from fastapi import Request
from fastapi.staticfiles import StaticFiles
from starlette.responses import Response


class StaticAssetStore:
    """Serves frontend files from a directory, keyed by request path."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        self._files = StaticFiles(directory=directory, html=True, check_dir=False)

    async def fetch(self, request: Request) -> Response:
        # Same path normalisation StaticFiles applies when mounted; "/" becomes ".".
        path = os.path.normpath(os.path.join(*request.url.path.split("/")))
        return await self._files.get_response(path, request.scope)
