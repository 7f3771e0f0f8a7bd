"""
File upload endpoints.

Uploads are multipart; the dispatcher leaves Content-Type to httpx so the
boundary is set correctly.
"""

from pathlib import Path
from typing import IO, Any

from portfolio_client.api.base import BaseResource
from portfolio_client.services.client import RequestOptions
from portfolio_client.services.types import APIResponse


class FilesAPI(BaseResource):
    prefix = "files"

    async def upload(
        self,
        file: Path | str | bytes | IO[bytes],
        filename: str | None = None,
        content_type: str = "application/octet-stream",
        fields: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> APIResponse[Any]:
        """
        Upload one file.

        Args:
            file: Path on disk, raw bytes, or an open binary file
            filename: Name sent to the server (defaults to the path name)
            content_type: MIME type of the part
            fields: Extra form fields sent alongside the file
            timeout: Per-call timeout override in seconds
        """
        if isinstance(file, (str, Path)):
            path = Path(file)
            content = path.read_bytes()
            filename = filename or path.name
        elif isinstance(file, bytes):
            content = file
        else:
            content = file.read()

        files = {"file": (filename or "upload", content, content_type)}
        return await self.client.upload(
            self.path("upload"),
            files=files,
            data=fields,
            options=RequestOptions(timeout=timeout),
        )

    async def delete(self, file_id: str) -> APIResponse[Any]:
        return await self.client.delete(self.path(file_id))
