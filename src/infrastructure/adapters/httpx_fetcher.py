"""Asset fetcher adapter streaming payloads over HTTP with httpx."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import httpx

from ...application.ports.asset_fetcher import ProgressCallback
from ...domain.errors import DownloadFailed

logger = logging.getLogger(__name__)


class HttpxAssetFetcher:
    """
    Streams a URL into a local file.

    Bytes go to a temporary file next to the destination, which replaces the
    destination only once the body is complete, so an interrupted transfer never
    leaves a truncated file under the final name.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout_seconds: float = 60.0,
        chunk_size: int = 64 * 1024,
    ) -> None:
        """
        Args:
            client: Optional preconfigured client (owned by the caller)
            timeout_seconds: Per-operation timeout (connect, read, write, pool)
            chunk_size: Bytes per streamed chunk
        """
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout_seconds, follow_redirects=True)
        self.chunk_size = chunk_size

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> HttpxAssetFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(
        self,
        url: str,
        destination: Path,
        progress_callback: ProgressCallback | None = None,
    ) -> int:
        """
        Stream ``url`` into ``destination``.

        Returns:
            Number of bytes written

        Raises:
            DownloadFailed: On HTTP error status, transport error or local I/O error
        """
        destination = Path(destination)
        temp_path: Path | None = None
        received = 0

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with self.client.stream("GET", url) as response:
                response.raise_for_status()
                total = _declared_length(response)
                if progress_callback:
                    progress_callback(0, total)

                with tempfile.NamedTemporaryFile(
                    mode="wb",
                    dir=destination.parent,
                    prefix=f".{destination.name}.part.",
                    delete=False,
                ) as temp_file:
                    temp_path = Path(temp_file.name)
                    for chunk in response.iter_bytes(chunk_size=self.chunk_size):
                        temp_file.write(chunk)
                        received += len(chunk)
                        if progress_callback:
                            progress_callback(received, total)

            os.replace(temp_path, destination)
            temp_path = None
        except httpx.HTTPStatusError as e:
            raise DownloadFailed(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise DownloadFailed(url, f"{type(e).__name__}: {e}") from e
        except OSError as e:
            raise DownloadFailed(url, f"cannot write {destination}: {e}") from e
        finally:
            # Also runs on KeyboardInterrupt, so no partial file is left behind
            _discard(temp_path)

        logger.debug(
            f"Downloaded {received} bytes",
            extra={"url": url, "destination": str(destination), "bytes": received},
        )
        return received


def _declared_length(response: httpx.Response) -> int | None:
    value = response.headers.get("Content-Length")
    if value is None:
        return None
    try:
        length = int(value)
    except ValueError:
        return None
    return length if length >= 0 else None


def _discard(temp_path: Path | None) -> None:
    if temp_path is not None:
        temp_path.unlink(missing_ok=True)
