"""
Turns a generation result into an image file on disk.
"""
import base64
import binascii
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Union

import httpx

from imagegen.ImageGenerator import make_timeout
from imagegen.ImageResponse import ImageResponse, InlineImage, RemoteImage, _detect_image_type
from imagegen.ProviderError import MaterializationError

DOWNLOAD_READ_TIMEOUT = 120.0


class ImageMaterializer:
    """
    Downloads or decodes an image and writes it to the requested path.

    The file is written through a temporary sibling and renamed into place, so
    the target is either replaced by the complete image or left untouched.
    """

    def __init__(self, client: httpx.Client = None, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client()
        self.timeout = make_timeout(DOWNLOAD_READ_TIMEOUT)

    def close(self):
        """Closes the HTTP client if this materializer created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def materialize(self, result: ImageResponse, output_path: Union[str, Path]) -> Path:
        """
        Save the image to a file.

        Args:
            result: RemoteImage or InlineImage returned by a generator.
            output_path: Destination file. An existing file is overwritten.

        Returns:
            The path the image was written to.

        Raises:
            MaterializationError: The image could not be downloaded, decoded or written.
        """
        if isinstance(result, RemoteImage):
            data = self._download(result.url)
        elif isinstance(result, InlineImage):
            data = self._decode(result.data)
        else:
            raise MaterializationError(f"Unsupported result type: {type(result).__name__}")

        path = Path(output_path)
        self.logger.info(f"Saving image to: {path}")
        self._write_atomically(path, data)

        image_type = _detect_image_type(data)
        if image_type == "unknown":
            self.logger.warning(f"Saved data is not a recognized image format ({len(data)} bytes)")
        self.logger.info(f"Image saved to {path} ({image_type}, {len(data)} bytes)")
        return path

    def _download(self, url: str) -> bytes:
        self.logger.info(f"Downloading image from: {url}")
        try:
            response = self.client.get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.HTTPError as e:
            raise MaterializationError(f"Error downloading image: {e}") from e

        if not response.is_success:
            raise MaterializationError(f"Failed to download image: HTTP {response.status_code}")
        if not response.content:
            raise MaterializationError("No image data received from download")
        return response.content

    def _decode(self, data: str) -> bytes:
        try:
            decoded = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise MaterializationError(f"Malformed base64 image data: {e}") from e
        if not decoded:
            raise MaterializationError("Decoded image data is empty")
        return decoded

    def _write_atomically(self, path: Path, data: bytes):
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".part")
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.chmod(tmp_name, self._file_mode(path))
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise MaterializationError(f"Error saving image to {path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)

    @staticmethod
    def _file_mode(path: Path) -> int:
        """Mode of the file being replaced, or the umask-based default for a new file."""
        try:
            return stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
