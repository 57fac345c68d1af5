"""
Source reader: local path or http(s) URL -> report bytes, bounded by max_input_bytes.
All failures surface as SourceReadError (InputTooLargeError when over the cap).
"""
from __future__ import annotations

import logging
from pathlib import Path

import requests

from core.exceptions import InputTooLargeError, SourceReadError
from core.interfaces import ISourceReader
from utils.config import DEFAULT_MAX_INPUT_BYTES, SourceConfig
from utils.retry import with_retry

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http://", "https://")
_CHUNK_SIZE = 64 * 1024


def is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.strip().lower().startswith(URL_SCHEMES)


class SourceReader(ISourceReader):
    """Reads paths from disk and URLs over HTTP with retry on transient network errors."""

    def __init__(
        self,
        max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES,
        source_config: SourceConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._max_bytes = max_input_bytes
        self._config = source_config or SourceConfig()
        self._session = session

    def read(self, source: str | Path) -> bytes:
        if is_url(source):
            return self._read_url(str(source).strip())
        return self._read_path(Path(source))

    def _check_size(self, size: int, source: str) -> None:
        if self._max_bytes and size > self._max_bytes:
            raise InputTooLargeError(
                f"Input too large: {size} bytes exceeds limit of {self._max_bytes}",
                source=source,
            )

    def _read_path(self, path: Path) -> bytes:
        if not path.exists():
            raise SourceReadError(f"File not found: {path}", source=str(path))
        if not path.is_file():
            raise SourceReadError(f"Not a file: {path}", source=str(path))
        try:
            self._check_size(path.stat().st_size, str(path))
            data = path.read_bytes()
        except OSError as e:
            raise SourceReadError(f"Failed to read {path}: {e}", source=str(path)) from e
        logger.debug("Read %s bytes from %s", len(data), path)
        return data

    def _fetch(self, url: str) -> bytes:
        getter = self._session.get if self._session is not None else requests.get
        resp = getter(url, timeout=self._config.timeout_sec, stream=True)
        try:
            resp.raise_for_status()
            declared = resp.headers.get("Content-Length")
            if declared and declared.isdigit():
                self._check_size(int(declared), url)
            buf = bytearray()
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                buf.extend(chunk)
                self._check_size(len(buf), url)
            return bytes(buf)
        finally:
            resp.close()

    def _read_url(self, url: str) -> bytes:
        try:
            data = with_retry(
                lambda: self._fetch(url),
                max_attempts=self._config.max_retries,
                delay_sec=self._config.retry_delay_sec,
                retry_exceptions=(requests.ConnectionError, requests.Timeout),
                label=url,
            )
        except requests.RequestException as e:
            raise SourceReadError(f"Failed to download {url}: {e}", source=url) from e
        logger.debug("Downloaded %s bytes from %s", len(data), url)
        return data
