"""URL transport for ``http(s)://`` and ``file://`` repositories.

Existence checks use HEAD requests; directory listings are scraped from the
HTML index pages served by Maven-style repositories.
"""
from __future__ import annotations

import logging
import os
import re
import shutil
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.parse import unquote, urljoin, urlsplit
from urllib.request import Request, url2pathname, urlopen

from ibiblio import __version__
from ibiblio.core.resolver.exceptions import TransportError
from ibiblio.core.resolver.models import ResourceInfo
from ibiblio.core.utils.redaction import redact_url_credentials

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
_HREF_RE = re.compile(r"""href\s*=\s*["']([^"'#?]+)["']""", re.IGNORECASE)
_NOT_FOUND_STATUSES = {404, 410}


def _is_file_url(url: str) -> bool:
    return urlsplit(url).scheme == "file"


def _file_path(url: str) -> Path:
    return Path(url2pathname(urlsplit(url).path))


def local_path_for(url: str) -> Path | None:
    """Return the filesystem path behind a ``file://`` URL, else None."""
    return _file_path(url) if _is_file_url(url) else None


def _parse_http_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None


class UrlTransport:
    """Transport backed by ``urllib``."""

    def __init__(self, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.timeout_seconds = timeout_seconds
        self.user_agent = f"ibiblio-resolver/{__version__}"

    def _request(self, url: str, method: str) -> Request:
        return Request(url, method=method, headers={"User-Agent": self.user_agent})

    def probe(self, url: str) -> ResourceInfo | None:
        if _is_file_url(url):
            path = _file_path(url)
            if not path.is_file():
                return None
            st = path.stat()
            return ResourceInfo(
                url=url,
                size=st.st_size,
                last_modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            )

        try:
            with urlopen(self._request(url, "HEAD"), timeout=self.timeout_seconds) as resp:
                length = resp.headers.get("Content-Length")
                return ResourceInfo(
                    url=url,
                    size=int(length) if length and length.isdigit() else None,
                    last_modified=_parse_http_date(resp.headers.get("Last-Modified")),
                )
        except HTTPError as exc:
            if exc.code not in _NOT_FOUND_STATUSES:
                logger.warning("HEAD %s returned HTTP %s", redact_url_credentials(url), exc.code)
            return None
        except (URLError, OSError, ValueError) as exc:
            logger.warning("Cannot reach %s: %s", redact_url_credentials(url), exc)
            return None

    def fetch(self, url: str, dest: Path) -> int:
        """Download ``url`` to ``dest`` atomically.

        Returns:
            Number of bytes written

        Raises:
            TransportError: If the resource cannot be read or written
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        partial = dest.with_name(dest.name + ".part")
        try:
            if _is_file_url(url):
                shutil.copyfile(_file_path(url), partial)
            else:
                with urlopen(self._request(url, "GET"), timeout=self.timeout_seconds) as resp:
                    with partial.open("wb") as fh:
                        shutil.copyfileobj(resp, fh)
            os.replace(partial, dest)
        except (HTTPError, URLError, OSError, ValueError) as exc:
            partial.unlink(missing_ok=True)
            raise TransportError(
                f"Failed to fetch {redact_url_credentials(url)}: {exc}",
                context={"url": redact_url_credentials(url), "dest": str(dest)},
            ) from exc
        return dest.stat().st_size

    def list_dir(self, url: str) -> list[str] | None:
        if not url.endswith("/"):
            url += "/"

        if _is_file_url(url):
            path = _file_path(url)
            if not path.is_dir():
                return None
            return sorted(entry.name + ("/" if entry.is_dir() else "") for entry in path.iterdir())

        try:
            with urlopen(self._request(url, "GET"), timeout=self.timeout_seconds) as resp:
                charset = resp.headers.get_content_charset() or "utf-8"
                html = resp.read().decode(charset, errors="replace")
        except HTTPError as exc:
            if exc.code not in _NOT_FOUND_STATUSES:
                logger.warning("Listing %s returned HTTP %s", redact_url_credentials(url), exc.code)
            return None
        except (URLError, OSError, ValueError) as exc:
            logger.warning("Cannot list %s: %s", redact_url_credentials(url), exc)
            return None
        return parse_directory_listing(url, html)


def parse_directory_listing(base_url: str, html: str) -> list[str]:
    """Extract child entry names from an HTML directory index.

    Only links pointing directly below ``base_url`` are kept. Directory
    entries keep their trailing ``/``.
    """
    base_path = urlsplit(base_url).path
    names: set[str] = set()
    for href in _HREF_RE.findall(html):
        target = urlsplit(urljoin(base_url, href.strip()))
        if target.netloc != urlsplit(base_url).netloc or not target.path.startswith(base_path):
            continue
        rest = target.path[len(base_path):]
        is_dir = rest.endswith("/")
        rest = rest.strip("/")
        if not rest or "/" in rest:
            continue
        names.add(unquote(rest) + ("/" if is_dir else ""))
    return sorted(names)


__all__ = ["UrlTransport", "parse_directory_listing", "local_path_for", "DEFAULT_TIMEOUT_SECONDS"]
