"""Where the game's CSV files come from.

The core never talks to the filesystem or network directly; it asks a data
source for the text of a relative path such as ``Asset_Timeline.csv`` or
``Crypto_Assets/BTC.csv``. A source returns ``None`` when the file cannot be
read, and the caller treats that as "no data" rather than an error.

Usage:
    from investsim.data_source import default_data_source

    source = default_data_source()
    text = source.read_text("Asset_Timeline.csv")
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

import requests

from investsim import config

logger = logging.getLogger(__name__)


class DataSource(Protocol):
    def read_text(self, relative_path: str) -> str | None:
        ...


def _clean_path(relative_path: str) -> str:
    clean = str(relative_path or "").replace("\\", "/").lstrip("/")
    if clean.startswith("data/"):
        clean = clean[len("data/"):]
    return clean


class LocalDataSource:
    """Read files from a directory tree on disk."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def read_text(self, relative_path: str) -> str | None:
        path = self.root / _clean_path(relative_path)
        try:
            return path.read_text(encoding="utf-8-sig")  # handle BOM
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return None

    def __repr__(self) -> str:
        return f"LocalDataSource({str(self.root)!r})"


class HttpDataSource:
    """Fetch files from a static web server (same layout as the local tree)."""

    def __init__(self, base_url: str, timeout: float = config.HTTP_TIMEOUT,
                 session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def url_for(self, relative_path: str) -> str:
        return f"{self.base_url}/{_clean_path(relative_path)}"

    def read_text(self, relative_path: str) -> str | None:
        url = self.url_for(relative_path)
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            return None

        if not resp.ok:
            logger.warning("Fetch failed for %s: HTTP %d", url, resp.status_code)
            return None

        # Static servers rarely declare a charset for .csv; strip a BOM by hand
        resp.encoding = resp.encoding or "utf-8"
        return resp.text.lstrip("\ufeff")

    def __repr__(self) -> str:
        return f"HttpDataSource({self.base_url!r})"


class InMemoryDataSource:
    """Serve files from a dict of ``{relative_path: text}``."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = {_clean_path(k): v for k, v in (files or {}).items()}
        self.reads: list[str] = []

    def read_text(self, relative_path: str) -> str | None:
        key = _clean_path(relative_path)
        self.reads.append(key)
        text = self.files.get(key)
        if text is None:
            logger.warning("No in-memory file for %s", key)
        return text


def default_data_source() -> DataSource:
    """HTTP when INVESTSIM_DATA_URL is set, otherwise the local data dir."""
    if config.DATA_URL:
        return HttpDataSource(config.DATA_URL)
    return LocalDataSource(config.DATA_DIR)


# ---------------------------------------------------------------------------
# File name remapping
# ---------------------------------------------------------------------------

def load_filename_mapping(source: DataSource) -> dict[str, dict[str, str]]:
    """Load the optional ``{folder: {base_name: file_name}}`` remapping table.

    Some instrument files on disk don't match the catalog's csv name (the
    data was exported under a different key). Missing or malformed mapping
    means "no remapping".
    """
    text = source.read_text(config.FILENAME_MAPPING_FILE)
    if not text:
        return {}
    try:
        raw = json.loads(text)
    except ValueError as e:
        logger.warning("Bad filename mapping JSON: %s", e)
        return {}
    if not isinstance(raw, dict):
        return {}
    return {
        str(folder): {str(k): str(v) for k, v in entries.items()}
        for folder, entries in raw.items()
        if isinstance(entries, dict)
    }


def resolve_filename(mapping: dict[str, dict[str, str]], folder: str, filename: str) -> str:
    """Apply the remapping table to ``filename`` inside ``folder``."""
    base = filename[:-4] if filename.endswith(".csv") else filename
    mapped = mapping.get(folder, {}).get(base)
    if not mapped:
        return filename
    return mapped if mapped.endswith(".csv") else f"{mapped}.csv"
