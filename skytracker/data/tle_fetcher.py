"""
Element-set download (CelesTrak GP groups) with a small disk cache.

This sits outside the per-frame core: it runs once at load time and hands
raw text to the parser.
 - Retries with linear backoff on network errors and HTML/error pages
 - Caches only SUCCESS payloads, one JSON file per group, with a TTL
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import requests

from skytracker.config import settings
from skytracker.data.tle_parser import ParseReport, parse_element_sets

logger = logging.getLogger(__name__)

USER_AGENT = "skytracker/0.1"

# -----------------------
# Cache helpers
# -----------------------
def _cache_file(group: str, cache_dir: Optional[Path] = None) -> Path:
    base = Path(cache_dir if cache_dir is not None else settings.TLE_CACHE_DIR)
    return base / f"{group.lower()}.json"


def _cache_get(path: Path, now: datetime) -> Optional[str]:
    """
    Return cached text if present, well-formed and within TTL, else None.
    """
    if not path.exists():
        return None
    try:
        entry = json.loads(path.read_text(encoding="utf-8"))
        ts = datetime.fromisoformat(entry["timestamp"])
        text = entry["text"]
    except (OSError, ValueError, KeyError, TypeError):
        logger.warning("TLE cache file %s unreadable or corrupt, ignoring it.", path)
        return None

    if now - ts >= timedelta(hours=settings.TLE_CACHE_TTL_HOURS):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    logger.info("TLE cache hit for group %s", entry.get("group", path.stem))
    return text


def _cache_put_success(path: Path, group: str, now: datetime, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps({
                "timestamp": now.isoformat(),
                "group": group,
                "source": "CelesTrak",
                "text": text,
            }, indent=2),
            encoding="utf-8",
        )
    except OSError as e:
        logger.warning("Failed to write TLE cache: %s", e)

# -----------------------
# Small helpers
# -----------------------
def _looks_like_html(text: str) -> bool:
    t = (text or "").lower()
    return ("<html" in t) or ("<!doctype html" in t) or ("</html>" in t)


def _looks_like_celestrak_error(text: str) -> bool:
    t = (text or "").lower()
    if "1 " in t and "2 " in t:
        return False
    needles = [
        "no gp data", "no data", "not found", "invalid", "error",
        "forbidden", "access denied", "cloudflare", "attention required",
    ]
    return any(n in t for n in needles) or not t.strip()

# -----------------------
# CelesTrak fetch (retry + html/error detection)
# -----------------------
def _fetch_celestrak(group: str, session: requests.Session) -> str:
    params = {"GROUP": group, "FORMAT": "TLE"}

    last_exc: Optional[Exception] = None
    for attempt in range(1, settings.HTTP_RETRIES + 1):
        try:
            resp = session.get(settings.CELESTRAK_GP_URL, params=params, timeout=settings.HTTP_TIMEOUT_S)
            resp.raise_for_status()

            ct = (resp.headers.get("Content-Type", "") or "").lower()
            text = resp.text or ""

            if "text/html" in ct or _looks_like_html(text) or _looks_like_celestrak_error(text):
                raise RuntimeError("CelesTrak returned non-TLE content (HTML/error page)")

            return text

        except requests.HTTPError as he:
            last_exc = he
            status = he.response.status_code if he.response is not None else None
            if status == 404:
                raise RuntimeError(f"CelesTrak: group {group!r} not found (404)") from he

        except (requests.RequestException, RuntimeError) as e:
            last_exc = e

        logger.warning("CelesTrak attempt %d/%d failed: %s", attempt, settings.HTTP_RETRIES, last_exc)
        if attempt < settings.HTTP_RETRIES:
            time.sleep(settings.HTTP_BACKOFF_S * attempt)

    raise RuntimeError(f"CelesTrak failed after retries for group {group!r}: {last_exc}") from last_exc

# -----------------------
# Public API
# -----------------------
def fetch_group_text(
    group: str = settings.DEFAULT_TLE_GROUP,
    session: Optional[requests.Session] = None,
    use_cache: bool = True,
    cache_dir: Optional[Path] = None,
) -> str:
    """
    Raw three-line element text for a CelesTrak group.
      - checks disk cache (TTL)
      - downloads from CelesTrak
    Raises RuntimeError if the download fails.
    """
    now = datetime.now(timezone.utc)
    path = _cache_file(group, cache_dir)

    if use_cache:
        cached = _cache_get(path, now)
        if cached is not None:
            return cached

    if session is None:
        session = requests.Session()
        session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "text/plain, text/html;q=0.9, */*;q=0.8",
        })

    text = _fetch_celestrak(group, session)
    logger.info("Fetched group %s from CelesTrak (%d bytes)", group, len(text))
    if use_cache:
        _cache_put_success(path, group, now, text)
    return text


def read_tle_file(path) -> str:
    return Path(path).read_text(encoding="utf-8")


def load_element_sets(group: str = settings.DEFAULT_TLE_GROUP, **kwargs) -> ParseReport:
    return parse_element_sets(fetch_group_text(group, **kwargs))
