"""Loading the complete marketing dataset.

The dataset is read once, asynchronously, and handed over whole: there is no
retry and no partial dataset. Failures are reported as a single readable
message for the page to display.
"""
import asyncio
import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from campaign_insights.config import DATA_FILE, FETCH_TIMEOUT
from campaign_insights.models import MarketingData


logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """The dataset could not be loaded; ``str(err)`` is shown to the user."""


@dataclass(frozen=True)
class LoadResult:
    data: Optional[MarketingData] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def _read_payload(path: str) -> dict:
    if not os.path.exists(path):
        raise DataLoadError(f"Missing file: {path}")
    try:
        with open(path, encoding="utf-8") as fh:
            payload = json.load(fh)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"{os.path.basename(path)} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise DataLoadError(f"Could not read {path}: {exc}") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("campaigns"), list):
        raise DataLoadError(f"{os.path.basename(path)} has no 'campaigns' list")
    return payload


async def fetch_marketing_data(path: str = DATA_FILE) -> MarketingData:
    payload = await asyncio.to_thread(_read_payload, path)
    data = MarketingData.from_dict(payload)
    logger.info("Loaded %d campaigns from %s", len(data.campaigns), path)
    return data


async def _fetch_with_timeout(path: str, timeout: Optional[float]) -> MarketingData:
    # wait_for cancels the pending fetch when the timeout expires.
    return await asyncio.wait_for(fetch_marketing_data(path), timeout=timeout)


def load_marketing_data(path: str = DATA_FILE, timeout: Optional[float] = FETCH_TIMEOUT) -> LoadResult:
    try:
        data = asyncio.run(_fetch_with_timeout(path, timeout))
    except asyncio.TimeoutError:
        logger.warning("Loading %s timed out after %ss", path, timeout)
        return LoadResult(error=f"Timed out loading marketing data after {timeout:g}s")
    except DataLoadError as exc:
        logger.error("Error loading marketing data: %s", exc)
        return LoadResult(error=str(exc))
    return LoadResult(data=data)


def require_marketing_data(path: str = DATA_FILE, timeout: Optional[float] = FETCH_TIMEOUT) -> MarketingData:
    """Same as ``load_marketing_data`` but raises ``DataLoadError`` on failure.

    Caching wrappers use this so that only a successful load is memoised.
    """
    result = load_marketing_data(path, timeout)
    if not result.ok:
        raise DataLoadError(result.error)
    return result.data
