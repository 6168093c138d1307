import logging

import requests

from khajiit_wares import config
from khajiit_wares.errors import SourceError

logger = logging.getLogger(__name__)


def load_url(url: str, timeout: float = config.FETCH_TIMEOUT) -> bytes:
    """Download *url* and return the response body."""
    logger.debug("Loading image from URL: %s", url)
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as error:
        raise SourceError(f"Failed to read URL {url!r}: {error}") from error

    if not response.ok:
        raise SourceError(f"URL {url!r} gave status code {response.status_code}")
    return response.content
