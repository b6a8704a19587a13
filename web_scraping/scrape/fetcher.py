import time
import logging

import requests

logger = logging.getLogger(__name__)

UA = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
DEFAULT_TIMEOUT = 10.0


def _is_permanent(exc: requests.RequestException) -> bool:
    # 4xx will not change on a refetch, except rate limiting
    resp = getattr(exc, "response", None)
    return resp is not None and 400 <= resp.status_code < 500 and resp.status_code != 429


def fetch_html(url: str, timeout: float = DEFAULT_TIMEOUT, retries: int = 0, user_agent: str = UA) -> str:
    """
    GET a page and return its body. Non-2xx responses raise requests.HTTPError;
    the last exception propagates once retries are used up.
    """
    for attempt in range(retries + 1):
        try:
            resp = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
            resp.raise_for_status()
            return resp.text
        except requests.RequestException as e:
            if attempt == retries or _is_permanent(e):
                raise
            logger.warning("[Fetcher ERR] Attempt %d failed for %s: %s", attempt + 1, url, e)
            time.sleep(1.0 + attempt)
