"""
Shared GET helper with retry logic for rate-limited public APIs
"""

import time
import logging
from typing import Dict, Optional

import requests

from .constants import API_RETRY_COUNT, API_TIMEOUT, API_RATE_LIMIT_BACKOFF_BASE
from .errors import UpstreamAPIError

logger = logging.getLogger(__name__)


def get_json(url: str,
             params: Optional[Dict] = None,
             service: str = "HTTP",
             session: Optional[requests.Session] = None,
             retry_count: int = API_RETRY_COUNT,
             timeout: int = API_TIMEOUT):
    """
    GET a JSON document, retrying on rate limits and network errors.

    Args:
        url: Endpoint URL
        params: Query parameters
        service: Name used in log lines and errors (e.g. "CoinGecko")
        session: Optional requests session (defaults to module-level requests)
        retry_count: Number of attempts

    Raises:
        UpstreamAPIError: when every attempt fails
    """
    http = session or requests
    last_error = None

    for attempt in range(retry_count):
        try:
            response = http.get(url, params=params, timeout=timeout,
                                headers={'Accept': 'application/json'})

            # Handle rate limiting (429 Too Many Requests)
            if response.status_code == 429:
                last_error = UpstreamAPIError(service, "rate limit exceeded", 429)
                if attempt < retry_count - 1:
                    wait_time = (attempt + 1) * API_RATE_LIMIT_BACKOFF_BASE
                    logger.warning(f"{service} rate limit hit. Waiting {wait_time}s before retry...")
                    time.sleep(wait_time)
                    continue
                raise last_error

            if response.status_code >= 400:
                raise UpstreamAPIError(service, f"{response.status_code} {response.reason}",
                                       response.status_code)
            return response.json()

        except requests.exceptions.RequestException as e:
            last_error = UpstreamAPIError(service, str(e))
            if attempt < retry_count - 1:
                wait_time = (attempt + 1) * API_RATE_LIMIT_BACKOFF_BASE
                logger.warning(f"{service} request error: {e}. Retrying in {wait_time}s...")
                time.sleep(wait_time)
            else:
                raise last_error from e
        except ValueError as e:
            # Body was not JSON
            raise UpstreamAPIError(service, f"invalid JSON response: {e}") from e

    raise last_error or UpstreamAPIError(service, "request failed")
