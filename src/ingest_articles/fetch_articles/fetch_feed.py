"""Feed retrieval over HTTP."""

import logging

import requests

from ingest_articles.models import FeedFetch, FetchFailure, FetchFailureKind

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "pulsereader-ingest/1.0 (RSS reader)"


def fetch_feed(
    url: str,
    timeout: float = 30,
    user_agent: str = DEFAULT_USER_AGENT,
) -> FeedFetch:
    """
    Fetch raw feed bytes from `url`.

    Never raises for network or HTTP failures; they come back as a
    FeedFetch with `failure` set. There is no retry here: the next
    scheduled cycle is the retry.
    """
    try:
        response = requests.get(
            url,
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )
        response.raise_for_status()
    except requests.Timeout as e:
        logger.warning("Timed out fetching %s after %ss", url, timeout)
        return FeedFetch(url=url, failure=FetchFailure(FetchFailureKind.TIMEOUT, str(e)))
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.warning("HTTP %s fetching %s", status, url)
        return FeedFetch(url=url, failure=FetchFailure(FetchFailureKind.HTTP_ERROR, str(e), status))
    except requests.RequestException as e:
        logger.warning("Failed to reach %s: %s", url, e)
        return FeedFetch(url=url, failure=FetchFailure(FetchFailureKind.UNREACHABLE, str(e)))

    return FeedFetch(url=url, content=response.content)
