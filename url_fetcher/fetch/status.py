"""Status classification helpers."""

from enum import Enum

from url_fetcher.fetch.config import FetchMethod
from url_fetcher.fetch.constants import (
    BODYLESS_SUCCESS_STATUSES,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_REDIRECT_MAX,
    HTTP_STATUS_REDIRECT_MIN,
)


class StatusClass(str, Enum):
    """Coarse classification of a response status."""

    SUCCESS = "SUCCESS"
    REDIRECTION = "REDIRECTION"
    OTHER = "OTHER"


def classify_status(status_code: int) -> StatusClass:
    """Classify an HTTP status code.

    Args:
        status_code: HTTP status code.

    Returns:
        SUCCESS for 2xx, REDIRECTION for 3xx, OTHER for everything else.
    """
    if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
        return StatusClass.SUCCESS
    if HTTP_STATUS_REDIRECT_MIN <= status_code < HTTP_STATUS_REDIRECT_MAX:
        return StatusClass.REDIRECTION
    return StatusClass.OTHER


def body_permitted(method: FetchMethod, status_code: int) -> bool:
    """Check whether a successful response can carry a body.

    Args:
        method: Request method.
        status_code: Response status code.

    Returns:
        False for HEAD requests and for 204/205 responses.
    """
    if method is FetchMethod.HEAD:
        return False
    return status_code not in BODYLESS_SUCCESS_STATUSES
