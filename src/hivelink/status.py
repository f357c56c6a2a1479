from enum import Enum
from typing import Union

from .errors import StatusError
from .models import Status, StatusCode


class StatusClass(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"
    FAILURE = "failure"


def classify(code: Union[StatusCode, int]) -> StatusClass:
    """
    Maps a remote status code to success, pending or failure.
    """
    code = StatusCode.parse(code)
    if code in (StatusCode.SUCCESS, StatusCode.SUCCESS_WITH_INFO):
        return StatusClass.SUCCESS
    if code == StatusCode.STILL_EXECUTING:
        return StatusClass.PENDING
    return StatusClass.FAILURE


def is_success(code: Union[StatusCode, int]) -> bool:
    return classify(code) == StatusClass.SUCCESS


def check_status(status: Status, context: str, allow_pending: bool = False) -> StatusClass:
    """
    Raises StatusError unless the status is a success, or a pending status
    where the caller accepts one.
    """
    result = classify(status.code)
    if result == StatusClass.SUCCESS:
        return result
    if result == StatusClass.PENDING and allow_pending:
        return result
    raise StatusError(f"{context} failed: {status}", status)
