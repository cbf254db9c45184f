"""Shared handling of mutation outcomes for the API routers."""

import logging
from typing import Callable

from rolemanager.api.schemas.common import MutationResponse
from rolemanager.core.errors import RecoverableError
from rolemanager.core.notices import NOTICE_ERROR, NoticeQueue
from rolemanager.services.role_manager import MutationOutcome, ROLES_PAGE

logger = logging.getLogger(__name__)


def run_mutation(
    notices: NoticeQueue,
    operation: Callable[[], MutationOutcome],
    *,
    queue_notice: bool = True,
) -> MutationResponse:
    """
    Run a service mutation and turn its outcome into a response.

    Recoverable errors abort the operation and are reported as an error
    notice; the outcome summary of a successful operation is queued as a
    notice for the next rendered view.
    """
    try:
        outcome = operation()
    except RecoverableError as exc:
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        if queue_notice:
            notices.push(exc.message, NOTICE_ERROR)
        return MutationResponse(
            success=False,
            message=exc.message,
            notice_type=NOTICE_ERROR,
            redirect_to=exc.redirect_to or ROLES_PAGE,
        )

    if queue_notice:
        notices.push(outcome.message, outcome.notice_type)
    return MutationResponse(
        success=True,
        message=outcome.message,
        notice_type=outcome.notice_type,
        redirect_to=outcome.redirect_to,
        counts=outcome.counts,
        details=outcome.details,
    )
