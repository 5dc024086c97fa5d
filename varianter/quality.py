"""Reporting of recoverable data-quality conditions."""

import logging
from typing import Any

from varianter.exceptions import ERROR_MESSAGES, RAISED_CODES
from varianter.signals import data_quality_issue

logger = logging.getLogger(__name__)


def report(code: str, sender: Any = None, **data: Any) -> None:
    """
    Log a recoverable issue and broadcast it on ``data_quality_issue``.

    A failing receiver is logged and skipped so rendering and purchase
    flows keep going.

    Raises:
        ValueError: If ``code`` is one of RAISED_CODES (those are VariantError)
    """
    if code in RAISED_CODES:
        raise ValueError(f"{code} is raised as VariantError, not reported")

    message = ERROR_MESSAGES.get(code, code)
    logger.warning("[%s] %s %s", code, message, data)

    responses = data_quality_issue.send_robust(
        sender=sender or __name__,
        code=code,
        message=message,
        data=data,
    )
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.error("data_quality_issue receiver %r failed: %s", receiver, response)
