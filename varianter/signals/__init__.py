"""
Varianter signals.

Signals:
    data_quality_issue:
        Sent whenever the engine recovers from inconsistent catalog data
        or ignores a shopper click on a value the catalog does not offer.
        Nothing is raised; receivers forward the report to whatever
        observability system the project uses.

        Kwargs:
            sender: the module or class that detected the issue
            code: str -- one of varianter.exceptions.ERROR_MESSAGES
            message: str -- human readable description
            data: dict -- context (product id, sku, combination, ...)

        Example handler::

            from varianter.signals import data_quality_issue

            def on_issue(sender, code, message, data, **kwargs):
                sentry_sdk.capture_message(f"[{code}] {message}", extras=data)

            data_quality_issue.connect(on_issue)
"""

from django.dispatch import Signal

data_quality_issue = Signal()
