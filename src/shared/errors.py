"""Error taxonomy for cross-context coordination failures.

Input validation failures use Protean's ``ValidationError``. The errors here
cover the business-rule failures that Protean has no vocabulary for. Each
carries a ``messages`` dict shaped like Protean's exceptions so API handlers
can render them the same way.

Publishing failures never reach a request: the OutboxProcessor retries them
and they show up as failed outbox rows.
"""


class CoordinationError(Exception):
    """Base class for the errors in this module."""

    def __init__(self, messages: dict[str, list[str]] | str, *args):
        if isinstance(messages, str):
            messages = {"_entity": [messages]}
        self.messages = messages
        super().__init__(messages, *args)

    def __str__(self) -> str:
        return str(self.messages)


class NotEligibleError(CoordinationError):
    """A business rule forbids the operation, e.g. reviewing an unfinished session."""


class ConflictError(CoordinationError):
    """The target state conflicts with the current one.

    Raised for illegal lifecycle transitions and for uniqueness violations.
    The caller may re-read the current state and decide what to do.
    """

