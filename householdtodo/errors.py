"""Error taxonomy for householdtodo.

Every failure the core reports is one of these types. Callers decide how to
surface them (the API maps them to HTTP status codes).
"""


class HouseholdTodoError(Exception):
    """Base exception for householdtodo errors."""

    retryable = False


class NotFoundError(HouseholdTodoError):
    """Entity is absent, or belongs to another household.

    The two cases are reported identically so callers cannot test for
    entities in other households.
    """


class InvalidArgumentError(HouseholdTodoError):
    """Request input is malformed (bad sort field, negative page, empty search text, bad color)."""


class ConflictError(HouseholdTodoError):
    """Request conflicts with current state (duplicate category name, category still in use)."""


class StoreUnavailableError(HouseholdTodoError):
    """The entity store failed. Safe to retry later; the core does not retry."""

    retryable = True
