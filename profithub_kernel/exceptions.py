"""
Typed exception hierarchy for the analytics kernel and engines.

Every error is a typed class with a machine-readable ``code`` class
attribute and carries its context as attributes rather than only in the
message, so callers catch by type and report by code:

    try:
        period = resolver.resolve(token, reference)
    except InvalidPeriodToken as e:
        return {"error": e.code, "token": e.token}

Hierarchy::

    ProfitHubError (base)
    |
    +-- PeriodError
    |   +-- InvalidPeriodToken
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- MixedCurrencyError
    |
    +-- InvalidInputError
    |
    +-- LookupFailedError
        +-- ProjectNotFoundError

Codes:

    Category   | Code                  | When raised
    -----------|-----------------------|------------------------------------
    Period     | INVALID_PERIOD_TOKEN  | Unknown period name
    Currency   | INVALID_CURRENCY      | Not a valid ISO 4217 code
               | MIXED_CURRENCY        | Amounts in different currencies
               |                       | combined in one computation
    Input      | INVALID_INPUT         | Negative hours/costs, malformed
               |                       | dates, unsupported horizons
    Lookup     | PROJECT_NOT_FOUND     | Project id has no row

All failures are local and synchronous.  Nothing here is transient, so none
of these errors should be retried.
"""

from typing import Any


class ProfitHubError(Exception):
    """
    Base exception for all analytics errors.

    All subclasses define a ``code`` class attribute.
    """

    code: str = "PROFITHUB_ERROR"


# Period-related exceptions


class PeriodError(ProfitHubError):
    """Base exception for period resolution errors."""

    code: str = "PERIOD_ERROR"


class InvalidPeriodToken(PeriodError):
    """Period token is not one of the supported names."""

    code: str = "INVALID_PERIOD_TOKEN"

    def __init__(self, token: Any, supported: tuple[str, ...] = ()):
        self.token = token
        self.supported = supported
        detail = f" (supported: {', '.join(supported)})" if supported else ""
        super().__init__(f"Unknown period token: {token!r}{detail}")


# Currency-related exceptions


class CurrencyError(ProfitHubError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError, ValueError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: '{currency}'")


class MixedCurrencyError(CurrencyError):
    """Amounts in different currencies were combined in one computation."""

    code: str = "MIXED_CURRENCY"

    def __init__(self, currency1: str, currency2: str, context: str | None = None):
        self.currency1 = currency1
        self.currency2 = currency2
        self.context = context
        where = f" in {context}" if context else ""
        super().__init__(f"Mixed currencies{where}: {currency1} vs {currency2}")


# Input validation


class InvalidInputError(ProfitHubError):
    """An argument violates a documented precondition."""

    code: str = "INVALID_INPUT"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


# Lookups performed by module services


class LookupFailedError(ProfitHubError):
    """Base exception for missing reference rows."""

    code: str = "LOOKUP_FAILED"


class ProjectNotFoundError(LookupFailedError):
    """Project with given ID was not found."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: Any):
        self.project_id = str(project_id)
        super().__init__(f"Project not found: {project_id}")
