"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.
``modules.core.exception_handler`` maps the base classes to HTTP codes.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidRequest, NotFound


class CustomerAlreadyExists(InvalidRequest):
    """A customer with the same email already exists."""

    code = "customer_already_exists"


class CustomerNotFound(NotFound):
    """The requested customer does not exist or has been soft-deleted."""

    code = "customer_not_found"


class InactiveCustomer(InvalidRequest):
    """The customer is inactive and cannot place orders."""

    code = "inactive_customer"
