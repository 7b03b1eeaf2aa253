"""Caller and counterparty checks shared by every command handler.

The caller's identity arrives already authenticated; these helpers only load
the user record and check the role the operation needs.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.accounts.user import Role, User
from marketplace.shared.errors import Forbidden


def _find_user(user_id):
    if not user_id:
        return None
    try:
        return current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        return None


def require_role(user_id, role: Role, action: str) -> User:
    """Return the acting user, refusing callers that do not hold ``role``."""
    user = _find_user(user_id)
    if user is None or user.role != role.value:
        raise Forbidden(f"Only {role.value}s can {action}")
    return user


def require_vendor(user_id, action: str) -> User:
    return require_role(user_id, Role.VENDOR, action)


def require_supplier(user_id, action: str) -> User:
    return require_role(user_id, Role.SUPPLIER, action)


def get_supplier(supplier_id) -> User:
    """Load the counterparty supplier, treating non-suppliers as missing."""
    user = _find_user(supplier_id)
    if user is None or not user.is_supplier:
        raise ObjectNotFoundError({"supplier_id": [f"Supplier {supplier_id} not found"]})
    return user
