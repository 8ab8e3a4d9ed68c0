"""
Authorization policies for administrator-only operations.
"""
import logging
from typing import Protocol

from registrations.services.errors import Forbidden
from registrations.services.normalization import canonical_id

logger = logging.getLogger(__name__)


class AuthorizationPolicy(Protocol):
    def is_authorized(self, caller_id) -> bool:
        ...


class StaticAdminPolicy:
    """Authorizes exactly one configured administrator id."""

    def __init__(self, admin_id):
        self.admin_id = canonical_id(admin_id)

    def is_authorized(self, caller_id) -> bool:
        # An unset administrator id locks everyone out
        if not self.admin_id:
            return False
        return canonical_id(caller_id) == self.admin_id


def require_admin(policy: AuthorizationPolicy, caller_id) -> None:
    """
    Raises:
        Forbidden: If the policy rejects caller_id
    """
    if not policy.is_authorized(caller_id):
        logger.warning(f"Forbidden: caller {caller_id!r} is not an administrator")
        raise Forbidden(f"Caller {caller_id!r} is not an administrator")
