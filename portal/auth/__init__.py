"""Auth package: shared-password login and session dependencies."""

from portal.auth.dependencies import get_current_user
from portal.auth.session import check_password, issue_token, verify_token

__all__ = [
    "check_password",
    "get_current_user",
    "issue_token",
    "verify_token",
]
