"""
Domain exceptions raised by the service layer.

Each carries the HTTP status and error_type the API exception handler
reports. Not-found is not an exception here: lookups return None.
"""


class FamilyHubError(Exception):
    """Base exception for Family Hub domain errors."""

    status_code: int = 400
    error_type: str = "domain_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MembershipRequiredError(FamilyHubError):
    """
    The acting user does not belong to a family yet.

    Raised when creating tasks or events before creating or joining
    a family.
    """

    status_code = 400
    error_type = "membership_required"


class PermissionDeniedError(FamilyHubError):
    """
    The acting user may not perform this action.

    Causes:
    - Acting on another family's data
    - A child attempting a parent/spouse-only action
    """

    status_code = 403
    error_type = "permission_denied"
