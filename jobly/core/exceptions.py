"""
Error taxonomy shared by the query builders, repositories and API layer.

Each error carries the HTTP status it maps to; main.py turns them into
JSON responses of the form {"detail": message}.
"""


class JoblyError(Exception):
    """Base exception for all expected application errors"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(JoblyError):
    """Malformed or empty input (empty update, inconsistent filter, bad status)"""
    status_code = 400


class NotFoundError(JoblyError):
    """Referenced entity does not exist"""
    status_code = 404

    def __init__(self, resource_type: str, identifier):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"No {resource_type}: {identifier}")


class ConflictError(JoblyError):
    """Natural key already taken on create"""
    status_code = 400

    def __init__(self, resource_type: str, identifier):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"Duplicate {resource_type}: {identifier}")


class UnauthorizedError(JoblyError):
    """Missing, invalid or expired credentials"""
    status_code = 401


class ForbiddenError(JoblyError):
    """Authenticated user may not perform this operation"""
    status_code = 403
