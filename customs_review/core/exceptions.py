"""
Domain exceptions for the Customs Review Service.

Each exception carries the HTTP status code the API layer answers with.
Declaration-scoped errors also carry the declaration id so handlers can
report and log it.
"""


class ReviewServiceError(Exception):
    """Base exception for customs review errors"""
    def __init__(self, message: str, status_code: int = 500, declaration_id: str = None):
        self.message = message
        self.status_code = status_code
        self.declaration_id = declaration_id
        super().__init__(self.message)


class DeclarationNotFoundError(ReviewServiceError):
    """Raised when a declaration does not exist for the given owner"""
    def __init__(self, declaration_id: str, user_id: str = None):
        scope = f" for user {user_id}" if user_id else ""
        super().__init__(
            f"Declaration {declaration_id} not found{scope}",
            status_code=404,
            declaration_id=declaration_id
        )
        self.user_id = user_id


class InvalidStatusTransitionError(ReviewServiceError):
    """Raised when a declaration cannot move to the requested status"""
    def __init__(self, declaration_id: str, current: str, target: str):
        super().__init__(
            f"Declaration {declaration_id} cannot move from {current} to {target}",
            status_code=409,
            declaration_id=declaration_id
        )
        self.current_status = current
        self.target_status = target


class DatabaseError(ReviewServiceError):
    """Raised when database operation fails"""
    def __init__(self, detail: str, declaration_id: str = None):
        super().__init__(
            "Database operation failed",
            status_code=500,
            declaration_id=declaration_id
        )
        self.detail = detail
