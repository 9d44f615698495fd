"""
Stock Dashboard — Error Types
───────────────────────────────
Every error the API renders carries its HTTP status and envelope status:
"fail" for client mistakes (4xx), "error" for server faults (5xx).
"""


class StockApiError(Exception):
    status_code = 500
    status = "error"
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message}


class ValidationError(StockApiError):
    status_code = 400
    status = "fail"
    default_message = "Invalid request"


class AuthError(StockApiError):
    status_code = 401
    status = "fail"
    default_message = "You are not logged in. Please log in to get access."


class NotFoundError(StockApiError):
    status_code = 404
    status = "fail"
    default_message = "Not found"


class RateLimitError(StockApiError):
    status_code = 429
    status = "fail"
    default_message = "Too many requests from this IP, please try again after 15 minutes"


class InternalError(StockApiError):
    pass
