"""
Error taxonomy for the marketplace backend.

Each error carries the HTTP status it is rendered with by the exception
handler registered in main.py.
"""


class MarketplaceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(MarketplaceError):
    status_code = 400


class InvalidField(MarketplaceError):
    status_code = 400


class InvalidRole(MarketplaceError):
    status_code = 400

    def __init__(self, message: str = "Invalid user type"):
        super().__init__(message)


class NotFound(MarketplaceError):
    status_code = 404


class StoreFailure(MarketplaceError):
    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
