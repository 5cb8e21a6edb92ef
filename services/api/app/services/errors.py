from __future__ import annotations


class PrintdropError(Exception):
    """Base class for domain errors surfaced to API callers as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PrintdropError):
    status_code = 400


class Unauthorized(PrintdropError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class Forbidden(PrintdropError):
    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class NotFound(PrintdropError):
    status_code = 404


class Conflict(PrintdropError):
    status_code = 400


class ServerMisconfiguration(PrintdropError):
    status_code = 500


class InvalidCredentials(Unauthorized):
    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class EmailDomainNotAllowed(Forbidden):
    def __init__(self, allowed_suffix: str) -> None:
        super().__init__(f"Only {allowed_suffix} email addresses are allowed")
        self.allowed_suffix = allowed_suffix


class UserNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("User not found")


class VendorNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("Vendor not found")


class OrderNotFound(NotFound):
    def __init__(self, order_id: str) -> None:
        super().__init__("Order not found")
        self.order_id = order_id


class FileNotFound(NotFound):
    def __init__(self, file_key: str) -> None:
        super().__init__("File not found")
        self.file_key = file_key


class NotYourOrder(Forbidden):
    def __init__(self, order_id: str) -> None:
        super().__init__("Not your order")
        self.order_id = order_id


class AlreadyAccepted(Conflict):
    def __init__(self, order_id: str) -> None:
        super().__init__("Order already accepted")
        self.order_id = order_id


class InvalidTransition(Conflict):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot move order from {current} to {requested}")
        self.current = current
        self.requested = requested


class UnsupportedType(ValidationError):
    def __init__(self, content_type: str | None) -> None:
        super().__init__("Only PDF files are allowed")
        self.content_type = content_type


class FileTooLarge(ValidationError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"File size exceeds {limit // (1024 * 1024)}MB limit")
        self.size = size
        self.limit = limit


class PricingUnavailable(ServerMisconfiguration):
    def __init__(self) -> None:
        super().__init__("Pricing not configured")


class StorageFailure(PrintdropError):
    status_code = 500
