"""Domain exceptions."""


class SmartClinicException(Exception):
    """Base exception for Smart Clinic application."""

    status_code = 500

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(SmartClinicException):
    """Domain validation error."""

    status_code = 400

    def __init__(self, field: str, value, reason: str = None):
        message = f"Invalid {field}: {value}"
        if reason:
            message += f" - {reason}"

        self.field = field
        self.reason = reason
        super().__init__(
            message=message,
            code="VALIDATION_ERROR"
        )


class UserNotFoundError(SmartClinicException):
    """User not found error."""

    status_code = 404

    def __init__(self, telegram_id: int):
        super().__init__(
            message=f"User with Telegram ID {telegram_id} not found",
            code="USER_NOT_FOUND"
        )


class ContentNotFoundError(SmartClinicException):
    """Content item not found (or not active)."""

    status_code = 404

    def __init__(self, content_id: int):
        super().__init__(
            message=f"Content item {content_id} not found",
            code="CONTENT_NOT_FOUND"
        )


class QuestionNotFoundError(SmartClinicException):
    """Support question not found."""

    status_code = 404

    def __init__(self, question_id: int):
        super().__init__(
            message=f"Question {question_id} not found",
            code="QUESTION_NOT_FOUND"
        )


class PlanNotFoundError(SmartClinicException):
    """Unknown subscription plan."""

    status_code = 404

    def __init__(self, months: int):
        super().__init__(
            message=f"Subscription plan for {months} months not found",
            code="PLAN_NOT_FOUND"
        )


class AccessDeniedError(SmartClinicException):
    """Premium content requested without an active subscription."""

    status_code = 403

    def __init__(self, content_id: int):
        super().__init__(
            message=f"Content item {content_id} requires an active subscription",
            code="ACCESS_DENIED"
        )


class StorageError(SmartClinicException):
    """Transient failure of the underlying store."""

    status_code = 503

    def __init__(self, operation: str, details: str = None):
        message = f"Storage error during {operation}"
        if details:
            message += f": {details}"

        super().__init__(
            message=message,
            code="STORAGE_ERROR"
        )
