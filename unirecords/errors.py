class RecordsError(Exception):
    """Base for failures surfaced to the caller with an HTTP status."""
    status_code = 500

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self):
        payload = {"error": self.message}
        if self.field:
            payload["field"] = self.field
        return payload


class NotFound(RecordsError):
    status_code = 404


class Forbidden(RecordsError):
    status_code = 403


class ValidationFailure(RecordsError):
    status_code = 400


class ConcurrencyConflict(RecordsError):
    status_code = 409


class ConstraintViolation(RecordsError):
    status_code = 409
