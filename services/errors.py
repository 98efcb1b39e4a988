"""
Errors raised by the outline services.

Every failure the routes can see is an OutlineError so a blueprint only needs
one error handler. DegradedReadError never reaches a route, progress reads
catch it and hand back zeroed progress instead.
"""


class OutlineError(Exception):
    status_code = 500
    code = 'OUTLINE_ERROR'

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        data = {'error': self.message, 'code': self.code}
        if self.details is not None:
            data['details'] = self.details
        return data


class ValidationError(OutlineError):
    """A field supplied by the caller breaks a constraint. Checked before any write."""
    status_code = 400
    code = 'VALIDATION_ERROR'


class NotFoundError(OutlineError):
    """The section, question or answer is gone, usually an edit racing a delete."""
    status_code = 404
    code = 'NOT_FOUND'


class PersistenceError(OutlineError):
    """The database call itself failed. The transaction was rolled back."""
    status_code = 500
    code = 'PERSISTENCE_ERROR'


class DegradedReadError(OutlineError):
    code = 'DEGRADED_READ'
