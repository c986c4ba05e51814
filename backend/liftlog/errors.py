"""Domain errors shared by the generator, the session machine and the reconciler.

Routers never catch these one by one; ``liftlog.main`` maps each class to an
HTTP status.
"""


class LiftLogError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(LiftLogError, ValueError):
    """Malformed profile or out-of-range set values. Nothing was applied."""
    status_code = 422


class NotFoundError(LiftLogError, LookupError):
    status_code = 404


class ConflictError(LiftLogError):
    """Operation not allowed in the current session state."""
    status_code = 409


class PersistenceUnavailable(LiftLogError):
    """The store could not be reached; local data is kept and the call can be retried."""
    status_code = 503
