class RegistryError(Exception):
    """Base class for precondition failures raised by the job registry."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RegistryError):
    status_code = 404


class ConflictError(RegistryError):
    status_code = 409


class ForbiddenError(RegistryError):
    status_code = 403


class InvalidInputError(RegistryError):
    status_code = 400
