class ServiceError(Exception):
    """
    Basisfout van de services (catalogus, routines, trainingen).

    Notities:
        - message wordt letterlijk aan de gebruiker getoond.
        - De errors-blueprint zet deze fouten om naar JSON met status_code.
    """
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(ServiceError):
    status_code = 404


class ForbiddenError(ServiceError):
    status_code = 403


class PayloadValidationError(ServiceError):
    status_code = 400

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}
