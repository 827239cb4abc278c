"""Domain exceptions mapped to JSON error responses in create_app()."""


class ESGError(Exception):
    status_code = 500

    def __init__(self, message="", errors=None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors) if errors else ([message] if message else [])

    def to_dict(self):
        return {"success": False, "message": self.message, "errors": self.errors}


class ValidationError(ESGError):
    """Submitted data failed validation. `errors` holds user-facing messages."""
    status_code = 400

    def __init__(self, errors, message="Validation failed"):
        super().__init__(message, errors)


class IntegrationError(ESGError):
    """An external data source could not be reached or returned bad data."""
    status_code = 502

    def __init__(self, system, message):
        super().__init__(f"{system}: {message}")
        self.system = system
