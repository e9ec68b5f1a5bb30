class ApiError(Exception):
    def __init__(self, status_code: int, code: str, message: str, headers: dict[str, str] | None = None):
        self.status_code = status_code
        self.code = str(code)
        self.message = message
        self.headers = headers
        super().__init__(message)


class TLSConfigurationError(RuntimeError):
    """Certificate or key material cannot be used to serve HTTPS."""
