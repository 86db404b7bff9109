class PrepDeckError(Exception):
    """Base error of the service"""

    def __init__(self, message: str = "Service error", status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(PrepDeckError):
    """Invalid configuration"""

    def __init__(self, message: str = "Configuration error"):
        super().__init__(message, status_code=500)


class SolutionNotFoundError(PrepDeckError):
    """Unknown problem id / part, or no file on disk"""

    def __init__(self, message: str = "Solution not found"):
        super().__init__(message, status_code=404)


class SolutionLoadError(PrepDeckError):
    """Solution file exists but cannot be read or decoded"""

    def __init__(self, message: str = "Solution load error"):
        super().__init__(message, status_code=500)


class ManifestError(PrepDeckError):
    """Solution manifest could not be built"""

    def __init__(self, message: str = "Manifest error"):
        super().__init__(message, status_code=500)


class MarkupTooLargeError(PrepDeckError):
    """Input text exceeds MAX_MARKUP_CHARS"""

    def __init__(self, message: str = "Markup too large"):
        super().__init__(message, status_code=413)


class ServiceUnavailableError(PrepDeckError):
    """Service not ready"""

    def __init__(self, message: str = "Service unavailable"):
        super().__init__(message, status_code=503)
