"""
Exceptions raised by the chat pipeline
"""


class ProxyError(Exception):
    """Base class for errors the API layer maps to an HTTP status"""

    status_code = 500


class InvalidInput(ProxyError):
    """Request body carries no usable chat text"""

    status_code = 400


class UnknownProvider(ProxyError):
    """Model identifier does not map to a supported upstream"""

    status_code = 400

    def __init__(self, prefix: str, supported: tuple):
        self.prefix = prefix
        self.supported = supported
        if prefix:
            message = f"Unsupported model prefix: '{prefix}'"
        else:
            message = "No model specified and no default model configured"
        super().__init__(f"{message} (supported: {', '.join(supported)})")


class UpstreamUnavailable(ProxyError):
    """Upstream call failed at the transport level or returned unusable data"""

    status_code = 502
