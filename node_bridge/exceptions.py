"""
Node Service Bridge Custom Exceptions
"""


class BridgeError(Exception):
    """Base exception for the bridge"""
    pass


class InvalidPort(BridgeError):
    """Port outside the range accepted by the update operation"""
    def __init__(self, port, minimum: int = 1024, maximum: int = 65535):
        self.port = port
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"Port must be between {minimum} and {maximum}")


class InvalidEndpoint(BridgeError):
    """Endpoint path contains characters outside the allowed set"""
    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        super().__init__(f"Invalid endpoint: {endpoint!r}")


class ServiceUnreachable(BridgeError):
    """Outbound call could not complete (network error or timeout)"""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(reason)


class MalformedResponse(BridgeError):
    """Response body could not be decoded as JSON"""
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Response from {url} is not valid JSON")
