from typing import Any, Dict


class ProxyError(Exception):
    """Base for errors that end a proxied request."""

    status_code = 500
    message = "Internal server error"

    def payload(self) -> Dict[str, Any]:
        return {"error": self.message}


class ClientError(ProxyError):
    """Rejected before any upstream traffic."""

    status_code = 400


class MissingTarget(ClientError):
    message = "Video URL is required"


class InvalidTarget(ClientError):
    message = "Video URL must be an absolute URL"


class StreamFailure(ProxyError):
    """Upstream broke mid-transfer. Headers are already out, so the stream is just cut."""

    message = "Video stream aborted"


class InternalError(ProxyError):
    def __init__(self, details: str):
        super().__init__(details)
        self.details = details

    def payload(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}
