"""Status domain exceptions."""

from fastapi import status

from server_list.core.domain.exceptions import DomainException


class ServersConfigError(DomainException):
    """Raised when servers.toml cannot be read or parsed."""

    http_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "SERVERS_CONFIG_INVALID"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}")


class StatusQueryError(DomainException):
    """Raised when a Minecraft server does not answer a status ping."""

    http_status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "STATUS_QUERY_FAILED"

    def __init__(self, host: str, reason: str):
        self.host = host
        self.reason = reason
        super().__init__(f"Status query to {host} failed: {reason}")


class StatusServiceAlreadyStartedError(DomainException):
    """Raised when the status poll loop is started twice."""

    http_status_code = status.HTTP_409_CONFLICT
    error_code = "ALREADY_STARTED"

    def __init__(self) -> None:
        super().__init__("Status poll loop has already been started")
