from typing import Optional


class AssistantClientError(Exception):
    pass


class ConfigError(AssistantClientError):
    """Credential or assistant identity missing; raised before any remote call."""


class GatewayError(AssistantClientError):

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class AuthError(GatewayError):
    pass


class NotFoundError(GatewayError):
    pass


class TransportError(GatewayError):
    pass


class ProtocolError(GatewayError):
    pass


class RunTimeoutError(AssistantClientError):

    def __init__(self, run_id: str, waited: float):
        super().__init__(f"Run {run_id} did not finish within {waited:.1f}s")
        self.run_id = run_id
        self.waited = waited


class TurnCancelledError(AssistantClientError):

    def __init__(self, run_id: Optional[str] = None):
        message = "Turn cancelled"
        if run_id:
            message = f"Turn cancelled while waiting on run {run_id}"
        super().__init__(message)
        self.run_id = run_id


class RunFailedError(AssistantClientError):

    def __init__(self, run_id: str, status: str, last_error: Optional[str] = None):
        message = f"Run {run_id} ended with status '{status}'"
        if last_error:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.run_id = run_id
        self.status = status
        self.last_error = last_error
