from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from copilot_assistant.config import AssistantConfig
from copilot_assistant.constants.assistant import PROTOCOL_HEADER
from copilot_assistant.exceptions import (
    AuthError,
    ConfigError,
    GatewayError,
    NotFoundError,
    ProtocolError,
    TransportError,
)
from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()

ModelT = TypeVar("ModelT", bound=BaseModel)

_TRANSIENT_STATUS_CODES = {408, 429}


def build_http_client(config: AssistantConfig) -> httpx.Client:
    return httpx.Client(base_url=config.base_url, timeout=config.request_timeout)


def apply_headers(client: httpx.Client, config: AssistantConfig) -> None:
    client.headers["Content-Type"] = "application/json"
    client.headers[PROTOCOL_HEADER] = config.protocol_version
    if config.api_key:
        client.headers["Authorization"] = f"Bearer {config.api_key}"
    else:
        client.headers.pop("Authorization", None)


def translate_status_error(error: httpx.HTTPStatusError) -> GatewayError:
    response = error.response
    status = response.status_code
    text = response.text
    message = f"{error.request.method} {error.request.url.path} returned {status}"
    if status in (401, 403):
        return AuthError(message, status_code=status, response_text=text)
    if status == 404:
        return NotFoundError(message, status_code=status, response_text=text)
    if status in _TRANSIENT_STATUS_CODES or status >= 500:
        return TransportError(message, status_code=status, response_text=text)
    return ProtocolError(message, status_code=status, response_text=text)


class BaseClient:
    """
    Shared request plumbing for the resource clients.

    Every resource client of one gateway shares a single httpx.Client and a
    single AssistantConfig, so swapping the credential on the gateway is seen
    by all of them.
    """

    def __init__(self, config: AssistantConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self.client = client or build_http_client(config)
        apply_headers(self.client, config)

    def _send(self, method: str, path: str, action: str, **kwargs) -> Dict[str, Any]:
        if not self.config.api_key:
            raise ConfigError("API key not set.")
        try:
            response = self.client.request(method, path, **kwargs)
            logging_utility.debug("Response from %s %s: %s", method, path, response.text)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logging_utility.error("HTTP error occurred while %s: %s", action, str(e))
            raise translate_status_error(e) from e
        except httpx.TransportError as e:
            logging_utility.error("Transport error occurred while %s: %s", action, str(e))
            raise TransportError(f"Transport failure while {action}: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logging_utility.error("Unparseable response while %s: %s", action, response.text)
            raise ProtocolError(
                f"Response to {action} is not valid JSON",
                status_code=response.status_code,
                response_text=response.text,
            ) from e
        if not isinstance(payload, dict):
            raise ProtocolError(
                f"Response to {action} is not a JSON object",
                status_code=response.status_code,
                response_text=response.text,
            )
        return payload

    def _write(self, path: str, action: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        # Writes are not idempotent and are sent exactly once.
        return self._send("POST", path, action, json=json if json is not None else {})

    def _read(self, path: str, action: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        retrying = Retrying(
            stop=stop_after_attempt(max(1, self.config.read_retries)),
            wait=wait_fixed(self.config.read_retry_wait),
            retry=retry_if_exception_type(TransportError),
            before_sleep=lambda state: logging_utility.warning(
                "Retrying %s after transport failure (attempt %d)",
                action,
                state.attempt_number,
            ),
            reraise=True,
        )
        return retrying(self._send, "GET", path, action, params=params)

    @staticmethod
    def _parse(model: Type[ModelT], payload: Dict[str, Any], action: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logging_utility.error("Validation error while %s: %s", action, e.json())
            raise ProtocolError(f"Unexpected response shape while {action}: {e}") from e
