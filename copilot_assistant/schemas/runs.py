from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from copilot_assistant.constants.assistant import TERMINAL_RUN_STATUSES


class RunCreate(BaseModel):
    assistant_id: str


class RunError(BaseModel):
    code: Optional[str] = None
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class RunRead(BaseModel):
    id: str
    status: str
    thread_id: Optional[str] = None
    assistant_id: Optional[str] = None
    created_at: Optional[int] = None
    completed_at: Optional[int] = None
    failed_at: Optional[int] = None
    cancelled_at: Optional[int] = None
    last_error: Optional[RunError] = None
    incomplete_details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_RUN_STATUSES

    @property
    def error_message(self) -> Optional[str]:
        if self.last_error is None:
            return None
        if self.last_error.code and self.last_error.message:
            return f"{self.last_error.code}: {self.last_error.message}"
        return self.last_error.message or self.last_error.code
