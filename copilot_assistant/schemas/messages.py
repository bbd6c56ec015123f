from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class MessageRole(str, Enum):
    ASSISTANT = "assistant"
    USER = "user"


class MessageCreate(BaseModel):
    role: str
    content: str

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v):
        valid_roles = {role.value for role in MessageRole}
        if isinstance(v, MessageRole):
            return v.value
        if isinstance(v, str):
            v = v.lower()
            if v in valid_roles:
                return v
        raise ValueError(f"Invalid role: {v}. Must be one of {sorted(valid_roles)}")


class MessageText(BaseModel):
    value: str = ""
    annotations: List[Any] = []

    model_config = ConfigDict(extra="ignore")


class MessageContent(BaseModel):
    type: str
    text: Optional[MessageText] = None

    model_config = ConfigDict(extra="ignore")


class MessageRead(BaseModel):
    id: str
    role: str
    content: List[MessageContent] = []
    thread_id: Optional[str] = None
    run_id: Optional[str] = None
    assistant_id: Optional[str] = None
    created_at: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def text(self) -> str:
        """Concatenated value of every text part, in order."""
        return "".join(part.text.value for part in self.content if part.text is not None)

    @property
    def is_assistant(self) -> bool:
        return self.role == MessageRole.ASSISTANT.value


class MessageList(BaseModel):
    data: List[MessageRead]
    first_id: Optional[str] = None
    last_id: Optional[str] = None
    has_more: bool = False

    model_config = ConfigDict(extra="ignore")
