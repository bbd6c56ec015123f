from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class AssistantRead(BaseModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    model: Optional[str] = None
    instructions: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class AssistantList(BaseModel):
    data: List[AssistantRead]
    has_more: bool = False

    model_config = ConfigDict(extra="ignore")
