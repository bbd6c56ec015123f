from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ThreadRead(BaseModel):
    id: str
    object: Optional[str] = None
    created_at: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="ignore")
