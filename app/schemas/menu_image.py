"""Menu image schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class MenuImageRead(BaseModel):
    id: int
    url: str
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)
