from typing import Any, Optional
from pydantic import BaseModel

class SubjectIdRequest(BaseModel):
    # Untyped so a missing or malformed id ends up as NotFound instead of a
    # validation error; parse_id decides what counts as an id
    id: Any = None

class BannerRequest(BaseModel):
    title: str
    description: Optional[str] = None
    image_link: Optional[str] = None
    redirect_link: Optional[str] = None
