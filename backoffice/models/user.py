"""
Session user model.
The back office keeps the acting operator's display name in the signed session cookie.
"""
from pydantic import BaseModel, Field, ConfigDict


class SessionUser(BaseModel):
    """Operator signed in to the back office."""
    name: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True)
