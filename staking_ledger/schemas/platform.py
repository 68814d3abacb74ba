"""
Platform registry schemas.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class AuthorityRequest(BaseModel):
    authority: str = Field(..., description="Hex identity to add")


class PlatformResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    authorities: List[str]
    project_count: int
    data_len: int
    deposit: int
