from __future__ import annotations

import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, list):
        return any(_has_non_finite(v) for v in value)
    if isinstance(value, dict):
        return any(_has_non_finite(v) for v in value.values())
    return False


class User(BaseModel):
    """
    The signed-in user, persisted as a single JSON object.

    Fields
    - id: account id assigned by the server.
    - name / given_name / family_name / email / picture / locale: profile data.
    - created_at / updated_at: server timestamps, kept verbatim as strings.
    - access_token: API token for the account.
    - role: account role (e.g., "admin"), if any.
    - github_access_token / github_username: linked GitHub identity.

    Notes
    - Every field is optional; a record may carry only a subset (e.g., just `name`).
    - Keys this model does not know are kept and written back unchanged. Their
      values must be plain JSON; tuples, sets, datetimes and NaN/inf are
      rejected so that what is read back equals what was written.
    """

    model_config = ConfigDict(extra="allow")

    __pydantic_extra__: Dict[str, JsonValue] = Field(init=False)

    id: Optional[int] = Field(default=None, description="Server-assigned account id")
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    email: Optional[str] = None
    picture: Optional[str] = Field(default=None, description="Avatar URL")
    locale: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    access_token: Optional[str] = Field(default=None, repr=False)
    role: Optional[str] = None
    github_access_token: Optional[str] = Field(default=None, repr=False)
    github_username: Optional[str] = None

    @model_validator(mode="after")
    def _extras_are_finite(self) -> "User":
        # JSON has no NaN/inf; they would be written as null
        for key, value in (self.model_extra or {}).items():
            if _has_non_finite(value):
                raise ValueError(f"extra field {key!r} contains a non-finite number")
        return self
