from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class ExistenceCheck(str, Enum):
    """Outcome of checking GitHub for a repository or file."""

    EXISTS = "exists"
    ABSENT = "absent"
    CHECK_FAILED = "check_failed"


class UploadRequest(BaseModel):
    class_id: str
    kind: str = "question"
    filename: Optional[str] = None
    content: str
    date: str

    @field_validator("class_id")
    @classmethod
    def normalize_class_id(cls, value: str) -> str:
        # Repository names are lower-case.
        return value.lower()

    @property
    def is_answer(self) -> bool:
        return self.kind == "answer"

    @property
    def class_label(self) -> str:
        return self.class_id.upper()


class StoredFile(BaseModel):
    url: Optional[str] = None
    sha: Optional[str] = None
    path: str


class WebhookPayload(BaseModel):
    class_name: str = Field(serialization_alias="class")
    date: str
    content: str


class UploadResult(BaseModel):
    message: str
    github: StoredFile
    drive: Any = None
