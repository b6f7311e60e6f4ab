"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationInfo, field_validator


def _not_blank(value: str, field_name: str) -> str:
    stripped = value.strip()
    if not stripped:
        msg = f"{field_name} must not be empty."
        raise ValueError(msg)
    return stripped


class CreateRepositoryRequest(BaseModel):
    """Request body for ``POST /repos``."""

    name: str
    description: str = ""
    private: bool = False

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        return _not_blank(v, "name")


class CreateBranchRequest(BaseModel):
    """Request body for ``POST /repos/{owner}/{repo}/branches``."""

    name: str
    from_sha: str

    @field_validator("name", "from_sha")
    @classmethod
    def _required(cls, v: str, info: ValidationInfo) -> str:
        return _not_blank(v, info.field_name)


class WriteFileRequest(BaseModel):
    """Request body for ``PUT /repos/{owner}/{repo}/file``."""

    path: str
    content: str
    message: str
    sha: str | None = None
    branch: str = "main"

    @field_validator("path", "message")
    @classmethod
    def _required(cls, v: str, info: ValidationInfo) -> str:
        return _not_blank(v, info.field_name)


class DeleteFileRequest(BaseModel):
    """Request body for ``DELETE /repos/{owner}/{repo}/file``."""

    path: str
    message: str
    sha: str
    branch: str = "main"

    @field_validator("path", "message", "sha")
    @classmethod
    def _required(cls, v: str, info: ValidationInfo) -> str:
        return _not_blank(v, info.field_name)


class UploadFileItem(BaseModel):
    path: str
    content: str
    name: str | None = None

    @field_validator("path")
    @classmethod
    def _path_required(cls, v: str) -> str:
        return _not_blank(v, "path")


class UploadFilesRequest(BaseModel):
    """Request body for ``POST /repos/{owner}/{repo}/upload``."""

    files: list[UploadFileItem] = Field(min_length=1)
    branch: str = "main"


class FileContentResponse(BaseModel):
    path: str
    branch: str
    content: str


class ExistsResponse(BaseModel):
    exists: bool


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
