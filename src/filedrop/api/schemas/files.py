# File transfer schemas — listing tree, conflict check, upload results.
# Created: 2026-10-19

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from filedrop.api.schemas.common import APIResponse


class FileNode(BaseModel):
    """A file in the listing tree."""

    name: str
    type: Literal["file"] = "file"
    relativePath: str
    size: int
    createdAt: datetime
    modifiedAt: datetime


class DirectoryNode(BaseModel):
    """A directory in the listing tree; children are nested nodes."""

    name: str
    type: Literal["directory"] = "directory"
    relativePath: str
    children: list[TreeNode] = []


TreeNode = Annotated[Union[FileNode, DirectoryNode], Field(discriminator="type")]

DirectoryNode.model_rebuild()


class FileListResponse(APIResponse):
    files: list[TreeNode] = []


class CheckFilesResponse(APIResponse):
    conflicts: list[str] = []


class UploadedFile(BaseModel):
    originalName: str
    filename: str
    relativePath: str
    fullPath: str
    size: int
    mimetype: str
    uploadTime: datetime


class UploadResponse(APIResponse):
    message: str
    files: list[UploadedFile] = []
