from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FileUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_key: str = Field(..., alias="fileKey")
    original_filename: str = Field(..., alias="originalFilename")
    size: int
    estimated_pages: int = Field(..., alias="estimatedPages")
