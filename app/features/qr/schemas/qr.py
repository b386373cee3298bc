from typing import Any

from pydantic import BaseModel, Field


class GenerateQrRequest(BaseModel):
    # left untyped so a missing or non-text url reaches the pipeline
    # and is answered with "Invalid URL" instead of a schema error
    url: Any = None

    class Config:
        json_schema_extra = {
            "example": {
                "url": "example.com"
            }
        }


class GenerateQrResponse(BaseModel):
    data_url: str = Field(..., alias="dataUrl", description="PNG QR code as a base64 data URL")

    class Config:
        populate_by_name = True


class ErrorResponse(BaseModel):
    error: str
