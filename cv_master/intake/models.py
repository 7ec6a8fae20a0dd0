"""Uploaded document model."""

import base64
from dataclasses import dataclass

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class UploadedDocument:
    """A validated upload, held as base64 text ready for the gateway."""

    filename: str
    mime_type: str
    size: int
    payload: str

    def decode(self) -> bytes:
        return base64.b64decode(self.payload)

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.payload}"
