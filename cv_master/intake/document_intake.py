"""Upload validation and transport encoding."""

import base64
import binascii
import logging
import re
from typing import Union

from cv_master.errors import EncodingError, FileTooLargeError, UnsupportedTypeError
from cv_master.intake.models import PDF_MIME_TYPE, UploadedDocument

logger = logging.getLogger("cv_master.intake")

DEFAULT_MAX_BYTES = 5 * 1024 * 1024

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*?;base64,", re.IGNORECASE)


def is_pdf(filename: str, content_type: str) -> bool:
    """Accept on the declared type or, when browsers misreport it, the suffix."""
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    return declared == PDF_MIME_TYPE or (filename or "").lower().endswith(".pdf")


def strip_data_url_prefix(text: str) -> str:
    """Drop a leading ``data:<type>;base64,`` so only the payload remains."""
    return _DATA_URL_PREFIX.sub("", text.strip(), count=1)


def _to_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    try:
        return base64.b64decode(strip_data_url_prefix(data), validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(str(e)) from e


def submit_file(
    filename: str,
    content_type: str,
    data: Union[bytes, str],
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> UploadedDocument:
    """Validate an upload and encode it for the inference gateway.

    ``data`` is either the raw file bytes or a base64 data URL as produced by
    a browser ``FileReader``. Checks run in order and the first failure wins:
    media type, then size, then encoding.
    """
    if not is_pdf(filename, content_type):
        logger.info("Rejected upload '%s' with type '%s'", filename, content_type)
        raise UnsupportedTypeError(filename, content_type)

    if isinstance(data, str):
        # Size check needs the decoded length; an undecodable payload fails here
        raw = _to_bytes(data)
    else:
        raw = bytes(data)

    if len(raw) > max_bytes:
        logger.info("Rejected upload '%s': %d bytes exceeds %d", filename, len(raw), max_bytes)
        raise FileTooLargeError(len(raw), max_bytes)

    payload = base64.b64encode(raw).decode("ascii")

    logger.info("Accepted upload '%s' (%d bytes)", filename, len(raw))
    return UploadedDocument(
        filename=filename,
        mime_type=PDF_MIME_TYPE,
        size=len(raw),
        payload=payload,
    )
