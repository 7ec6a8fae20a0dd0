"""Exception hierarchy shared by intake, gateway and workflow."""


class CVMasterError(Exception):
    """Base class for all application errors."""


# Document intake


class IntakeError(CVMasterError, ValueError):
    """An uploaded file was rejected. The message is shown to the user."""


class UnsupportedTypeError(IntakeError):
    def __init__(self, filename: str = "", content_type: str = ""):
        self.filename = filename
        self.content_type = content_type
        super().__init__("Please upload a PDF file so the document can be read correctly.")


class FileTooLargeError(IntakeError):
    def __init__(self, size: int, max_bytes: int):
        self.size = size
        self.max_bytes = max_bytes
        super().__init__(f"The file must not exceed {max_bytes // (1024 * 1024)} MB.")


class EncodingError(IntakeError):
    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__("The file could not be processed. Please try again.")


# Inference gateway


class GatewayError(CVMasterError):
    """The external analysis service did not produce a usable result."""


class MissingCredentialsError(GatewayError):
    pass


class TransportError(GatewayError):
    pass


class EmptyResponseError(GatewayError):
    pass


class SchemaViolationError(GatewayError):
    pass


# Workflow


class WorkflowContractError(CVMasterError, RuntimeError):
    """A transition was attempted without its prerequisite state.

    This is a programming error, never a user-facing condition.
    """
