"""Typed failures of the story generation pipeline."""


class GenerationError(Exception):
    """Base class for failures reported to the caller of a generation request."""

    code = "generation_error"


class InvalidRequest(GenerationError):
    """Caller supplied missing or malformed input."""

    code = "invalid_request"


class InvalidStyle(InvalidRequest):
    code = "invalid_style"

    def __init__(self, style):
        self.style = style
        super().__init__(f"Unknown writing style: {style!r}")


class ServiceUnavailable(GenerationError):
    """Story generation is not configured on this server."""

    code = "service_unavailable"


class GenerationFailed(GenerationError):
    """The generation service errored or returned unusable output."""

    code = "generation_failed"
