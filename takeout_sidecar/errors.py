from typing import Optional


class DecodeError(ValueError):
    """Base error for a sidecar that cannot be decoded."""


class StructuralDecodeError(DecodeError):
    """Malformed JSON, or a field holding the wrong JSON type."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class EnrichmentShapeError(DecodeError):
    """An enrichment entry is neither a narrative nor a location block."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"enrichments[{index}]: {message}"
        super().__init__(message)
