# errors.py
"""Error hierarchy for code generation. All generator errors extend GenerationError."""


class GenerationError(Exception):
    """Base error for everything the generator reports."""

    message = "Code generation failed"

    def __init__(self, message=None, **details):
        self.message = message or self.__class__.message
        self.details = details
        super().__init__(self.message)


class InvalidConfiguration(GenerationError):
    """Envelope shape selected while the envelope factory name is empty."""

    message = "Invalid @JsonToModel configuration"


class UnsupportedTarget(GenerationError):
    """@JsonToModel attached to something that is not a class."""

    message = "@JsonToModel can only be applied to classes"


class InvalidSignature(GenerationError):
    """Abstract method with no parameter carrying the raw JSON value."""

    message = "Method has no parameter to decode from"


class DeclarationError(GenerationError):
    """Declaration input that cannot be read or has an unexpected structure."""

    message = "Invalid declaration input"
