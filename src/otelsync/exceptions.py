"""Exception classes for otelsync."""


class ConfigurationError(Exception):
    """Raised when operator configuration or an input manifest is invalid.

    In permissive validation mode only unreadable files raise this error;
    missing values are logged and defaulted instead.
    """


class SynthesisError(Exception):
    """Raised when a synthesis pass cannot produce a collector config.

    This covers structural problems only (unknown destination type,
    malformed processor declaration, name collisions). A single
    misconfigured destination never raises this in permissive mode.
    """


class UnknownDestinationTypeError(SynthesisError):
    """Raised when no adapter is registered for a destination type."""

    def __init__(self, destination_type: str) -> None:
        self.destination_type = destination_type
        super().__init__(f"No adapter registered for destination type '{destination_type}'")


class ProcessorDeclarationError(SynthesisError):
    """Raised when a processor declaration cannot be merged."""


class DestinationConfigError(Exception):
    """Base class for problems confined to a single destination.

    Adapters raise these before touching the collector config; the
    synthesis engine catches them at the adapter boundary.
    """


class MissingFieldError(DestinationConfigError):
    """Raised when a destination lacks a field its adapter requires."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{key} not specified")


class FieldValidationError(DestinationConfigError):
    """Raised when a destination field is present but malformed."""
