"""Exceptions raised by the merge pipeline.

Every fatal condition is one of these by the time it reaches the orchestrator,
which turns it into a status string instead of letting it escape.
"""


class PraiseSlidesError(Exception):
    """Base class for all praise2slides pipeline errors."""


class ConfigurationError(PraiseSlidesError):
    """Required configuration is missing or invalid. Raised before any deck is opened."""


class ResourceOpenError(PraiseSlidesError):
    """The responses sheet, the template deck, or the target deck could not be opened."""


class MergeError(PraiseSlidesError):
    """Appending or filling in the slide for one submission failed."""


class SerializationError(PraiseSlidesError):
    """Persisted state could not be parsed. Callers treat this as "nothing processed yet"."""
