"""
Exception types shared across Sieve.
"""


class ConfigurationError(Exception):
    """
    Raised when a filter or pipeline cannot be set up from its configuration.

    Fatal: the pipeline does not start when this is raised.
    """


class ExtractionError(Exception):
    """Raised when a field reference cannot be resolved against an event."""

    def __init__(self, template: str, reference: str):
        super().__init__(f"Cannot resolve field '{reference}' in '{template}'")
        self.template = template
        self.reference = reference
