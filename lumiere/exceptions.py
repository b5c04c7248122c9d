"""Errors raised by the editorial studio."""


class LumiereError(Exception):
    """Base class for studio errors."""


class MissingInputError(LumiereError, ValueError):
    """A batch was requested without a portrait or without any product image."""


class GenerationInProgressError(LumiereError):
    """A batch was requested while another one is still running."""


class NoImageReturnedError(LumiereError, RuntimeError):
    """The generation response contained no inline image part."""


class InvalidImageError(LumiereError, ValueError):
    """An uploaded file could not be read as an image."""


class CredentialError(LumiereError):
    """No API key is available for the generation call."""
