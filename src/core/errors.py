"""Errors raised by the core and adapters.

The CLI turns any `AemEdgeError` into a red message and exit code 1.
"""

from __future__ import annotations


class AemEdgeError(Exception):
    """Base class for errors with a user-facing message."""


class ConfigurationError(AemEdgeError):
    """Required setting missing (org id, token, ...)."""


class ConfigStoreError(AemEdgeError):
    """A config file exists but cannot be read as a JSON object."""


class IdentityError(AemEdgeError):
    """The IMS context cannot provide a usable token or API key."""


class ContextNotConfiguredError(IdentityError):
    code = "CONTEXT_NOT_CONFIGURED"


class TokenUnavailableError(IdentityError):
    """The context has no cached access token, or it expired."""


class InvalidServiceIdError(AemEdgeError):
    pass


class FastlyCliNotFoundError(AemEdgeError):
    pass
