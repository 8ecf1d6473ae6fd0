"""
Exception types for moddetective.

Detected defects are never raised one by one; they are collected into a
BadModReport. The exceptions here cover host-side infrastructure failures
and the single terminal failure raised by the driver.
"""


class ModDetectiveError(Exception):
    """Base class for all moddetective errors."""


class ConfigError(ModDetectiveError):
    """Invalid configuration value."""


class ModLoaderError(ModDetectiveError):
    """The mod list could not be obtained from the host."""


class MetadataError(ModDetectiveError):
    """A mod metadata file could not be parsed."""

    def __init__(self, message: str, origin: str = "<string>"):
        super().__init__(f"{origin}: {message}")
        self.origin = origin


class TypeResolutionError(ModDetectiveError):
    """A host type identifier could not be resolved to a class name."""
