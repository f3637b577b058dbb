#!/usr/bin/env python3
"""
Ghostline Exception Hierarchy
Errors raised by registration, configuration and completion providers
"""

class GhostlineException(Exception):
    """Base exception for all Ghostline errors"""
    def __init__(self, message, code=None, details=None):
        self.message = message
        self.code = code or "UNKNOWN_ERROR"
        self.details = details or {}
        super().__init__(self.message)
    
    def to_dict(self):
        """Convert exception to dict for logging/output"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(GhostlineException):
    """Raised when configuration is invalid or missing"""
    def __init__(self, message, config_key=None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, "CONFIG_ERROR", details)


class RegistryError(GhostlineException):
    """Raised when a command or group cannot be registered"""
    def __init__(self, message, command=None, group=None):
        details = {}
        if command:
            details["command"] = command
        if group:
            details["group"] = group
        super().__init__(message, "REGISTRY_ERROR", details)


class MetadataError(GhostlineException):
    """Raised when a completion descriptor references something that does not exist"""
    def __init__(self, message, command=None, argument=None, reference=None):
        details = {}
        if command:
            details["command"] = command
        if argument:
            details["argument"] = argument
        if reference:
            details["reference"] = reference
        super().__init__(message, "METADATA_ERROR", details)


class ProviderError(GhostlineException):
    """Raised (and contained) when a completion provider fails"""
    def __init__(self, message, provider=None, cause=None):
        details = {}
        if provider:
            details["provider"] = provider
        if cause is not None:
            details["cause"] = repr(cause)
        super().__init__(message, "PROVIDER_ERROR", details)
