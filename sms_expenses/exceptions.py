"""Exceptions raised by the SMS expense reader."""


class SmsReaderError(Exception):
    """Base exception for the SMS expense reader"""
    pass


class SmsSourceError(SmsReaderError):
    """The SMS-access capability failed to list messages"""
    pass


class PermissionRequestError(SmsReaderError):
    """The permission provider failed while asking for access"""
    pass


class ConfigurationError(SmsReaderError):
    """Invalid or missing settings"""
    pass


class ScreenStateError(SmsReaderError):
    """An action was requested in a screen state that does not allow it"""
    pass
