"""
Conversion errors

Fatal errors stop the run before any output file is written.
ImageFetchFailed and CacheWriteFailed are recoverable and only logged.
"""


class ConversionError(Exception):
    """Base class for all converter errors"""
    pass


class MalformedChannelIdentifier(ConversionError):
    """Raised when a channel display-name is not '<id> <name>'"""
    pass


class UnknownChannelReference(ConversionError):
    """Raised when a programme references a channel that was never declared"""
    pass


class MissingRequiredField(ConversionError):
    """Raised when title, start or stop is absent from a record"""
    pass


class DateFormatError(ConversionError, ValueError):
    """Raised when an XMLTV timestamp is invalid"""
    pass


class ReplacementImageUnreadable(ConversionError):
    """Raised when a replacement poster cannot be read from disk"""
    pass


class ReplacementConfigInvalid(ConversionError):
    """Raised when the replacements JSON file cannot be parsed"""
    pass


class ImageFetchFailed(ConversionError):
    """Raised by fetchers when a preview image cannot be downloaded"""
    pass


class CacheWriteFailed(ConversionError):
    """Raised when a downloaded poster cannot be written to the cache directory"""
    pass
