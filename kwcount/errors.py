class KwCountError(Exception):
    """Base class for every error that aborts a keyword count run"""

class ConfigError(KwCountError):
    """Worker count missing, non-numeric or non-positive"""

class KeywordFileError(KwCountError):
    """Keyword list could not be opened or read"""

class InputFileError(KwCountError):
    """Input text could not be opened"""

class InputReadError(InputFileError):
    """Input text failed while it was being read"""

class RunCancelled(KwCountError):
    """The run's cancellation signal was raised before the workers finished"""
