# localca/services/ca_errors.py

class CAError(Exception):
    """Base class for Certificate Authority and issuance errors."""


class ProfileValidationError(CAError):
    """Raised when an identity or issuance profile is invalid (checked before any key is made)."""


class SANRequiredError(ProfileValidationError):
    """Raised when a server-capable profile is requested without any Subject Alternative Names."""


class CAKeyMismatchError(CAError):
    """Raised when an existing CA certificate was not made for the CA private key beside it."""


class CryptoBackendError(CAError):
    """Raised when key generation, CSR creation or signing fails."""


class ArtifactNotFoundError(CAError):
    """Raised when a stage expects prior output that does not exist."""


class ArtifactWriteError(CAError):
    """Raised when an artifact cannot be written to disk."""


class InvalidCertificateError(CAError):
    """Raised when a certificate or private key cannot be parsed."""


class CAExpiredError(CAError):
    """Raised when an existing CA certificate is outside its validity window."""
