# localca/services/sops_errors.py

class SopsError(Exception):
    """Base class for errors raised by the SOPS encryption integration."""


class SopsPreconditionError(SopsError):
    """No age recipients configured and no local age key file present."""


class SopsNotFoundError(SopsError):
    """The sops binary is not installed or not on PATH."""


class EncryptionFailedError(SopsError):
    """sops returned a non-zero status for a file."""
