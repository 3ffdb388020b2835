# localca/services/trust_errors.py

class TrustError(Exception):
    """Base class for trust store installation errors."""


class UnknownTrustTargetError(TrustError):
    """Requested trust target is not one of the supported targets."""


class TrustInstallError(TrustError):
    """The platform tooling refused or failed to install the CA certificate."""
