# localca/models/__init__.py

from .app import App
from .identity import CertificateIdentity, IssuanceProfile, SubjectAltName
from .layout import OutputPaths

__all__ = [
    "App",
    "CertificateIdentity",
    "IssuanceProfile",
    "OutputPaths",
    "SubjectAltName",
]
