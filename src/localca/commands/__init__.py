# localca/commands/__init__.py

from __future__ import annotations

import argparse

from . import ca, cert, emit, encrypt, trust

def register_all(subparsers: argparse._SubParsersAction) -> None:
    """
    Register all subcommands here
    """
    ca.register(subparsers)
    cert.register(subparsers)
    emit.register(subparsers)
    encrypt.register(subparsers)
    trust.register(subparsers)
