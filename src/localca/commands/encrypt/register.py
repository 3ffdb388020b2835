# localca/commands/encrypt/register.py

from __future__ import annotations

import argparse

from .actions import handle_encrypt


def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `encrypt` command.
    """
    parser = subparsers.add_parser(
        'encrypt',
        help='Write SOPS encrypted siblings of existing files',
    )
    parser.add_argument('files',
        nargs='+',
        metavar='FILE',
        help='Plaintext files; *.yaml files are encrypted as YAML documents')
    parser.add_argument('--sops-bin',
        help='Path of the sops binary')

    parser.set_defaults(handler=handle_encrypt)
