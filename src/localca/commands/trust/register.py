# localca/commands/trust/register.py

from __future__ import annotations

import argparse

from .actions import handle_trust_install
from localca.commands.helpers import show_help
from localca.constants import TRUST_TARGETS


def _add_install_subcommand(actions: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """
    Register `trust install`
    """
    parser = actions.add_parser('install',
        help='Install the CA certificate into a trust store')
    parser.add_argument('-t', '--target',
        required=True,
        help=f"Trust store: {', '.join(TRUST_TARGETS)}")
    parser.add_argument('--ca-cert',
        help='CA certificate (default: <out-dir>/local-ca.crt)')

    parser.set_defaults(handler=handle_trust_install)

    return parser

def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `trust` command and its actions.
    """
    parser = subparsers.add_parser(
        'trust',
        add_help=True,
        help='Perform trust store actions',
    )

    actions = parser.add_subparsers(
        title='Actions',
        dest='action',
    )

    _add_install_subcommand(actions)

    parser.set_defaults(handler=show_help, _parser=parser)
