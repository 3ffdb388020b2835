# localca/commands/ca/register.py

from __future__ import annotations

import argparse

from .actions import handle_ca_init, handle_ca_info
from localca.commands.helpers import show_help
from localca.constants import DEFAULT_CA_CN, DEFAULT_DAYS


def _add_init_subcommand(actions: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """
    Register `ca init`
    """
    parser = actions.add_parser('init',
        help='Reuse the local root CA, generating the key and certificate if absent'
    )
    parser.add_argument('--ca-cn',
        default=DEFAULT_CA_CN,
        help='x509 Common Name for a newly generated CA (an existing CA is never replaced)'
    )
    parser.add_argument('--root-ca-key',
        required=False,
        help='Path of the CA private key (default: <out-dir>/root-ca.key)'
    )
    parser.add_argument('--ca-days',
        type=int,
        default=DEFAULT_DAYS['ca'],
        help='The number of days a newly generated CA certificate is valid for'
    )
    parser.set_defaults(handler=handle_ca_init)

    return parser

def _add_info_subcommand(actions: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """
    Register `ca info`
    """
    parser = actions.add_parser('info',
        help='Show the local root CA certificate'
    )
    parser.add_argument('--root-ca-key',
        required=False,
        help='Path of the CA private key, checked against the certificate when present'
    )
    parser.set_defaults(handler=handle_ca_info)

    return parser

def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `ca` command and its actions.
    """
    parser = subparsers.add_parser(
        'ca',
        add_help=True,
        help='Perform Certificate Authority actions',
    )

    actions = parser.add_subparsers(
        title='Actions',
        dest='action',
    )

    _add_init_subcommand(actions)
    _add_info_subcommand(actions)

    parser.set_defaults(handler=show_help, _parser=parser)
