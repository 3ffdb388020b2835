# localca/commands/cert/register.py

from __future__ import annotations

import argparse

from .actions import handle_cert_create, handle_cert_info
from localca.commands.helpers import show_help
from localca.constants import (
    DEFAULT_CA_CN,
    DEFAULT_DAYS,
    DEFAULT_K8S_CONF,
    DEFAULT_LEAF_CN,
    DEFAULT_PROFILE,
    TRUST_TARGETS,
)


def _add_create_subcommand(actions: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """
    Register `cert create`
    """
    parser = actions.add_parser('create',
        help='Issue a leaf certificate and emit the requested artifacts')

    identity = parser.add_argument_group('Identity')
    identity.add_argument('-n', '--cn',
        default=DEFAULT_LEAF_CN,
        help='x509 Common Name of the leaf certificate')
    identity.add_argument('--san',
        action='append',
        metavar='TYPE:VALUE',
        help='Subject Alternative Name, DNS:<name> or IP:<address>. Repeatable.')
    identity.add_argument('--subject-extra',
        metavar='/O=../OU=../C=..',
        help='Extra subject attributes appended after the CN')
    identity.add_argument('-p', '--profile',
        default=DEFAULT_PROFILE,
        help='Usage profile: server, client or both')
    identity.add_argument('--days',
        type=int,
        default=DEFAULT_DAYS['leaf'],
        help='The number of days the leaf certificate is valid for')

    authority = parser.add_argument_group('Certificate Authority')
    authority.add_argument('--ca-cn',
        default=DEFAULT_CA_CN,
        help='x509 Common Name for a newly generated CA')
    authority.add_argument('--root-ca-key',
        help='Path of the CA private key (default: <out-dir>/root-ca.key)')
    authority.add_argument('--ca-days',
        type=int,
        default=DEFAULT_DAYS['ca'],
        help='The number of days a newly generated CA certificate is valid for')

    outputs = parser.add_argument_group('Outputs')
    outputs.add_argument('--emit-k8s-secret',
        action='store_true',
        help='Write a Kubernetes TLS secret manifest')
    outputs.add_argument('--k8s-name',
        default=DEFAULT_K8S_CONF['name'],
        help='Name of the Kubernetes secret')
    outputs.add_argument('--k8s-namespace',
        default=DEFAULT_K8S_CONF['namespace'],
        help='Namespace of the Kubernetes secret')
    outputs.add_argument('--emit-traefik',
        metavar='DIR',
        help='Write fullchain.pem and key.pem into DIR')
    outputs.add_argument('--install-trust',
        metavar='TARGET',
        help=f"Install the CA into a trust store: {', '.join(TRUST_TARGETS)}")
    outputs.add_argument('--emit-sops',
        action='store_true',
        help='Write SOPS encrypted siblings (*.sops) of the emitted files')

    parser.set_defaults(handler=handle_cert_create)

    return parser

def _add_info_subcommand(actions: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """
    Register `cert info`
    """
    parser = actions.add_parser('info',
        help='Show a leaf certificate')
    parser.add_argument('-c', '--cert-file',
        help='Certificate file (default: <out-dir>/local-cert.pem)')

    parser.set_defaults(handler=handle_cert_info)

    return parser

def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `cert` command and its actions.
    """
    parser = subparsers.add_parser(
        'cert',
        add_help=True,
        help='Perform Certificate actions',
    )

    actions = parser.add_subparsers(
        title='Actions',
        dest='action',
    )

    _add_create_subcommand(actions)
    _add_info_subcommand(actions)

    parser.set_defaults(handler=show_help, _parser=parser)
