# localca/commands/emit/register.py

from __future__ import annotations

import argparse

from .actions import handle_emit_k8s_secret, handle_emit_traefik
from localca.commands.helpers import show_help
from localca.constants import DEFAULT_K8S_CONF


def _add_k8s_secret_subcommand(actions: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """
    Register `emit k8s-secret`
    """
    parser = actions.add_parser('k8s-secret',
        help='Write a Kubernetes TLS secret from the leaf and CA in the output directory')
    parser.add_argument('--name',
        default=DEFAULT_K8S_CONF['name'],
        help='Name of the Kubernetes secret')
    parser.add_argument('--namespace',
        default=DEFAULT_K8S_CONF['namespace'],
        help='Namespace of the Kubernetes secret')
    parser.add_argument('--out',
        metavar='FILE',
        help='Manifest file (default: <out-dir>/<name>-secret.yaml)')

    parser.set_defaults(handler=handle_emit_k8s_secret)

    return parser

def _add_traefik_subcommand(actions: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """
    Register `emit traefik`
    """
    parser = actions.add_parser('traefik',
        help='Write fullchain.pem and key.pem from the leaf and CA in the output directory')
    parser.add_argument('-d', '--dir',
        required=True,
        help='Bundle directory, created if absent')

    parser.set_defaults(handler=handle_emit_traefik)

    return parser

def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `emit` command and its actions.
    """
    parser = subparsers.add_parser(
        'emit',
        add_help=True,
        help='Package issued certificates for a consumer',
    )

    actions = parser.add_subparsers(
        title='Actions',
        dest='action',
    )

    _add_k8s_secret_subcommand(actions)
    _add_traefik_subcommand(actions)

    parser.set_defaults(handler=show_help, _parser=parser)
