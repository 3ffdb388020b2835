#!/usr/bin/env python3
"""
#
# localca - Local Certificate Authority
#

Bootstrap or reuse a local root CA, issue leaf certificates signed by it and
package them as Kubernetes TLS secrets, Traefik bundles and SOPS encrypted files.

Requirements:
  - Python 3.9+
  - Cryptography (pyca/cryptography) - https://cryptography.io
  - Pydantic, PyYAML

Optional Requirements:
  - sops - encrypted siblings of emitted artifacts
  - certutil / update-ca-certificates / security - trust store installation

"""
from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Callable

from pydantic import ValidationError

from localca import __version__, __title__, __short_title__
from .constants import DEFAULT_OUT_DIR, EXIT_FATAL, EXIT_VALIDATION_ERROR, OUT_DIR_ENV
from .commands import register_all
from .models.app import App
from .utils.formatting import title, error

from .services.ca_errors import CAError, ProfileValidationError
from .services.sops_errors import SopsError
from .services.trust_errors import TrustError, UnknownTrustTargetError

log = logging.getLogger(__name__)


def build_parser(prog_desc: str) -> argparse.ArgumentParser:
    """ Build the command line argument parser """

    parser = argparse.ArgumentParser(
        prog="localca",
        description=prog_desc,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("-o", "--out-dir",
        default=os.environ.get(OUT_DIR_ENV, DEFAULT_OUT_DIR),
        help=f"Output directory (env {OUT_DIR_ENV})"
    )

    parser.add_argument("--log-level",
        default="INFO",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Set logging verbosity",
    )

    parser.add_argument("--version",
        action="version",
        version=f"{__title__} {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command", required=True)

    register_all(subparsers)

    return parser

# ---------------------
# Entry point
# ---------------------

def main(argv: Optional[list[str]] = None) -> int:

    description: str = f'{__title__} - {__short_title__} v{__version__}'

    parser: argparse.ArgumentParser = build_parser(description)
    args: argparse.Namespace = parser.parse_args(argv)
    handler: Optional[Callable[[App], int]] = getattr(args, "handler", None)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    title(description, 1)

    if handler is None:
        logging.error("Unknown command: %s", getattr(args, "command", None))
        return EXIT_FATAL

    try:
        app: App = App.from_args(args=args)

        return handler(app)

    except ValidationError as e:
        # Option values rejected before any stage ran
        for err in e.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            error(f"Invalid value for {field}: {err['msg']}")
        return EXIT_VALIDATION_ERROR
    except (ProfileValidationError, UnknownTrustTargetError) as e:
        error(f"Validation failed: {e}")
        return EXIT_VALIDATION_ERROR
    except CAError as e:
        # Certificate authority, issuance, emitter and file problems
        error(str(e))
        return EXIT_FATAL
    except SopsError as e:
        error(f"Encryption failed: {e}")
        return EXIT_FATAL
    except TrustError as e:
        error(f"Trust installation failed: {e}")
        return EXIT_FATAL
    except SystemExit:
        raise
    except Exception:
        log.exception("Unexpected error")
        return EXIT_FATAL

if __name__ == "__main__":
    raise SystemExit(main())
