# localca/commands/trust/actions.py

from __future__ import annotations

from pathlib import Path

from localca.constants import EXIT_FATAL, EXIT_OK
from localca.models import App
from localca.services.trust import install_trust, resolve_trust_target
from localca.utils.files import require_files
from localca.utils.formatting import highlight, print_result, title


def handle_trust_install(app: App) -> int:
    ca_cert = Path(app.args.ca_cert) if getattr(app.args, 'ca_cert', None) else app.paths.ca_cert

    resolve_trust_target(app.args.target)
    require_files(ca_cert)

    title(f'Installing [ {highlight(ca_cert)} ] into [ {highlight(app.args.target)} ]', 9)
    ok = print_result(install_trust(app.args.target, ca_cert))

    return EXIT_OK if ok else EXIT_FATAL
