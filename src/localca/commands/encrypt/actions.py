# localca/commands/encrypt/actions.py

from __future__ import annotations

import dataclasses
import logging

from localca.constants import EXIT_OK
from localca.models import App
from localca.services.sops import Artifact, EncryptionPipeline, SopsConfig
from localca.utils.formatting import highlight, print_result, title

log = logging.getLogger(__name__)


def handle_encrypt(app: App) -> int:
    title('SOPS Encryption', 2)

    config = SopsConfig.from_environ()
    if getattr(app.args, 'sops_bin', None):
        config = dataclasses.replace(config, binary=app.args.sops_bin)

    pipeline = EncryptionPipeline(config)
    sops = pipeline.check_preconditions()
    log.debug("Using sops at %s", sops.bin)

    for artifact in [Artifact.of(f) for f in app.args.files]:
        title(f'Encrypting [ {highlight(artifact.path)} ]', 9)
        try:
            pipeline.run([artifact])
        except Exception:
            print_result(False)
            raise
        print_result(True)
        title(f'  {highlight(artifact.sibling)}', 7)

    return EXIT_OK
