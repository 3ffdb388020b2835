# localca/models/app.py

import logging
from argparse import Namespace
from dataclasses import dataclass

from localca.models.layout import OutputPaths

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class App:
    """
    Lightweight application context passed to all handlers.
    Holds the parsed arguments and the resolved output layout.
    """
    args: Namespace
    paths: OutputPaths

    @classmethod
    def from_args(cls, args: Namespace) -> "App":
        paths = OutputPaths.build(
            out_dir=args.out_dir,
            root_ca_key=getattr(args, "root_ca_key", None),
        )
        log.debug("Output directory resolved to %s", paths.out_dir)

        return cls(args=args, paths=paths)
