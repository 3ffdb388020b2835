# localca/commands/helpers.py

from __future__ import annotations

import argparse
from typing import Type, TypeVar

from pydantic import BaseModel

from localca.constants import EXIT_OK
from localca.models import App

M = TypeVar("M", bound=BaseModel)

def prune_opts(model: Type[M], ns: argparse.Namespace) -> M:
    """
    Prune an argparse namespace down to fields the Pydantic model knows about,
    then validate. Unknown args (out_dir, handler, etc.) are ignored, and so are
    options left unset so the model defaults apply.
    """
    data = vars(ns)
    allowed = model.model_fields.keys()
    pruned = {k: data[k] for k in allowed if k in data and data[k] is not None}

    return model.model_validate(pruned)

def show_help(app: App) -> int:
    """ Default handler for a command group invoked without an action """
    app.args._parser.print_help()
    return EXIT_OK
