# localca/commands/emit/actions.py

from __future__ import annotations

from pathlib import Path

from localca.commands.helpers import prune_opts
from localca.constants import EXIT_OK
from localca.models import App
from localca.models.options import K8sSecretOptions
from localca.services.emitters import emit_k8s_secret, emit_traefik_bundle
from localca.utils.formatting import highlight, print_result, title


def handle_emit_k8s_secret(app: App) -> int:
    opts = prune_opts(K8sSecretOptions, app.args)
    out_path = Path(opts.out) if opts.out else app.paths.secret_manifest(opts.name)

    title(f'Writing Kubernetes secret [ {highlight(out_path)} ]', 9)
    emit_k8s_secret(
        name=opts.name,
        namespace=opts.namespace,
        out_path=out_path,
        cert_path=app.paths.leaf_cert,
        key_path=app.paths.leaf_key,
        ca_cert_path=app.paths.ca_cert,
    )
    print_result(True)

    return EXIT_OK

def handle_emit_traefik(app: App) -> int:
    title(f'Writing Traefik bundle [ {highlight(app.args.dir)} ]', 9)
    emit_traefik_bundle(
        cert_path=app.paths.leaf_cert,
        ca_cert_path=app.paths.ca_cert,
        key_path=app.paths.leaf_key,
        out_dir=Path(app.args.dir),
    )
    print_result(True)

    return EXIT_OK
