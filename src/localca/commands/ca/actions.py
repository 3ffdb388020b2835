# localca/commands/ca/actions.py

from __future__ import annotations

import logging

from localca.commands.helpers import prune_opts
from localca.constants import EXIT_OK
from localca.models import App
from localca.models.options import CAInitOptions
from localca.services.ca import CertificateAuthority, prepare_cert_authority
from localca.services.cert import CertificateBundle
from localca.utils.formatting import highlight, print_result, title

log = logging.getLogger(__name__)


def resolve_ca(app: App, ca_cn: str, ca_days: int) -> CertificateAuthority:
    """ CA stage shared by `ca init` and `cert create` """
    paths = app.paths

    title(f'Resolving CA [ {highlight(paths.ca_cert)} ]', 9)
    try:
        ca = prepare_cert_authority(
            key_path=paths.ca_key,
            cert_path=paths.ca_cert,
            common_name=ca_cn,
            days=ca_days,
        )
    except Exception:
        print_result(False)
        raise
    print_result(True)

    title(f'CA key {ca.key_action}, certificate {ca.cert_action} '
          f'[ {highlight(ca.common_name)} ]', 7)

    if ca.reused and ca.common_name != ca_cn:
        title(f'Existing CA kept; requested CN {highlight(ca_cn)} not applied. '
              'Use another --out-dir or --root-ca-key for a different CA.', 7)

    return ca

def handle_ca_init(app: App) -> int:
    title('Initialising the Certificate Authority', 3)

    opts = prune_opts(CAInitOptions, app.args)
    resolve_ca(app, ca_cn=opts.ca_cn, ca_days=opts.ca_days)

    return EXIT_OK

def handle_ca_info(app: App) -> int:
    title('Certificate Authority', 2, extra=app.paths.ca_cert)

    key_path = app.paths.ca_key if app.paths.ca_key.is_file() else None
    bundle = CertificateBundle.from_files(cert_path=app.paths.ca_cert, key_path=key_path)

    print(f"Subject: {bundle.get_certificate_attrib('subject')}")
    print(f"Serial: {bundle.get_certificate_attrib('serial')}")
    print(f"Key Size: {bundle.get_certificate_attrib('key_size')}-bit RSA")
    print(f"Valid From: {bundle.get_certificate_attrib('not_before')}")
    print(f"Expiry Date: {bundle.get_certificate_attrib('not_after')}")

    if key_path is not None:
        title(f'Private key matches [ {highlight(key_path)} ]', 9)
        print_result(bundle.key_matches())

    return EXIT_OK
