# localca/commands/cert/actions.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from localca.commands.ca.actions import resolve_ca
from localca.commands.helpers import prune_opts
from localca.constants import COLOUR_ERROR, COLOUR_OK, COLOUR_RESET, EXIT_OK
from localca.models import App, CertificateIdentity, IssuanceProfile
from localca.models.options import CertCreateOptions
from localca.services.cert import CertificateBundle
from localca.services.emitters import emit_k8s_secret, emit_traefik_bundle
from localca.services.issuer import LeafIssuer
from localca.services.profile import build_csr_profile
from localca.services.sops import Artifact, EncryptionPipeline, SopsConfig
from localca.services.trust import install_trust, resolve_trust_target
from localca.utils.datetime import days_remaining
from localca.utils.formatting import highlight, print_result, title

log = logging.getLogger(__name__)


def _stage(text: str, func, *args, **kwargs):
    """ Run one pipeline stage between a status line and its result marker """
    title(text, 9)
    try:
        result = func(*args, **kwargs)
    except Exception:
        print_result(False)
        raise
    print_result(True)
    return result

def handle_cert_create(app: App) -> int:
    title('Create x509 Certificate', level=2)

    opts = prune_opts(CertCreateOptions, app.args)
    paths = app.paths

    # Validation, before any key is generated or any file is written
    identity = CertificateIdentity.from_strings(
        common_name=opts.cn,
        subject_extra=opts.subject_extra,
        sans=opts.san,
    )
    profile = IssuanceProfile.parse(opts.profile)
    build_csr_profile(identity, profile)

    if opts.install_trust:
        resolve_trust_target(opts.install_trust)

    ca = resolve_ca(app, ca_cn=opts.ca_cn, ca_days=opts.ca_days)

    issuer = LeafIssuer(ca, days=opts.days)
    leaf = _stage(
        f'Issuing {profile.value} certificate [ {highlight(identity.subject_string())} ]',
        issuer.issue,
        identity,
        profile,
        key_path=paths.leaf_key,
        cert_path=paths.leaf_cert,
        csr_path=paths.csr,
    )

    artifacts: List[Artifact] = [
        Artifact.of(paths.leaf_key),
        Artifact.of(paths.leaf_cert),
        Artifact.of(paths.ca_cert),
    ]

    if opts.emit_k8s_secret:
        manifest = _stage(
            f'Writing Kubernetes secret [ {highlight(opts.k8s_namespace + "/" + opts.k8s_name)} ]',
            emit_k8s_secret,
            name=opts.k8s_name,
            namespace=opts.k8s_namespace,
            out_path=paths.secret_manifest(opts.k8s_name),
            cert_path=leaf.cert_path,
            key_path=leaf.key_path,
            ca_cert_path=paths.ca_cert,
        )
        artifacts.append(Artifact.of(manifest))

    if opts.emit_traefik:
        _stage(
            f'Writing Traefik bundle [ {highlight(opts.emit_traefik)} ]',
            emit_traefik_bundle,
            cert_path=leaf.cert_path,
            ca_cert_path=paths.ca_cert,
            key_path=leaf.key_path,
            out_dir=Path(opts.emit_traefik),
        )

    if opts.install_trust:
        # Reported, never fatal
        title(f'Installing CA into trust store [ {highlight(opts.install_trust)} ]', 9)
        print_result(install_trust(opts.install_trust, paths.ca_cert))

    if opts.emit_sops:
        pipeline = EncryptionPipeline(SopsConfig.from_environ())
        encrypted = _stage('Encrypting artifacts with SOPS', pipeline.run, artifacts)
        for path in encrypted:
            title(f'  {highlight(path)}', 7)

    title(f'Certificates generated in {highlight(paths.out_dir)}', 7)

    return EXIT_OK

def handle_cert_info(app: App) -> int:
    cert_file = Path(app.args.cert_file) if getattr(app.args, 'cert_file', None) \
        else app.paths.leaf_cert

    bundle = CertificateBundle.from_files(cert_path=cert_file)
    title('Certificate', 2, extra=cert_file)

    remaining = days_remaining(bundle.certificate.not_valid_after_utc)
    if remaining >= 0:
        status = f'[ {COLOUR_OK}Valid{COLOUR_RESET} ] {remaining} days remaining'
    else:
        status = f'[ {COLOUR_ERROR}Expired{COLOUR_RESET} ]'

    san = bundle.get_certificate_attrib('subject_alt_name')
    eku = bundle.get_certificate_attrib('extended_key_usage')

    print(f"Subject: {bundle.get_certificate_attrib('subject')}")
    print(f"Issuer: {bundle.get_certificate_attrib('issuer')}")
    print(f'Status: {status}')
    print(f"Expiry Date: {bundle.get_certificate_attrib('not_after')}")
    print(f"SAN: {', '.join(san) if san else '-'}")
    print(f"Extended Key Usage: {', '.join(eku) if eku else '-'}")
    print(f"Key Size: {bundle.get_certificate_attrib('key_size')}-bit RSA")

    return EXIT_OK
