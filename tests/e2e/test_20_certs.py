# tests/e2e/test_20_certs.py

import os

import pytest
import yaml

from helpers import run_localca, assert_ok, assert_code

pytestmark = pytest.mark.e2e

@pytest.mark.order(20)
def test_cert_create_server(localca_bin, out_dir):
    assert_ok(run_localca(localca_bin, out_dir, "cert", "create",
                          "-n", "app.local", "--san", "DNS:app.local", "--san", "IP:127.0.0.1",
                          "-p", "server"),
              "cert create server")

    mode = os.stat(out_dir / "local-key.pem").st_mode & 0o777
    assert mode == 0o600, f"Expected key perms 0600, got {oct(mode)}"

@pytest.mark.order(21)
def test_cert_info(localca_bin, out_dir):
    res = run_localca(localca_bin, out_dir, "cert", "info")
    assert_ok(res, "cert info")
    assert "DNS:app.local" in res.stdout
    assert "IP:127.0.0.1" in res.stdout

@pytest.mark.order(22)
def test_cert_create_both_requires_san(localca_bin, out_dir):
    before = (out_dir / "local-key.pem").read_bytes()

    res = run_localca(localca_bin, out_dir, "cert", "create", "-n", "nosan.local", "-p", "both")
    assert_code(res, 1, "cert create both without SAN")

    assert (out_dir / "local-key.pem").read_bytes() == before

@pytest.mark.order(23)
def test_cert_create_with_artifacts(localca_bin, out_dir, tmp_path_factory):
    traefik = tmp_path_factory.mktemp("traefik")

    assert_ok(run_localca(localca_bin, out_dir, "cert", "create",
                          "-n", "web.local", "--san", "DNS:web.local",
                          "--emit-k8s-secret", "--k8s-name", "web-tls", "--k8s-namespace", "web",
                          "--emit-traefik", str(traefik)),
              "cert create with k8s and traefik")

    manifest = yaml.safe_load((out_dir / "web-tls-secret.yaml").read_text())
    assert manifest["type"] == "kubernetes.io/tls"
    assert manifest["metadata"]["namespace"] == "web"
    assert set(manifest["data"]) == {"tls.crt", "tls.key", "ca.crt"}

    assert (traefik / "fullchain.pem").is_file()
    assert (traefik / "key.pem").read_bytes() == (out_dir / "local-key.pem").read_bytes()

@pytest.mark.order(24)
def test_emit_k8s_secret_standalone(localca_bin, out_dir):
    assert_ok(run_localca(localca_bin, out_dir, "emit", "k8s-secret", "--name", "standalone"),
              "emit k8s-secret")
    assert (out_dir / "standalone-secret.yaml").is_file()

@pytest.mark.order(25)
def test_cert_create_unknown_trust_target(localca_bin, out_dir):
    res = run_localca(localca_bin, out_dir, "cert", "create",
                      "--san", "DNS:localhost", "--install-trust", "windows")
    assert_code(res, 1, "cert create with unknown trust target")

@pytest.mark.order(30)
def test_encrypt_without_age_config(localca_bin, out_dir, tmp_path_factory):
    empty = tmp_path_factory.mktemp("no-age") / "keys.txt"

    res = run_localca(localca_bin, out_dir, "encrypt", str(out_dir / "local-key.pem"),
                      env={"SOPS_AGE_RECIPIENTS": "", "SOPS_AGE_KEY_FILE": str(empty)})
    assert_code(res, 2, "encrypt without recipients")
    assert not (out_dir / "local-key.pem.sops").exists()

@pytest.mark.order(31)
def test_cert_create_with_sops(localca_bin, out_dir, sops_path, age_recipient):
    assert_ok(run_localca(localca_bin, out_dir, "cert", "create",
                          "--san", "DNS:localhost", "--emit-k8s-secret", "--emit-sops"),
              "cert create with sops")

    for name in ("local-key.pem", "local-cert.pem", "local-ca.crt"):
        assert (out_dir / name).is_file()
        assert (out_dir / f"{name}.sops").is_file()
    assert (out_dir / "local-tls-secret.yaml.sops.yaml").is_file()
