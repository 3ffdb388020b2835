"""Unit tests for localca.services.sops module."""

import stat

import pytest

from localca.services.sops import Artifact, EncryptionPipeline, Sops, SopsConfig
from localca.services.sops_errors import (
    EncryptionFailedError,
    SopsNotFoundError,
    SopsPreconditionError,
)

# Prefixes the plaintext, fails for any file whose name contains "fail"
FAKE_SOPS = """#!/bin/sh
for last; do :; done
case "$(basename "$last")" in
  *fail*) echo "could not encrypt $last" >&2; exit 1 ;;
esac
echo "ENC $*"
cat "$last"
"""


@pytest.fixture
def fake_sops(tmp_path):
    path = tmp_path / "bin" / "sops"
    path.parent.mkdir()
    path.write_text(FAKE_SOPS)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path)


@pytest.fixture
def plaintext(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    files = {
        "key": out / "local-key.pem",
        "cert": out / "local-cert.pem",
        "manifest": out / "local-tls-secret.yaml",
    }
    for name, path in files.items():
        path.write_bytes(f"plaintext {name}\n".encode())
    return files


class TestSopsConfig:
    """Tests for SopsConfig.from_environ."""

    def test_recipients_from_env(self, tmp_path):
        config = SopsConfig.from_environ({
            "SOPS_AGE_RECIPIENTS": "age1abc",
            "SOPS_AGE_KEY_FILE": str(tmp_path / "keys.txt"),
        })
        assert config.recipients == "age1abc"
        assert config.key_file == tmp_path / "keys.txt"
        assert not config.has_key_file

    def test_blank_recipients(self):
        config = SopsConfig.from_environ({"SOPS_AGE_RECIPIENTS": "  "})
        assert config.recipients is None

    def test_default_key_file(self):
        config = SopsConfig.from_environ({})
        assert str(config.key_file).endswith(".config/sops/age/keys.txt")

    def test_key_file_present(self, tmp_path):
        key_file = tmp_path / "keys.txt"
        key_file.write_text("AGE-SECRET-KEY-1...")
        config = SopsConfig.from_environ({"SOPS_AGE_KEY_FILE": str(key_file)})
        assert config.has_key_file


class TestArtifact:
    """Tests for encrypted sibling naming."""

    def test_pem_sibling(self, tmp_path):
        artifact = Artifact.of(tmp_path / "local-key.pem")
        assert not artifact.yaml
        assert artifact.sibling == tmp_path / "local-key.pem.sops"

    def test_yaml_sibling(self, tmp_path):
        artifact = Artifact.of(tmp_path / "local-tls-secret.yaml")
        assert artifact.yaml
        assert artifact.sibling == tmp_path / "local-tls-secret.yaml.sops.yaml"


class TestEncryptionPipeline:
    """Tests for EncryptionPipeline."""

    def test_precondition_without_recipients_or_keys(self, tmp_path, plaintext, fake_sops):
        """Fails before touching any file when nothing can encrypt."""
        config = SopsConfig(binary=fake_sops, key_file=tmp_path / "missing.txt")

        with pytest.raises(SopsPreconditionError):
            EncryptionPipeline(config).run([Artifact.of(p) for p in plaintext.values()])

        assert not list(plaintext["key"].parent.glob("*.sops*"))

    def test_missing_binary(self, tmp_path):
        config = SopsConfig(binary=str(tmp_path / "no-such-sops"), recipients="age1abc")

        with pytest.raises(SopsNotFoundError):
            EncryptionPipeline(config).check_preconditions()

    def test_key_file_satisfies_precondition(self, tmp_path, fake_sops):
        key_file = tmp_path / "keys.txt"
        key_file.write_text("AGE-SECRET-KEY-1...")
        config = SopsConfig(binary=fake_sops, key_file=key_file)

        assert isinstance(EncryptionPipeline(config).check_preconditions(), Sops)

    def test_additive_encryption(self, plaintext, fake_sops):
        """Plaintext stays byte-identical and each file gets exactly one sibling."""
        before = {name: path.read_bytes() for name, path in plaintext.items()}
        config = SopsConfig(binary=fake_sops, recipients="age1abc")

        written = EncryptionPipeline(config).run([Artifact.of(p) for p in plaintext.values()])

        assert {name: path.read_bytes() for name, path in plaintext.items()} == before
        assert sorted(p.name for p in written) == sorted([
            "local-key.pem.sops",
            "local-cert.pem.sops",
            "local-tls-secret.yaml.sops.yaml",
        ])
        assert len(list(plaintext["key"].parent.glob("*.sops*"))) == 3

    def test_arguments(self, plaintext, fake_sops):
        """Recipients are passed explicitly and YAML gets YAML input/output types."""
        config = SopsConfig(binary=fake_sops, recipients="age1abc")

        EncryptionPipeline(config).run([Artifact.of(plaintext["manifest"])])

        sibling = plaintext["manifest"].parent / "local-tls-secret.yaml.sops.yaml"
        first_line = sibling.read_text().splitlines()[0]
        assert "--encrypt" in first_line
        assert "--age age1abc" in first_line
        assert "--input-type yaml --output-type yaml" in first_line

    def test_fail_fast(self, plaintext, fake_sops, tmp_path):
        """A failure stops the run; earlier siblings and all plaintext remain."""
        failing = plaintext["key"].parent / "fail.pem"
        failing.write_bytes(b"plaintext fail\n")
        config = SopsConfig(binary=fake_sops, recipients="age1abc")

        with pytest.raises(EncryptionFailedError) as exc_info:
            EncryptionPipeline(config).run([
                Artifact.of(plaintext["key"]),
                Artifact.of(failing),
                Artifact.of(plaintext["cert"]),
            ])

        assert "could not encrypt" in str(exc_info.value)
        assert (plaintext["key"].parent / "local-key.pem.sops").is_file()
        assert not (plaintext["key"].parent / "fail.pem.sops").exists()
        assert not (plaintext["cert"].parent / "local-cert.pem.sops").exists()
        assert failing.read_bytes() == b"plaintext fail\n"

    def test_missing_plaintext(self, tmp_path, fake_sops):
        from localca.services.ca_errors import ArtifactNotFoundError

        config = SopsConfig(binary=fake_sops, recipients="age1abc")

        with pytest.raises(ArtifactNotFoundError):
            EncryptionPipeline(config).run([Artifact.of(tmp_path / "absent.pem")])
