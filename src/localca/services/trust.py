# localca/services/trust.py

from __future__ import annotations

import logging
import platform
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Sequence

from localca.constants import DEFAULT_TRUST_CONF, TRUST_TARGETS
from localca.services.trust_errors import TrustInstallError, UnknownTrustTargetError
from localca.utils.files import StrPath, expand_path
from localca.utils.formatting import warning
from localca.utils.process import run_command, stderr_text

log = logging.getLogger(__name__)


def _run_checked(command: Sequence[str], what: str) -> None:
    try:
        result = run_command(command)
    except FileNotFoundError as e:
        raise TrustInstallError(f"{command[0]!r} not found; cannot {what}.") from e

    if result.returncode != 0:
        raise TrustInstallError(f"Failed to {what}: {stderr_text(result)}")


class TrustStore(ABC):
    """
    Abstract base class for platform trust stores.

    Each platform adapter installs a CA certificate into the machine-wide
    store and into the browser (Firefox NSS) store.
    """
    firefox_profiles: str = DEFAULT_TRUST_CONF['firefox_profiles']

    @abstractmethod
    def install_machine_trust(self, ca_cert: Path) -> bool:
        """
        Install `ca_cert` as a trusted root for the whole machine

        Returns:
            bool: True on success

        Raises:
            TrustInstallError
        """

    def install_browser_trust(self, ca_cert: Path) -> bool:
        """ Add `ca_cert` to the default Firefox profile with certutil """
        profile_dir = self.find_firefox_profile()

        _run_checked(
            ['certutil', '-A',
             '-n', DEFAULT_TRUST_CONF['firefox_nickname'],
             '-t', 'C,,',
             '-i', str(ca_cert),
             '-d', f'sql:{profile_dir}'],
            'add the CA to the Firefox profile',
        )
        return True

    def find_firefox_profile(self) -> Path:
        root = expand_path(self.firefox_profiles)
        profiles = sorted(p for p in root.glob('*.default*') if p.is_dir()) if root.is_dir() else []

        if not profiles:
            raise TrustInstallError(f"Firefox profile not found under {root}")

        return profiles[0]


class LinuxTrustStore(TrustStore):
    """ Debian style anchors: /usr/local/share/ca-certificates + update-ca-certificates """
    def install_machine_trust(self, ca_cert: Path) -> bool:
        destination = Path(DEFAULT_TRUST_CONF['linux_anchor_dir']) / ca_cert.name

        _run_checked(['sudo', 'cp', str(ca_cert), str(destination)],
                     f'copy the CA certificate to {destination}')

        try:
            _run_checked(['sudo', 'update-ca-certificates'], 'refresh the system trust store')
        except TrustInstallError as e:
            # The anchor is in place; the next refresh will pick it up
            warning(str(e))

        return True


class MacOSTrustStore(TrustStore):
    firefox_profiles = '~/Library/Application Support/Firefox/Profiles'

    def install_machine_trust(self, ca_cert: Path) -> bool:
        _run_checked(
            ['sudo', 'security', 'add-trusted-cert',
             '-d', '-r', 'trustRoot',
             '-k', DEFAULT_TRUST_CONF['macos_keychain'],
             str(ca_cert)],
            'add the CA to the System keychain',
        )
        return True


def get_trust_store(system: Optional[str] = None) -> TrustStore:
    """ Trust store adapter for the running platform """
    system = system or platform.system()

    if system == 'Darwin':
        return MacOSTrustStore()

    return LinuxTrustStore()


def resolve_trust_target(target: str) -> Callable[[Path], bool]:
    """
    Map a trust target name to the install action

    Raises:
        UnknownTrustTargetError: for anything other than linux, macos or firefox
    """
    if target == 'linux':
        return LinuxTrustStore().install_machine_trust
    if target == 'macos':
        return MacOSTrustStore().install_machine_trust
    if target == 'firefox':
        return get_trust_store().install_browser_trust

    raise UnknownTrustTargetError(
        f"Unknown trust target {target!r}. Expected one of: {', '.join(TRUST_TARGETS)}"
    )


def install_trust(target: str, ca_cert: StrPath) -> bool:
    """
    Install the CA certificate into a trust store, reporting rather than raising
    on failure. The target itself must already be valid.

    Returns:
        bool: True when the install succeeded
    """
    action = resolve_trust_target(target)
    ca_path = Path(ca_cert)

    if not ca_path.is_file():
        warning(f"Certificate not found: {ca_path}")
        return False

    try:
        return action(ca_path)
    except TrustInstallError as e:
        log.debug("Trust install for %s failed", target, exc_info=True)
        warning(str(e))
        return False
