# localca/constants.py

from __future__ import annotations

"""
Standardised exit codes for localca CLI commands.

0 = success
1 = validation errors (bad profile, missing SAN, unknown trust target)
2 = fatal errors (preconditions, crypto/sops failures, IO problems, unhandled exceptions)
"""
EXIT_OK: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_FATAL: int = 2

# ---- ANSI Colour Codes ----
COLOUR = {
    'red': '\033[31m',
    'green': '\033[32m',
    'yellow': '\033[33m',
    'cyan': '\033[36m',
    'bold_red': '\033[1;31m',
    'bold_yellow': '\033[1;33m',
    'bold_white': '\033[1;37m',
    'underline_white': '\033[4;37m',
    'reset': '\033[0m'
}

# Convenience shortcuts
COLOUR_ERROR = COLOUR['bold_red']
COLOUR_OK = COLOUR['green']
COLOUR_BRIGHT = COLOUR['bold_white']
COLOUR_WARNING = COLOUR['bold_yellow']
COLOUR_RESET = COLOUR['reset']

# ---- Cryptographic defaults ----
DEFAULT_KEY_SIZE = {
    'ca': 4096,
    'leaf': 2048,
}

DEFAULT_DAYS = {
    'ca': 3650,
    'leaf': 825,
}

DEFAULT_CA_CN = 'Local Root CA'
DEFAULT_LEAF_CN = 'localhost'
DEFAULT_PROFILE = 'both'

# ---- Output layout defaults ----
DEFAULT_OUT_DIR = './certs'
OUT_DIR_ENV = 'LOCALCA_OUT_DIR'

DEFAULT_STORAGE_CONF = {
    'ca_key_file': 'root-ca.key',
    'ca_cert_file': 'local-ca.crt',
    'leaf_key_file': 'local-key.pem',
    'leaf_cert_file': 'local-cert.pem',
    'csr_file': 'local.csr',
    'bundle_chain_file': 'fullchain.pem',
    'bundle_key_file': 'key.pem',
}

DEFAULT_K8S_CONF = {
    'name': 'local-tls',
    'namespace': 'default',
    'secret_suffix': '-secret.yaml',
}

KEY_FILE_MODE = 0o600
PUBLIC_FILE_MODE = 0o644

# ---- SOPS defaults ----
SOPS_BIN = 'sops'

DEFAULT_SOPS_CONF = {
    'recipients_env': 'SOPS_AGE_RECIPIENTS',
    'key_file_env': 'SOPS_AGE_KEY_FILE',
    'key_file': '~/.config/sops/age/keys.txt',
    'suffix': '.sops',
    'yaml_suffix': '.sops.yaml',
}

# ---- Trust store defaults ----
TRUST_TARGETS = ('linux', 'macos', 'firefox')

DEFAULT_TRUST_CONF = {
    'linux_anchor_dir': '/usr/local/share/ca-certificates',
    'macos_keychain': '/Library/Keychains/System.keychain',
    'firefox_profiles': '~/.mozilla/firefox',
    'firefox_nickname': 'Local Root CA',
}

# ---- View defaults ----
STATUS_COLUMN = 90
