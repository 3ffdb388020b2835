# localca/models/options.py

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, PositiveInt

from localca.constants import (
    DEFAULT_CA_CN,
    DEFAULT_DAYS,
    DEFAULT_K8S_CONF,
    DEFAULT_LEAF_CN,
    DEFAULT_PROFILE,
)

# DNS-1123 subdomain (object names) and label (namespaces)
K8S_NAME_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
K8S_NAMESPACE_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$"


class CAInitOptions(BaseModel):
    ca_cn: str = Field(default=DEFAULT_CA_CN, min_length=1)
    ca_days: PositiveInt = DEFAULT_DAYS['ca']


class CertCreateOptions(BaseModel):
    """ Everything `cert create` needs, validated before the pipeline starts """
    cn: str = Field(default=DEFAULT_LEAF_CN, min_length=1)
    san: List[str] = Field(default_factory=list)
    subject_extra: Optional[str] = None
    # Resolved by IssuanceProfile.parse()
    profile: str = DEFAULT_PROFILE
    ca_cn: str = Field(default=DEFAULT_CA_CN, min_length=1)
    ca_days: PositiveInt = DEFAULT_DAYS['ca']
    days: PositiveInt = DEFAULT_DAYS['leaf']
    emit_k8s_secret: bool = False
    k8s_name: str = Field(default=DEFAULT_K8S_CONF['name'], max_length=253,
                          pattern=K8S_NAME_PATTERN)
    k8s_namespace: str = Field(default=DEFAULT_K8S_CONF['namespace'], max_length=63,
                               pattern=K8S_NAMESPACE_PATTERN)
    emit_traefik: Optional[str] = None
    install_trust: Optional[str] = None
    emit_sops: bool = False


class K8sSecretOptions(BaseModel):
    name: str = Field(default=DEFAULT_K8S_CONF['name'], max_length=253, pattern=K8S_NAME_PATTERN)
    namespace: str = Field(default=DEFAULT_K8S_CONF['namespace'], max_length=63,
                           pattern=K8S_NAMESPACE_PATTERN)
    out: Optional[str] = None
