from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from kubernetes import config
from kubernetes.config.config_exception import ConfigException


logger = logging.getLogger(__name__)


class KubeconfigError(Exception):
    """The kubeconfig file is missing or could not be parsed."""


@dataclass(frozen=True)
class KubeContexts:
    names: List[str]
    current: Optional[str]


def list_kube_contexts(kubeconfig: Optional[str] = None) -> KubeContexts:
    """Read context names (in file order) and the current context.

    ``kubeconfig`` falls back to the client's default loading rules
    ($KUBECONFIG, then ~/.kube/config).
    """

    path = os.path.expanduser(kubeconfig) if kubeconfig else None
    if path and not os.path.exists(path):
        raise KubeconfigError(f"kubeconfig not found: {path}")

    try:
        contexts, active = config.list_kube_config_contexts(config_file=path)
    except ConfigException as exc:
        raise KubeconfigError(str(exc)) from exc

    names = [c["name"] for c in contexts or [] if c.get("name")]
    current = active.get("name") if active else None
    logger.debug("Loaded %d kube contexts (current=%s)", len(names), current)
    return KubeContexts(names=names, current=current)
