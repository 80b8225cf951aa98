from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from kubernetes import client, config


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KubernetesClientSet:
    context: str
    core: client.CoreV1Api
    apps: client.AppsV1Api


def load_clients(context: str, *, kubeconfig: Optional[str] = None) -> KubernetesClientSet:
    """Create API clients bound to one kubeconfig context.

    Uses a dedicated ApiClient per context (instead of the global default
    configuration) so tabs for different clusters can coexist.
    """

    api_client = config.new_client_from_config(config_file=kubeconfig, context=context)
    logger.debug("Created Kubernetes clients for context %s", context)
    return KubernetesClientSet(
        context=context,
        core=client.CoreV1Api(api_client),
        apps=client.AppsV1Api(api_client),
    )
