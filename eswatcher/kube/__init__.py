"""Kubernetes connectivity for eswatcher.

Exposes:
    KubeClients        -- core/v1 + custom-objects handles over one ApiClient.
    load_configuration -- kubeconfig / service-account / in-cluster discovery.
    build_clients      -- client construction from a Configuration.
    connect            -- both of the above.
"""

from eswatcher.kube.client import KubeClients, build_clients, connect, kubeconfig_path, load_configuration

__all__ = ["KubeClients", "build_clients", "connect", "kubeconfig_path", "load_configuration"]
