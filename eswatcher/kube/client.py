"""Kubernetes connection discovery and API client construction.

Discovery order:
    1. ``$KUBECONFIG``, else ``~/.kube/config`` -- used when the file exists.
    2. Service-account token + ``KUBERNETES_SERVICE_HOST``/``_PORT`` -- an
       explicit bearer-token configuration against the in-cluster endpoint.
    3. The kubernetes-asyncio in-cluster loader.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]

from eswatcher.errors import ClientConstructionError, ConfigurationError
from eswatcher.observability.logging import get_logger

_log = get_logger("kube.client")

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
SERVICE_ACCOUNT_TOKEN = SERVICE_ACCOUNT_DIR / "token"
SERVICE_ACCOUNT_CA = SERVICE_ACCOUNT_DIR / "ca.crt"


@dataclass
class KubeClients:
    """API handles shared by the event tailer and the readiness poller."""

    api_client: Any
    core_v1: Any
    custom_objects: Any

    async def close(self) -> None:
        """Close the underlying aiohttp connection pool."""
        try:
            await self.api_client.close()
        except Exception as exc:  # noqa: BLE001
            _log.debug("api client close raised (non-fatal)", error=str(exc))


def kubeconfig_path(environ: Mapping[str, str] | None = None, home: Path | None = None) -> Path | None:
    """Return the kubeconfig file to try, or None when neither env nor home yields one."""
    env = os.environ if environ is None else environ
    explicit = env.get("KUBECONFIG", "")
    if explicit:
        return Path(explicit)
    home_dir = home if home is not None else Path.home()
    if str(home_dir):
        return home_dir / ".kube" / "config"
    return None


def _service_account_configuration(
    environ: Mapping[str, str],
    token_path: Path,
    ca_path: Path,
) -> Any | None:
    if not token_path.exists():
        return None
    host = environ.get("KUBERNETES_SERVICE_HOST", "")
    port = environ.get("KUBERNETES_SERVICE_PORT", "")
    if not host or not port:
        return None
    try:
        token = token_path.read_text().strip()
    except OSError as exc:
        raise ConfigurationError(f"failed to read token: {exc}") from exc

    configuration = k8s_client.Configuration()
    configuration.host = f"https://{host}:{port}"
    configuration.api_key = {"BearerToken": token}
    configuration.api_key_prefix = {"BearerToken": "Bearer"}
    configuration.ssl_ca_cert = str(ca_path)
    return configuration


async def load_configuration(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
    token_path: Path = SERVICE_ACCOUNT_TOKEN,
    ca_path: Path = SERVICE_ACCOUNT_CA,
) -> Any:
    """Discover how to reach the API server and return a client Configuration.

    Raises ConfigurationError when no source yields a usable configuration.
    """
    env = os.environ if environ is None else environ

    path = kubeconfig_path(env, home)
    if path is not None and path.is_file():
        configuration = k8s_client.Configuration()
        try:
            await k8s_config.load_kube_config(config_file=str(path), client_configuration=configuration)
        except Exception as exc:
            raise ConfigurationError(f"error loading kubeconfig {path}: {exc}") from exc
        _log.info("k8s client configured from kubeconfig", path=str(path))
        return configuration

    configuration = _service_account_configuration(env, token_path, ca_path)
    if configuration is not None:
        _log.info("k8s client configured from service account token")
        return configuration

    configuration = k8s_client.Configuration()
    try:
        k8s_config.load_incluster_config(client_configuration=configuration)
    except k8s_config.ConfigException as exc:
        raise ConfigurationError(f"no kubeconfig found and in-cluster config unavailable: {exc}") from exc
    _log.info("k8s client configured from in-cluster service account")
    return configuration


def build_clients(configuration: Any) -> KubeClients:
    """Create the core/v1 and custom-objects API handles over one ApiClient."""
    try:
        api_client = k8s_client.ApiClient(configuration=configuration)
        return KubeClients(
            api_client=api_client,
            core_v1=k8s_client.CoreV1Api(api_client),
            custom_objects=k8s_client.CustomObjectsApi(api_client),
        )
    except Exception as exc:
        raise ClientConstructionError(f"error creating Kubernetes clients: {exc}") from exc


async def connect() -> KubeClients:
    """Discover configuration and build clients in one step."""
    configuration = await load_configuration()
    return build_clients(configuration)
