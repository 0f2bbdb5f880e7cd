"""
Kubernetes adapters for the watcher: secret store and event sink.

Talks to the API server over plain HTTPS with the pod's service account.
"""

import logging
import os
from typing import Mapping, Optional

import requests

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_DIR = "/var/run/secrets/kubernetes.io/serviceaccount"
REQUEST_TIMEOUT = 10


class KubernetesClient:
    """Minimal authenticated client for the Kubernetes REST API."""

    def __init__(self, api_url: str, token: Optional[str] = None, verify=True,
                 session: Optional[requests.Session] = None, timeout: float = REQUEST_TIMEOUT):
        self.api_url = api_url.rstrip("/")
        self.verify = verify
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def in_cluster(cls, service_account_dir: str = SERVICE_ACCOUNT_DIR) -> "KubernetesClient":
        """
        Build a client from the pod environment.

        Raises:
            RuntimeError: Not running inside a cluster
        """
        host = os.getenv("KUBERNETES_SERVICE_HOST")
        port = os.getenv("KUBERNETES_SERVICE_PORT", "443")
        if not host:
            raise RuntimeError("KUBERNETES_SERVICE_HOST is not set; not running in a cluster?")
        if ":" in host:
            host = f"[{host}]"

        with open(os.path.join(service_account_dir, "token")) as f:
            token = f.read().strip()
        ca_path = os.path.join(service_account_dir, "ca.crt")
        verify = ca_path if os.path.exists(ca_path) else True

        return cls(f"https://{host}:{port}", token=token, verify=verify)

    def get(self, path: str) -> requests.Response:
        return self.session.get(self.api_url + path, timeout=self.timeout, verify=self.verify)

    def post(self, path: str, body: dict) -> requests.Response:
        return self.session.post(self.api_url + path, json=body, timeout=self.timeout, verify=self.verify)


class KubernetesSecretStore:
    """Reads secret data maps (values stay base64-encoded, as stored)."""

    def __init__(self, client: KubernetesClient):
        self.client = client

    def get(self, namespace: str, name: str) -> Optional[Mapping[str, str]]:
        """
        Returns:
            The secret's ``data`` map, or None if the secret does not exist

        Raises:
            requests.RequestException: API server unreachable or error status
        """
        response = self.client.get(f"/api/v1/namespaces/{namespace}/secrets/{name}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json().get("data")


class KubernetesEventSink:
    """Creates events.k8s.io/v1 events."""

    def __init__(self, client: KubernetesClient):
        self.client = client

    def publish(self, event):
        namespace = event.regarding.namespace
        response = self.client.post(f"/apis/events.k8s.io/v1/namespaces/{namespace}/events", event.to_dict())
        response.raise_for_status()
        logger.debug(f"Published license event {event.generate_name} ({event.state})")
