"""
Tests for licensing/k8s.py - Kubernetes secret store and event sink.

The HTTP session is a mock; no API server is contacted.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from licensing.events import NO_LICENSE_REPORT, build_event
from licensing.k8s import KubernetesClient, KubernetesEventSink, KubernetesSecretStore
from licensing.model import LicenseState

API = "https://10.0.0.1:443"


def response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body or {}
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return KubernetesClient(API + "/", token="tok", verify="/ca.crt", session=session, timeout=3)


class TestKubernetesClient:

    def test_bearer_token(self, client, session):
        assert session.headers["Authorization"] == "Bearer tok"
        assert client.api_url == API

    def test_get(self, client, session):
        client.get("/api/v1/namespaces")
        session.get.assert_called_once_with(API + "/api/v1/namespaces", timeout=3, verify="/ca.crt")

    def test_post(self, client, session):
        client.post("/x", {"a": 1})
        session.post.assert_called_once_with(API + "/x", json={"a": 1}, timeout=3, verify="/ca.crt")

    def test_in_cluster(self, tmp_path, monkeypatch):
        (tmp_path / "token").write_text("service-token\n")
        (tmp_path / "ca.crt").write_text("---cert---")
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.96.0.1")
        monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "6443")

        client = KubernetesClient.in_cluster(str(tmp_path))

        assert client.api_url == "https://10.96.0.1:6443"
        assert client.verify == str(tmp_path / "ca.crt")
        assert client.session.headers["Authorization"] == "Bearer service-token"

    def test_in_cluster_ipv6_host(self, tmp_path, monkeypatch):
        (tmp_path / "token").write_text("t")
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "fd00::1")
        monkeypatch.delenv("KUBERNETES_SERVICE_PORT", raising=False)

        client = KubernetesClient.in_cluster(str(tmp_path))

        assert client.api_url == "https://[fd00::1]:443"
        assert client.verify is True

    def test_not_in_cluster(self, tmp_path, monkeypatch):
        monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
        with pytest.raises(RuntimeError):
            KubernetesClient.in_cluster(str(tmp_path))

    def test_missing_token(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.96.0.1")
        with pytest.raises(OSError):
            KubernetesClient.in_cluster(str(tmp_path))


class TestKubernetesSecretStore:

    def test_returns_data_map(self, client, session):
        session.get.return_value = response(200, {"kind": "Secret", "data": {"license": "eA=="}})

        data = KubernetesSecretStore(client).get("kafka", "csm-op-license")

        assert data == {"license": "eA=="}
        assert session.get.call_args.args[0] == API + "/api/v1/namespaces/kafka/secrets/csm-op-license"

    def test_secret_without_data(self, client, session):
        session.get.return_value = response(200, {"kind": "Secret"})
        assert KubernetesSecretStore(client).get("kafka", "s") is None

    def test_not_found(self, client, session):
        session.get.return_value = response(404)
        assert KubernetesSecretStore(client).get("kafka", "s") is None

    def test_server_error_raises(self, client, session):
        session.get.return_value = response(500)
        with pytest.raises(requests.HTTPError):
            KubernetesSecretStore(client).get("kafka", "s")

    def test_connection_error_raises(self, client, session):
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(requests.RequestException):
            KubernetesSecretStore(client).get("kafka", "s")


class TestKubernetesEventSink:

    def event(self):
        return build_event(
            LicenseState.MISSING, NO_LICENSE_REPORT, "kafka", "cluster-operator",
            now=datetime(2024, 2, 3, tzinfo=timezone.utc),
        )

    def test_posts_event(self, client, session):
        session.post.return_value = response(201)
        event = self.event()

        KubernetesEventSink(client).publish(event)

        url = session.post.call_args.args[0]
        body = session.post.call_args.kwargs["json"]
        assert url == API + "/apis/events.k8s.io/v1/namespaces/kafka/events"
        assert body == event.to_dict()
        assert body["metadata"]["annotations"] == {"csm/license-state": "MISSING"}

    def test_rejected_event_raises(self, client, session):
        session.post.return_value = response(403)
        with pytest.raises(requests.HTTPError):
            KubernetesEventSink(client).publish(self.event())
