"""Kubelet HTTP client."""

from __future__ import annotations

import logging
import warnings
from typing import Any

import requests
from urllib3.exceptions import InsecureRequestWarning

from ...constants import DEFAULT_KUBELET_URL, DEFAULT_TOKEN_PATH
from ...tracing import trace_span
from ...utils.errors import KubeletDecodeError, KubeletStatusError, KubeletTransportError
from ...utils.secrets import read_bearer_token
from .models import PodRecord

logger = logging.getLogger(__name__)


class KubeletClient:
    """Lists pods from the node-local kubelet API."""

    def __init__(
        self,
        url: str = DEFAULT_KUBELET_URL,
        token_path: str = DEFAULT_TOKEN_PATH,
        connect_timeout: float = 2.0,
        read_timeout: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the kubelet client.

        Args:
            url: Full URL of the kubelet pods endpoint
            token_path: File holding the service account bearer token
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            session: Optional requests session (one is created otherwise)
        """
        self.url = url
        self.token_path = token_path
        self.timeout = (connect_timeout, read_timeout)
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _get(self) -> requests.Response:
        headers = {"Authorization": f"Bearer {read_bearer_token(self.token_path)}"}
        # the kubelet serves a self-signed certificate
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", category=InsecureRequestWarning)
            try:
                return self.session.get(self.url, headers=headers, timeout=self.timeout, verify=False)
            except requests.RequestException as e:
                raise KubeletTransportError(f"Request to {self.url} failed: {e}") from e

    def query_pods(self) -> list[dict[str, Any]]:
        """Fetch the raw ``items`` array of the kubelet pod list.

        Returns:
            List of pod objects

        Raises:
            KubeletTransportError: On connection, timeout or token errors
            KubeletStatusError: On non-200 responses
            KubeletDecodeError: On malformed bodies
        """
        response = self._get()
        if response.status_code != 200:
            raise KubeletStatusError(response.status_code, response.text)
        try:
            body = response.json()
        except ValueError as e:
            raise KubeletDecodeError(f"Invalid JSON from kubelet: {e}") from e
        if not isinstance(body, dict) or not isinstance(body.get("items"), list):
            raise KubeletDecodeError("Kubelet response has no items array")
        return body["items"]

    def list_pods(self) -> list[PodRecord]:
        """Fetch the pod list and keep only namespace, name and labels.

        Returns:
            Pods known to the kubelet
        """
        with trace_span("kubelet.list_pods", attributes={"http.url": self.url}):
            items = self.query_pods()
        pods = []
        for item in items:
            pod = PodRecord.from_item(item)
            if pod is None:
                logger.debug("Skipping kubelet item without namespace or name")
                continue
            pods.append(pod)
        return pods
