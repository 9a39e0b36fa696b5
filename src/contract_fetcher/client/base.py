"""Client setup and raw Etherscan request plumbing."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from ..constants import API_V2_ENDPOINT, DEFAULT_TIMEOUT
from ..credentials import resolve_api_key

logger = logging.getLogger(__name__)


class EtherscanTransportError(Exception):
    """The API could not be reached or returned an unusable HTTP response."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class EtherscanClientBaseMixin:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = API_V2_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        key_file: Optional[Path] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Etherscan API key (falls back to env / ~/.etherscankey)
            api_url: Etherscan v2 unified endpoint
            timeout: Per-request timeout in seconds
            session: HTTP session to use (a new one is created if omitted)
            key_file: Alternative key file location
        """
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.key_file = key_file


    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


    def _get_api_key(self) -> str:
        return resolve_api_key(self.api_key, self.key_file)


    def _request(self, chain_id: int, api_key: str, **params: str) -> Dict[str, Any]:
        """
        Issue one GET against the unified endpoint.

        Args:
            chain_id: Chain ID (sent as 'chainid')
            api_key: Resolved API key
            **params: module/action/address/... query parameters

        Returns:
            Decoded JSON envelope

        Raises:
            EtherscanTransportError: On connection failures, HTTP error statuses
                or bodies that are not a JSON object
        """
        query = {"chainid": chain_id, **params, "apikey": api_key}
        logger.debug(f"GET {self.api_url} module={params.get('module')} action={params.get('action')} chain={chain_id}")

        try:
            response = self.session.get(self.api_url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            raise EtherscanTransportError(str(e)) from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise EtherscanTransportError(f"{response.status_code} - {response.reason}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise EtherscanTransportError(f"Invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise EtherscanTransportError(f"Unexpected response payload: {data!r}")
        return data
