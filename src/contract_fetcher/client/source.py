"""Top-level verified-source fetch flow."""

import logging

from ..constants import CHAINS
from ..credentials import ApiKeyNotFoundError
from ..models import FailureKind, FetchFailure, FetchOutcome
from .base import EtherscanTransportError

logger = logging.getLogger(__name__)


class EtherscanClientSourceMixin:
    def fetch(self, chain_id: int, address: str) -> FetchOutcome:
        """
        Fetch verified source for an address.

        Args:
            chain_id: Chain ID from the registry
            address: 0x-prefixed address (format already validated by the caller)

        Returns:
            FetchSuccess with the contract record, or FetchFailure describing
            why no source is available
        """
        try:
            api_key = self._get_api_key()
        except ApiKeyNotFoundError as e:
            return FetchFailure(
                kind=FailureKind.MISSING_API_KEY, detail=str(e), chain_id=chain_id, address=address
            )

        chain = CHAINS.get(chain_id)
        if chain is None:
            return FetchFailure(kind=FailureKind.UNSUPPORTED_CHAIN, chain_id=chain_id, address=address)

        logger.info(f"Fetching source for {address} on {chain.display_name} ({chain_id})")
        try:
            data = self._request(
                chain_id,
                api_key,
                module="contract",
                action="getsourcecode",
                address=address,
            )
        except EtherscanTransportError as e:
            logger.warning(f"getsourcecode request failed: {e.detail}")
            return FetchFailure(
                kind=FailureKind.TRANSPORT_ERROR, detail=e.detail, chain_id=chain_id, address=address
            )

        return self._classify_sourcecode_response(data, chain_id, address, api_key)
