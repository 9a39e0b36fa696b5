"""Bytecode lookup used to tell wallets apart from unverified contracts."""

import logging
from typing import Optional

from .base import EtherscanTransportError

logger = logging.getLogger(__name__)


class EtherscanClientBytecodeMixin:
    def has_bytecode(self, chain_id: int, address: str, api_key: str) -> Optional[bool]:
        """
        Check whether an address has deployed code via eth_getCode.

        Args:
            chain_id: Chain ID
            address: Address to look up
            api_key: Resolved API key

        Returns:
            True if bytecode is present, False for an empty account ('0x'),
            None if the lookup was inconclusive
        """
        try:
            data = self._request(
                chain_id,
                api_key,
                module="proxy",
                action="eth_getCode",
                address=address,
                tag="latest",
            )
        except EtherscanTransportError as e:
            logger.warning(f"Could not determine if {address} is a contract: {e.detail}")
            return None

        result = data.get("result")
        if not isinstance(result, str) or not result.startswith("0x"):
            logger.warning(f"Inconclusive eth_getCode response for {address}: {data!r}")
            return None

        if result == "0x":
            return False

        logger.debug(f"eth_getCode returned {(len(result) - 2) // 2} bytes for {address}")
        return True
