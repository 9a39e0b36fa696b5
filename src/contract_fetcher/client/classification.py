"""Mapping of getsourcecode envelopes onto fetch outcomes."""

import logging
from typing import Any, Dict

from ..models import ContractRecord, FailureKind, FetchFailure, FetchOutcome, FetchSuccess

logger = logging.getLogger(__name__)

# The API has no machine-readable error codes; these substrings are matched
# case-insensitively against the message and result text.
INVALID_API_KEY_MARKER = "invalid api key"
RATE_LIMIT_MARKER = "max rate limit reached"


def classify_api_error(data: Dict[str, Any]) -> FailureKind:
    """Pick the failure kind for an envelope whose status is not '1'."""
    text = error_text(data).lower()
    if INVALID_API_KEY_MARKER in text:
        return FailureKind.INVALID_API_KEY
    if RATE_LIMIT_MARKER in text:
        return FailureKind.RATE_LIMITED
    return FailureKind.API_ERROR


def error_text(data: Dict[str, Any]) -> str:
    """Raw upstream error text: message and (string) result joined."""
    message = str(data.get("message") or "").strip()
    result = data.get("result")
    result_text = result.strip() if isinstance(result, str) else ""
    parts = [part for part in (message, result_text) if part]
    return " - ".join(parts) or "Failed to fetch contract source"


class EtherscanClientClassificationMixin:
    def _classify_sourcecode_response(
        self,
        data: Dict[str, Any],
        chain_id: int,
        address: str,
        api_key: str,
    ) -> FetchOutcome:
        """
        Turn a getsourcecode envelope into a FetchOutcome.

        Empty SourceCode is disambiguated with a bytecode lookup. Only an
        explicit empty-code answer means EOA; an inconclusive lookup counts
        as an unverified contract.
        """
        def failure(kind: FailureKind, detail: str = "") -> FetchFailure:
            return FetchFailure(kind=kind, detail=detail, chain_id=chain_id, address=address)

        if str(data.get("status")) != "1":
            kind = classify_api_error(data)
            detail = error_text(data)
            logger.warning(f"getsourcecode failed for {address} on chain {chain_id}: {detail}")
            return failure(kind, detail)

        result = data.get("result")
        if not result:
            return failure(FailureKind.NO_CONTRACT_FOUND)
        if not isinstance(result, list) or not isinstance(result[0], dict):
            return failure(FailureKind.API_ERROR, f"Unexpected result payload: {result!r}")

        entry = result[0]
        source_code = entry.get("SourceCode")
        if not isinstance(source_code, str) or not source_code:
            logger.info(f"No verified source for {address}, probing for bytecode")
            has_code = self.has_bytecode(chain_id, address, api_key)
            if has_code is False:
                return failure(FailureKind.EOA_ADDRESS)
            return failure(FailureKind.UNVERIFIED_CONTRACT)

        record = ContractRecord.from_api_entry(entry, chain_id=chain_id, address=address)
        if record.is_proxy:
            logger.info(f"{address} is a proxy, implementation: {record.implementation_address}")
        logger.info(f"Fetched {record.contract_name or 'contract'} ({len(source_code)} chars of source)")
        return FetchSuccess(record=record)
