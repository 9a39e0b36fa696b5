"""Verified contract source fetching from the Etherscan v2 API."""

from .client import EtherscanClient
from .constants import CHAINS
from .credentials import ApiKeyNotFoundError, resolve_api_key
from .decoding import decode_source_code, encode_standard_json
from .models import (
    ChainDescriptor,
    ContractRecord,
    DecodedFile,
    FailureKind,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
)
from .pipeline import SaveResult, fetch_and_save
from .writer import ContractWriteError, save_contract_files

__all__ = [
    "ApiKeyNotFoundError",
    "CHAINS",
    "ChainDescriptor",
    "ContractRecord",
    "ContractWriteError",
    "DecodedFile",
    "EtherscanClient",
    "FailureKind",
    "FetchFailure",
    "FetchOutcome",
    "FetchSuccess",
    "SaveResult",
    "decode_source_code",
    "encode_standard_json",
    "fetch_and_save",
    "resolve_api_key",
    "save_contract_files",
]
