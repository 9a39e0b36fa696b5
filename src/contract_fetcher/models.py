"""Structured models shared by the fetch, decode and save stages."""

import re
from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_runs(value: Any) -> int:
    """
    Parse the optimizer run count the way the explorer reports it.

    Only the leading integer of the raw string counts ("200" and "200 runs"
    both give 200); anything non-numeric or missing gives 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value or ""))
    return int(match.group(1)) if match else 0


class ChainDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)
    chain_id: int
    display_name: str


class DecodedFile(BaseModel):
    """One source file recovered from the explorer's SourceCode field."""
    model_config = ConfigDict(frozen=True)
    path: str
    content: str


class ContractRecord(BaseModel):
    """Normalized getsourcecode result for a verified contract."""
    model_config = ConfigDict(frozen=True)
    address: str
    chain_id: int
    contract_name: str = ""
    compiler_version: str = ""
    optimization_used: bool = False
    runs: int = 0
    evm_version: str = ""
    license_type: str = ""
    library: str = ""
    swarm_source: str = ""
    raw_source_code: str = Field(min_length=1)
    is_proxy: bool = False
    implementation_address: Optional[str] = None
    # Raw explorer strings, kept verbatim for metadata.json
    proxy_flag: str = "0"
    implementation: str = ""

    @classmethod
    def from_api_entry(cls, entry: Dict[str, Any], chain_id: int, address: str) -> "ContractRecord":
        """
        Build a record from one entry of the getsourcecode result list.

        Args:
            entry: Raw result entry (Etherscan field names)
            chain_id: Chain the entry was fetched from
            address: Queried address

        Returns:
            ContractRecord
        """
        proxy_flag = str(entry.get("Proxy") or "0")
        implementation = str(entry.get("Implementation") or "")
        is_proxy = proxy_flag == "1"

        return cls(
            address=address,
            chain_id=chain_id,
            contract_name=str(entry.get("ContractName") or ""),
            compiler_version=str(entry.get("CompilerVersion") or ""),
            optimization_used=str(entry.get("OptimizationUsed") or "") == "1",
            runs=parse_runs(entry.get("Runs")),
            evm_version=str(entry.get("EVMVersion") or ""),
            license_type=str(entry.get("LicenseType") or ""),
            library=str(entry.get("Library") or ""),
            swarm_source=str(entry.get("SwarmSource") or ""),
            raw_source_code=str(entry.get("SourceCode") or ""),
            is_proxy=is_proxy,
            implementation_address=(implementation or None) if is_proxy else None,
            proxy_flag=proxy_flag,
            implementation=implementation,
        )


class FailureKind(str, Enum):
    INVALID_API_KEY = "invalid_api_key"
    MISSING_API_KEY = "missing_api_key"
    RATE_LIMITED = "rate_limited"
    UNSUPPORTED_CHAIN = "unsupported_chain"
    NO_CONTRACT_FOUND = "no_contract_found"
    UNVERIFIED_CONTRACT = "unverified_contract"
    EOA_ADDRESS = "eoa_address"
    API_ERROR = "api_error"
    TRANSPORT_ERROR = "transport_error"


_FAILURE_MESSAGES = {
    FailureKind.INVALID_API_KEY: "Invalid API key",
    FailureKind.MISSING_API_KEY: "Unable to read API key: {detail}",
    FailureKind.RATE_LIMITED: "Rate limit exceeded",
    FailureKind.UNSUPPORTED_CHAIN: (
        "Unsupported chain ID: {chain_id}. Use 'fetch-contract chains' to see supported chains."
    ),
    FailureKind.NO_CONTRACT_FOUND: "No contract found at {address} on chain {chain_id}",
    FailureKind.UNVERIFIED_CONTRACT: "Unverified contract: {address}",
    FailureKind.EOA_ADDRESS: "EOA address: {address}",
    FailureKind.API_ERROR: "API Error: {detail}",
    FailureKind.TRANSPORT_ERROR: "HTTP Error: {detail}",
}


class FetchSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)
    ok: Literal[True] = True
    record: ContractRecord


class FetchFailure(BaseModel):
    model_config = ConfigDict(frozen=True)
    ok: Literal[False] = False
    kind: FailureKind
    detail: str = ""
    chain_id: Optional[int] = None
    address: Optional[str] = None

    @property
    def message(self) -> str:
        """Single-line, user-facing description of the failure."""
        return _FAILURE_MESSAGES[self.kind].format(
            detail=self.detail,
            chain_id=self.chain_id,
            address=self.address,
        )


FetchOutcome = Union[FetchSuccess, FetchFailure]


class ProxyInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    is_proxy: bool = Field(default=True, alias="isProxy")
    implementation: Optional[str] = None


class ContractMetadata(BaseModel):
    """Contents of the metadata.json descriptor written next to the sources."""
    model_config = ConfigDict(populate_by_name=True)
    contract_name: str = Field(alias="contractName")
    compiler_version: str = Field(alias="compilerVersion")
    optimization_used: bool = Field(alias="optimizationUsed")
    runs: int = 0
    evm_version: str = Field(default="default", alias="evmVersion")
    library: str = ""
    license_type: str = Field(default="", alias="licenseType")
    proxy: str = "0"
    implementation: str = ""
    swarm_source: str = Field(default="", alias="swarmSource")
    proxy_info: Optional[ProxyInfo] = Field(default=None, alias="proxyInfo")

    @classmethod
    def from_record(cls, record: ContractRecord) -> "ContractMetadata":
        proxy_info = None
        if record.is_proxy:
            proxy_info = ProxyInfo(is_proxy=True, implementation=record.implementation_address)

        return cls(
            contract_name=record.contract_name,
            compiler_version=record.compiler_version,
            optimization_used=record.optimization_used,
            runs=record.runs,
            evm_version=record.evm_version or "default",
            library=record.library,
            license_type=record.license_type,
            proxy=record.proxy_flag or "0",
            implementation=record.implementation,
            swarm_source=record.swarm_source,
            proxy_info=proxy_info,
        )

    def to_json_dict(self) -> Dict[str, Any]:
        """Camel-cased dict; proxyInfo is only present for proxies."""
        data = self.model_dump(by_alias=True)
        if self.proxy_info is None:
            data.pop("proxyInfo")
        return data
