from unittest.mock import MagicMock

import pytest

from contract_fetcher import EtherscanClient

ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"
IMPLEMENTATION = "0xDEF1C0ded9bec7F1a1670819833240f027b25EfF"


def make_response(payload, status_code=200, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = payload
    return response


def sourcecode_entry(**overrides):
    entry = {
        "SourceCode": "pragma solidity ^0.8.19;\ncontract Multicall3 {}",
        "ABI": "[]",
        "ContractName": "Multicall3",
        "CompilerVersion": "v0.8.12+commit.f00d7308",
        "OptimizationUsed": "1",
        "Runs": "10000000",
        "ConstructorArguments": "",
        "EVMVersion": "Default",
        "Library": "",
        "LicenseType": "MIT",
        "Proxy": "0",
        "Implementation": "",
        "SwarmSource": "ipfs://QmExample",
    }
    entry.update(overrides)
    return entry


def ok_envelope(*entries):
    return {"status": "1", "message": "OK", "result": list(entries)}


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return EtherscanClient(api_key="TESTKEY", session=session)
