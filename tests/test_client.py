from unittest.mock import patch

import requests

from contract_fetcher import EtherscanClient, FailureKind, FetchFailure, FetchSuccess
from contract_fetcher.constants import API_V2_ENDPOINT

from conftest import ADDRESS, IMPLEMENTATION, make_response, ok_envelope, sourcecode_entry


def test_fetch_verified_contract(client, session):
    session.get.return_value = make_response(ok_envelope(sourcecode_entry()))

    outcome = client.fetch(1, ADDRESS)

    assert isinstance(outcome, FetchSuccess)
    record = outcome.record
    assert record.contract_name == "Multicall3"
    assert record.optimization_used is True
    assert record.runs == 10000000
    assert record.is_proxy is False
    assert record.implementation_address is None
    assert record.raw_source_code.startswith("pragma solidity")

    session.get.assert_called_once()
    args, kwargs = session.get.call_args
    assert args[0] == API_V2_ENDPOINT
    assert kwargs["params"] == {
        "chainid": 1,
        "module": "contract",
        "action": "getsourcecode",
        "address": ADDRESS,
        "apikey": "TESTKEY",
    }
    assert kwargs["timeout"] == 30


def test_fetch_proxy_contract(client, session):
    entry = sourcecode_entry(Proxy="1", Implementation=IMPLEMENTATION)
    session.get.return_value = make_response(ok_envelope(entry))

    outcome = client.fetch(1, ADDRESS)

    assert outcome.ok
    assert outcome.record.is_proxy is True
    assert outcome.record.implementation_address == IMPLEMENTATION


def test_fetch_proxy_without_implementation(client, session):
    session.get.return_value = make_response(ok_envelope(sourcecode_entry(Proxy="1")))

    outcome = client.fetch(1, ADDRESS)

    assert outcome.record.is_proxy is True
    assert outcome.record.implementation_address is None


def test_unsupported_chain_makes_no_request(client, session):
    outcome = client.fetch(999999, ADDRESS)

    assert isinstance(outcome, FetchFailure)
    assert outcome.kind == FailureKind.UNSUPPORTED_CHAIN
    assert "999999" in outcome.message
    assert session.get.call_count == 0


def test_missing_api_key_makes_no_request(session, tmp_path, monkeypatch):
    monkeypatch.delenv("ETHERSCAN_API_KEY", raising=False)
    client = EtherscanClient(session=session, key_file=tmp_path / "missing-key")

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.MISSING_API_KEY
    assert "missing-key" in outcome.detail
    assert session.get.call_count == 0


def test_invalid_api_key(client, session):
    session.get.return_value = make_response(
        {"status": "0", "message": "NOTOK", "result": "Invalid API Key (#err2)|chainid 1"}
    )

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.INVALID_API_KEY


def test_rate_limited(client, session):
    session.get.return_value = make_response(
        {"status": "0", "message": "NOTOK", "result": "Max rate limit reached, please use API Key for higher rate limit"}
    )

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.RATE_LIMITED


def test_unrecognized_api_error_keeps_upstream_text(client, session):
    session.get.return_value = make_response(
        {"status": "0", "message": "NOTOK", "result": "Invalid Address format"}
    )

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.API_ERROR
    assert outcome.detail == "NOTOK - Invalid Address format"
    assert outcome.message == "API Error: NOTOK - Invalid Address format"


def test_empty_result_list_is_no_contract(client, session):
    session.get.return_value = make_response({"status": "1", "message": "OK", "result": []})

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.NO_CONTRACT_FOUND
    assert ADDRESS in outcome.message


def test_http_error_is_transport_error(client, session):
    response = make_response(None, status_code=502, reason="Bad Gateway")
    response.raise_for_status.side_effect = requests.HTTPError("502 Server Error")
    session.get.return_value = response

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.TRANSPORT_ERROR
    assert outcome.detail == "502 - Bad Gateway"


def test_connection_error_is_transport_error(client, session):
    session.get.side_effect = requests.ConnectionError("connection refused")

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.TRANSPORT_ERROR
    assert "connection refused" in outcome.detail


def test_non_json_body_is_transport_error(client, session):
    response = make_response(None)
    response.json.side_effect = ValueError("Expecting value")
    session.get.return_value = response

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.TRANSPORT_ERROR


def test_empty_source_with_no_bytecode_is_eoa(client, session):
    session.get.side_effect = [
        make_response(ok_envelope(sourcecode_entry(SourceCode="", ABI="Contract source code not verified"))),
        make_response({"jsonrpc": "2.0", "id": 1, "result": "0x"}),
    ]

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.EOA_ADDRESS
    assert outcome.message == f"EOA address: {ADDRESS}"
    code_params = session.get.call_args_list[1][1]["params"]
    assert code_params["module"] == "proxy"
    assert code_params["action"] == "eth_getCode"
    assert code_params["tag"] == "latest"


def test_empty_source_with_bytecode_is_unverified(client, session):
    session.get.side_effect = [
        make_response(ok_envelope(sourcecode_entry(SourceCode=""))),
        make_response({"jsonrpc": "2.0", "id": 1, "result": "0x6080604052"}),
    ]

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.UNVERIFIED_CONTRACT
    assert outcome.message == f"Unverified contract: {ADDRESS}"


def test_missing_source_field_with_failed_bytecode_lookup_is_unverified(client, session):
    entry = sourcecode_entry()
    del entry["SourceCode"]
    session.get.side_effect = [
        make_response(ok_envelope(entry)),
        requests.Timeout("read timed out"),
    ]

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.UNVERIFIED_CONTRACT
    assert session.get.call_count == 2


def test_inconclusive_bytecode_lookup_is_unverified(client, session):
    session.get.side_effect = [
        make_response(ok_envelope(sourcecode_entry(SourceCode=""))),
        make_response({"status": "0", "message": "NOTOK", "result": "Error! Invalid address format"}),
    ]

    outcome = client.fetch(1, ADDRESS)

    assert outcome.kind == FailureKind.UNVERIFIED_CONTRACT


def test_has_bytecode_tri_state(client, session):
    session.get.side_effect = [
        make_response({"result": "0x"}),
        make_response({"result": "0x60806040"}),
        make_response({"error": {"code": -32602, "message": "invalid argument"}}),
    ]

    assert client.has_bytecode(1, ADDRESS, "TESTKEY") is False
    assert client.has_bytecode(1, ADDRESS, "TESTKEY") is True
    assert client.has_bytecode(1, ADDRESS, "TESTKEY") is None


def test_whitespace_only_source_is_returned_as_is(client, session):
    session.get.return_value = make_response(ok_envelope(sourcecode_entry(SourceCode="  \n")))

    outcome = client.fetch(1, ADDRESS)

    assert outcome.ok
    assert outcome.record.raw_source_code == "  \n"
    session.get.assert_called_once()


def test_client_closes_its_own_session():
    with patch("contract_fetcher.client.base.requests.Session") as session_cls:
        with EtherscanClient(api_key="TESTKEY") as client:
            assert client.session is session_cls.return_value

    session_cls.return_value.close.assert_called_once()


def test_client_leaves_injected_session_open(session):
    with EtherscanClient(api_key="TESTKEY", session=session):
        pass

    session.close.assert_not_called()
