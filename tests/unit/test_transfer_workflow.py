from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from imx_workflows.api.models import (
    CreateTransferRequest,
    CreateTransferResponse,
    GetSignableTransferRequest,
    GetSignableTransferResponse,
    Token,
    TokenData,
)
from imx_workflows.core.errors import InvalidServerResponse, SigningFailure, TransportFailure
from imx_workflows.workflows import transfer_workflow

SIGNABLE_FIELDS = {
    "signable_message": "MSG",
    "payload_hash": "0xHASH",
    "sender_stark_key": "SK1",
    "sender_vault_id": "V1",
    "receiver_stark_key": "SK2",
    "receiver_vault_id": "V2",
    "asset_id": "A1",
    "amount": "100",
    "nonce": "1",
    "expiration_timestamp": "999",
}


def _make_request(receiver: str = "0xreceiver") -> GetSignableTransferRequest:
    return GetSignableTransferRequest(
        sender="0xsender",
        token=Token(type="ERC721", data=TokenData(token_address="0xcontract", token_id="42")),
        amount="1",
        receiver=receiver,
    )


def _make_api(signable: dict, created: dict | None = None) -> MagicMock:
    api = MagicMock()
    api.get_signable_transfer_v1 = AsyncMock(return_value=GetSignableTransferResponse(**signable))
    api.create_transfer_v1 = AsyncMock(
        return_value=CreateTransferResponse(
            **(created or {"sent_signature": "0xsent", "status": "success", "time": 1700000000, "transfer_id": 5})
        )
    )
    return api


@pytest.mark.asyncio
async def test_transfer_submits_both_signatures(fake_eth_signer, fake_stark_signer) -> None:
    api = _make_api(SIGNABLE_FIELDS)

    result = await transfer_workflow(fake_eth_signer, _make_request(), api, stark_signer=fake_stark_signer)

    api.get_signable_transfer_v1.assert_awaited_once_with(_make_request())
    wallet = fake_stark_signer.generated[0]
    api.create_transfer_v1.assert_awaited_once_with(
        CreateTransferRequest(
            sender_stark_key="SK1",
            sender_vault_id="V1",
            receiver_stark_key="SK2",
            receiver_vault_id="V2",
            asset_id="A1",
            amount="100",
            nonce="1",
            expiration_timestamp="999",
            stark_signature=f"stark-sig:0xHASH:{wallet.private_key}",
        ),
        x_imx_eth_address="0xabcdef0000000000000000000000000000000001",
        x_imx_eth_signature="eth-sig:MSG",
    )
    assert result == CreateTransferResponse(
        sent_signature="0xsent", status="success", time=1700000000, transfer_id=5
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["signable_message", "payload_hash"])
async def test_missing_signable_field_fails_before_signing(missing, fake_eth_signer, fake_stark_signer) -> None:
    signable = {key: value for key, value in SIGNABLE_FIELDS.items() if key != missing}
    api = _make_api(signable)

    with pytest.raises(InvalidServerResponse):
        await transfer_workflow(fake_eth_signer, _make_request(), api, stark_signer=fake_stark_signer)

    assert fake_eth_signer.messages == []
    assert fake_stark_signer.generated == []
    assert fake_stark_signer.signed == []
    api.create_transfer_v1.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_transfer_parameter_is_terminal(fake_eth_signer, fake_stark_signer) -> None:
    signable = dict(SIGNABLE_FIELDS, receiver_vault_id=None)
    api = _make_api(signable)

    with pytest.raises(InvalidServerResponse, match="receiver_vault_id"):
        await transfer_workflow(fake_eth_signer, _make_request(), api, stark_signer=fake_stark_signer)

    assert fake_stark_signer.generated == []
    api.create_transfer_v1.assert_not_awaited()


@pytest.mark.asyncio
async def test_address_is_lowercased(fake_eth_signer_cls, fake_stark_signer) -> None:
    signer = fake_eth_signer_cls(address="0xAbCdEf00000000000000000000000000000000FF")
    api = _make_api(SIGNABLE_FIELDS)

    await transfer_workflow(signer, _make_request(), api, stark_signer=fake_stark_signer)

    kwargs = api.create_transfer_v1.await_args.kwargs
    assert kwargs["x_imx_eth_address"] == "0xabcdef00000000000000000000000000000000ff"


@pytest.mark.asyncio
async def test_absent_response_fields_stay_absent(fake_eth_signer, fake_stark_signer) -> None:
    api = _make_api(SIGNABLE_FIELDS, created={"transfer_id": 8})

    result = await transfer_workflow(fake_eth_signer, _make_request(), api, stark_signer=fake_stark_signer)

    assert result.transfer_id == 8
    assert result.status is None
    assert result.sent_signature is None
    assert result.time is None


@pytest.mark.asyncio
async def test_signing_failure_propagates_without_submission(fake_eth_signer_cls, fake_stark_signer) -> None:
    api = _make_api(SIGNABLE_FIELDS)
    fake_stark_signer.sign_hash = AsyncMock(side_effect=SigningFailure("bad hash"))

    with pytest.raises(SigningFailure, match="bad hash"):
        await transfer_workflow(fake_eth_signer_cls(), _make_request(), api, stark_signer=fake_stark_signer)

    api.create_transfer_v1.assert_not_awaited()


@pytest.mark.asyncio
async def test_transport_failure_propagates_unchanged(fake_eth_signer, fake_stark_signer) -> None:
    api = _make_api(SIGNABLE_FIELDS)
    failure = TransportFailure("boom", status_code=502)
    api.create_transfer_v1 = AsyncMock(side_effect=failure)

    with pytest.raises(TransportFailure) as excinfo:
        await transfer_workflow(fake_eth_signer, _make_request(), api, stark_signer=fake_stark_signer)

    assert excinfo.value is failure
    api.create_transfer_v1.assert_awaited_once()


@pytest.mark.asyncio
async def test_numeric_status_is_returned_as_text(fake_eth_signer, fake_stark_signer) -> None:
    api = _make_api(SIGNABLE_FIELDS, created={"status": 1, "transfer_id": 9})

    result = await transfer_workflow(fake_eth_signer, _make_request(), api, stark_signer=fake_stark_signer)

    assert result.status == "1"
    assert result.transfer_id == 9
