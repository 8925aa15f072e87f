"""
Transfer 이벤트 / transfer() calldata 디코딩 테스트
"""
from conftest import RECIPIENT, SENDER, padded_topic, transfer_calldata, uint256
from txverify.chain_configs import TRANSFER_EVENT_SIGNATURE
from txverify.decoding import decode_transfer_calldata, decode_transfer_log, find_transfer_log

APPROVAL_SIGNATURE = "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"
CONTRACT = "0x55d398326f99059ff775485246999027b3197955"


def transfer_log(signature=TRANSFER_EVENT_SIGNATURE, raw_amount=1):
    return {
        "address": CONTRACT,
        "topics": [signature, padded_topic(SENDER), padded_topic(RECIPIENT)],
        "data": uint256(raw_amount),
    }


def test_find_transfer_log_skips_other_events():
    approval = transfer_log(signature=APPROVAL_SIGNATURE)
    anonymous = {"address": CONTRACT, "topics": [TRANSFER_EVENT_SIGNATURE], "data": "0x"}
    transfer = transfer_log(raw_amount=7)

    assert find_transfer_log([approval, anonymous, transfer]) is transfer
    assert find_transfer_log([approval]) is None
    assert find_transfer_log(None) is None


def test_decode_transfer_log():
    decoded = decode_transfer_log(transfer_log(raw_amount=2 ** 255))
    assert decoded == {
        "from_address": SENDER,
        "to_address": RECIPIENT,
        "raw_amount": 2 ** 255,
        "contract_address": CONTRACT,
    }


def test_decode_transfer_log_with_empty_data():
    log = transfer_log()
    log["data"] = "0x"
    assert decode_transfer_log(log)["raw_amount"] == 0


def test_decode_transfer_calldata():
    data = transfer_calldata(RECIPIENT, 10_000_000)
    assert decode_transfer_calldata(data) == {"to_address": RECIPIENT, "raw_amount": 10_000_000}
    # TRON은 0x 없이 내려온다
    assert decode_transfer_calldata(data[2:])["raw_amount"] == 10_000_000


def test_non_transfer_calldata_is_ignored():
    approve = "0x095ea7b3" + data_words()
    assert decode_transfer_calldata(approve) is None
    assert decode_transfer_calldata("0xa9059cbb") is None
    assert decode_transfer_calldata("0x") is None
    assert decode_transfer_calldata(None) is None


def data_words():
    return "0" * 128
