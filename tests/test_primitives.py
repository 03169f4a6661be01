import pytest

from ordkit.primitives import (
    SEQUENCE_ENABLE_RBF_NO_LOCKTIME,
    SEQUENCE_MAX,
    Address,
    InscriptionId,
    OutPoint,
    SatPoint,
    Transaction,
    TxIn,
    TxOut,
    dust_value,
)

MAINNET_ADDRESS = "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4"
RECIPIENT = "tb1q6en7qjxgw4ev8xwx94pzdry6a6ky7wlfeqzunz"
CHANGE = [
    "tb1qjsv26lap3ffssj6hfy8mzn0lg5vte6a42j75ww",
    "tb1qakxxzv9n7706kc3xdcycrtfv8cqv62hnwexc0l",
    "tb1qxz9yk0td0yye009gt6ayn7jthz5p07a75luryg",
]
TAPROOT = "bc1pxwww0ct9ue7e8tdnlmug5m2tamfn7q06sahstg39ys4c9f3340qqxrdu9k"


def _txid(n):
    return f"{n:x}" * 64


def _outpoint(n):
    return OutPoint.parse(f"{_txid(n)}:{n}")


def _inscription_id(n):
    return InscriptionId.parse(f"{_txid(n)}i{n}")


def test_outpoint_round_trip():
    text = f"{_txid(1)}:1"
    assert str(OutPoint.parse(text)) == text


def test_outpoint_null():
    null = OutPoint.null()
    assert str(null) == "0" * 64 + ":4294967295"
    assert null.is_null
    assert not _outpoint(1).is_null


@pytest.mark.parametrize(
    "text",
    ["", "abc", f"{_txid(1)}", f"{_txid(1)}:01", f"{_txid(1)}:x", f"{'g' * 64}:0", f"{_txid(1)}:4294967296"],
)
def test_outpoint_parse_errors(text):
    with pytest.raises(ValueError):
        OutPoint.parse(text)


def test_outpoint_ordering_by_vout():
    a = OutPoint(_txid(1), 0)
    b = OutPoint(_txid(1), 5)
    assert sorted([b, a]) == [a, b]
    assert a < b


def test_outpoint_uppercase_normalised():
    assert OutPoint.parse(f"{'A' * 64}:0") == OutPoint.parse(f"{'a' * 64}:0")


def test_satpoint_round_trip():
    text = f"{_txid(2)}:2:500"
    satpoint = SatPoint.parse(text)
    assert str(satpoint) == text
    assert satpoint.outpoint == _outpoint(2)
    assert satpoint.offset == 500


def test_satpoint_ordering():
    low = SatPoint(_outpoint(1), 10)
    high = SatPoint(_outpoint(1), 20)
    assert max(high, low) == high


def test_satpoint_parse_error():
    with pytest.raises(ValueError):
        SatPoint.parse(f"{_txid(1)}:1:abc")


def test_inscription_id_round_trip():
    inscription_id = _inscription_id(1)
    assert str(inscription_id) == "1" * 64 + "i1"
    assert inscription_id.index == 1


@pytest.mark.parametrize("text", ["1" * 64 + "x1", "1" * 64, "1" * 64 + "i", "1" * 64 + "i-1"])
def test_inscription_id_parse_errors(text):
    with pytest.raises(ValueError):
        InscriptionId.parse(text)


def test_address_bech32_script():
    address = Address.parse(MAINNET_ADDRESS)
    assert address.script_pubkey().hex() == "0014751e76e8199196d454941c45d1b3a323f1433bd6"
    assert str(address) == MAINNET_ADDRESS
    assert address.network == "bitcoin"


def test_address_p2pkh_zero_hash():
    address = Address.parse("1111111111111111111114oLvT2")
    assert address.script_pubkey() == b"\x76\xa9\x14" + bytes(20) + b"\x88\xac"


def test_address_uppercase_equals_lowercase():
    assert Address.parse(MAINNET_ADDRESS.upper()) == Address.parse(MAINNET_ADDRESS)


@pytest.mark.parametrize(
    "text",
    [
        MAINNET_ADDRESS[:-1] + "5",
        "bc1QW508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4",
        "1111111111111111111114oLvT3",
        "not an address",
    ],
)
def test_address_parse_errors(text):
    with pytest.raises(ValueError):
        Address.parse(text)


def test_test_addresses_are_distinct_and_testnet():
    addresses = {Address.parse(text) for text in [RECIPIENT, *CHANGE]}
    assert len(addresses) == 4
    assert {address.network for address in addresses} == {"testnet"}


def test_dust_value_of_recipient():
    assert dust_value(Address.parse(RECIPIENT).script_pubkey()) == 294


def test_dust_value_taproot_above_segwit_v0():
    taproot = dust_value(Address.parse(TAPROOT).script_pubkey())
    v0 = dust_value(Address.parse(RECIPIENT).script_pubkey())
    assert taproot > v0


def test_additional_input_size():
    before = Transaction().vsize()
    after = Transaction(input=[TxIn(OutPoint.null(), witness=[bytes(64)])]).vsize()
    assert after - before == 58


def test_additional_output_size():
    before = Transaction().vsize()
    after = Transaction(output=[TxOut(0, Address.parse(TAPROOT).script_pubkey())]).vsize()
    assert after - before == 43


def test_weight_without_witness_is_four_times_size():
    tx = Transaction(
        input=[TxIn(_outpoint(1))],
        output=[TxOut(1000, Address.parse(RECIPIENT).script_pubkey())],
    )
    assert tx.weight() == 4 * len(tx.serialize())
    assert tx.vsize() == len(tx.serialize())


def test_witness_serialization_marker_and_txid():
    plain = Transaction(input=[TxIn(_outpoint(1))], output=[TxOut(5)])
    witnessed = Transaction(input=[TxIn(_outpoint(1), witness=[bytes(64)])], output=[TxOut(5)])
    assert witnessed.serialize()[4:6] == b"\x00\x01"
    assert witnessed.txid() == plain.txid()
    assert len(witnessed.serialize()) > len(plain.serialize())
    assert witnessed.vsize() < len(witnessed.serialize())


def test_txid_changes_with_outputs():
    a = Transaction(input=[TxIn(_outpoint(1))], output=[TxOut(5)])
    b = Transaction(input=[TxIn(_outpoint(1))], output=[TxOut(6)])
    assert a.txid() != b.txid()
    assert len(a.txid()) == 64


def test_explicit_rbf():
    rbf = Transaction(input=[TxIn(_outpoint(1), sequence=SEQUENCE_ENABLE_RBF_NO_LOCKTIME)])
    final = Transaction(input=[TxIn(_outpoint(1), sequence=SEQUENCE_MAX)])
    assert rbf.is_explicitly_rbf()
    assert not final.is_explicitly_rbf()
    assert not Transaction().is_explicitly_rbf()


def test_transactions_compare_by_value():
    a = Transaction(input=[TxIn(_outpoint(1), witness=[b"\x01"])], output=[TxOut(1)])
    b = Transaction(input=(TxIn(_outpoint(1), witness=(b"\x01",)),), output=(TxOut(1),))
    assert a == b