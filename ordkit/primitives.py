"""Bitcoin transaction primitives: outpoints, sat points, addresses and transactions."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from functools import total_ordering

SEQUENCE_MAX = 0xFFFFFFFF
SEQUENCE_ENABLE_RBF_NO_LOCKTIME = 0xFFFFFFFD
WITNESS_SCALE_FACTOR = 4

_DUST_RELAY_FEE_PER_VBYTE = 3
_U32_MAX = 0xFFFFFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF
_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _sha256d(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def _varint(n: int) -> bytes:
    if n < 0xFD:
        return bytes([n])
    if n <= 0xFFFF:
        return b"\xfd" + n.to_bytes(2, "little")
    if n <= 0xFFFFFFFF:
        return b"\xfe" + n.to_bytes(4, "little")
    return b"\xff" + n.to_bytes(8, "little")


def _encode_bytes(data: bytes) -> bytes:
    return _varint(len(data)) + data


def _parse_txid(text: str) -> str:
    if len(text) != 64 or not set(text) <= _HEX_DIGITS:
        raise ValueError(f"invalid txid: {text!r}")
    return text.lower()


def _parse_uint(text: str, maximum: int, what: str, canonical: bool = False) -> int:
    if not text or not set(text) <= _DIGITS:
        raise ValueError(f"invalid {what}: {text!r}")
    if canonical and len(text) > 1 and text[0] == "0":
        raise ValueError(f"non-canonical {what}: {text!r}")
    value = int(text)
    if value > maximum:
        raise ValueError(f"{what} out of range: {text!r}")
    return value


def _check_txid_field(obj: object, txid: str) -> None:
    object.__setattr__(obj, "txid", _parse_txid(txid))


@total_ordering
@dataclass(frozen=True)
class OutPoint:
    """A reference to an output of a transaction."""

    txid: str
    vout: int

    def __post_init__(self) -> None:
        _check_txid_field(self, self.txid)
        if not 0 <= self.vout <= _U32_MAX:
            raise ValueError(f"vout out of range: {self.vout}")

    @classmethod
    def parse(cls, text: str) -> OutPoint:
        txid, sep, vout = text.rpartition(":")
        if not sep:
            raise ValueError(f"missing ':' in outpoint: {text!r}")
        return cls(_parse_txid(txid), _parse_uint(vout, _U32_MAX, "vout", canonical=True))

    @classmethod
    def null(cls) -> OutPoint:
        return cls("0" * 64, _U32_MAX)

    @property
    def is_null(self) -> bool:
        return self == OutPoint.null()

    def serialize(self) -> bytes:
        return bytes.fromhex(self.txid)[::-1] + self.vout.to_bytes(4, "little")

    def _key(self) -> tuple[bytes, int]:
        return bytes.fromhex(self.txid)[::-1], self.vout

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, OutPoint):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        return f"{self.txid}:{self.vout}"


@total_ordering
@dataclass(frozen=True)
class SatPoint:
    """The position of a single sat within an output."""

    outpoint: OutPoint
    offset: int

    def __post_init__(self) -> None:
        if not 0 <= self.offset <= _U64_MAX:
            raise ValueError(f"offset out of range: {self.offset}")

    @classmethod
    def parse(cls, text: str) -> SatPoint:
        outpoint, sep, offset = text.rpartition(":")
        if not sep:
            raise ValueError(f"missing ':' in satpoint: {text!r}")
        return cls(OutPoint.parse(outpoint), _parse_uint(offset, _U64_MAX, "offset"))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SatPoint):
            return NotImplemented
        return (self.outpoint, self.offset) < (other.outpoint, other.offset)

    def __str__(self) -> str:
        return f"{self.outpoint}:{self.offset}"


@total_ordering
@dataclass(frozen=True)
class InscriptionId:
    """An inscription, named by its reveal transaction and index."""

    txid: str
    index: int

    def __post_init__(self) -> None:
        _check_txid_field(self, self.txid)
        if not 0 <= self.index <= _U32_MAX:
            raise ValueError(f"index out of range: {self.index}")

    @classmethod
    def parse(cls, text: str) -> InscriptionId:
        if not text.isascii():
            raise ValueError(f"non-ascii character in inscription id: {text!r}")
        if len(text) < 66:
            raise ValueError(f"invalid inscription id length {len(text)}")
        if text[64] != "i":
            raise ValueError(f"invalid inscription id separator {text[64]!r}")
        return cls(_parse_txid(text[:64]), _parse_uint(text[65:], _U32_MAX, "index"))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, InscriptionId):
            return NotImplemented
        return (bytes.fromhex(self.txid)[::-1], self.index) < (
            bytes.fromhex(other.txid)[::-1],
            other.index,
        )

    def __str__(self) -> str:
        return f"{self.txid}i{self.index}"


_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_VALUES = {char: value for value, char in enumerate(_BECH32_CHARSET)}
_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3
_SEGWIT_HRPS = {"bc": "bitcoin", "tb": "testnet", "bcrt": "regtest"}

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_VALUES = {char: value for value, char in enumerate(_BASE58_ALPHABET)}
_BASE58_VERSIONS = {
    0x00: ("bitcoin", "p2pkh"),
    0x05: ("bitcoin", "p2sh"),
    0x6F: ("testnet", "p2pkh"),
    0xC4: ("testnet", "p2sh"),
}


def _bech32_polymod(values: list[int]) -> int:
    generator = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for bit, g in enumerate(generator):
            if (top >> bit) & 1:
                chk ^= g
    return chk


def _bech32_hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data: list[int], from_bits: int, to_bits: int) -> bytes:
    acc = 0
    bits = 0
    out = bytearray()
    maxv = (1 << to_bits) - 1
    for value in data:
        acc = ((acc << from_bits) | value) & ((1 << (from_bits + to_bits - 1)) - 1)
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & maxv)
    if bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        raise ValueError("invalid bech32 padding")
    return bytes(out)


def _decode_segwit(text: str) -> tuple[str, bytes]:
    if text.lower() != text and text.upper() != text:
        raise ValueError(f"mixed case address: {text!r}")
    lowered = text.lower()
    pos = lowered.rfind("1")
    if pos < 1 or pos + 7 > len(lowered) or len(lowered) > 90:
        raise ValueError(f"invalid bech32 address: {text!r}")
    hrp = lowered[:pos]
    try:
        data = [_BECH32_VALUES[c] for c in lowered[pos + 1 :]]
    except KeyError as error:
        raise ValueError(f"invalid bech32 character in {text!r}") from error
    const = _bech32_polymod(_bech32_hrp_expand(hrp) + data)
    version = data[0]
    if version > 16:
        raise ValueError(f"invalid witness version {version}")
    expected = _BECH32_CONST if version == 0 else _BECH32M_CONST
    if const != expected:
        raise ValueError(f"invalid bech32 checksum: {text!r}")
    program = _convert_bits(data[1:-6], 5, 8)
    if not 2 <= len(program) <= 40:
        raise ValueError(f"invalid witness program length {len(program)}")
    if version == 0 and len(program) not in (20, 32):
        raise ValueError(f"invalid v0 witness program length {len(program)}")
    opcode = 0 if version == 0 else 0x50 + version
    return lowered, bytes([opcode, len(program)]) + program


def _decode_base58check(text: str) -> bytes:
    number = 0
    for char in text:
        try:
            number = number * 58 + _BASE58_VALUES[char]
        except KeyError as error:
            raise ValueError(f"invalid base58 character {char!r}") from error
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    zeros = len(text) - len(text.lstrip("1"))
    raw = bytes(zeros) + body
    if len(raw) < 5:
        raise ValueError(f"base58 string too short: {text!r}")
    payload, checksum = raw[:-4], raw[-4:]
    if _sha256d(payload)[:4] != checksum:
        raise ValueError(f"invalid base58 checksum: {text!r}")
    return payload


@dataclass(frozen=True, order=True)
class Address:
    """A bitcoin address together with the output script it pays to."""

    text: str
    network: str = field(compare=False)
    _script: bytes = field(compare=False, repr=False)

    @classmethod
    def parse(cls, text: str) -> Address:
        hrp = text[: text.rfind("1")].lower() if "1" in text else ""
        if hrp in _SEGWIT_HRPS:
            canonical, script = _decode_segwit(text)
            return cls(canonical, _SEGWIT_HRPS[hrp], script)
        payload = _decode_base58check(text)
        if len(payload) != 21 or payload[0] not in _BASE58_VERSIONS:
            raise ValueError(f"invalid legacy address: {text!r}")
        network, kind = _BASE58_VERSIONS[payload[0]]
        digest = payload[1:]
        if kind == "p2pkh":
            script = b"\x76\xa9\x14" + digest + b"\x88\xac"
        else:
            script = b"\xa9\x14" + digest + b"\x87"
        return cls(text, network, script)

    def script_pubkey(self) -> bytes:
        return self._script

    def __str__(self) -> str:
        return self.text


def _is_witness_program(script: bytes) -> bool:
    if not 4 <= len(script) <= 42:
        return False
    version_ok = script[0] == 0 or 0x51 <= script[0] <= 0x60
    return version_ok and 2 <= script[1] <= 40 and len(script) - 2 == script[1]


def dust_value(script_pubkey: bytes) -> int:
    """Smallest value in sats an output paying to ``script_pubkey`` may hold."""
    if script_pubkey[:1] == b"\x6a":
        return 0
    encoded = len(_varint(len(script_pubkey))) + len(script_pubkey)
    if _is_witness_program(script_pubkey):
        size = 32 + 4 + 1 + 107 // 4 + 4 + 8 + encoded
    else:
        size = 32 + 4 + 1 + 107 + 4 + 8 + encoded
    return _DUST_RELAY_FEE_PER_VBYTE * size


@dataclass(frozen=True)
class TxIn:
    previous_output: OutPoint
    script_sig: bytes = b""
    sequence: int = SEQUENCE_MAX
    witness: tuple[bytes, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "witness", tuple(bytes(item) for item in self.witness))
        object.__setattr__(self, "script_sig", bytes(self.script_sig))

    def _serialize(self) -> bytes:
        return (
            self.previous_output.serialize()
            + _encode_bytes(self.script_sig)
            + self.sequence.to_bytes(4, "little")
        )

    def _serialize_witness(self) -> bytes:
        return _varint(len(self.witness)) + b"".join(_encode_bytes(item) for item in self.witness)


@dataclass(frozen=True)
class TxOut:
    value: int
    script_pubkey: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "script_pubkey", bytes(self.script_pubkey))

    def _serialize(self) -> bytes:
        return self.value.to_bytes(8, "little") + _encode_bytes(self.script_pubkey)


@dataclass(frozen=True)
class Transaction:
    version: int = 1
    lock_time: int = 0
    input: tuple[TxIn, ...] = ()
    output: tuple[TxOut, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "input", tuple(self.input))
        object.__setattr__(self, "output", tuple(self.output))

    def _body(self) -> bytes:
        return (
            _varint(len(self.input))
            + b"".join(txin._serialize() for txin in self.input)
            + _varint(len(self.output))
            + b"".join(txout._serialize() for txout in self.output)
        )

    def _version_bytes(self) -> bytes:
        return self.version.to_bytes(4, "little", signed=True)

    def _lock_time_bytes(self) -> bytes:
        return self.lock_time.to_bytes(4, "little")

    def serialize(self) -> bytes:
        """Consensus encoding, with witness data where any input carries it."""
        has_witness = not self.input or any(txin.witness for txin in self.input)
        if not has_witness:
            return self._version_bytes() + self._body() + self._lock_time_bytes()
        return (
            self._version_bytes()
            + b"\x00\x01"
            + self._body()
            + b"".join(txin._serialize_witness() for txin in self.input)
            + self._lock_time_bytes()
        )

    def txid(self) -> str:
        legacy = self._version_bytes() + self._body() + self._lock_time_bytes()
        return _sha256d(legacy)[::-1].hex()

    def weight(self) -> int:
        input_weight = 0
        with_witness = 0
        for txin in self.input:
            input_weight += WITNESS_SCALE_FACTOR * (
                32 + 4 + 4 + len(_varint(len(txin.script_sig))) + len(txin.script_sig)
            )
            if txin.witness:
                with_witness += 1
                input_weight += len(txin._serialize_witness())
        output_size = sum(
            8 + len(_varint(len(txout.script_pubkey))) + len(txout.script_pubkey)
            for txout in self.output
        )
        non_input_size = (
            4 + len(_varint(len(self.input))) + len(_varint(len(self.output))) + output_size + 4
        )
        weight = non_input_size * WITNESS_SCALE_FACTOR + input_weight
        if with_witness:
            weight += len(self.input) - with_witness + 2
        return weight

    def vsize(self) -> int:
        return (self.weight() + WITNESS_SCALE_FACTOR - 1) // WITNESS_SCALE_FACTOR

    def is_explicitly_rbf(self) -> bool:
        return any(txin.sequence < 0xFFFFFFFE for txin in self.input)