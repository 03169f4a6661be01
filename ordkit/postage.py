"""Fee rates, targets, errors and size estimates used when building ordinal-aware transactions."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from .primitives import (
    SEQUENCE_ENABLE_RBF_NO_LOCKTIME,
    Address,
    InscriptionId,
    OutPoint,
    SatPoint,
    Transaction,
    TxIn,
    TxOut,
)

ADDITIONAL_INPUT_VBYTES = 58
ADDITIONAL_OUTPUT_VBYTES = 43
TARGET_POSTAGE = 10_000
MAX_POSTAGE = 2 * TARGET_POSTAGE
SCHNORR_SIGNATURE_SIZE = 64
AMOUNT_MAX = 0xFFFFFFFFFFFFFFFF


def format_amount(sats: int) -> str:
    """Render a value in sats as a bitcoin amount, e.g. ``0.00000294 BTC``."""
    sign = "-" if sats < 0 else ""
    whole, fraction = divmod(abs(sats), 100_000_000)
    return f"{sign}{whole}.{fraction:08d} BTC"


@dataclass(frozen=True)
class FeeRate:
    """A fee rate in sats per virtual byte."""

    rate: float

    def __post_init__(self) -> None:
        rate = float(self.rate)
        if not math.isfinite(rate):
            raise ValueError(f"fee rate must be finite: {self.rate}")
        if rate < 0.0:
            raise ValueError(f"fee rate must not be negative: {self.rate}")
        object.__setattr__(self, "rate", rate)

    def fee(self, vsize: int) -> int:
        """Fee in sats for a transaction of ``vsize`` virtual bytes, rounded up."""
        return math.ceil(self.rate * vsize)


@dataclass(frozen=True)
class Target:
    """What the recipient output should hold: an exact value, or postage when ``value`` is None."""

    value: int | None = None

    def __post_init__(self) -> None:
        if self.value is not None and not 0 <= self.value <= AMOUNT_MAX:
            raise ValueError(f"target value out of range: {self.value}")


POSTAGE = Target()


class TransactionBuilderError(Exception):
    """A transaction could not be built from the given wallet state."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class DuplicateAddress(TransactionBuilderError):
    def __init__(self, address: Address) -> None:
        super().__init__(f"duplicate input address: {address}")
        self.address = address


class Dust(TransactionBuilderError):
    def __init__(self, output_value: int, dust_value: int) -> None:
        super().__init__(
            "output value is below dust value: "
            f"{format_amount(output_value)} < {format_amount(dust_value)}"
        )
        self.output_value = output_value
        self.dust_value = dust_value


class NotEnoughCardinalUtxos(TransactionBuilderError):
    def __init__(self) -> None:
        super().__init__(
            "wallet does not contain enough cardinal UTXOs, "
            "please add additional funds to wallet."
        )


class NotInWallet(TransactionBuilderError):
    def __init__(self, satpoint: SatPoint) -> None:
        super().__init__(f"outgoing satpoint {satpoint} not in wallet")
        self.satpoint = satpoint


class OutOfRange(TransactionBuilderError):
    def __init__(self, satpoint: SatPoint, maximum: int) -> None:
        super().__init__(f"outgoing satpoint {satpoint} offset higher than maximum {maximum}")
        self.satpoint = satpoint
        self.maximum = maximum


class UtxoContainsAdditionalInscription(TransactionBuilderError):
    def __init__(
        self,
        outgoing_satpoint: SatPoint,
        inscribed_satpoint: SatPoint,
        inscription_id: InscriptionId,
    ) -> None:
        super().__init__(
            f"cannot send {outgoing_satpoint} without also sending inscription "
            f"{inscription_id} at {inscribed_satpoint}"
        )
        self.outgoing_satpoint = outgoing_satpoint
        self.inscribed_satpoint = inscribed_satpoint
        self.inscription_id = inscription_id


class ValueOverflow(TransactionBuilderError):
    def __init__(self) -> None:
        super().__init__("arithmetic overflow calculating value")


class InvariantViolation(AssertionError):
    """A built transaction broke one of the rules it must always satisfy."""


def estimate_vbytes_with(inputs: int, outputs: Iterable[Address]) -> int:
    """Virtual size of a transaction with ``inputs`` taproot key-path inputs paying ``outputs``."""
    transaction = Transaction(
        version=1,
        lock_time=0,
        input=tuple(
            TxIn(
                previous_output=OutPoint.null(),
                script_sig=b"",
                sequence=SEQUENCE_ENABLE_RBF_NO_LOCKTIME,
                witness=(bytes(SCHNORR_SIGNATURE_SIZE),),
            )
            for _ in range(inputs)
        ),
        output=tuple(TxOut(0, address.script_pubkey()) for address in outputs),
    )
    return transaction.vsize()