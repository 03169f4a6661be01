"""Wallet views: balances, cardinal outputs, owned inscriptions and sat lookup."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .primitives import InscriptionId, OutPoint, SatPoint

_U64_MAX = 0xFFFFFFFFFFFFFFFF

EXPLORERS = {
    "mainnet": "https://ordinals.com/inscription/",
    "regtest": "http://localhost/inscription/",
    "signet": "https://signet.ordinals.com/inscription/",
    "testnet": "https://testnet.ordinals.com/inscription/",
}


@dataclass(frozen=True)
class Cardinal:
    """An unspent wallet output that carries no inscription."""

    output: OutPoint
    amount: int


@dataclass(frozen=True)
class WalletInscription:
    """An inscription held in one of the wallet's unspent outputs."""

    inscription: InscriptionId
    location: SatPoint
    explorer: str


def _inscribed_outpoints(inscriptions: Iterable[SatPoint]) -> set[OutPoint]:
    return {satpoint.outpoint for satpoint in inscriptions}


def cardinal_balance(
    inscriptions: Mapping[SatPoint, InscriptionId],
    unspent_outputs: Mapping[OutPoint, int],
) -> int:
    """Total value in sats of the unspent outputs that hold no inscription."""
    inscribed = _inscribed_outpoints(inscriptions)
    return sum(
        amount for outpoint, amount in unspent_outputs.items() if outpoint not in inscribed
    )


def cardinal_outputs(
    inscriptions: Mapping[SatPoint, InscriptionId],
    unspent_outputs: Mapping[OutPoint, int],
) -> list[Cardinal]:
    """Unspent outputs without inscriptions, in outpoint order."""
    inscribed = _inscribed_outpoints(inscriptions)
    return [
        Cardinal(outpoint, unspent_outputs[outpoint])
        for outpoint in sorted(unspent_outputs)
        if outpoint not in inscribed
    ]


def wallet_outputs(unspent_outputs: Mapping[OutPoint, int]) -> list[tuple[OutPoint, int]]:
    """All unspent outputs with their values, in outpoint order."""
    return [(outpoint, unspent_outputs[outpoint]) for outpoint in sorted(unspent_outputs)]


def wallet_inscriptions(
    chain: str,
    inscriptions: Mapping[SatPoint, InscriptionId],
    unspent_outputs: Mapping[OutPoint, int],
) -> list[WalletInscription]:
    """Inscriptions located in the wallet's unspent outputs, in location order."""
    try:
        explorer = EXPLORERS[chain]
    except KeyError:
        raise ValueError(f"unknown chain: {chain!r}") from None
    return [
        WalletInscription(
            inscription=inscriptions[location],
            location=location,
            explorer=f"{explorer}{inscriptions[location]}",
        )
        for location in sorted(inscriptions)
        if location.outpoint in unspent_outputs
    ]


def _parse_sat(value: str) -> int:
    digits = value[1:] if value.startswith("+") else value
    if not value:
        raise ValueError("cannot parse integer from empty string")
    if not digits or not digits.isascii() or not digits.isdigit():
        raise ValueError("invalid digit found in string")
    number = int(digits)
    if number > _U64_MAX:
        raise ValueError("number too large to fit in target type")
    return number


def sats_from_tsv(
    utxos: Iterable[tuple[OutPoint, Iterable[tuple[int, int]]]],
    tsv: str,
) -> list[tuple[OutPoint, str]]:
    """Find which outputs hold the sats named in the first column of ``tsv``.

    Empty lines and lines starting with ``#`` are skipped. Results come in
    sat order, each paired with the text it was written as.
    """
    needles: list[tuple[int, str]] = []
    for number, line in enumerate(tsv.split("\n"), start=1):
        line = line.removesuffix("\r")
        if not line or line.startswith("#"):
            continue
        value = line.split("\t", 1)[0]
        try:
            sat = _parse_sat(value)
        except ValueError as error:
            raise ValueError(
                f'failed to parse sat from string "{value}" on line {number}: {error}'
            ) from error
        needles.append((sat, value))
    needles.sort()

    haystacks = sorted(
        (start, end, outpoint) for outpoint, ranges in utxos for start, end in ranges
    )

    results: list[tuple[OutPoint, str]] = []
    i = j = 0
    while i < len(needles) and j < len(haystacks):
        needle, value = needles[i]
        start, end, outpoint = haystacks[j]
        if start <= needle < end:
            results.append((outpoint, value))
        if needle >= end:
            j += 1
        else:
            i += 1
    return results