"""Pieces of the explorer pages: inscription frames, clock hands and page metadata."""

from __future__ import annotations

from dataclasses import dataclass

from .primitives import InscriptionId

SUBSIDY_HALVING_INTERVAL = 210_000
DIFFCHANGE_INTERVAL = 2016
FIRST_POST_SUBSIDY_HEIGHT = 33 * SUBSIDY_HALVING_INTERVAL
DEFAULT_DOMAIN = "ordinals.com"
CHAINS = ("mainnet", "testnet", "signet", "regtest")


@dataclass(frozen=True)
class Iframe:
    """A sandboxed preview frame for an inscription, optionally linked to its page."""

    inscription_id: InscriptionId
    linked: bool = False

    @classmethod
    def thumbnail(cls, inscription_id: InscriptionId) -> Iframe:
        return cls(inscription_id, linked=True)

    @classmethod
    def main(cls, inscription_id: InscriptionId) -> Iframe:
        return cls(inscription_id, linked=False)

    def __str__(self) -> str:
        frame = (
            "<iframe sandbox=allow-scripts scrolling=no loading=lazy "
            f"src=/preview/{self.inscription_id}></iframe>"
        )
        if self.linked:
            return f"<a href=/inscription/{self.inscription_id}>{frame}</a>"
        return frame


@dataclass(frozen=True)
class ClockAngles:
    """Hand angles in degrees of the block clock at a given height."""

    height: int
    hour: float
    minute: float
    second: float


def clock_angles(height: int) -> ClockAngles:
    """Compute the subsidy, epoch and period hand angles for ``height``."""
    if height < 0:
        raise ValueError(f"height must not be negative: {height}")
    capped = min(height, FIRST_POST_SUBSIDY_HEIGHT)
    return ClockAngles(
        height=height,
        hour=(capped % FIRST_POST_SUBSIDY_HEIGHT) / FIRST_POST_SUBSIDY_HEIGHT * 360.0,
        minute=(capped % SUBSIDY_HALVING_INTERVAL) / SUBSIDY_HALVING_INTERVAL * 360.0,
        second=(height % DIFFCHANGE_INTERVAL) / DIFFCHANGE_INTERVAL * 360.0,
    )


def og_image(domain: str | None) -> str:
    """Open Graph image location for pages served from ``domain``."""
    return f"https://{domain or DEFAULT_DOMAIN}/static/favicon.png"


def superscript(chain: str) -> str:
    """Label shown next to the site name for ``chain``."""
    if chain not in CHAINS:
        raise ValueError(f"unknown chain: {chain!r}")
    return "alpha" if chain == "mainnet" else chain