# ordkit

Helpers for ordinal-aware Bitcoin wallets in plain Python. The package uses
nothing outside the standard library.

## Modules

- `ordkit.primitives`: `OutPoint`, `SatPoint`, `InscriptionId` and
  `Address`, each with a `parse` class method. `Address.script_pubkey()`
  returns the output script for segwit (bech32/bech32m) and legacy
  (base58) addresses. `TxIn`, `TxOut` and `Transaction` model a
  transaction. `Transaction` has `serialize()`, `txid()`, `weight()`,
  `vsize()` and `is_explicitly_rbf()`. `dust_value(script_pubkey)` gives
  the smallest value an output to that script may hold.
- `ordkit.postage`: `FeeRate`, whose `fee(vsize)` rounds up to whole sats.
  `Target` is either an exact value or postage (`POSTAGE`). The module
  also has the postage constants `TARGET_POSTAGE` and `MAX_POSTAGE`, and
  `estimate_vbytes_with(inputs, outputs)` for the size of a transaction
  with taproot key-path inputs. The error types are `DuplicateAddress`,
  `Dust`, `NotEnoughCardinalUtxos`, `NotInWallet`, `OutOfRange`,
  `UtxoContainsAdditionalInscription` and `ValueOverflow`, all subclasses
  of `TransactionBuilderError`, plus `InvariantViolation`.
- `ordkit.wallet`: summaries of a wallet's unspent outputs.
  `cardinal_balance` and `cardinal_outputs` (returning `Cardinal` records)
  cover the outputs that hold no inscription. `wallet_outputs` lists all
  unspent outputs. `wallet_inscriptions` returns `WalletInscription`
  records with explorer links for a chain. `sats_from_tsv` matches sats
  listed in the first column of a TSV text against the wallet's sat
  ranges.
- `ordkit.html`: explorer page pieces. `Iframe.thumbnail` and `Iframe.main`
  render preview frames for an inscription. `clock_angles(height)` returns
  the clock hand angles as a `ClockAngles` record. `og_image(domain)` and
  `superscript(chain)` give page metadata.
- `ordkit.tally`: `tally(noun, count)` gives counted nouns such as
  `"1 output"` and `"2 outputs"`.

## Installing

```
pip install .
```

## Example

```python
from ordkit.primitives import Address, OutPoint
from ordkit.postage import FeeRate, estimate_vbytes_with
from ordkit.wallet import sats_from_tsv

outpoint = OutPoint.parse("1" * 64 + ":1")
recipient = Address.parse("tb1q6en7qjxgw4ev8xwx94pzdry6a6ky7wlfeqzunz")

vbytes = estimate_vbytes_with(1, [recipient])
print(vbytes, FeeRate(2.5).fee(vbytes))

print(sats_from_tsv([(outpoint, [(0, 2)])], "1\n0\n"))
# [(OutPoint(txid='11...11', vout=1), '0'), (OutPoint(..., vout=1), '1')]
```

## What it does not do

- It does not assemble or sign transactions. It provides the fee rates,
  size estimates, targets and error types that such a builder needs, but
  no builder itself.
- It does not talk to a Bitcoin node or keep an index. Every wallet
  summary works on mappings of outpoints and inscriptions that you pass
  in.
- It has no command-line interface and does not serve or render whole
  explorer pages.

## Running the tests

```
pip install .[test]
pytest
```