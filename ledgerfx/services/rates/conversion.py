from __future__ import annotations

"""Ledger <-> display currency conversion.

Both directions use the same rate so they are exact multiplicative inverses
(up to float rounding). No rounding is applied here; formatting rounds once,
at display time.
"""


def convert_from_base(amount: float, rate: float) -> float:
    return amount * rate


def convert_to_base(amount: float, rate: float) -> float:
    return amount / rate
