"""Tax policy constants for the Korean overseas-equity regime."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, FrozenSet

DEFAULT_ANNUAL_EXEMPTION = Decimal("2500000")
DEFAULT_CAPITAL_GAINS_RATE = Decimal("0.22")
DEFAULT_DIVIDEND_WITHHOLDING_RATE = Decimal("0.154")
# Foreign-currency RP is a cash sweep vehicle and never taxed as equity.
DEFAULT_EXCLUDED_SYMBOLS: FrozenSet[str] = frozenset({"외화-RP"})

ExclusionPredicate = Callable[[str], bool]


@dataclass(frozen=True)
class TaxPolicy:
    """Configurable policy values consumed by the engine."""

    annual_exemption: Decimal = DEFAULT_ANNUAL_EXEMPTION
    capital_gains_rate: Decimal = DEFAULT_CAPITAL_GAINS_RATE
    dividend_withholding_rate: Decimal = DEFAULT_DIVIDEND_WITHHOLDING_RATE
    excluded_symbols: FrozenSet[str] = field(default_factory=lambda: DEFAULT_EXCLUDED_SYMBOLS)

    def is_excluded(self, symbol: str) -> bool:
        return symbol.strip() in self.excluded_symbols


DEFAULT_POLICY = TaxPolicy()


__all__ = [
    "DEFAULT_ANNUAL_EXEMPTION",
    "DEFAULT_CAPITAL_GAINS_RATE",
    "DEFAULT_DIVIDEND_WITHHOLDING_RATE",
    "DEFAULT_EXCLUDED_SYMBOLS",
    "DEFAULT_POLICY",
    "ExclusionPredicate",
    "TaxPolicy",
]
