# ============================================================
# FILE: CORE/symbols.py
# ROLE: Symbol normalization into one canonical space (BASE+QUOTE)
# ============================================================

from __future__ import annotations

from typing import Dict, Optional, Tuple


class SymbolNormalizer:
    """Normalize exchange symbols into the canonical BASEQUOTE format (uppercase).

    Examples:
        BINANCE: BTCUSDT        -> BTCUSDT
        BYBIT:   BTCUSDT        -> BTCUSDT
        BITGET:  BTCUSDT        -> BTCUSDT
        OKX:     BTC-USDT-SWAP  -> BTCUSDT
        GATE:    BTC_USDT       -> BTCUSDT
        MEXC:    BTC_USDT       -> BTCUSDT
        any:     XBTUSDT        -> BTCUSDT  (XBT alias)
    """

    BASE_ALIASES: Dict[str, str] = {
        "XBT": "BTC",
        "BCC": "BCH",  # historical edge case
    }

    @classmethod
    def normalize_ccy(cls, ccy: str) -> str:
        c = (ccy or "").upper().strip()
        return cls.BASE_ALIASES.get(c, c)

    @classmethod
    def canonical_pair(cls, base: str, quote: str) -> str:
        b = cls.normalize_ccy(base)
        q = cls.normalize_ccy(quote)
        if not b or not q:
            raise ValueError(f"Bad pair base={base!r} quote={quote!r}")
        return f"{b}{q}"

    # -------------------------
    # Parsers (raw -> base/quote)
    # -------------------------
    @classmethod
    def parse_concat_symbol(cls, sym: str, quote: str = "USDT") -> Optional[Tuple[str, str]]:
        # Binance / Bybit / Bitget v2: BTCUSDT
        s = (sym or "").upper().strip()
        q = (quote or "").upper().strip()
        if not q or not s.endswith(q):
            return None
        base = s[: -len(q)]
        if not base:
            return None
        return cls.normalize_ccy(base), q

    @classmethod
    def parse_okx_inst_id(cls, inst_id: str, quote: str = "USDT") -> Optional[Tuple[str, str]]:
        # Typical: BTC-USDT-SWAP
        s = (inst_id or "").upper().strip()
        parts = s.split("-")
        if len(parts) != 3 or parts[2] != "SWAP":
            return None
        base, q = parts[0], parts[1]
        if not base or q != (quote or "").upper().strip():
            return None
        return cls.normalize_ccy(base), q

    @classmethod
    def parse_underscore_symbol(cls, sym: str, quote: str = "USDT") -> Optional[Tuple[str, str]]:
        # Gate / MEXC: BTC_USDT
        s = (sym or "").upper().strip()
        q = (quote or "").upper().strip()
        suffix = f"_{q}"
        if not q or not s.endswith(suffix):
            return None
        base = s[: -len(suffix)]
        if not base or "_" in base:
            return None
        return cls.normalize_ccy(base), q

    @classmethod
    def to_canonical(cls, parsed: Optional[Tuple[str, str]]) -> Optional[str]:
        if not parsed:
            return None
        return cls.canonical_pair(parsed[0], parsed[1])
