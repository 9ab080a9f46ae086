# ============================================================
# FILE: API/BYBIT/__init__.py
# ROLE: Bybit v5 linear (USDT perpetual) public funding source
# NOTE: Self-contained, aiohttp-only.
# ============================================================

__all__ = ["funding", "client"]
