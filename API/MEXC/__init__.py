# ============================================================
# FILE: API/MEXC/__init__.py
# ROLE: MEXC contract (USDT perpetual) public funding source
# NOTE: Self-contained, aiohttp-only.
# ============================================================

__all__ = ["funding", "client"]
