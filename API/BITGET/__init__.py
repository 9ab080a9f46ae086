# ============================================================
# FILE: API/BITGET/__init__.py
# ROLE: Bitget USDT-M Futures public funding source
# NOTE: Self-contained, aiohttp-only.
# ============================================================

__all__ = ["funding", "client"]
