# ============================================================
# FILE: API/BINANCE/__init__.py
# ROLE: Binance USDT-M Futures public funding source
# NOTE: Self-contained, aiohttp-only.
# ============================================================

__all__ = ["funding", "client"]
