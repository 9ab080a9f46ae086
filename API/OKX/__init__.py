# ============================================================
# FILE: API/OKX/__init__.py
# ROLE: OKX USDT-margined SWAP public funding source
# NOTE: Self-contained, aiohttp-only.
# ============================================================

__all__ = ["funding", "client"]
