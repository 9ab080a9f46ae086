# ============================================================
# FILE: API/GATE/__init__.py
# ROLE: Gate USDT-settled futures public funding source
# NOTE: Self-contained, aiohttp-only.
# ============================================================

__all__ = ["funding", "client"]
