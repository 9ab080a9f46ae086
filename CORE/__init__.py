# ============================================================
# FILE: CORE/__init__.py
# ROLE: Detection core (alignment, ranking, cooldown gate, driver)
# ============================================================
