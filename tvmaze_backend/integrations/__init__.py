"""
External system integrations (TVmaze).

Upstream clients live under this namespace so they remain decoupled from app
entrypoints (`api/`) and pipeline scripts (`scripts/`).
"""
