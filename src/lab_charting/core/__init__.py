"""
Core run machinery: typed context models, run lock, pacing, audit trail,
report routing and the batch orchestrator.

Import submodules directly (core.orchestrator, core.router, ...).
"""
