"""
Core engine: business clock, tick simulator, rollups and the service
exposing ``process_tick``, ``get_dashboard_metrics`` and ``patch_settings``.

No import of the submodules here: the rules import ``core.clock`` and
would otherwise load the service (and the rules again) half-initialized.
Import from the submodules directly, e.g. ``CafeOPS.core.service``.
"""
