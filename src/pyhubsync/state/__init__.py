"""State/store layer.

This package is the single source of truth for per-device on/off state.
Inbound hub pushes, the startup pull and local actors all mutate it through
:class:`pyhubsync.state.store.StateStore`.
"""
