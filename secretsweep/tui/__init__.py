"""
secretsweep TUI — Textual front end for the session state machine.

Translates key presses into session commands, runs the jobs the session
hands back on Textual workers, and renders SessionView snapshots.
"""

from __future__ import annotations
