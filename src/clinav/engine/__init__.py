"""Interaction engine.

Pure state machines (navigator, menu, form, confirmation), the event loop
that hosts them, and the controller sequencing a session.
"""

from clinav.engine.controller import Controller, SessionResult
from clinav.engine.loop import EventLoop, ScriptedDriver, run_machine
from clinav.engine.renderer import MachineRenderer, Renderer

__all__ = [
    "Controller",
    "EventLoop",
    "MachineRenderer",
    "Renderer",
    "ScriptedDriver",
    "SessionResult",
    "run_machine",
]
