"""Game domain services: session state, claims, rounds and timers.

This package contains the transport-free game logic. Socket handlers and
HTTP routes talk to it through ``GameEngine`` only, keeping Socket.IO
concerns separated from core game mechanics.
"""

from .engine import GameEngine
from .session import GameSession

__all__ = ['GameEngine', 'GameSession']
