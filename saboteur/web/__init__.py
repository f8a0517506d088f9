"""
Web interface module: event recording and the HTTP server.
"""

from .event_emitter import EventEmitter
from .run_recorder import RunRecorder

__all__ = ['EventEmitter', 'RunRecorder']
