"""Utility helpers."""

from .identifiers import generate_id, now_ms
from .titles import generate_session_title

__all__ = ['generate_id', 'now_ms', 'generate_session_title']
