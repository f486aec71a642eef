"""Dispatch module."""

from .queue import DispatchQueue

__all__ = ["DispatchQueue"]
