"""Core domain layer - entities, interfaces, services and exceptions."""

from zycle.core import entities, exceptions, interfaces

__all__ = ["entities", "interfaces", "exceptions"]
