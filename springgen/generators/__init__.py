"""Artifact generators, one per layer of the generated application."""

from .base import BaseGenerator
from .controller import ControllerGenerator
from .entity import EntityGenerator
from .migration import MigrationClock, MigrationGenerator, default_sql
from .repository import RepositoryGenerator
from .service import ServiceGenerator

__all__ = [
    "BaseGenerator",
    "ControllerGenerator",
    "EntityGenerator",
    "MigrationClock",
    "MigrationGenerator",
    "RepositoryGenerator",
    "ServiceGenerator",
    "default_sql",
]
