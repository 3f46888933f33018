"""springgen: Spring Boot CRUD layers generated from one entity schema."""

from .artifacts import Artifact, ArtifactKind, GenerationReport, OutputRoot, WriteAction, WriteOutcome
from .errors import CodegenError, ConfigError, GenerationError, SchemaValidationError
from .loader import load_schemas
from .orchestrator import CodeGenerator, OutputRoots
from .policy import Manifest, OverridePolicy
from .schema import FieldDef, Schema

__all__ = [
    "Artifact",
    "ArtifactKind",
    "CodeGenerator",
    "CodegenError",
    "ConfigError",
    "FieldDef",
    "GenerationError",
    "GenerationReport",
    "Manifest",
    "OutputRoot",
    "OutputRoots",
    "OverridePolicy",
    "Schema",
    "SchemaValidationError",
    "WriteAction",
    "WriteOutcome",
    "load_schemas",
]
