"""
This package contains the core logic for building flat-layout Java projects
into runnable JARs: staging a package-shaped source root, driving javac and
assembling the compiled output.
"""

from .models import BuildConfiguration, CompileResult, ProjectKind
from .packaging.orchestrator import BuildOrchestrator

__all__ = [
    "BuildConfiguration",
    "BuildOrchestrator",
    "CompileResult",
    "ProjectKind",
]
