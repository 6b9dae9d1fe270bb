"""Declaration shell synthesis for compiled library metadata."""

from .assembler import DeclarationAssembler
from .config import ShellConfig, load_config
from .graph import TypeGraph
from .orchestrator import Orchestrator, ShellResult
from .provider import MetadataProvider, load_library
from .writer import ShellWriter

__version__ = "0.1.0"

__all__ = [
    "DeclarationAssembler",
    "MetadataProvider",
    "Orchestrator",
    "ShellConfig",
    "ShellResult",
    "ShellWriter",
    "TypeGraph",
    "load_config",
    "load_library",
]
