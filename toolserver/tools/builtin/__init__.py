"""Builtin tools, registered in catalog order."""
from ...config import Settings
from ..registry import ToolRegistry
from . import greet
from . import calculator
from . import clock
from . import geocode
from . import weather
from . import code_review
from . import image

BUILTIN_MODULES = (greet, calculator, clock, geocode, weather, code_review, image)


def register_builtin_tools(registry: ToolRegistry, settings: Settings) -> None:
    for module in BUILTIN_MODULES:
        registry.register(module.descriptor(settings))
