"""Composition of GLSL shader code from effect files."""

# ruff: noqa: F401, F403

from ._version import __version__, version_info
from . import utils
from .utils import logger

from .effects import *
from .effects import ShaderComposer, ComposedSource, SourceDeclaration
from .shaders import builtin_declarations, load_glsl


def compose(effect_key, declarations=(), **kwargs):
    """Compose the shader code for the given effect key with a new ShaderComposer.

    The kwargs are passed to the ShaderComposer. For repeated use, create a
    ShaderComposer once, so that parsed effects are cached.
    """
    return ShaderComposer(declarations, **kwargs).compose(effect_key)
