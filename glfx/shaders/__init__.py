"""
This directory contains the effect files that ship with glfx. They are
declared as embedded sources by ``builtin_declarations()``, so that shader
code can use e.g. ``#include glfx.Math.Constants``.
"""

import functools
import importlib.resources

from ..effects import SourceDeclaration


PACKAGE_NAME = "glfx.shaders"
EXTENSION = ".glsl"


@functools.lru_cache(maxsize=None)
def load_glsl(name):
    """Load the raw text of a builtin effect file, e.g. "glfx.glsl"."""
    ref = importlib.resources.files(PACKAGE_NAME) / name
    return ref.read_bytes().decode()


@functools.lru_cache(maxsize=None)
def _builtin_names():
    ref = importlib.resources.files(PACKAGE_NAME)
    names = [x.name for x in ref.iterdir() if x.name.endswith(EXTENSION)]
    return tuple(sorted(names))


def builtin_declarations():
    """Get a list of embedded SourceDeclaration objects for the builtin effects."""
    return [
        SourceDeclaration(
            name[: -len(EXTENSION)], name, embedded=True, package=PACKAGE_NAME
        )
        for name in _builtin_names()
    ]
