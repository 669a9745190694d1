"""
Configuration of where effect files are looked up. Both values can be
set with environment variables, and overridden per SourceRegistry.
"""

import os


DEFAULT_SHADER_DIR = os.path.join("Data", "Shaders")
DEFAULT_SHADER_EXTENSION = "glsl"


def get_shader_dir():
    """Get the base directory used to synthesize effect file locations.

    Set by ``GLFX_SHADER_DIR``, default "Data/Shaders" (relative to the cwd).
    """
    dir = os.getenv("GLFX_SHADER_DIR")
    if dir:
        return os.path.expanduser(dir)
    return DEFAULT_SHADER_DIR


def get_shader_extension():
    """Get the extension appended to effect names that have no declared location.

    Set by ``GLFX_SHADER_EXT``, default "glsl". A leading dot is ignored.
    """
    ext = os.getenv("GLFX_SHADER_EXT", "").strip()
    return ext.lstrip(".") or DEFAULT_SHADER_EXTENSION
