"""
Composing shader source from effect sections.

An effect key like "lighting/Phong.Fragment.Diffuse" refers to the section
that best matches "Fragment.Diffuse" in the effect "lighting/Phong". The
section can include other sections with ``#include <effect key>``, where
the key is relative to the directory of the including effect. The result
is a single piece of code with ``#line`` markers, so that compiler errors
can be mapped back to the effect files.
"""

import re
import posixpath

from ..utils import logger, assert_type
from ._errors import (
    InvalidEffectKey,
    SectionNotFound,
    CyclicInclude,
    DuplicateInclude,
)
from ._sources import SourceRegistry
from ._cache import EffectCache
from ._resolver import find_best_section
from ._diagnostics import map_location, translate_log
from ._templating import apply_templating


re_include = re.compile(r'^#include\s+(?:"(?P<q>[^"]+)"|<(?P<a>[^>]+)>|(?P<b>\S+))')
VERSION_PREFIX = "#version"


def split_effect_key(effect_key):
    """Split an effect key into (logical name, section key).

    E.g. "lighting/Phong.Fragment.Diffuse" -> ("lighting/Phong", "Fragment.Diffuse").
    """
    assert_type("effect_key", effect_key, str)
    key = effect_key.strip().replace("\\", "/")
    dirname, basename = posixpath.split(key)
    source_name, sep, section_key = basename.partition(".")
    if not (sep and source_name):
        raise InvalidEffectKey(effect_key)
    logical_name = posixpath.join(dirname, source_name) if dirname else source_name
    return logical_name, section_key


def line_marker(line_number, file_index):
    return f"#line {line_number} {file_index}\n"


class ComposedSource:
    """The result of composing an effect key.

    Holds the composed code, the source files that contributed to it (the
    index in this list is the file index used in the ``#line`` markers),
    and the warnings produced during composition.
    """

    def __init__(self, effect_key, code, source_files, warnings):
        self._effect_key = effect_key
        self._code = code
        self._source_files = tuple(source_files)
        self._warnings = tuple(warnings)

    def __repr__(self):
        n = len(self._source_files)
        return f"<ComposedSource '{self._effect_key}' from {n} files>"

    def __str__(self):
        return self._code

    @property
    def effect_key(self):
        """The effect key that was composed."""
        return self._effect_key

    @property
    def code(self):
        """The composed source code."""
        return self._code

    @property
    def source_files(self):
        """A tuple of SourceFile objects, indexed by file index."""
        return self._source_files

    @property
    def warnings(self):
        """A tuple of CompositionWarning objects, e.g. for duplicate includes."""
        return self._warnings

    def map_location(self, file_index, line):
        """Map a (file_index, line) reported by the compiler to (location, line)."""
        return map_location(self._source_files, file_index, line)

    def translate_log(self, log):
        """Replace the file indices in a compiler info log with file locations."""
        return translate_log(log, self._source_files)

    def with_code(self, code):
        """Get a copy of this object with different code."""
        return ComposedSource(self._effect_key, code, self._source_files, self._warnings)


class IncludeExpander:
    """Expand an effect key into a ComposedSource, resolving includes recursively.

    An expander performs one composition. Each section is expanded at most
    once; later includes of the same section produce no code and a
    DuplicateInclude warning. A section that includes itself (directly or
    indirectly) raises CyclicInclude.
    """

    def __init__(self, registry, cache):
        assert_type("registry", registry, SourceRegistry)
        assert_type("cache", cache, EffectCache)
        self._registry = registry
        self._cache = cache
        self._used = False
        self._expanded = set()  # section ids
        self._stack = []  # (section id, effect key) of sections being expanded
        self._file_indices = {}  # effect identity -> file index
        self._source_files = []
        self._warnings = []

    def expand(self, effect_key):
        """Compose the given effect key. Raises an EffectError on failure."""
        if self._used:
            raise RuntimeError("An IncludeExpander can only be used once.")
        self._used = True
        logger.debug(f"Composing {effect_key}")
        code = self._expand(effect_key)
        return ComposedSource(effect_key, code, self._source_files, self._warnings)

    def _expand(self, effect_key):
        logical_name, section_key = split_effect_key(effect_key)

        # Get the section
        source_file = self._registry.resolve(logical_name)
        effect = self._cache.load(source_file)
        section = find_best_section(effect, section_key)
        if section is None:
            raise SectionNotFound(effect.identity, section_key, effect_key)

        # Check for includes of sections that are being expanded, or already were
        if any(section.id == sid for sid, _ in self._stack):
            raise CyclicInclude([key for _, key in self._stack] + [effect_key])
        if section.id in self._expanded:
            warning = DuplicateInclude(effect.identity, section.key, effect_key)
            logger.warning(str(warning))
            self._warnings.append(warning)
            return ""
        self._expanded.add(section.id)

        # Get file index, each effect gets one on its first use
        file_index = self._file_indices.get(effect.identity)
        if file_index is None:
            file_index = self._file_indices[effect.identity] = len(self._source_files)
            self._source_files.append(source_file)

        self._stack.append((section.id, effect_key))
        try:
            return self._expand_section(section, logical_name, file_index)
        finally:
            self._stack.pop()

    def _expand_section(self, section, logical_name, file_index):
        dirname = posixpath.dirname(logical_name)
        parts = []
        fix_line = True
        for line_number, line in section.lines():
            match = re_include.match(line)
            if match:
                include_key = match.group("q") or match.group("a") or match.group("b")
                include_key = posixpath.normpath(posixpath.join(dirname, include_key))
                # Replace the include with the source of the included section
                parts.append(self._expand(include_key))
                # The line numbering changed, so fix it at the next line
                fix_line = True
                continue
            if fix_line and not line.startswith(VERSION_PREFIX):
                parts.append(line_marker(line_number, file_index))
                fix_line = False
            parts.append(line + "\n")
        return "".join(parts)


class ShaderComposer:
    """The context for composing shader code from effect files.

    Parameters:
        declarations (iterable): SourceDeclaration objects for sources that
            are not at their default location.
        base_dir (str | None): The directory for default locations.
        extension (str | None): The extension for default locations.
        reader (SourceReader | dict | callable | None): Provides the content of sources.
        cache (EffectCache | None): An existing cache to share between composers.
            If given, the composer uses the cache's registry, and the above
            arguments and ``include_builtin=False`` must not be given.
        include_builtin (bool): Whether to declare the effects that ship with glfx.
            Default True.
    """

    def __init__(
        self,
        declarations=(),
        *,
        base_dir=None,
        extension=None,
        reader=None,
        cache=None,
        include_builtin=True,
    ):
        if cache is not None:
            assert_type("cache", cache, EffectCache)
            if declarations or base_dir or extension or reader or not include_builtin:
                raise ValueError(
                    "A ShaderComposer with a shared cache uses the registry of that cache."
                )
            self._cache = cache
        else:
            declarations = list(declarations)
            if include_builtin:
                from ..shaders import builtin_declarations

                declarations.extend(builtin_declarations())
            registry = SourceRegistry(
                declarations, base_dir=base_dir, extension=extension, reader=reader
            )
            self._cache = EffectCache(registry)

    def __repr__(self):
        return f"<ShaderComposer with {len(self._cache)} cached effects at {hex(id(self))}>"

    @property
    def registry(self):
        """The SourceRegistry to resolve logical source names."""
        return self._cache.registry

    @property
    def cache(self):
        """The EffectCache holding the parsed effects."""
        return self._cache

    def compose(self, effect_key, **template_vars):
        """Compose the source for the given effect key.

        If template variables are given, the composed code is rendered with
        jinja2 (using ``{$ $}`` for blocks and ``{{ }}`` for variables).
        Returns a ComposedSource.
        """
        result = IncludeExpander(self.registry, self._cache).expand(effect_key)
        if template_vars:
            result = result.with_code(apply_templating(result.code, **template_vars))
        return result

    def compose_program(self, stages, **template_vars):
        """Compose the sources for all stages of a program.

        The stages is a dict that maps a stage name (e.g. "vertex") to an
        effect key. Returns a dict mapping stage name to ComposedSource.
        """
        if not stages:
            raise ValueError("Cannot compose a program without shader stages.")
        result = {}
        for stage, effect_key in stages.items():
            logger.debug(f"Composing {stage}: {effect_key}")
            result[stage] = self.compose(effect_key, **template_vars)
        return result
