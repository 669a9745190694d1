"""
The effect file format. An effect is a text file with several sections,
each containing (part of) the source of a shader::

    -- Vertex
    #version 330
    ...

    -- Fragment.Diffuse
    #version 330
    #include Common.Lighting
    ...

A line starting with ``--`` starts a new section, named by the rest of the
line. Lines before the first separator are ignored. This format is
similar to that of GLSW (http://prideout.net/blog/?p=11).
"""

import re
import weakref

from ..utils import logger, assert_type, ReadOnlyDict
from ._errors import DuplicateSectionKey
from ._resolver import find_best_section


SECTION_SEPARATOR = "--"

re_line_break = re.compile(r"\r\n|\r|\n")


def split_lines(text):
    """Split text into lines at "\\r\\n", "\\r" and "\\n" only, like a GLSL compiler does.

    A trailing line break does not produce an extra empty line.
    """
    lines = re_line_break.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


class Section:
    """A named block of source within an effect.

    Sections are created by ``parse_effect()``. Two sections are equal if they
    have the same key and belong to effects with the same identity.
    """

    __slots__ = ["_effect_ref", "_effect_identity", "_key", "_body", "_first_line_number"]

    def __init__(self, effect, key, body, first_line_number):
        self._effect_ref = weakref.ref(effect)
        self._effect_identity = effect.identity
        self._key = key
        self._body = body
        self._first_line_number = first_line_number

    def __repr__(self):
        return f"<Section '{self._key}' of {self._effect_identity!r} at line {self._first_line_number}>"

    def __eq__(self, other):
        if not isinstance(other, Section):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    @property
    def effect(self):
        """The effect that contains this section (None if it no longer exists)."""
        return self._effect_ref()

    @property
    def id(self):
        """The tuple (effect identity, key) that identifies this section."""
        return self._effect_identity, self._key

    @property
    def key(self):
        """The key of this section, e.g. "Fragment.Diffuse"."""
        return self._key

    @property
    def body(self):
        """The source text of this section. Each line ends with a newline."""
        return self._body

    @property
    def first_line_number(self):
        """The 1-based line number, in the effect file, of the first line of the body."""
        return self._first_line_number

    def lines(self):
        """Iterate over (line_number, line) tuples of the body."""
        for i, line in enumerate(split_lines(self._body)):
            yield self._first_line_number + i, line


class Effect:
    """A parsed effect file. Use ``parse_effect()`` or an EffectCache to create one."""

    def __init__(self, identity, origin=None):
        assert_type("identity", identity, str)
        self._identity = identity
        self._origin = origin
        self._sections = ReadOnlyDict()
        self._warnings = ()

    def __repr__(self):
        return f"<Effect {self._identity!r} with {len(self._sections)} sections>"

    @property
    def identity(self):
        """The canonical identity of this effect (a path or resource name)."""
        return self._identity

    @property
    def origin(self):
        """The SourceFile this effect was loaded from, or None."""
        return self._origin

    @property
    def sections(self):
        """A read-only dict mapping section key to Section, in order of first definition."""
        return self._sections

    @property
    def warnings(self):
        """A tuple of DuplicateSectionKey warnings produced while parsing."""
        return self._warnings

    def get_matching_section(self, key):
        """Get the section with the longest key that is a prefix of the given key, or None."""
        return find_best_section(self, key)


def parse_effect(text, identity, origin=None):
    """Parse the source of an effect file into an Effect object.

    Parameters:
        text (str): The content of the effect file.
        identity (str): The identity of the effect, typically the path.
        origin (SourceFile | None): The source that the text was read from.

    When a section key occurs more than once, the last section wins, and
    a DuplicateSectionKey warning is logged and stored on the effect.
    """
    assert_type("text", text, str)

    effect = Effect(identity, origin)
    sections = {}
    warnings = []

    key = None
    first_line_number = 0
    body_lines = []

    def finish_section():
        section = Section(effect, key, "".join(body_lines), first_line_number)
        if key in sections:
            warning = DuplicateSectionKey(
                identity, key, sections[key].first_line_number - 1, first_line_number - 1
            )
            logger.warning(str(warning))
            warnings.append(warning)
        sections[key] = section

    for linenr, line in enumerate(split_lines(text), 1):
        if not line.startswith(SECTION_SEPARATOR):
            # Lines before the first separator are dropped
            if key is not None:
                body_lines.append(line + "\n")
            continue
        if key is not None:
            finish_section()
        key = line[len(SECTION_SEPARATOR) :].strip()
        first_line_number = linenr + 1
        body_lines = []

    if key is not None:
        finish_section()

    effect._sections = ReadOnlyDict(sections)
    effect._warnings = tuple(warnings)
    logger.debug(f"Parsed effect {identity!r} with {len(sections)} sections")
    return effect
