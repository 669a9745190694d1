"""
The exceptions and warnings used by the effect system.
"""


class EffectError(Exception):
    """Base class for errors raised while loading or composing effects."""


class SourceNotFound(EffectError, LookupError):
    """A logical source name does not resolve to any source."""

    def __init__(self, requested, detail=None):
        self.requested = requested
        msg = f"Effect source not found: '{requested}'"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class SourceUnavailable(EffectError, OSError):
    """A resolved source could not be read.

    The underlying error, if any, is available as ``__cause__``.
    """

    def __init__(self, source_file, reason):
        self.source_file = source_file
        super().__init__(f"Cannot read effect source {source_file.identity!r}: {reason}")


class SectionNotFound(EffectError, LookupError):
    """An effect has no section whose key is a prefix of the requested key."""

    def __init__(self, effect_identity, section_key, effect_key=None):
        self.effect_identity = effect_identity
        self.section_key = section_key
        self.effect_key = effect_key
        msg = f"No section matching '{section_key}' in effect {effect_identity!r}"
        if effect_key:
            msg += f" (requested as '{effect_key}')"
        super().__init__(msg)


class CyclicInclude(EffectError):
    """A section includes itself, directly or through other sections."""

    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__("Cyclic include: " + " -> ".join(self.chain))


class InvalidEffectKey(EffectError, ValueError):
    """An effect key that cannot be split into a source name and a section key."""

    def __init__(self, key):
        self.key = key
        super().__init__(
            f"Invalid effect key '{key}', expected '<source name>.<section key>'"
        )


class TemplateError(EffectError, ValueError):
    """Templating of the composed source failed."""


class CompositionWarning(UserWarning):
    """Base class for non-fatal problems. These are recorded and logged, never raised."""


class DuplicateSectionKey(CompositionWarning):
    """An effect defines the same section key more than once; the last one wins."""

    def __init__(self, effect_identity, key, first_line, line):
        self.effect_identity = effect_identity
        self.key = key
        self.first_line = first_line
        self.line = line
        super().__init__(
            f"Section '{key}' in effect {effect_identity!r} at line {line} "
            f"overrides the section defined at line {first_line}"
        )


class DuplicateInclude(CompositionWarning):
    """A section was requested again after it was already expanded."""

    def __init__(self, effect_identity, key, effect_key):
        self.effect_identity = effect_identity
        self.key = key
        self.effect_key = effect_key
        super().__init__(f"Shader already included: {effect_key}")
