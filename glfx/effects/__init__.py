"""
This subpackage implements the composition of shader code from effect files.


## A note about effects

An effect file holds the source of several shaders in named sections. Shader
code refers to a section with an effect key: the (logical) name of the
effect, followed by a dot and the section key, e.g. "Phong.Fragment.Diffuse".
The section with the longest key that is a prefix of the requested key is
used, so an effect can provide a generic "Fragment" section as well as more
specific variants.

Sections can include other sections, in the same or other effects, with
``#include <effect key>``. The composed code gets ``#line`` markers, so that
the errors reported by the GPU compiler can be mapped back to the original
effect files (see ``ComposedSource.translate_log()``).

.. currentmodule:: glfx.effects

.. autosummary::
    :toctree: effects/
    :template: ../_templates/custom_layout.rst

    ShaderComposer
    ComposedSource
    IncludeExpander
    EffectCache
    SourceRegistry
    SourceDeclaration
    SourceFile
    Effect
    Section
    parse_effect
    find_best_section

"""

from ._errors import (  # noqa: F401
    EffectError,
    SourceNotFound,
    SourceUnavailable,
    SectionNotFound,
    CyclicInclude,
    InvalidEffectKey,
    TemplateError,
    CompositionWarning,
    DuplicateSectionKey,
    DuplicateInclude,
)
from ._sources import (  # noqa: F401
    SourceFile,
    SourceDeclaration,
    SourceReader,
    FileSystemReader,
    DictReader,
    FunctionReader,
    SourceRegistry,
)
from ._effect import Effect, Section, parse_effect  # noqa: F401
from ._resolver import find_best_section  # noqa: F401
from ._cache import EffectCache  # noqa: F401
from ._composer import (  # noqa: F401
    ComposedSource,
    IncludeExpander,
    ShaderComposer,
    split_effect_key,
)
from ._templating import apply_templating  # noqa: F401
