import pytest

import glfx
from glfx.effects import (
    ShaderComposer,
    ComposedSource,
    SourceDeclaration,
    DuplicateInclude,
    TemplateError,
)


phong = """Phong shading.

-- Vertex
#version 330 core
#include Common.Transform
in vec3 position;
void main() {
    gl_Position = transform(position);
}

-- Fragment
#version 330 core
#include Common.Transform
out vec4 color;
void main() {
    color = vec4(1.0);
}
"""

common = """-- Transform
uniform mat4 mvp;
vec4 transform(vec3 p) { return mvp * vec4(p, 1.0); }
"""


def make_composer(**kwargs):
    files = {"fx/Phong.glsl": phong, "fx/Common.glsl": common}
    return ShaderComposer(base_dir="fx", extension="glsl", reader=files, **kwargs)


def test_compose():
    composer = make_composer()
    result = composer.compose("Phong.Vertex")

    assert isinstance(result, ComposedSource)
    assert result.code.startswith("#version 330 core\n#line 2 1\nuniform mat4 mvp;\n")
    assert "#line 6 0\nin vec3 position;\n" in result.code
    assert str(result) == result.code
    assert len(composer.cache) == 2


def test_compose_program():
    composer = make_composer()
    sources = composer.compose_program(
        {"vertex": "Phong.Vertex", "fragment": "Phong.Fragment"}
    )

    assert list(sources.keys()) == ["vertex", "fragment"]
    # Each stage is a separate composition, so both include the transform
    for source in sources.values():
        assert source.code.count("uniform mat4 mvp;") == 1
        assert source.warnings == ()
    assert "gl_Position" in sources["vertex"].code
    assert "color = vec4(1.0);" in sources["fragment"].code

    with pytest.raises(ValueError):
        composer.compose_program({})


def test_cache_is_shared_between_compositions():
    reads = []
    files = {"fx/Phong.glsl": phong, "fx/Common.glsl": common}

    def read(source_file):
        reads.append(source_file.location)
        return files.get(source_file.location)

    composer = ShaderComposer(base_dir="fx", reader=read, include_builtin=False)
    composer.compose_program({"vertex": "Phong.Vertex", "fragment": "Phong.Fragment"})
    composer.compose("Phong.Vertex")
    assert sorted(reads) == ["fx/Common.glsl", "fx/Phong.glsl"]

    # A second composer can share the cache
    composer2 = ShaderComposer(cache=composer.cache)
    assert composer2.registry is composer.registry
    composer2.compose("Phong.Fragment")
    assert len(reads) == 2

    with pytest.raises(ValueError):
        ShaderComposer(base_dir="other", cache=composer.cache)
    with pytest.raises(ValueError):
        ShaderComposer(cache=composer.cache, include_builtin=False)
    with pytest.raises(TypeError):
        ShaderComposer(cache={})


def test_declarations():
    files = {"elsewhere/phong_v2.glsl": phong, "fx/Common.glsl": common}
    declarations = [SourceDeclaration("Phong", "elsewhere/phong_v2.glsl")]
    composer = ShaderComposer(declarations, base_dir="fx", reader=files)
    result = composer.compose("phong.fragment")
    assert result.source_files[0].location == "elsewhere/phong_v2.glsl"
    assert "out vec4 color;" in result.code


def test_builtin_effects(effect_files):
    write, base_dir = effect_files
    write(
        "Lit.glsl",
        """-- Fragment
#include glfx.Version
#include glfx.Math.Util
#include glfx.Lighting.Lambert
void main() {}
""",
    )
    composer = ShaderComposer(base_dir=base_dir)
    result = composer.compose("Lit.Fragment")

    assert result.code.startswith("#version 330 core\n")
    assert result.code.count("float saturate(float x)") == 1
    assert "float lambert(" in result.code
    # Lambert includes Math.Util, which was already included
    assert len(result.warnings) == 1
    assert isinstance(result.warnings[0], DuplicateInclude)

    assert len(result.source_files) == 2
    builtin = result.source_files[1]
    assert builtin.embedded
    assert builtin.identity == "glfx.shaders:glfx.glsl"


def test_builtin_can_be_disabled(effect_files):
    write, base_dir = effect_files
    write("Lit.glsl", "-- Fragment\n#include glfx.Version\n")
    composer = ShaderComposer(base_dir=base_dir, include_builtin=False)
    with pytest.raises(glfx.SourceNotFound):
        composer.compose("Lit.Fragment")


def test_compose_with_templating():
    files = {
        "fx/T.glsl": """-- Main
const int N = {{ n_lights }};
{$ if use_fog $}
#include T.Fog
{$ endif $}
void main() {}
-- Fog
float fog() { return {{ fog_density }}; }
""",
    }
    composer = ShaderComposer(base_dir="fx", reader=files)

    result = composer.compose("T.Main", n_lights=4, use_fog=True, fog_density=0.5)
    assert result.code == (
        "#line 2 0\n"
        "const int N = 4;\n"
        "\n"
        "#line 8 0\n"
        "float fog() { return 0.5; }\n"
        "#line 5 0\n"
        "\n"
        "void main() {}\n"
    )

    # Includes are resolved before templating, so the include is dropped with its branch
    result = composer.compose("T.Main", n_lights=1, use_fog=False, fog_density=0)
    assert result.code == "#line 2 0\nconst int N = 1;\n\nvoid main() {}\n"

    with pytest.raises(TemplateError) as info:
        composer.compose("T.Main", n_lights=1, use_fog=True)
    assert "fog_density" in str(info.value)


def test_compose_without_template_vars_keeps_braces():
    files = {"fx/T.glsl": "-- Main\nint x = {{ not_a_var }};\n"}
    composer = ShaderComposer(base_dir="fx", reader=files)
    assert "{{ not_a_var }}" in composer.compose("T.Main").code


def test_compose_function():
    files = {"fx/Phong.glsl": phong, "fx/Common.glsl": common}
    result = glfx.compose("Phong.Fragment", base_dir="fx", reader=files)
    assert "out vec4 color;" in result.code
