from glfx.effects import parse_effect, find_best_section


effect_text = """
-- Vertex
v
-- Fragment
f
-- Fragment.Diffuse
fd
-- Fragment.Diffuse.Textured
fdt
"""


def test_longest_prefix_wins():
    effect = parse_effect(effect_text, "test.glsl")

    section = find_best_section(effect, "Fragment.Diffuse.Extra")
    assert section.key == "Fragment.Diffuse"

    section = find_best_section(effect, "Fragment.Diffuse.Textured.Alpha")
    assert section.key == "Fragment.Diffuse.Textured"

    section = find_best_section(effect, "Fragment.Specular")
    assert section.key == "Fragment"


def test_exact_match():
    effect = parse_effect(effect_text, "test.glsl")
    assert find_best_section(effect, "Fragment").key == "Fragment"
    assert find_best_section(effect, "Vertex").body == "v\n"


def test_case_insensitive():
    effect = parse_effect(effect_text, "test.glsl")
    section = find_best_section(effect, "fragment.DIFFUSE.extra")
    assert section.key == "Fragment.Diffuse"


def test_no_match():
    effect = parse_effect("-- Fragment\nf\n-- Fragment.Diffuse\nfd\n", "test.glsl")
    assert find_best_section(effect, "Vertex.Main") is None
    assert find_best_section(effect, "Frag") is None
    assert effect.get_matching_section("Vertex.Main") is None


def test_plain_prefix_match():
    # The match is on the plain string, not on dot-separated parts
    effect = parse_effect("-- Frag\nf\n", "test.glsl")
    assert find_best_section(effect, "Fragment").key == "Frag"


def test_empty_key_is_fallback():
    effect = parse_effect("--\nfallback\n-- Vertex\nv\n", "test.glsl")
    assert find_best_section(effect, "Fragment").body == "fallback\n"
    assert find_best_section(effect, "Vertex.Main").key == "Vertex"


def test_tie_first_declared_wins():
    effect = parse_effect("-- FRAG\nupper\n-- Frag\nmixed\n", "test.glsl")
    assert find_best_section(effect, "frag.main").body == "upper\n"

    effect = parse_effect("-- Frag\nmixed\n-- FRAG\nupper\n", "test.glsl")
    assert find_best_section(effect, "frag.main").body == "mixed\n"


def test_get_matching_section():
    effect = parse_effect(effect_text, "test.glsl")
    section = effect.get_matching_section("Fragment.Diffuse.Extra")
    assert section is effect.sections["Fragment.Diffuse"]


if __name__ == "__main__":
    for f in list(globals().values()):
        if callable(f) and f.__name__.startswith("test_"):
            print(f.__name__)
            f()
