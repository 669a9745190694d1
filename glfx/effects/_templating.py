"""
Optional jinja2 templating of composed shader code. The block delimiters
are ``{$ $}`` so that they don't collide with GLSL code. Block tags leave
their (empty) line in place, so the ``#line`` markers of the composed code
keep pointing at the right lines. Lines in a branch that is not taken are
removed though, which shifts the lines that follow until the next marker.
"""

import jinja2

from ._errors import TemplateError


jinja_env = jinja2.Environment(
    block_start_string="{$",
    block_end_string="$}",
    variable_start_string="{{",
    variable_end_string="}}",
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
)


def apply_templating(code, **kwargs):
    """Render the given code as a template with the given variables."""
    try:
        t = jinja_env.from_string(code)
    except jinja2.TemplateSyntaxError as err:
        raise TemplateError(
            f"Cannot compose shader: {err.message} (line {err.lineno})"
        ) from None
    try:
        return t.render(**kwargs)
    except jinja2.UndefinedError as err:
        raise TemplateError(f"Cannot compose shader: {err.args[0]}") from None
