"""System instruction templates for the tutor pages.

Each page has one Markdown template in this directory, rendered with
Jinja2. Every variable a template references must be supplied: a
missing one raises ``jinja2.UndefinedError`` rather than leaving a gap
in the instruction sent to the model.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

# Directory containing the .md prompt template files
_PROMPTS_DIR = Path(__file__).parent

_ENV = Environment(
    loader=FileSystemLoader(_PROMPTS_DIR),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def render_prompt(template_name: str, **variables: object) -> str:
    """Render the page template ``template_name`` with ``variables``.

    Args:
        template_name: Template file name without the .md extension
                       (one of the TutorMode values).
        **variables: subject, language, class_level, board or
                     target_language, as the template requires.

    Raises:
        FileNotFoundError: If the template file does not exist.
        jinja2.UndefinedError: If the template uses a variable not passed.
    """
    filename = f"{template_name}.md"
    if not (_PROMPTS_DIR / filename).is_file():
        raise FileNotFoundError(f"Prompt template not found: {_PROMPTS_DIR / filename}")
    return _ENV.get_template(filename).render(**variables)
