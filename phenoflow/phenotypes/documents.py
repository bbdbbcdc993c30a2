"""README/LICENSE documents and the marker pairs used to edit them.

New phenotypes get a README rendered from templates/README-Template.md
(Jinja2) and a copy of templates/LICENSE.md. Later edits never re-render:
descriptions are spliced in place between markers so the rest of the
document stays byte-identical.
"""

import base64
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from phenoflow.text import hexcodec, locator

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

README_PATH = "README.md"
README_TEMPLATE = "README-Template.md"
README_COMMIT_MESSAGE = "Initial README.md"

LICENSE_PATH = "LICENSE.md"
LICENSE_COMMIT_MESSAGE = "Initial LICENSE.md"

CWL_EXTENSION = ".cwl"

# "<ID> - <description>" up to the next heading, minus the line breaks before it
DESCRIPTION_START = "- "
DESCRIPTION_END = "##"
_LINE_BREAK_HEX = (hexcodec.encode("\n"), hexcodec.encode("\r"))

# Step files: "doc: <description>\nid: <step id>"
STEP_DESCRIPTION_START = "doc: "
STEP_DESCRIPTION_END = "\nid: "

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=False,  # markdown, not HTML
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def render_readme(name: str, about: str) -> str:
    """Render the initial README for a phenotype."""
    return _env.get_template(README_TEMPLATE).render(name=name, about=about)


def license_text() -> str:
    return (TEMPLATES_DIR / LICENSE_PATH).read_text(encoding="utf-8")


def text_to_base64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def base64_to_text(content: str) -> str:
    return hexcodec.decode_text(hexcodec.from_base64(content))


# ── Phenotype description (README.md) ────────────────────


def _description_region(buffer: str) -> locator.DelimitedRegion:
    """Region between "- " and the next "##", excluding trailing CR/LF bytes."""
    region = locator.locate(buffer, DESCRIPTION_START, DESCRIPTION_END)
    end = region.end
    while end > region.start and buffer[end - 2:end] in _LINE_BREAK_HEX:
        end -= 2
    return locator.DelimitedRegion(start=region.start, end=end)


def extract_description(readme_content: str) -> str:
    """Description text from base64 README content."""
    buffer = hexcodec.from_base64(readme_content)
    return hexcodec.decode_text(_description_region(buffer).slice(buffer))


def replace_description(readme_content: str, description: str) -> str:
    """Return base64 README content with the description replaced.

    The line breaks before the next heading are kept as they were (LF or CRLF).
    """
    buffer = hexcodec.from_base64(readme_content)
    region = _description_region(buffer)
    buffer = locator.replace(buffer, region, hexcodec.encode(description))
    return hexcodec.to_base64(buffer)


# ── Step description (step .cwl) ─────────────────────────


def extract_step_description(step_content: str) -> str:
    buffer = hexcodec.from_base64(step_content)
    return locator.extract(buffer, STEP_DESCRIPTION_START, STEP_DESCRIPTION_END)


def replace_step_description(step_content: str, description: str) -> str:
    buffer = hexcodec.from_base64(step_content)
    buffer = locator.replace_between(
        buffer, STEP_DESCRIPTION_START, STEP_DESCRIPTION_END, description
    )
    return hexcodec.to_base64(buffer)
