#!/usr/bin/env python3
"""Compile email templates by inlining CSS and minifying HTML.

Source templates live in app/templates/emails/*.j2; the compiled .html files
in app/templates/emails/compiled/ are what the mailer renders at runtime.

Run after modifying a source template (requires the dev extra):
    python scripts/compile_emails.py
"""

from pathlib import Path

import css_inline
import minify_html
from jinja2 import Environment

from app.core.constants import (
    CompiledEmailTemplatesDir,
    EmailTemplates,
    JinjaEmailTemplatesEnv,
)

# Minifiers keep quotes around URL-looking attribute values, so placeholders
# are rendered as URLs and swapped back to Jinja2 expressions afterwards.
MARKER_URL_PREFIX = "https://jinja-placeholder.local/var/"


def _restore_placeholders(html: str, variables: tuple[str, ...]) -> str:
    for var in variables:
        marker = f"{MARKER_URL_PREFIX}{var}"
        jinja_var = f"{{{{ {var} }}}}"
        html = html.replace(f"={marker}>", f'="{jinja_var}">')
        html = html.replace(f"={marker} ", f'="{jinja_var}" ')
        html = html.replace(f'"{marker}"', f'"{jinja_var}"')
        html = html.replace(marker, jinja_var)
    return html


def compile_template(
    env: Environment, source_name: str, variables: tuple[str, ...], output: Path
) -> None:
    context = {var: f"{MARKER_URL_PREFIX}{var}" for var in variables}
    html = env.get_template(source_name).render(**context)
    html = minify_html.minify(css_inline.inline(html), minify_css=True)
    output.write_text(_restore_placeholders(html, variables), encoding="utf-8")
    print(f"  ✓ {source_name} -> {output.name}")


def main() -> None:
    CompiledEmailTemplatesDir.mkdir(exist_ok=True)
    print("Compiling email templates...")

    for template in EmailTemplates.ALL:
        compile_template(
            JinjaEmailTemplatesEnv,
            template.source,
            template.variables,
            CompiledEmailTemplatesDir / template.compiled,
        )

    print(f"\nCompiled templates saved to: {CompiledEmailTemplatesDir}")


if __name__ == "__main__":
    main()
