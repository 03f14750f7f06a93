"""
HTML document generation for rendered site pages.

Page bodies come from the site renderer; this module wraps them in the site
template, injects the theme as CSS custom properties and writes the result to
the output tree.
"""

import html
import logging
import re
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.paths import get_system_path, resolve_data_path

logger = logging.getLogger(__name__)

CUSTOM_TEMPLATE_MARKER = "review-site:custom-template"
NOT_FOUND_ROUTE = "/404"

_PLACEHOLDER = re.compile(r"%\{(\w+)\}")


def theme_css(theme: Optional[Dict[str, Any]]) -> str:
    """Return a ``:root`` block exposing theme colors, fonts and layout as CSS variables."""
    theme = theme or {}
    colors = theme.get('colors') or {}
    text = colors.get('text') or {}
    background = colors.get('background') or {}
    typography = theme.get('typography') or {}
    layout = theme.get('layout') or {}
    footer = (theme.get('components') or {}).get('footer') or {}
    animations = theme.get('animations') or {}

    font = typography.get('fontFamily') or 'Inter'
    variables = {
        '--color-primary': colors.get('primary', '#2563eb'),
        '--color-secondary': colors.get('secondary', '#8b5cf6'),
        '--color-accent': colors.get('accent', '#f59e0b'),
        '--color-text-primary': text.get('primary') or '#1f2937',
        '--color-text-secondary': text.get('secondary') or '#6b7280',
        '--color-bg-primary': background.get('primary') or '#ffffff',
        '--color-bg-secondary': background.get('secondary') or '#f9fafb',
        '--font-family': f"{font}, system-ui, sans-serif",
        '--font-heading': f"{typography.get('headingFont') or font}, system-ui, sans-serif",
        '--font-body': f"{typography.get('bodyFont') or font}, system-ui, sans-serif",
        '--layout-max-width': layout.get('maxWidth') or '1280px',
        '--layout-padding': layout.get('containerPadding') or '2rem',
        '--header-height': layout.get('headerHeight') or '80px',
        '--footer-bg': footer.get('backgroundColor') or '#111827',
        '--animation-duration': (animations.get('duration') or '300ms') if animations.get('enabled') else '0ms',
    }
    # Values end up inside a <style> element; strip anything that could close it.
    lines = [f"  {name}: {str(value).replace('<', '').replace('>', '')};" for name, value in variables.items()]
    return ":root {\n" + "\n".join(lines) + "\n}"


def font_stylesheet_url(theme: Optional[Dict[str, Any]]) -> str:
    font = ((theme or {}).get('typography') or {}).get('fontFamily') or 'Inter'
    return f"https://fonts.googleapis.com/css2?family={font.replace(' ', '+')}:wght@400;500;600;700;800;900&display=swap"


def route_output_path(route: str, output_dir: Path) -> Path:
    """Map a site route to its file inside *output_dir*.

    ``/`` becomes ``index.html``, ``/a/b`` becomes ``a/b/index.html`` and the
    not-found route becomes ``404.html``.
    """
    if route == NOT_FOUND_ROUTE:
        return output_dir / '404.html'
    segments = [s for s in route.strip('/').split('/') if s]
    if any(s in ('.', '..') for s in segments):
        raise ValueError(f"Refusing to write route outside the output directory: {route}")
    return output_dir.joinpath(*segments, 'index.html')


class HTMLGenerator:
    """Fills the site template and writes rendered pages to disk."""

    def __init__(self, template_path: str = "site_template.html"):
        """Prepare the generator, resolving the template path into the data directory."""
        self.template_path = self._resolve_template(template_path)
        self._template: Optional[str] = None

    @property
    def template(self) -> str:
        if self._template is None:
            with open(self.template_path, 'r', encoding='utf-8') as tmpl:
                self._template = tmpl.read()
        return self._template

    def render_document(
        self,
        title: str,
        content: str,
        description: str = '',
        keywords: str = '',
        theme: Optional[Dict[str, Any]] = None,
        header: str = '',
        footer: str = '',
    ) -> str:
        """Substitute the template placeholders in a single pass.

        Text values are escaped; *header*, *content* and *footer* are HTML.
        Unknown placeholders are left untouched.
        """
        values = {
            'title': html.escape(title or ''),
            'description': html.escape(description or ''),
            'keywords': html.escape(keywords or ''),
            'theme_css': theme_css(theme),
            'font_url': html.escape(font_stylesheet_url(theme)),
            'header': header,
            'content': content,
            'footer': footer,
        }
        return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), self.template)

    def write_page(self, route: str, html_text: str, output_dir) -> Path:
        """Write *html_text* for *route* below *output_dir* and return the file path."""
        target = route_output_path(route, Path(output_dir))
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            f.write(html_text)
        logger.debug("Wrote %s -> %s", route, target)
        return target

    def _create_basic_template(self, target: Optional[Path] = None) -> None:
        """Create a basic HTML template if none exists."""
        basic_template = (
            "<!DOCTYPE html>\n"
            "<html lang=\"en\">\n"
            "<head>\n"
            "<meta charset=\"UTF-8\">\n"
            "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">\n"
            "<title>%{title}</title>\n"
            "<meta name=\"description\" content=\"%{description}\">\n"
            "<meta name=\"keywords\" content=\"%{keywords}\">\n"
            "<style>\n"
            "%{theme_css}\n"
            "body { font-family: var(--font-body); color: var(--color-text-primary); margin: 0; }\n"
            "h1, h2, h3, h4 { font-family: var(--font-heading); }\n"
            "main { max-width: var(--layout-max-width); margin: 0 auto; padding: var(--layout-padding); }\n"
            "</style>\n"
            "</head>\n"
            "<body>\n"
            "%{header}\n"
            "<main>\n"
            "%{content}\n"
            "</main>\n"
            "%{footer}\n"
            "</body>\n"
            "</html>\n"
        )

        target_path = target or Path(self.template_path)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        with open(target_path, 'w', encoding='utf-8') as f:
            f.write(basic_template)

    def _resolve_template(self, template_path: str) -> str:
        """Return the runtime copy of a template, refreshed from the bundled one.

        An absolute path that exists is used as given. A runtime copy carrying
        the custom-template marker is never overwritten; a name with no bundled
        template gets the basic template.
        """
        candidate = Path(template_path)
        if candidate.is_absolute() and candidate.exists():
            return str(candidate)

        data_template = resolve_data_path('templates', candidate.name)
        system_template = get_system_path('templates', candidate.name)
        current = data_template.read_text(encoding='utf-8') if data_template.exists() else None

        if not system_template.exists():
            if current is None:
                self._create_basic_template(data_template)
            return str(data_template)

        if current is not None and CUSTOM_TEMPLATE_MARKER in current:
            logger.debug("Skipping template refresh for %s (custom marker present)", data_template)
        elif current != system_template.read_text(encoding='utf-8'):
            data_template.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(system_template, data_template)
            logger.info("Refreshed HTML template %s from the bundled copy", data_template.name)
        return str(data_template)
