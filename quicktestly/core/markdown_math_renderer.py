"""Markdown + LaTeX rendering helpers shared by Qt and web clients.

Question text and option text are stored as markdown with ``$...$`` math.
Both the teacher preview (QWebEngineView) and the student page receive HTML
from this module and let MathJax typeset the math on display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html

from markdown_it import MarkdownIt

from quicktestly.constants.about import APP_NAME

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a short answer option without the surrounding paragraph."""

        return self._markdown.renderInline(markdown_text.strip())

    def wrap_with_mathjax(self, body_html: str, title: str = APP_NAME) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{html.escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: #1f2937; }}
      .question-html {{ font-size: 1.1rem; line-height: 1.5; }}
      ol.options {{ list-style: upper-alpha; padding-left: 1.5rem; }}
      ol.options li.correct {{ color: #15803d; font-weight: 600; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""

    def render_full_document(self, markdown_text: str, title: str = APP_NAME) -> str:
        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(fragment, title=title)

    def render_question_preview(
        self,
        markdown_text: str,
        options: list[str],
        correct_option_index: int | None = None,
    ) -> str:
        """Question plus its lettered options, marking the correct one."""

        items = []
        for index, option in enumerate(options):
            css = ' class="correct"' if index == correct_option_index else ""
            items.append(f"<li{css}>{self.render_inline(option)}</li>")
        body = self.render_fragment(markdown_text)
        if items:
            body += f"<ol class=\"options\">{''.join(items)}</ol>"
        return self.wrap_with_mathjax(body)


# Shared instance; MarkdownIt renders are read-only after construction.
renderer = MarkdownMathRenderer()
