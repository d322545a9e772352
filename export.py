"""Download formats for generated stories."""

import html
import re
from typing import Literal, Tuple

ExportFormat = Literal["txt", "html"]

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <style>
    body {{ font-family: Georgia, serif; max-width: 800px; margin: 0 auto; padding: 40px; line-height: 1.8; }}
    h1 {{ text-align: center; margin-bottom: 40px; }}
    p {{ margin-bottom: 20px; text-align: justify; }}
  </style>
</head>
<body>
  <h1>{title}</h1>
{paragraphs}
</body>
</html>
"""

MEDIA_TYPES = {
    "txt": "text/plain; charset=utf-8",
    "html": "text/html; charset=utf-8",
}


def export_text(title: str, content: str) -> str:
    if not title:
        return content
    return f"{title}\n\n{content}"


def export_html(title: str, content: str) -> str:
    paragraphs = "\n".join(
        f"  <p>{html.escape(line.strip())}</p>" for line in content.splitlines() if line.strip()
    )
    return HTML_TEMPLATE.format(title=html.escape(title), paragraphs=paragraphs)


def export_filename(title: str, fmt: ExportFormat) -> str:
    base = re.sub(r'[\\/:*?"<>|\r\n]+', "_", (title or "").strip()) or "autobiography"
    return f"{base}.{fmt}"


def render_export(title: str, content: str, fmt: ExportFormat) -> Tuple[str, str, str]:
    """Return (body, media type, download filename) for ``fmt``."""
    if fmt == "txt":
        body = export_text(title, content)
    elif fmt == "html":
        body = export_html(title, content)
    else:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    return body, MEDIA_TYPES[fmt], export_filename(title, fmt)
