"""Conversion between a generated site and project file records."""

from __future__ import annotations

import uuid

from flowvce.file_filter import get_language_hint
from flowvce.models import FileRecord, GeneratedSite, SiteMetadata

HTML_FILE = "index.html"
CSS_FILE = "styles.css"
JS_FILE = "script.js"
ASSETS_DIR = "assets"


def _record(path: str, content: str) -> FileRecord:
    return FileRecord(
        id=uuid.uuid4().hex,
        path=path,
        content=content,
        language=get_language_hint(path),
        size=len(content.encode("utf-8")),
        is_generated=True,
    )


def site_to_records(site: GeneratedSite) -> list[FileRecord]:
    """Expand a generated site into editable file records."""
    records = [
        _record(HTML_FILE, site.html),
        _record(CSS_FILE, site.css),
        _record(JS_FILE, site.js),
    ]
    for name, content in site.assets.items():
        records.append(_record(f"{ASSETS_DIR}/{name}", content))
    return records


def records_to_site(records: list[FileRecord], metadata: SiteMetadata) -> GeneratedSite:
    """Collect edited records back into a site for preview and deployment.

    Files other than the three entry files and ``assets/*`` are ignored.
    """
    by_path = {r.path: r.content for r in records}
    prefix = ASSETS_DIR + "/"
    assets = {
        path[len(prefix):]: content
        for path, content in by_path.items()
        if path.startswith(prefix)
    }
    return GeneratedSite(
        html=by_path.get(HTML_FILE, ""),
        css=by_path.get(CSS_FILE, ""),
        js=by_path.get(JS_FILE, ""),
        assets=assets,
        metadata=metadata,
    )


def records_to_mapping(records: list[FileRecord]) -> dict[str, str]:
    """Return ``{path: content}`` for committing or publishing."""
    return {r.path: r.content for r in records}


def render_preview_html(site: GeneratedSite) -> str:
    """Inline the stylesheet and script into one document for the preview frame."""
    html = site.html
    style = f"<style>\n{site.css}\n</style>"
    script = f"<script>\n{site.js}\n</script>"

    head_end = html.lower().rfind("</head>")
    if head_end != -1:
        html = html[:head_end] + style + "\n" + html[head_end:]
    else:
        html = style + "\n" + html

    body_end = html.lower().rfind("</body>")
    if body_end != -1:
        html = html[:body_end] + script + "\n" + html[body_end:]
    else:
        html = html + "\n" + script
    return html
