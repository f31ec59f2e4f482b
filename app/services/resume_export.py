from __future__ import annotations

import re
from io import BytesIO

from docx import Document

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET_RE = re.compile(r"^\s*[-*+]\s+(.*)$")
_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s+(.*)$")
_EMPHASIS_RE = re.compile(r"(\*\*|__)(.+?)\1|(\*|_)(.+?)\3")

MEDIA_TYPES = {
    "txt": "text/plain; charset=utf-8",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def _add_runs(paragraph, text: str) -> None:
    position = 0
    for match in _EMPHASIS_RE.finditer(text):
        if match.start() > position:
            paragraph.add_run(text[position:match.start()])
        if match.group(2) is not None:
            paragraph.add_run(match.group(2)).bold = True
        else:
            paragraph.add_run(match.group(4)).italic = True
        position = match.end()
    if position < len(text):
        paragraph.add_run(text[position:])


def markdown_to_docx(markdown: str) -> bytes:
    """Render the enhanced-resume markdown subset (headings, bullets, emphasis) as DOCX."""
    document = Document()
    for raw_line in markdown.splitlines():
        line = raw_line.rstrip()
        if not line.strip():
            continue
        heading = _HEADING_RE.match(line)
        if heading:
            level = min(len(heading.group(1)), 4)
            document.add_heading(heading.group(2).strip(), level=level)
            continue
        bullet = _BULLET_RE.match(line)
        if bullet:
            _add_runs(document.add_paragraph(style="List Bullet"), bullet.group(1).strip())
            continue
        numbered = _NUMBERED_RE.match(line)
        if numbered:
            _add_runs(document.add_paragraph(style="List Number"), numbered.group(1).strip())
            continue
        _add_runs(document.add_paragraph(), line.strip())

    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def export_resume(content: str, export_format: str) -> tuple[bytes, str, str]:
    """Return (body, media type, filename) for a downloadable resume."""
    if export_format == "docx":
        body = markdown_to_docx(content)
    else:
        export_format = "txt"
        body = content.encode("utf-8")
    return body, MEDIA_TYPES[export_format], f"enhanced-resume.{export_format}"
