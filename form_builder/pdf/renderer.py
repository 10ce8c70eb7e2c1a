"""Render a filled form to HTML and PDF.

HTML comes from a Jinja2 template (autoescaped); the PDF is printed from that
HTML by headless Chromium through Playwright.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import yaml
from jinja2 import Environment, FileSystemLoader, select_autoescape
from playwright.async_api import async_playwright

from form_builder.domain.spec_model import question_path

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_STYLE_PATH = Path(__file__).parent / "config" / "pdf_style.yaml"
TEMPLATE_NAME = "form.html.j2"

_WHITESPACE = re.compile(r"\s+")


def pdf_filename(name: str) -> str:
    """Download name for a form: lowercased, whitespace runs to ``-``."""
    return f"{_WHITESPACE.sub('-', name.lower())}.pdf"


def content_disposition(filename: str) -> str:
    """
    ``attachment`` header value for ``filename``.

    Header values must be latin-1, so names outside printable ASCII (or
    containing quotes) get an ASCII ``filename`` with ``_`` substitutes plus
    the exact name as RFC 5987 ``filename*``.
    """
    fallback = "".join(c if " " <= c <= "~" and c not in '"\\' else "_" for c in filename)
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _simple_view(question: Dict[str, Any], answer: Any) -> Dict[str, Any]:
    return {
        "answer": answer if isinstance(answer, str) else "",
        "placeholder": "No answer provided",
    }


def _option_view(question: Dict[str, Any], answer: Any, justification: Any) -> Dict[str, Any]:
    if question.get("multiple") is True and isinstance(answer, list):
        text = ", ".join(str(a) for a in answer)
    elif isinstance(answer, str):
        text = answer
    else:
        text = ""
    return {
        "answer": text,
        "placeholder": "No selection",
        "justification": justification if isinstance(justification, str) else "",
    }


def _detailed_view(question: Dict[str, Any], answer: Any) -> Dict[str, Any]:
    attributes = [a for a in question.get("attributes") or [] if isinstance(a, dict)]
    columns = [_text(a.get("name")) for a in attributes]
    rows: List[List[str]] = []
    for row in answer if isinstance(answer, list) else []:
        row = row if isinstance(row, dict) else {}
        rows.append(["" if row.get(c) is None else str(row.get(c)) for c in columns])
    return {"columns": columns, "rows": rows}


def _image_view(question: Dict[str, Any], answer: Any) -> Dict[str, Any]:
    url = answer if isinstance(answer, str) and answer else _text(question.get("url"))
    return {"image_url": url}


def build_document(spec: Dict[str, Any], value: Dict[str, Any]) -> Dict[str, Any]:
    """Template context: the spec with each question's answer resolved."""
    sections = []
    for si, section in enumerate(spec.get("sections") or []):
        if not isinstance(section, dict):
            continue
        questions = []
        for qi, question in enumerate(section.get("questions") or []):
            if not isinstance(question, dict):
                continue
            path = question_path(si, qi)
            answer = value.get(path)
            q_type = question.get("type")

            if q_type == "simple":
                view = _simple_view(question, answer)
            elif q_type == "option":
                view = _option_view(question, answer, value.get(f"{path}.justification"))
            elif q_type == "detailed":
                view = _detailed_view(question, answer)
            elif q_type == "image":
                view = _image_view(question, answer)
            else:
                continue

            view.update(
                type=q_type,
                question=_text(question.get("question")),
                description=_text(question.get("description")),
            )
            questions.append(view)

        sections.append({
            "number": si + 1,
            "title": _text(section.get("title")),
            "description": _text(section.get("description")),
            "questions": questions,
        })

    return {
        "name": _text(spec.get("name")),
        "description": _text(spec.get("description")),
        "sections": sections,
    }


class PdfRenderer:
    """Turns a form spec plus answers into a printable document."""

    def __init__(self, style_path: Optional[Path] = None):
        self._style_path = Path(style_path) if style_path else DEFAULT_STYLE_PATH
        with open(self._style_path, "r", encoding="utf-8") as f:
            self._style: Dict[str, Any] = yaml.safe_load(f) or {}
        self._env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "j2"]),
        )

    @property
    def style(self) -> Dict[str, Any]:
        return self._style

    def render_html(self, spec: Dict[str, Any], value: Dict[str, Any]) -> str:
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(form=build_document(spec, value), style=self._style)

    def _pdf_options(self) -> Dict[str, Any]:
        page = self._style.get("page", {})
        return {
            "format": page.get("format", "A4"),
            "print_background": page.get("print_background", True),
            "margin": page.get("margin", {}),
        }

    async def _print(self, html: str) -> bytes:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="domcontentloaded")
                return await page.pdf(**self._pdf_options())
            finally:
                await browser.close()

    async def render_pdf(self, spec: Dict[str, Any], value: Dict[str, Any]) -> bytes:
        html = self.render_html(spec, value)
        pdf = await self._print(html)
        logger.info(f"Rendered PDF for '{spec.get('name')}' ({len(pdf)} bytes)")
        return pdf
