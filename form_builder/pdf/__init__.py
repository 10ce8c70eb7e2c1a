"""PDF export of filled forms."""

from form_builder.pdf.renderer import PdfRenderer, build_document, content_disposition, pdf_filename

__all__ = ["PdfRenderer", "build_document", "content_disposition", "pdf_filename"]
