"""
Document composition - wrap slide fragments in standalone HTML documents.

Baseline rules come first in <head>, so the source document's own
stylesheets and style blocks (added after, in source order) win the cascade.
"""

from html import escape

from .schemas import Canvas, StyleSet

BASELINE_CSS = """
html, body { margin: 0; padding: 0; }
body { background: white; }
body, p, h1, h2, h3, h4, h5, h6, ul, ol, li { font-family: sans-serif; }
b, strong { font-weight: bold; }
i, em { font-style: italic; }
u { text-decoration: underline; }
"""


def _head(title: str, styles: StyleSet, wrapper_css: str) -> str:
    links = "\n".join(
        f'<link rel="stylesheet" href="{escape(href, quote=True)}">'
        for href in styles.external
    )
    inline = "\n".join(styles.inline)
    return (
        "<head>\n"
        '<meta charset="UTF-8">\n'
        f"<title>{escape(title)}</title>\n"
        f"<style>{BASELINE_CSS}{wrapper_css}</style>\n"
        f"{links}\n"
        f"<style>\n{inline}\n</style>\n"
        "</head>"
    )


def compose(fragment: str, styles: StyleSet, canvas: Canvas, title: str = "Slide") -> str:
    """
    Build a self-contained document showing one fragment on a fixed canvas.

    Args:
        fragment: Inner HTML of one slide
        styles: Styles extracted from the source document
        canvas: Pixel size of the wrapper
        title: Document title

    Returns:
        Complete HTML document
    """
    wrapper_css = (
        f".slide-wrapper {{ width: {canvas.width}px; height: {canvas.height}px; "
        "overflow: hidden; box-sizing: border-box; position: relative; }\n"
    )
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        f"{_head(title, styles, wrapper_css)}\n"
        "<body>\n"
        f'<div class="slide-wrapper">{fragment}</div>\n'
        "</body>\n"
        "</html>\n"
    )


def compose_pages(
    fragments: list[str], styles: StyleSet, canvas: Canvas, title: str = "Document"
) -> str:
    """Build one printable document with a page per fragment."""
    # Height is left to the content; print margins shrink the printable area
    wrapper_css = (
        f".page-wrapper {{ max-width: {canvas.width}px; box-sizing: border-box; }}\n"
        ".page-wrapper + .page-wrapper { break-before: page; }\n"
    )
    pages = "\n".join(f'<div class="page-wrapper">{fragment}</div>' for fragment in fragments)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        f"{_head(title, styles, wrapper_css)}\n"
        "<body>\n"
        f"{pages}\n"
        "</body>\n"
        "</html>\n"
    )
