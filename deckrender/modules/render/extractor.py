"""
Slide extraction - split source HTML into slide fragments plus its styles.
"""

from bs4 import BeautifulSoup, Tag

from deckrender.shared.errors import NoSlidesFoundError
from deckrender.shared.logging import get_logger
from .schemas import Slide, StyleSet

logger = get_logger(__name__)

DEFAULT_SLIDE_SELECTOR = ".slide"


class SlideExtractor:
    """Parse HTML into ordered slides and a StyleSet."""

    def __init__(self, selector: str = DEFAULT_SLIDE_SELECTOR):
        self.selector = selector

    def extract(self, html: str, fallback: bool = False) -> tuple[list[Slide], StyleSet]:
        """
        Extract slide containers and styles in document order.

        Args:
            html: Source HTML
            fallback: When no slide containers exist, treat the whole input as
                a single slide instead of failing (PDF mode)

        Returns:
            (slides, styles)

        Raises:
            NoSlidesFoundError: no containers and fallback is off
        """
        soup = BeautifulSoup(html, "html.parser")
        styles = self._extract_styles(soup)

        containers = self._outermost(soup.select(self.selector))
        slides = [
            Slide(index=i, fragment_html=el.decode_contents())
            for i, el in enumerate(containers)
        ]

        if not slides:
            if not fallback:
                raise NoSlidesFoundError(
                    f"No slide containers matching '{self.selector}' found",
                    details={"selector": self.selector},
                )
            logger.info("No slide containers, using whole document as one slide")
            slides = [Slide(index=0, fragment_html=html)]

        logger.info(
            f"Extracted {len(slides)} slide(s), {len(styles.inline)} style block(s), "
            f"{len(styles.external)} stylesheet link(s)"
        )
        return slides, styles

    def _extract_styles(self, soup: BeautifulSoup) -> StyleSet:
        inline = tuple(style.get_text() for style in soup.find_all("style"))
        external = tuple(
            link["href"]
            for link in soup.select('link[rel~="stylesheet"]')
            if link.get("href")
        )
        return StyleSet(inline=inline, external=external)

    @staticmethod
    def _outermost(elements: list[Tag]) -> list[Tag]:
        # Nested containers belong to their enclosing slide
        seen: set[int] = set()
        result = []
        for el in elements:
            if any(id(parent) in seen for parent in el.parents):
                continue
            seen.add(id(el))
            result.append(el)
        return result
