"""deckrender - HTML to PDF / PPTX rendering service."""

__version__ = "0.1.0"
