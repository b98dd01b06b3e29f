"""Service-layer exceptions."""


class ParseError(Exception):
    """Raised when a story cannot be loaded. No partial story is returned."""


class NavigationError(Exception):
    """Raised when a resolved target does not name a section in the story."""

    def __init__(self, section_id: str) -> None:
        super().__init__(f"Section not found: {section_id}")
        self.section_id = section_id


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""
