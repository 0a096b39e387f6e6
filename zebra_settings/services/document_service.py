import xml.etree.ElementTree as ET
from typing import Optional, Protocol


class DocumentNode(Protocol):
    tag: str
    text: str

    def child(self, name: str) -> Optional["DocumentNode"]: ...

    def attribute(self, name: str, default: Optional[str] = None) -> Optional[str]: ...


class MarkupParser(Protocol):
    def parse(self, text: str) -> DocumentNode: ...


class ElementNode:
    """Nó sobre um xml.etree.Element."""

    def __init__(self, element: ET.Element):
        self._element = element

    @property
    def tag(self) -> str:
        return self._element.tag

    @property
    def text(self) -> str:
        return (self._element.text or "").strip()

    def child(self, name: str) -> Optional["ElementNode"]:
        found = self._element.find(name)
        return ElementNode(found) if found is not None else None

    def attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._element.get(name, default)


class ElementTreeParser:
    """Parser padrão. Propaga ET.ParseError para quem chamou."""

    def parse(self, text: str) -> ElementNode:
        return ElementNode(ET.fromstring(text.strip()))


DEFAULT_PARSER = ElementTreeParser()
