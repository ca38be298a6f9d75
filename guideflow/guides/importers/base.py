import codecs
from abc import ABC, abstractmethod

from guideflow.guides.importers.schemas import ParsedFlowBox


class ImporterBase(ABC):
    @abstractmethod
    def parse(self, text: str) -> list[ParsedFlowBox]:
        """Parse raw guide content into ordered flow boxes."""
        ...

    @staticmethod
    def decode(content: bytes) -> str:
        """Decode uploaded bytes to text with encoding fallback."""
        if content.startswith(codecs.BOM_UTF8):
            content = content[len(codecs.BOM_UTF8) :]
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError:
            return content.decode("latin-1")
