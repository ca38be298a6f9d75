from guideflow.guides.importers.base import ImporterBase
from guideflow.guides.importers.csv_importer import CSVImporter, parse_csv
from guideflow.guides.importers.markdown_importer import MarkdownImporter, parse_markdown

__all__ = ["CSVImporter", "ImporterBase", "MarkdownImporter", "parse_csv", "parse_markdown"]
