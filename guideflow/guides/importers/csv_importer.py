import structlog

from guideflow.exceptions import ValidationError
from guideflow.guides.importers.base import ImporterBase
from guideflow.guides.importers.schemas import CSVRow, ParsedFlowBox, ParsedStep

logger = structlog.get_logger()

EXPECTED_HEADERS = ["Flow Name", "Flow Description", "Step Title", "Content"]
MIN_FIELDS = len(EXPECTED_HEADERS)


def _strip_quotes(value: str) -> str:
    """Remove a single pair of surrounding double quotes."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def _clean_field(value: str) -> str:
    return _strip_quotes(value.strip())


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas that are not inside double quotes."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append(_clean_field("".join(current)))
            current = []
        else:
            current.append(char)

    fields.append(_clean_field("".join(current)))
    return fields


def parse_header(line: str) -> list[str]:
    return [_clean_field(column) for column in line.split(",")]


class CSVImporter(ImporterBase):
    """Reads guides from a four-column CSV, one step per row.

    Required headers (any order): Flow Name, Flow Description, Step Title,
    Content. Data columns are read positionally in that order.
    """

    def parse(self, text: str) -> list[ParsedFlowBox]:
        return self.group_rows(self.parse_rows(text))

    def parse_rows(self, text: str) -> list[CSVRow]:
        """Validate the header and return accepted data rows.

        Raises:
            ValidationError: fewer than two lines, or a required header is missing.
        """
        lines = text.split("\n")
        if len(lines) < 2:
            raise ValidationError("CSV must have at least a header and one data row")

        header = parse_header(lines[0])
        if not all(expected in header for expected in EXPECTED_HEADERS):
            missing = [h for h in EXPECTED_HEADERS if h not in header]
            logger.warning("csv_headers_missing", missing=missing)
            raise ValidationError(f"CSV must have headers: {', '.join(EXPECTED_HEADERS)}")

        rows: list[CSVRow] = []
        for line_num, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            if not line:
                continue

            fields = split_csv_line(line)
            if len(fields) < MIN_FIELDS:
                logger.warning(
                    "csv_row_skipped",
                    row=line_num,
                    reason=f"expected {MIN_FIELDS} fields, got {len(fields)}",
                )
                continue

            flow_name, flow_description, step_title, content = fields[:MIN_FIELDS]
            if not flow_name or not step_title:
                logger.warning(
                    "csv_row_skipped", row=line_num, reason="empty flow name or step title"
                )
                continue

            rows.append(
                CSVRow(
                    flow_name=flow_name,
                    flow_description=flow_description,
                    step_title=step_title,
                    content=content,
                )
            )

        logger.debug("csv_rows_parsed", accepted=len(rows), total=len(lines) - 1)
        return rows

    def group_rows(self, rows: list[CSVRow]) -> list[ParsedFlowBox]:
        """Group rows by flow name, keeping first-seen order of flows and steps."""
        groups: dict[str, tuple[str, list[ParsedStep]]] = {}
        for row in rows:
            if row.flow_name not in groups:
                groups[row.flow_name] = (row.flow_description, [])
            groups[row.flow_name][1].append(ParsedStep(title=row.step_title, content=row.content))

        return [
            ParsedFlowBox(title=name, description=description, steps=steps)
            for name, (description, steps) in groups.items()
        ]


def parse_csv(text: str) -> list[ParsedFlowBox]:
    return CSVImporter().parse(text)
