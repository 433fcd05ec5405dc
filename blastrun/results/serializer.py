import io
from collections.abc import Iterable
from typing import ClassVar
from xml.etree import ElementTree as ET

from blastrun.logging.logger import Log
from blastrun.results.models import CollatorRecord


def _format_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (str, int)):
        return str(value)
    raise TypeError(f"cannot serialize {value!r} (type {type(value).__name__})")


def extract_document_fragment(buffer: bytes) -> str:
    """Return the text from the first '<' byte to the last '>' byte, inclusive.

    Strips byte-order marks, padding and trailers around the markup. Returns
    an empty string when the buffer holds no such pair or the span is not UTF-8.
    """
    start = buffer.find(b"<")
    end = buffer.rfind(b">")
    if start == -1 or end < start:
        return ""
    try:
        return buffer[start : end + 1].decode("utf-8")
    except UnicodeDecodeError:
        return ""


class BlastXmlSerializer:
    """Serializes collator records into an XML document with a fixed element order."""

    ROOT_TAG: ClassVar[str] = "ArrayOfBlastResultCollator"
    RECORD_TAG: ClassVar[str] = "BlastResultCollator"
    FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("QueryId", "query_id"),
        ("SubjectId", "subject_id"),
        ("Identity", "identity"),
        ("Alignment", "alignment"),
        ("Length", "length"),
        ("Mismatches", "mismatches"),
        ("GapOpenings", "gap_openings"),
        ("QStart", "q_start"),
        ("QEnd", "q_end"),
        ("SStart", "s_start"),
        ("SEnd", "s_end"),
        ("EValue", "e_value"),
        ("Bit", "bit"),
        ("Positives", "positives"),
        ("QueryString", "query_string"),
        ("SubjectString", "subject_string"),
        ("Accession", "accession"),
        ("Description", "description"),
    )

    def encode(self, records: Iterable[CollatorRecord]) -> bytes:
        """Serialize records to UTF-8 XML bytes.

        Returns b"" when a record cannot be serialized; the caller decides
        whether an empty document is fatal.
        """
        rows = list(records)
        try:
            root = ET.Element(self.ROOT_TAG)
            for row in rows:
                element = ET.SubElement(root, self.RECORD_TAG)
                for tag, attribute in self.FIELDS:
                    ET.SubElement(element, tag).text = _format_value(getattr(row, attribute))
            buffer = io.BytesIO()
            ET.ElementTree(root).write(buffer, encoding="utf-8", xml_declaration=True)
        except (AttributeError, TypeError, ValueError) as exc:
            Log.warning(f"Failed to encode {len(rows)} collator records: {exc}")
            return b""
        return buffer.getvalue()
