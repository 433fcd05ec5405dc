"""BLAST XML report parsing.

A payload may hold several concatenated BLAST XML documents (older BLAST
versions emit one per query). Each document becomes one BlastResult so the
grouping survives; Bio.Blast.NCBIXML does the element-level parsing.
"""

import io
import re
from typing import Any

from Bio.Blast import NCBIXML

from blastrun.logging.logger import Log
from blastrun.results.models import BlastResult, BlastSearchRecord, Hit, Hsp
from blastrun.search.exceptions import ParseError

_DOCUMENT_START_RE = re.compile(r"^<\?xml", re.MULTILINE)


def split_documents(payload: str) -> list[str]:
    """Split a payload into its XML documents, each starting with an XML declaration."""
    text = payload.lstrip("\ufeff \t\r\n")
    starts = [m.start() for m in _DOCUMENT_START_RE.finditer(text)]
    if not starts or starts[0] != 0:
        raise ParseError("Payload does not start with an XML declaration")
    bounds = [*starts, len(text)]
    return [text[begin:end].rstrip() for begin, end in zip(bounds, bounds[1:])]


def _count(value: Any) -> int:
    # NCBIXML leaves unset counters as a (None, None) tuple
    return value if isinstance(value, int) else 0


class BlastXmlParser:
    """Parses raw BLAST XML payloads into the nested result tree."""

    def parse(self, payload: str) -> list[BlastResult]:
        """Parse every BLAST document in the payload.

        Raises:
            ParseError: if the payload is empty, not BLAST XML, or a document
                holds no iteration record.
        """
        if not payload or not payload.strip():
            raise ParseError("Result payload is empty")
        results = [self._parse_document(doc, index) for index, doc in enumerate(split_documents(payload))]
        for result in results:
            Log.debug(
                f"Parsed {result.program} report against {result.database}: "
                f"{len(result.records)} record(s)"
            )
        return results

    def _parse_document(self, document: str, index: int) -> BlastResult:
        try:
            blast_records = list(NCBIXML.parse(io.StringIO(document)))
        except Exception as exc:
            raise ParseError(f"Malformed BLAST XML in document {index}: {exc}") from exc
        if not blast_records:
            raise ParseError(f"BLAST XML document {index} contains no iteration")
        first = blast_records[0]
        return BlastResult(
            program=first.application or "",
            database=first.database or "",
            records=[self._build_record(r) for r in blast_records],
        )

    def _build_record(self, blast_record: Any) -> BlastSearchRecord:
        return BlastSearchRecord(
            query_id=blast_record.query_id or "",
            query_def=blast_record.query or "",
            hits=[self._build_hit(a) for a in blast_record.alignments],
        )

    def _build_hit(self, alignment: Any) -> Hit:
        return Hit(
            id=alignment.hit_id or "",
            accession=getattr(alignment, "accession", "") or "",
            description=alignment.hit_def or "",
            length=alignment.length or 0,
            hsps=[self._build_hsp(hsp, alignment.hit_id) for hsp in alignment.hsps],
        )

    def _build_hsp(self, hsp: Any, hit_id: str) -> Hsp:
        if hsp.expect is None or hsp.bits is None:
            raise ParseError(f"Hsp of hit '{hit_id}' has no e-value or bit score")
        return Hsp(
            align_length=hsp.align_length or 0,
            bit_score=hsp.bits,
            e_value=hsp.expect,
            identities=_count(hsp.identities),
            positives=_count(hsp.positives),
            query_start=hsp.query_start or 0,
            query_end=hsp.query_end or 0,
            hit_start=hsp.sbjct_start or 0,
            hit_end=hsp.sbjct_end or 0,
            query_sequence=hsp.query or "",
            hit_sequence=hsp.sbjct or "",
        )
