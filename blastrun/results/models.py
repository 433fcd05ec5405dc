from dataclasses import dataclass, field


@dataclass(frozen=True)
class Hsp:
    """One high-scoring segment pair (local alignment) of a hit."""

    align_length: int
    bit_score: float
    e_value: float
    identities: int
    positives: int
    query_start: int
    query_end: int
    hit_start: int
    hit_end: int
    query_sequence: str = ""
    hit_sequence: str = ""


@dataclass(frozen=True)
class Hit:
    """A database sequence found similar to the query."""

    id: str
    accession: str
    description: str
    length: int
    hsps: list[Hsp] = field(default_factory=list)


@dataclass(frozen=True)
class BlastSearchRecord:
    """Hits of one query sequence."""

    query_id: str
    query_def: str = ""
    hits: list[Hit] = field(default_factory=list)


@dataclass(frozen=True)
class BlastResult:
    """One BLAST report document; holds one record per query."""

    program: str = ""
    database: str = ""
    records: list[BlastSearchRecord] = field(default_factory=list)


@dataclass(frozen=True)
class CollatorRecord:
    """Flat tabular row for one Hsp plus the identifying fields of its hit and query.

    Field order is the column order of the serialized document.
    """

    query_id: str
    subject_id: str
    identity: int
    alignment: int
    length: int
    mismatches: str
    gap_openings: str
    q_start: int
    q_end: int
    s_start: int
    s_end: int
    e_value: float
    bit: float
    positives: int
    query_string: str
    subject_string: str
    accession: str
    description: str
