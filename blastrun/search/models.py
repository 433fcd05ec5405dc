from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from Bio.SeqRecord import SeqRecord

DEFAULT_PROGRAM = "blastn"
DEFAULT_DATABASE = "nr"
DEFAULT_EXPECT = "1e-10"

_CORE_KEYS = frozenset({"program", "database", "expect"})


class ServiceRequestStatus(Enum):
    QUEUED = "queued"
    RUNNING = "running"
    READY = "ready"
    ERROR = "error"
    CANCELED = "canceled"


@dataclass(frozen=True)
class StatusInfo:
    """Status of a remote search as reported by the service."""

    status: ServiceRequestStatus
    message: str = ""

    @property
    def is_failure(self) -> bool:
        return self.status in (ServiceRequestStatus.ERROR, ServiceRequestStatus.CANCELED)

    @property
    def is_terminal(self) -> bool:
        return self.is_failure or self.status is ServiceRequestStatus.READY


@dataclass(frozen=True)
class JobHandle:
    """Identifier assigned by the remote service to one submitted search."""

    request_id: str
    estimated_seconds: int | None = None

    def __str__(self) -> str:
        return self.request_id


@dataclass(frozen=True)
class SearchParameters:
    """Named search parameters: the Program/Database/Expect core plus pass-through extras.

    Extra keys are sent to the service verbatim and may not shadow a core key.
    """

    program: str = DEFAULT_PROGRAM
    database: str = DEFAULT_DATABASE
    expect: str = DEFAULT_EXPECT
    extra: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        shadowed = sorted(k for k in self.extra if k.lower() in _CORE_KEYS)
        if shadowed:
            raise ValueError(
                f"Extra parameters may not override core parameters: {shadowed}"
            )
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def as_dict(self) -> dict[str, str]:
        params = {
            "Program": self.program,
            "Database": self.database,
            "Expect": self.expect,
        }
        params.update(self.extra)
        return params


@dataclass(frozen=True)
class SearchRequest:
    """Sequences plus parameters for one remote search. Read-only once built."""

    sequences: tuple[SeqRecord, ...]
    parameters: SearchParameters = field(default_factory=SearchParameters)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sequences", tuple(self.sequences))

    def to_fasta(self) -> str:
        """Render the query sequences as FASTA text, one record per sequence."""
        lines: list[str] = []
        for index, record in enumerate(self.sequences, start=1):
            identifier = record.id if record.id and record.id != "<unknown id>" else f"query_{index}"
            lines.append(f">{identifier}")
            lines.append(str(record.seq))
        return "\n".join(lines) + "\n" if lines else ""
