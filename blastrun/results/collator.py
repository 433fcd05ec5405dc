from collections.abc import Iterable

from blastrun.results.models import BlastResult, BlastSearchRecord, CollatorRecord, Hit, Hsp


def _collate(record: BlastSearchRecord, hit: Hit, hsp: Hsp) -> CollatorRecord:
    return CollatorRecord(
        query_id=record.query_id or record.query_def,
        subject_id=hit.id,
        identity=hsp.identities,
        alignment=hsp.align_length,
        length=hit.length,
        mismatches="",
        gap_openings="",
        q_start=hsp.query_start,
        q_end=hsp.query_end,
        s_start=hsp.hit_start,
        s_end=hsp.hit_end,
        e_value=hsp.e_value,
        bit=hsp.bit_score,
        positives=hsp.positives,
        query_string=hsp.query_sequence,
        subject_string=hsp.hit_sequence,
        accession=hit.accession,
        description=hit.description,
    )


def flatten(results: Iterable[BlastResult]) -> list[CollatorRecord]:
    """Emit one CollatorRecord per Hsp in Result -> Record -> Hit -> Hsp order.

    Hits without Hsps and records without hits contribute nothing. Rows are
    never re-sorted and no score threshold is applied. A record without a
    query id is labelled with its query definition line.
    """
    return [
        _collate(record, hit, hsp)
        for result in results
        for record in result.records
        for hit in record.hits
        for hsp in hit.hsps
    ]
