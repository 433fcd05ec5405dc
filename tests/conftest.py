from collections.abc import Callable
from typing import Any

import pytest
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

HitSpec = dict[str, Any]
IterationSpec = dict[str, Any]


def _hsp_xml(num: int, hsp: dict[str, Any]) -> str:
    return f"""
            <Hsp>
              <Hsp_num>{num}</Hsp_num>
              <Hsp_bit-score>{hsp["bits"]}</Hsp_bit-score>
              <Hsp_score>{int(hsp["bits"])}</Hsp_score>
              <Hsp_evalue>{hsp["evalue"]}</Hsp_evalue>
              <Hsp_query-from>{hsp["qfrom"]}</Hsp_query-from>
              <Hsp_query-to>{hsp["qto"]}</Hsp_query-to>
              <Hsp_hit-from>{hsp["hfrom"]}</Hsp_hit-from>
              <Hsp_hit-to>{hsp["hto"]}</Hsp_hit-to>
              <Hsp_query-frame>1</Hsp_query-frame>
              <Hsp_hit-frame>1</Hsp_hit-frame>
              <Hsp_identity>{hsp["identity"]}</Hsp_identity>
              <Hsp_positive>{hsp["positive"]}</Hsp_positive>
              <Hsp_gaps>0</Hsp_gaps>
              <Hsp_align-len>{hsp["align_len"]}</Hsp_align-len>
              <Hsp_qseq>{hsp["qseq"]}</Hsp_qseq>
              <Hsp_hseq>{hsp["hseq"]}</Hsp_hseq>
              <Hsp_midline>{"|" * len(hsp["qseq"])}</Hsp_midline>
            </Hsp>"""


def _hit_xml(num: int, hit: HitSpec) -> str:
    hsps = "".join(_hsp_xml(i, h) for i, h in enumerate(hit.get("hsps", []), start=1))
    return f"""
        <Hit>
          <Hit_num>{num}</Hit_num>
          <Hit_id>{hit["id"]}</Hit_id>
          <Hit_def>{hit["def"]}</Hit_def>
          <Hit_accession>{hit["accession"]}</Hit_accession>
          <Hit_len>{hit["len"]}</Hit_len>
          <Hit_hsps>{hsps}
          </Hit_hsps>
        </Hit>"""


def _iteration_xml(num: int, iteration: IterationSpec) -> str:
    hits = "".join(_hit_xml(i, h) for i, h in enumerate(iteration.get("hits", []), start=1))
    message = "" if iteration.get("hits") else "\n      <Iteration_message>No hits found</Iteration_message>"
    return f"""
    <Iteration>
      <Iteration_iter-num>{num}</Iteration_iter-num>
      <Iteration_query-ID>{iteration["query_id"]}</Iteration_query-ID>
      <Iteration_query-def>{iteration.get("query_def", "query")}</Iteration_query-def>
      <Iteration_query-len>{iteration.get("query_len", 30)}</Iteration_query-len>
      <Iteration_hits>{hits}
      </Iteration_hits>{message}
    </Iteration>"""


def build_blast_xml(iterations: list[IterationSpec], program: str = "blastn") -> str:
    body = "".join(_iteration_xml(i, it) for i, it in enumerate(iterations, start=1))
    first_id = iterations[0]["query_id"] if iterations else "Query_1"
    return f"""<?xml version="1.0"?>
<BlastOutput>
  <BlastOutput_program>{program}</BlastOutput_program>
  <BlastOutput_version>{program.upper()} 2.15.0+</BlastOutput_version>
  <BlastOutput_reference>Stephen F. Altschul et al.</BlastOutput_reference>
  <BlastOutput_db>nr</BlastOutput_db>
  <BlastOutput_query-ID>{first_id}</BlastOutput_query-ID>
  <BlastOutput_query-def>query</BlastOutput_query-def>
  <BlastOutput_query-len>30</BlastOutput_query-len>
  <BlastOutput_param>
    <Parameters>
      <Parameters_expect>1e-10</Parameters_expect>
      <Parameters_sc-match>2</Parameters_sc-match>
      <Parameters_sc-mismatch>-3</Parameters_sc-mismatch>
      <Parameters_gap-open>5</Parameters_gap-open>
      <Parameters_gap-extend>2</Parameters_gap-extend>
    </Parameters>
  </BlastOutput_param>
  <BlastOutput_iterations>{body}
  </BlastOutput_iterations>
</BlastOutput>
"""


def make_hsp(
    bits: float,
    evalue: str,
    qfrom: int = 1,
    qto: int = 20,
    hfrom: int = 101,
    hto: int = 120,
    identity: int = 20,
    positive: int = 20,
    qseq: str = "ACGTACGTACGTACGTACGT",
    hseq: str = "ACGTACGTACGTACGTACGT",
) -> dict[str, Any]:
    return {
        "bits": bits,
        "evalue": evalue,
        "qfrom": qfrom,
        "qto": qto,
        "hfrom": hfrom,
        "hto": hto,
        "identity": identity,
        "positive": positive,
        "align_len": len(qseq),
        "qseq": qseq,
        "hseq": hseq,
    }


@pytest.fixture()
def blast_xml_builder() -> Callable[..., str]:
    """Build a BLAST XML report from a list of iteration specs."""
    return build_blast_xml


@pytest.fixture()
def hsp_builder() -> Callable[..., dict[str, Any]]:
    return make_hsp


@pytest.fixture()
def two_hsp_payload() -> str:
    """One result -> one record -> one hit with two Hsps."""
    return build_blast_xml(
        [
            {
                "query_id": "Query_1",
                "query_def": "seq1",
                "hits": [
                    {
                        "id": "gi|123|gb|AB000001.1|",
                        "def": "Example hit one",
                        "accession": "AB000001",
                        "len": 1500,
                        "hsps": [
                            make_hsp(40.1, "1e-15", qfrom=1, qto=20, hfrom=11, hto=30),
                            make_hsp(
                                22.3,
                                "3e-11",
                                qfrom=3,
                                qto=14,
                                hfrom=801,
                                hto=812,
                                identity=11,
                                positive=11,
                                qseq="GTACGTACGTAC",
                                hseq="GTACGTTCGTAC",
                            ),
                        ],
                    }
                ],
            }
        ]
    )


@pytest.fixture()
def sample_sequences() -> list[SeqRecord]:
    return [
        SeqRecord(Seq("ACGTACGTACGTACGTACGTACGTACGTAC"), id="seq1"),
        SeqRecord(Seq("TTGACCATGGCATTAGCCGATTACGA"), id="seq2"),
    ]
