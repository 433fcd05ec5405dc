"""Example BLAST client adapter.

Use this module as a reference when implementing new service adapters.
Implement BaseBlastClient and register the provider in BlastClientFactory.
"""

import uuid
from typing import ClassVar

from blastrun.search.client_base import BaseBlastClient
from blastrun.search.models import (
    JobHandle,
    SearchParameters,
    SearchRequest,
    ServiceRequestStatus,
    StatusInfo,
)


class ExampleBlastClient(BaseBlastClient):
    """Adapter that reports every search as ready and returns a fixed BLAST XML report.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_PAYLOAD: ClassVar[str] = """<?xml version="1.0"?>
<BlastOutput>
  <BlastOutput_program>blastn</BlastOutput_program>
  <BlastOutput_version>BLASTN 2.15.0+</BlastOutput_version>
  <BlastOutput_reference>Stephen F. Altschul et al.</BlastOutput_reference>
  <BlastOutput_db>nr</BlastOutput_db>
  <BlastOutput_query-ID>Query_1</BlastOutput_query-ID>
  <BlastOutput_query-def>example query</BlastOutput_query-def>
  <BlastOutput_query-len>24</BlastOutput_query-len>
  <BlastOutput_param>
    <Parameters>
      <Parameters_expect>1e-10</Parameters_expect>
      <Parameters_sc-match>2</Parameters_sc-match>
      <Parameters_sc-mismatch>-3</Parameters_sc-mismatch>
      <Parameters_gap-open>5</Parameters_gap-open>
      <Parameters_gap-extend>2</Parameters_gap-extend>
    </Parameters>
  </BlastOutput_param>
  <BlastOutput_iterations>
    <Iteration>
      <Iteration_iter-num>1</Iteration_iter-num>
      <Iteration_query-ID>Query_1</Iteration_query-ID>
      <Iteration_query-def>example query</Iteration_query-def>
      <Iteration_query-len>24</Iteration_query-len>
      <Iteration_hits>
        <Hit>
          <Hit_num>1</Hit_num>
          <Hit_id>gi|2506495|gb|AF021345.1|</Hit_id>
          <Hit_def>Example organism 16S ribosomal RNA gene, partial sequence</Hit_def>
          <Hit_accession>AF021345</Hit_accession>
          <Hit_len>1480</Hit_len>
          <Hit_hsps>
            <Hsp>
              <Hsp_num>1</Hsp_num>
              <Hsp_bit-score>44.1</Hsp_bit-score>
              <Hsp_score>48</Hsp_score>
              <Hsp_evalue>2.3e-12</Hsp_evalue>
              <Hsp_query-from>1</Hsp_query-from>
              <Hsp_query-to>24</Hsp_query-to>
              <Hsp_hit-from>101</Hsp_hit-from>
              <Hsp_hit-to>124</Hsp_hit-to>
              <Hsp_query-frame>1</Hsp_query-frame>
              <Hsp_hit-frame>1</Hsp_hit-frame>
              <Hsp_identity>24</Hsp_identity>
              <Hsp_positive>24</Hsp_positive>
              <Hsp_gaps>0</Hsp_gaps>
              <Hsp_align-len>24</Hsp_align-len>
              <Hsp_qseq>AGAGTTTGATCCTGGCTCAGGACG</Hsp_qseq>
              <Hsp_hseq>AGAGTTTGATCCTGGCTCAGGACG</Hsp_hseq>
              <Hsp_midline>||||||||||||||||||||||||</Hsp_midline>
            </Hsp>
            <Hsp>
              <Hsp_num>2</Hsp_num>
              <Hsp_bit-score>30.2</Hsp_bit-score>
              <Hsp_score>32</Hsp_score>
              <Hsp_evalue>4.0e-11</Hsp_evalue>
              <Hsp_query-from>5</Hsp_query-from>
              <Hsp_query-to>20</Hsp_query-to>
              <Hsp_hit-from>905</Hsp_hit-from>
              <Hsp_hit-to>920</Hsp_hit-to>
              <Hsp_query-frame>1</Hsp_query-frame>
              <Hsp_hit-frame>1</Hsp_hit-frame>
              <Hsp_identity>16</Hsp_identity>
              <Hsp_positive>16</Hsp_positive>
              <Hsp_gaps>0</Hsp_gaps>
              <Hsp_align-len>16</Hsp_align-len>
              <Hsp_qseq>TTTGATCCTGGCTCAG</Hsp_qseq>
              <Hsp_hseq>TTTGATCCTGGCTCAG</Hsp_hseq>
              <Hsp_midline>||||||||||||||||</Hsp_midline>
            </Hsp>
          </Hit_hsps>
        </Hit>
      </Iteration_hits>
    </Iteration>
  </BlastOutput_iterations>
</BlastOutput>
"""

    def __init__(self, payload: str | None = None) -> None:
        self._payload = payload if payload is not None else self.DEFAULT_PAYLOAD

    def submit(self, request: SearchRequest) -> JobHandle:
        _ = request
        return JobHandle(request_id=f"EXAMPLE-{uuid.uuid4().hex[:12].upper()}", estimated_seconds=0)

    def get_status(self, handle: JobHandle) -> StatusInfo:
        _ = handle
        return StatusInfo(ServiceRequestStatus.READY)

    def get_result(self, handle: JobHandle, parameters: SearchParameters) -> str:
        _ = handle, parameters
        return self._payload
