from urllib.parse import parse_qs
from xml.etree import ElementTree as ET

import httpx
import pytest
from Bio.SeqRecord import SeqRecord

from blastrun.config.settings import Settings
from blastrun.processor.processor import build_processor
from blastrun.search.models import ServiceRequestStatus
from blastrun.search.ncbi_client_adapter import NcbiBlastClientAdapter
from blastrun.worker.job_runner import JobRunner
from blastrun.worker.search_runner import BlastSearchRunner

EXPECTED_FIRST = {
    "QueryId": "Query_1",
    "SubjectId": "gi|123|gb|AB000001.1|",
    "Identity": "20",
    "Alignment": "20",
    "Length": "1500",
    "Mismatches": "",
    "GapOpenings": "",
    "QStart": "1",
    "QEnd": "20",
    "SStart": "11",
    "SEnd": "30",
    "EValue": "1e-15",
    "Bit": "40.1",
    "Positives": "20",
    "QueryString": "ACGTACGTACGTACGTACGT",
    "SubjectString": "ACGTACGTACGTACGTACGT",
    "Accession": "AB000001",
    "Description": "Example hit one",
}


def _runner(client, settings: Settings) -> BlastSearchRunner:
    return BlastSearchRunner(JobRunner(build_processor(settings, client)), settings, client=client)


@pytest.mark.integration
class TestScriptedService:
    def test_queued_then_ready_produces_two_records(
        self,
        test_settings: Settings,
        sample_sequences: list[SeqRecord],
        two_hsp_payload: str,
        scripted_client,
    ) -> None:
        client = scripted_client(
            [ServiceRequestStatus.QUEUED, ServiceRequestStatus.READY], two_hsp_payload
        )

        with _runner(client, test_settings) as runner:
            outcome = runner.run(sample_sequences).result(timeout=10)

        assert outcome.succeeded, outcome.message
        assert outcome.request_id == "RID-SCRIPTED"
        assert client.status_calls == 2
        assert client.result_calls == 1
        root = ET.fromstring(outcome.document)
        assert root.tag == "ArrayOfBlastResultCollator"
        assert len(root) == 2
        first, second = ({el.tag: el.text or "" for el in rec} for rec in root)
        assert first == EXPECTED_FIRST
        assert (second["QStart"], second["QEnd"]) == ("3", "14")
        assert (second["SStart"], second["SEnd"]) == ("801", "812")
        assert second["EValue"] == "3e-11"
        assert second["Bit"] == "22.3"
        assert second["SubjectString"] == "GTACGTTCGTAC"

    def test_canceled_on_first_poll_never_fetches(
        self,
        test_settings: Settings,
        sample_sequences: list[SeqRecord],
        two_hsp_payload: str,
        scripted_client,
    ) -> None:
        client = scripted_client([ServiceRequestStatus.CANCELED], two_hsp_payload)

        with _runner(client, test_settings) as runner:
            outcome = runner.run(sample_sequences).result(timeout=10)

        assert outcome.error_kind == "polling"
        assert "canceled" in outcome.message
        assert client.status_calls == 1
        assert client.result_calls == 0

    def test_never_ready_times_out(
        self,
        test_settings: Settings,
        sample_sequences: list[SeqRecord],
        scripted_client,
    ) -> None:
        client = scripted_client([ServiceRequestStatus.RUNNING])

        with _runner(client, test_settings) as runner:
            outcome = runner.run(sample_sequences).result(timeout=10)

        assert outcome.error_kind == "timeout"
        assert client.status_calls == test_settings.max_poll_attempts
        assert client.result_calls == 0

    def test_hits_without_hsps_give_empty_document(
        self,
        test_settings: Settings,
        sample_sequences: list[SeqRecord],
        blast_xml_builder,
        scripted_client,
    ) -> None:
        payload = blast_xml_builder([{"query_id": "Query_1"}, {"query_id": "Query_2"}])
        client = scripted_client([ServiceRequestStatus.READY], payload)

        with _runner(client, test_settings) as runner:
            outcome = runner.run(sample_sequences).result(timeout=10)

        assert outcome.succeeded
        assert len(ET.fromstring(outcome.document)) == 0


@pytest.mark.integration
class TestNcbiProtocol:
    def test_full_exchange_over_http(
        self,
        test_settings: Settings,
        sample_sequences: list[SeqRecord],
        two_hsp_payload: str,
    ) -> None:
        status_pages = iter(["Status=WAITING", "Status=READY\n    ThereAreHits=yes"])
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                form = parse_qs(request.content.decode())
                seen.append(f"Put {form['PROGRAM'][0]} {form['DATABASE'][0]}")
                return httpx.Response(
                    200, text="<!--QBlastInfoBegin\n    RID = R42\n    RTOE = 1\nQBlastInfoEnd\n-->"
                )
            params = request.url.params
            if params.get("FORMAT_OBJECT") == "SearchInfo":
                seen.append("SearchInfo")
                return httpx.Response(
                    200, text=f"<!--\nQBlastInfoBegin\n    {next(status_pages)}\nQBlastInfoEnd\n-->"
                )
            seen.append(f"Get {params['FORMAT_TYPE']}")
            return httpx.Response(200, text=two_hsp_payload)

        client = NcbiBlastClientAdapter(
            base_url="https://blast.example.org/Blast.cgi",
            timeout_seconds=5,
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with _runner(client, test_settings) as runner:
            outcome = runner.run(sample_sequences, program="blastn", database="nt").result(timeout=10)

        assert outcome.succeeded, outcome.message
        assert outcome.request_id == "R42"
        assert seen == ["Put blastn nt", "SearchInfo", "SearchInfo", "Get XML"]
        assert len(ET.fromstring(outcome.document)) == 2
