"""Adapter for the NCBI BLAST URL API (Blast.cgi).

Put submits a search and answers with a QBlastInfo block holding the
request id (RID) and an estimated time of execution (RTOE). Get with
FORMAT_OBJECT=SearchInfo reports the status; Get with FORMAT_TYPE=XML
returns the report.
"""

import re
from typing import ClassVar

import httpx

from blastrun.search.client_base import BaseBlastClient
from blastrun.search.exceptions import BlastServiceError
from blastrun.search.models import (
    JobHandle,
    SearchParameters,
    SearchRequest,
    ServiceRequestStatus,
    StatusInfo,
)

_QBLAST_INFO_RE = re.compile(r"QBlastInfoBegin(.*?)QBlastInfoEnd", re.DOTALL)
_INFO_LINE_RE = re.compile(r"^\s*(\w+)\s*=\s*(.*?)\s*$", re.MULTILINE)
_ERROR_MESSAGE_RE = re.compile(r'<p class="error">(.*?)</p>|Message ID#\d+ Error: ([^<\n]+)', re.DOTALL)
# Get accepts these formatting parameters in addition to the RID
_RESULT_FORMAT_KEYS = frozenset({"HITLIST_SIZE", "ALIGNMENTS", "DESCRIPTIONS"})
_PROTOCOL_KEYS = frozenset({"CMD", "PROGRAM", "DATABASE", "EXPECT", "QUERY", "TOOL", "EMAIL", "RID"})


def parse_qblast_info(page: str) -> dict[str, str]:
    """Collect the KEY=VALUE pairs of every QBlastInfo block in a response page."""
    info: dict[str, str] = {}
    for block in _QBLAST_INFO_RE.findall(page):
        for key, value in _INFO_LINE_RE.findall(block):
            info[key] = value
    return info


def _error_message(page: str) -> str:
    match = _ERROR_MESSAGE_RE.search(page)
    if match is None:
        return ""
    return next((group for group in match.groups() if group), "").strip()


class NcbiBlastClientAdapter(BaseBlastClient):
    """Remote BLAST client built on httpx and the NCBI Blast.cgi endpoint."""

    STATUS_MAP: ClassVar[dict[str, ServiceRequestStatus]] = {
        "WAITING": ServiceRequestStatus.RUNNING,
        "READY": ServiceRequestStatus.READY,
        "FAILED": ServiceRequestStatus.ERROR,
        "UNKNOWN": ServiceRequestStatus.CANCELED,
    }

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        tool: str = "",
        email: str = "",
        proxy_url: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url
        self._tool = tool
        self._email = email
        self._client = http_client or httpx.Client(
            timeout=timeout_seconds,
            proxy=proxy_url,
            follow_redirects=True,
        )

    def submit(self, request: SearchRequest) -> JobHandle:
        page = self._call("post", data=self._build_put_form(request))
        info = parse_qblast_info(page)
        request_id = info.get("RID", "")
        if not request_id:
            detail = _error_message(page) or "response contained no RID"
            raise BlastServiceError(f"BLAST submission rejected: {detail}")
        rtoe = info.get("RTOE", "")
        return JobHandle(
            request_id=request_id,
            estimated_seconds=int(rtoe) if rtoe.isdigit() else None,
        )

    def get_status(self, handle: JobHandle) -> StatusInfo:
        page = self._call(
            "get",
            params={"CMD": "Get", "FORMAT_OBJECT": "SearchInfo", "RID": handle.request_id},
        )
        info = parse_qblast_info(page)
        raw_status = info.get("Status", "").upper()
        status = self.STATUS_MAP.get(raw_status)
        if status is None:
            return StatusInfo(
                ServiceRequestStatus.ERROR,
                f"Unrecognized status '{raw_status}' for request {handle.request_id}",
            )
        if status is ServiceRequestStatus.CANCELED:
            return StatusInfo(status, f"Request {handle.request_id} is unknown or has expired")
        if status is ServiceRequestStatus.ERROR:
            return StatusInfo(status, _error_message(page) or "Search failed on the server")
        if status is ServiceRequestStatus.READY and info.get("ThereAreHits", "").lower() == "no":
            return StatusInfo(status, "No hits found")
        return StatusInfo(status)

    def get_result(self, handle: JobHandle, parameters: SearchParameters) -> str:
        params = {"CMD": "Get", "FORMAT_TYPE": "XML", "RID": handle.request_id}
        for key, value in parameters.extra.items():
            if key.upper() in _RESULT_FORMAT_KEYS:
                params[key.upper()] = value
        return self._call("get", params=params)

    def close(self) -> None:
        self._client.close()

    def _build_put_form(self, request: SearchRequest) -> dict[str, str]:
        parameters = request.parameters
        # extras go first so they can never replace a protocol field
        form = {
            key: value
            for key, value in parameters.extra.items()
            if key.upper() not in _PROTOCOL_KEYS
        }
        form.update(
            CMD="Put",
            PROGRAM=parameters.program,
            DATABASE=parameters.database,
            EXPECT=parameters.expect,
            QUERY=request.to_fasta(),
        )
        if self._tool:
            form["TOOL"] = self._tool
        if self._email:
            form["EMAIL"] = self._email
        return form

    def _call(
        self,
        method: str,
        *,
        data: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> str:
        try:
            if method == "post":
                response = self._client.post(self._base_url, data=data)
            else:
                response = self._client.get(self._base_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BlastServiceError(
                f"BLAST service returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BlastServiceError(f"BLAST service network error: {exc}") from exc
        return response.text
