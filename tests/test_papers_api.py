from __future__ import annotations

from unittest.mock import MagicMock

import requests

from arxiv_client import ArxivClient, ArxivResponse
from arxiv_feed import UNEXPECTED_FORMAT_MESSAGE
from papers_api import handle_papers_request

FEED_XML = """<feed xmlns="http://www.w3.org/2005/Atom">
  <entry>
    <id>http://x/abs/9999.1111v2</id>
    <title>  A   B </title>
    <author><name> C </name></author>
    <category term="cs.AI"/>
    <link title="pdf" href="http://x/pdf/9999.1111v2.pdf"/>
  </entry>
</feed>"""


def _client(status: int = 200, text: str = FEED_XML, reason: str = "OK") -> MagicMock:
    client = MagicMock(spec=ArxivClient)
    client.fetch.return_value = ArxivResponse(status_code=status, reason=reason, text=text)
    return client


def test_success_returns_paper_dicts() -> None:
    response = handle_papers_request({}, client=_client())

    assert response.status == 200
    assert len(response.payload) == 1
    paper = response.payload[0]
    assert paper["id"] == "9999.1111"
    assert paper["title"] == "A B"
    assert paper["authors"] == ["C"]
    assert paper["categories"] == ["cs.AI"]
    assert paper["pdfLink"] == "http://x/pdf/9999.1111v2.pdf"
    assert paper["published"] == ""
    assert paper["updated"] == ""
    assert response.papers[0].id == "9999.1111"


def test_query_parameters_reach_upstream() -> None:
    client = _client()

    handle_papers_request({"query": "diffusion", "start": "10", "max_results": "25"}, client=client)

    query = client.fetch.call_args.args[0]
    assert query.search_query == "diffusion"
    assert query.sort_by == "relevance"
    assert query.params()["start"] == "10"
    assert query.params()["max_results"] == "25"


def test_empty_feed_is_success() -> None:
    response = handle_papers_request({}, client=_client(text="<feed><title>t</title></feed>"))

    assert response.status == 200
    assert response.payload == []


def test_upstream_error_forwards_status_and_body() -> None:
    client = _client(status=503, reason="Service Unavailable", text="Retry later")

    response = handle_papers_request({}, client=client)

    assert response.status == 503
    assert response.payload == {
        "error": "arXiv API Error: 503 Service Unavailable",
        "details": "Retry later",
    }


def test_missing_feed_is_unexpected_format() -> None:
    response = handle_papers_request({}, client=_client(text="<rss><channel/></rss>"))

    assert response.status == 500
    assert response.payload == {"error": UNEXPECTED_FORMAT_MESSAGE}


def test_empty_document_root_is_server_error_not_empty_success() -> None:
    response = handle_papers_request({}, client=_client(text="<feed/>"))

    assert response.status == 500
    assert response.payload == {"error": UNEXPECTED_FORMAT_MESSAGE}


def test_malformed_xml_is_generic_server_error() -> None:
    response = handle_papers_request({}, client=_client(text="not xml at all"))

    assert response.status == 500
    assert response.payload["error"].startswith("Failed to process request: ")


def test_transport_failure_is_generic_server_error() -> None:
    client = MagicMock(spec=ArxivClient)
    client.fetch.side_effect = requests.ConnectionError("connection reset")

    response = handle_papers_request({"query": "x"}, client=client)

    assert response.status == 500
    assert response.payload == {"error": "Failed to process request: connection reset"}
