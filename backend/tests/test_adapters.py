"""
openFDA and Google Vision adapter tests with a fake HTTP session.
"""

import pytest
import requests
from requests.adapters import HTTPAdapter

from medscan.domain.value_objects.call_outcome import OutcomeStatus
from medscan.domain.value_objects.image_data import ImageData
from medscan.infrastructure.label_search.openfda_client import OpenFDALabelSearch
from medscan.infrastructure.utils.http import create_session
from medscan.infrastructure.vision.google_vision import GoogleVisionService


class FakeResponse:

    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    """Records requests and replays a canned response (or raises)."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.headers = {}
        self.calls = []

    def _reply(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._reply("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._reply("POST", url, **kwargs)


@pytest.fixture
def image():
    return ImageData.from_base64("aGVsbG8=", format="jpeg")


class TestOpenFDALabelSearch:

    def test_results(self):
        session = FakeSession(FakeResponse({"results": [{"openfda": {}}, "junk"]}))
        client = OpenFDALabelSearch(api_key="k", session=session, timeout=5)

        outcome = client.search_labels('openfda.brand_name:"Tylenol"', limit=3)

        assert outcome.is_success
        assert outcome.value == [{"openfda": {}}]
        method, url, kwargs = session.calls[0]
        assert url == "https://api.fda.gov/drug/label.json"
        assert kwargs["params"] == {"search": 'openfda.brand_name:"Tylenol"', "limit": 3, "api_key": "k"}
        assert kwargs["timeout"] == 5

    def test_product_endpoint_without_key(self):
        session = FakeSession(FakeResponse({"results": [{"product_ndc": "0002-3227"}]}))
        OpenFDALabelSearch(session=session).search_products('product_ndc:"0002-3227"')

        _, url, kwargs = session.calls[0]
        assert url.endswith("/ndc.json")
        assert "api_key" not in kwargs["params"]
        assert kwargs["params"]["limit"] == 1

    def test_not_found_is_empty(self):
        payload = {"error": {"code": "NOT_FOUND", "message": "No matches found!"}}
        client = OpenFDALabelSearch(session=FakeSession(FakeResponse(payload, status_code=404)))

        assert client.search_labels("zzz").status is OutcomeStatus.EMPTY

    def test_other_api_error(self):
        payload = {"error": {"code": "BAD_REQUEST", "message": "Syntax error"}}
        client = OpenFDALabelSearch(session=FakeSession(FakeResponse(payload, status_code=400)))

        assert client.search_labels("(((").is_error

    def test_http_error_without_body(self):
        client = OpenFDALabelSearch(session=FakeSession(FakeResponse({}, status_code=500)))
        assert client.search_labels("x").is_error

    def test_transport_error(self):
        client = OpenFDALabelSearch(session=FakeSession(error=requests.ConnectionError("refused")))
        outcome = client.search_labels("x")
        assert outcome.is_error
        assert outcome.value_or([]) == []

    def test_invalid_json(self):
        client = OpenFDALabelSearch(session=FakeSession(FakeResponse(invalid_json=True)))
        assert client.search_labels("x").is_error

    def test_empty_results(self):
        client = OpenFDALabelSearch(session=FakeSession(FakeResponse({"results": []})))
        assert client.search_labels("x").status is OutcomeStatus.EMPTY


class TestGoogleVisionService:

    def test_text_request_shape(self, image):
        session = FakeSession(FakeResponse({"responses": [
            {"textAnnotations": [{"description": "M 30\nscored"}, {"description": "M"}]}
        ]}))
        vision = GoogleVisionService("key", session=session, language_hints=("en",))

        outcome = vision.detect_text(image)

        assert outcome.value == "M 30\nscored"
        _, url, kwargs = session.calls[0]
        assert kwargs["params"] == {"key": "key"}
        request = kwargs["json"]["requests"][0]
        assert request["image"] == {"content": "aGVsbG8="}
        assert request["features"] == [{"type": "DOCUMENT_TEXT_DETECTION", "maxResults": 10}]
        assert request["imageContext"] == {"languageHints": ["en"]}

    def test_colors(self, image):
        session = FakeSession(FakeResponse({"responses": [{"imagePropertiesAnnotation": {
            "dominantColors": {"colors": [{"color": {"red": 250, "green": 250}, "score": 0.7}]}
        }}]}))
        colors = GoogleVisionService("key", session=session).detect_colors(image).value

        assert colors[0].rgb == (250.0, 250.0, 0.0)
        assert session.calls[0][2]["json"]["requests"][0]["features"][0]["type"] == "IMAGE_PROPERTIES"

    def test_labels_and_objects(self, image):
        session = FakeSession(FakeResponse({"responses": [{
            "labelAnnotations": [{"description": "Pill", "score": 0.9}, {"score": 0.1}],
            "localizedObjectAnnotations": [{"name": "Tablet", "score": 0.8}],
        }]}))
        vision = GoogleVisionService("key", session=session)

        assert vision.detect_labels(image).value == ["Pill"]
        assert vision.detect_objects(image).value[0].name == "Tablet"

    def test_nothing_detected_is_empty(self, image):
        vision = GoogleVisionService("key", session=FakeSession(FakeResponse({"responses": [{}]})))
        assert vision.detect_text(image).status is OutcomeStatus.EMPTY
        assert vision.detect_labels(image).status is OutcomeStatus.EMPTY

    def test_missing_responses(self, image):
        vision = GoogleVisionService("key", session=FakeSession(FakeResponse({})))
        assert vision.detect_text(image).status is OutcomeStatus.EMPTY

    def test_response_error(self, image):
        payload = {"responses": [{"error": {"code": 3, "message": "Bad image data."}}]}
        vision = GoogleVisionService("key", session=FakeSession(FakeResponse(payload)))
        assert vision.detect_text(image).is_error

    def test_top_level_error(self, image):
        payload = {"error": {"code": 403, "message": "API key not valid"}}
        vision = GoogleVisionService("key", session=FakeSession(FakeResponse(payload, status_code=403)))
        assert vision.detect_colors(image).is_error

    def test_no_api_key(self, image):
        session = FakeSession(FakeResponse({"responses": [{}]}))
        vision = GoogleVisionService(None, session=session)

        assert vision.detect_text(image).is_error
        assert vision.is_available() is False
        assert session.calls == []

    def test_transport_error(self, image):
        vision = GoogleVisionService("key", session=FakeSession(error=requests.Timeout("slow")))
        assert vision.detect_objects(image).is_error


class TestSharedSession:

    def test_pooled_adapter_for_both_schemes(self):
        session = create_session("medscan-test", pool_size=4)

        for url in ("https://api.fda.gov/drug/label.json", "http://localhost:54321/rest/v1"):
            adapter = session.get_adapter(url)
            assert isinstance(adapter, HTTPAdapter)
            assert adapter._pool_maxsize == 4
        assert session.headers["User-Agent"] == "medscan-test"
