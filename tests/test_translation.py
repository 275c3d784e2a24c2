import json

import httpx


def test_translate_forwards_request(client, auth_headers, mock_http):
    requests = mock_http(lambda request: httpx.Response(200, json={"translatedText": "dog", "sourceLang": "da"}))
    res = client.post(
        "/translate",
        json={"text": "hund", "sourceLang": "da", "destLang": "en", "options": {"formality": "less"}},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json() == {"translatedText": "dog", "sourceLang": "da"}

    sent = requests[0]
    assert str(sent.url) == "http://translator.test/translate"
    assert json.loads(sent.content) == {
        "text": "hund",
        "sourceLang": "da",
        "destLang": "en",
        "options": {"formality": "less"},
    }


def test_translate_defaults_source_to_auto(client, auth_headers, mock_http):
    requests = mock_http(lambda request: httpx.Response(200, json={"translatedText": "cat"}))
    client.post("/translate", json={"text": "kat", "destLang": "en"}, headers=auth_headers)
    assert json.loads(requests[0].content)["sourceLang"] == "auto"


def test_translate_requires_text(client, auth_headers):
    res = client.post("/translate", json={"text": "   ", "destLang": "en"}, headers=auth_headers)
    assert res.status_code == 400
    res = client.post("/translate", json={"destLang": "en"}, headers=auth_headers)
    assert res.status_code == 400


def test_translate_requires_auth(client):
    assert client.post("/translate", json={"text": "hund", "destLang": "en"}).status_code == 401


def test_translate_upstream_error(client, auth_headers, mock_http):
    mock_http(lambda request: httpx.Response(500, text="model crashed"))
    res = client.post("/translate", json={"text": "hund", "destLang": "en"}, headers=auth_headers)
    assert res.status_code == 502
    assert res.json()["detail"] == "Translation service returned 500"


def test_translate_upstream_unreachable(client, auth_headers, mock_http):
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    mock_http(refuse)
    res = client.post("/translate", json={"text": "hund", "destLang": "en"}, headers=auth_headers)
    assert res.status_code == 502
    assert res.json()["detail"] == "Translation service is unavailable"
