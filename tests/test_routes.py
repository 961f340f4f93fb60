import struct

import pytest
from fastapi.testclient import TestClient

from telegram_media_deserialize.configs import settings
from telegram_media_deserialize.main import app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "api_password", None)
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_deserialize_returns_buffer_and_headers(client, build_container):
    data = build_container([[(0, b"AAAA")], [(8, b"CCCC")]], trailing=b"???")

    response = client.post("/deserialize", content=data)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/octet-stream"
    assert response.content == b"AAAA\x00\x00\x00\x00CCCC"
    assert response.headers["x-last-contiguous-offset"] == "4"
    assert response.headers["x-trailing-byte-count"] == "3"
    assert response.headers["x-buffer-size"] == "12"


def test_deserialize_truncate(client, build_container):
    data = build_container([[(0, b"AAAA")], [(8, b"CCCC")]])

    response = client.post("/deserialize", params={"truncate": "true"}, content=data)

    assert response.status_code == 200
    assert response.content == b"AAAA"
    assert response.headers["x-buffer-size"] == "12"


def test_deserialize_big_endian(client, build_container):
    data = build_container([[(0, b"AB")]], byte_order="big")

    response = client.post("/deserialize", params={"byte_order": "big"}, content=data)

    assert response.content == b"AB"


def test_invalid_byte_order_rejected(client, build_container):
    response = client.post("/deserialize", params={"byte_order": "middle"}, content=b"\x00\x00\x00\x00")

    assert response.status_code == 422


def test_empty_body_rejected(client):
    response = client.post("/deserialize", content=b"")

    assert response.status_code == 400


def test_body_size_limit(client, monkeypatch, build_container):
    monkeypatch.setattr(settings, "max_input_size", 8)

    response = client.post("/deserialize", content=build_container([[(0, b"AAAAAAAA")]]))

    assert response.status_code == 413


def test_overflow_is_unprocessable(client, build_container):
    response = client.post("/deserialize", content=build_container([[(0xFFFFFFFF, b"XY")]]))

    assert response.status_code == 422
    assert "Destination overflow" in response.text


def test_small_body_cannot_demand_a_huge_output(client):
    # 12 bytes declaring a part that would end just below 4 GiB.
    response = client.post("/deserialize", content=struct.pack("<III", 1, 0xFFFFFF00, 0))

    assert response.status_code == 422
    assert "Destination overflow" in response.text


def test_output_size_limit(client, monkeypatch, build_container):
    monkeypatch.setattr(settings, "max_output_size", 1024)

    response = client.post("/deserialize", content=build_container([[(200_000_000, b"AAAA")]]))
    assert response.status_code == 422

    response = client.post("/deserialize", content=build_container([[(1020, b"AAAA")]]))
    assert response.status_code == 200
    assert response.headers["x-buffer-size"] == "1024"


def test_report(client, build_container):
    data = build_container([[(0, b"AAAA")], [(8, b"CCCC")]], trailing=b"??")

    response = client.post("/deserialize/report", content=data)

    assert response.status_code == 200
    report = response.json()
    assert report["byte_order"] == "little"
    assert report["last_contiguous_offset"] == 4
    assert report["trailing_byte_count"] == 2
    assert report["gaps"] == [[4, 8]]
    assert report["last_part"]["out_offset"] == 8


def test_api_password_required(monkeypatch, build_container):
    monkeypatch.setattr(settings, "api_password", "secret")
    client = TestClient(app)
    data = build_container([[(0, b"AAAA")]])

    assert client.post("/deserialize", content=data).status_code == 403
    assert client.post("/deserialize", params={"api_password": "secret"}, content=data).status_code == 200
    assert client.post("/deserialize", headers={"api_password": "secret"}, content=data).status_code == 200


def test_docs_can_be_disabled(client, monkeypatch):
    assert client.get("/openapi.json").status_code == 200

    monkeypatch.setattr(settings, "disable_docs", True)

    assert client.get("/openapi.json").status_code == 404
