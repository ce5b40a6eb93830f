"""Tests for text file loading and the Ollama reachability helpers."""

import pytest
import requests

from conftest import make_response
from docvec.ingest.loaders import guess_media_type, is_probably_binary, load_text_file
from docvec.ollama_client import check_ollama, has_model, list_models


def test_load_text_file_utf8(tmp_path):
    p = tmp_path / "notes.txt"
    p.write_text("héllo", encoding="utf-8")

    loaded = load_text_file(p)

    assert loaded.content == "héllo"
    assert loaded.file_name == "notes.txt"
    assert loaded.media_type == "text/plain"
    assert loaded.encoding == "utf-8"


def test_load_text_file_latin1_fallback(tmp_path):
    p = tmp_path / "old.txt"
    p.write_bytes("café".encode("latin-1"))

    loaded = load_text_file(p)

    assert loaded.content == "café"
    assert loaded.encoding == "latin-1"


def test_load_binary_file_is_rejected(tmp_path):
    p = tmp_path / "blob.bin"
    p.write_bytes(b"\x00\x01\x02binary")

    with pytest.raises(ValueError):
        load_text_file(p)


def test_binary_sniffing():
    assert not is_probably_binary(b"")
    assert not is_probably_binary(b"plain text\n")
    assert is_probably_binary(b"abc\x00def")


def test_guess_media_type(tmp_path):
    assert guess_media_type(tmp_path / "README.md") == "text/markdown"
    assert guess_media_type(tmp_path / "page.html") == "text/html"
    assert guess_media_type(tmp_path / "noext") is None


def test_check_ollama_falls_back_to_version(mocker):
    get = mocker.patch(
        "docvec.ollama_client.requests.get",
        side_effect=[requests.ConnectionError("nope"), make_response(200, {"version": "0.3.0"})],
    )

    assert check_ollama("http://ollama:11434/") is True
    assert get.call_args_list[0][0][0] == "http://ollama:11434/api/tags"
    assert get.call_args_list[1][0][0] == "http://ollama:11434/api/version"


def test_check_ollama_unreachable(mocker):
    mocker.patch("docvec.ollama_client.requests.get", side_effect=requests.ConnectionError("nope"))
    assert check_ollama() is False


def test_list_models(mocker):
    mocker.patch(
        "docvec.ollama_client.requests.get",
        return_value=make_response(200, {"models": [{"name": "nomic-embed-text:latest"}, {"size": 1}]}),
    )
    assert list_models() == ["nomic-embed-text:latest"]


def test_list_models_http_error(mocker):
    mocker.patch("docvec.ollama_client.requests.get", return_value=make_response(500, text="err"))
    with pytest.raises(requests.HTTPError):
        list_models()


def test_has_model_accepts_implicit_latest():
    models = ["nomic-embed-text:latest", "llama3:8b"]
    assert has_model(models, "nomic-embed-text")
    assert has_model(models, "llama3:8b")
    assert not has_model(models, "llama3")
