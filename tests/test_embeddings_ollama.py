"""Tests for the Ollama embedding client (HTTP mocked)."""

import json

import pytest
import requests

from conftest import make_response
from docvec.config import EmbeddingOptions
from docvec.embeddings.ollama import OllamaEmbedder
from docvec.errors import (
    EmbeddingParseError,
    EmbeddingServiceError,
    EmbeddingUnavailable,
    RequestPreparationError,
)


@pytest.fixture
def post(mocker):
    return mocker.patch("docvec.embeddings.ollama.requests.post")


@pytest.fixture
def embedder():
    return OllamaEmbedder(host="http://ollama:11434/", model="nomic-embed-text", timeout=5)


def test_embed_posts_model_and_prompt(post, embedder):
    post.return_value = make_response(200, {"embedding": [0.1, 0.2, 0.3]})

    assert embedder.embed("hello") == [0.1, 0.2, 0.3]

    post.assert_called_once()
    args, kwargs = post.call_args
    assert args[0] == "http://ollama:11434/api/embeddings"
    assert json.loads(kwargs["data"]) == {"model": "nomic-embed-text", "prompt": "hello"}
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["timeout"] == 5


def test_integer_components_become_floats(post, embedder):
    post.return_value = make_response(200, {"embedding": [1, 0, -2]})
    out = embedder.embed("x")
    assert out == [1.0, 0.0, -2.0]
    assert all(isinstance(v, float) for v in out)


def test_non_200_raises_service_error(post, embedder):
    post.return_value = make_response(500, text="model crashed")

    with pytest.raises(EmbeddingServiceError) as exc:
        embedder.embed("hello")
    assert exc.value.status == 500
    assert "model crashed" in exc.value.detail


def test_404_is_not_retried(post, embedder):
    post.return_value = make_response(404, {"error": "model not found"})

    with pytest.raises(EmbeddingServiceError):
        embedder.embed("hello")
    assert post.call_count == 1


@pytest.mark.parametrize(
    "exc",
    [requests.ConnectionError("refused"), requests.Timeout("slow")],
)
def test_transport_failure_raises_unavailable(post, embedder, exc):
    post.side_effect = exc

    with pytest.raises(EmbeddingUnavailable):
        embedder.embed("hello")
    assert post.call_count == 1


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        json.dumps([0.1, 0.2]),
        json.dumps({"embeddings": [[0.1]]}),
        json.dumps({"embedding": "0.1,0.2"}),
        json.dumps({"embedding": []}),
        json.dumps({"embedding": [0.1, "x"]}),
        json.dumps({"embedding": [True, False]}),
        '{"embedding": [0.1, 1e400]}',
        '{"embedding": [0.1, NaN]}',
        '{"embedding": [1' + "0" * 400 + "]}",
    ],
)
def test_malformed_body_raises_parse_error(post, embedder, text):
    post.return_value = make_response(200, text=text)

    with pytest.raises(EmbeddingParseError):
        embedder.embed("hello")


def test_non_string_prompt_is_rejected_before_sending(post, embedder):
    with pytest.raises(RequestPreparationError):
        embedder.embed(b"bytes")  # type: ignore[arg-type]
    post.assert_not_called()


def test_from_options(post):
    embedder = OllamaEmbedder.from_options(
        EmbeddingOptions(ollama_url="http://host.docker.internal:11434", model="mxbai-embed-large", timeout=9)
    )
    post.return_value = make_response(200, {"embedding": [0.5]})

    embedder.embed("q")

    args, kwargs = post.call_args
    assert args[0] == "http://host.docker.internal:11434/api/embeddings"
    assert json.loads(kwargs["data"])["model"] == "mxbai-embed-large"
    assert kwargs["timeout"] == 9

