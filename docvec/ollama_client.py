# docvec/ollama_client.py
"""Ollama reachability and model listing, used by `docvec status` and /health."""

from __future__ import annotations

import logging
from typing import List

import requests

from .config import LOCAL_OLLAMA_URL

logger = logging.getLogger(__name__)


def check_ollama(host: str = LOCAL_OLLAMA_URL, timeout: float = 3) -> bool:
    """
    Return True if Ollama answers on /api/tags or /api/version.

    Args:
        host: Base URL.
        timeout: Timeout seconds per probe.
    """
    base = host.rstrip("/")
    for path in ("/api/tags", "/api/version"):
        try:
            r = requests.get(base + path, timeout=timeout)
        except requests.RequestException as e:
            logger.debug("Ollama probe %s failed: %s", base + path, e)
            continue
        if 200 <= r.status_code < 300:
            return True
    return False


def list_models(host: str = LOCAL_OLLAMA_URL, timeout: float = 5) -> List[str]:
    """
    List installed model names.

    Raises:
        requests.RequestException: On transport failure or non-2xx response.
    """
    r = requests.get(host.rstrip("/") + "/api/tags", timeout=timeout)
    r.raise_for_status()
    data = r.json() or {}
    return [m["name"] for m in data.get("models", []) if isinstance(m, dict) and m.get("name")]


def has_model(models: List[str], model: str) -> bool:
    """True if `model` is installed, accepting an implicit `:latest` tag."""
    wanted = {model, model if ":" in model else f"{model}:latest"}
    return any(m in wanted for m in models)
