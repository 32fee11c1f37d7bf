"""
Bootstrap environment for Streamlit Cloud & local dev:
- Copy st.secrets into os.environ; a ``[missing_persons]`` table maps to the
  MP_* settings read by ``config.resolve_sources`` (``dataset_url`` ->
  ``MP_DATASET_URL``), other nested tables flatten to PREFIX_CHILD
- Finally, load .env (without overriding existing env vars)
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Dict, Iterator, Tuple

import streamlit as st
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "missing_persons"
SETTINGS_PREFIX = "MP"


def _sanitize_key(key: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", key.upper())


def _flatten_secrets(prefix: str, val) -> Iterator[Tuple[str, str]]:
    if isinstance(val, dict):
        for k, v in val.items():
            yield from _flatten_secrets(f"{prefix}_{k}", v)
    else:
        yield _sanitize_key(prefix), str(val)


def _read_secrets() -> Dict[str, Any]:
    try:
        # st.secrets raises when no secrets.toml exists outside Streamlit Cloud
        items = getattr(st, "secrets", None)
        if not items:
            return {}
        return items.to_dict()  # type: ignore[attr-defined]
    except Exception as exc:  # StreamlitSecretNotFoundError varies by release
        logger.debug("No Streamlit secrets available: %s", exc)
        return {}


def secrets_to_env(secrets: Dict[str, Any]) -> Dict[str, str]:
    """Environment variables derived from a secrets mapping."""
    env: Dict[str, str] = {}
    for key, value in secrets.items():
        prefix = SETTINGS_PREFIX if key == SETTINGS_SECTION else key
        env.update(_flatten_secrets(prefix, value))
    return env


def _bridge_secrets_to_env() -> None:
    bridged = 0
    for key, value in secrets_to_env(_read_secrets()).items():
        if key not in os.environ:
            os.environ[key] = value
            bridged += 1
    if bridged:
        logger.debug("Bridged %d Streamlit secrets into the environment", bridged)


def ensure_env() -> None:
    """Idempotent: make sure env vars are available.
    Safe to call multiple times, both inside and outside Streamlit runtime.
    """
    _bridge_secrets_to_env()
    # load_dotenv will not override existing env vars by default
    load_dotenv()
