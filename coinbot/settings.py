"""Environment configuration helpers."""

from __future__ import annotations

import os

from dotenv import find_dotenv, load_dotenv

from coinbot.errors import EnvVarError


def load_env() -> bool:
    """Load a ``.env`` file found from the working directory upwards.

    Variables already present in the environment are kept. Returns whether a
    file was found and loaded.
    """
    path = find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path)


def require_env(name: str) -> str:
    """Return the value of an environment variable or raise ``EnvVarError``."""
    try:
        return os.environ[name]
    except KeyError:
        raise EnvVarError(f"{name} is not set") from None