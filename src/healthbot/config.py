"""Process configuration, read once from the environment at startup."""

import os
from dataclasses import dataclass
from typing import Literal

OutboundProvider = Literal["wasender", "whapi"]
NonMedicalPolicy = Literal["reject", "ignore"]

REQUIRED_VARS = (
    "WASENDER_API_KEY",
    "OPENAI_API_KEY",
    "OPENROUTER_API_KEY",
    "PINECONE_API_KEY",
    "PINECONE_INDEX_NAME",
    "DATABASE_URL",
)

DEFAULT_WASENDER_BASE_URL = "https://www.wasenderapi.com"
DEFAULT_WHAPI_BASE_URL = "https://gate.whapi.cloud"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_COMPLETION_MODEL = "openai/gpt-oss-20b:free"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


@dataclass(frozen=True)
class Settings:
    wasender_api_key: str
    openai_api_key: str
    openrouter_api_key: str
    pinecone_api_key: str
    pinecone_index_name: str
    database_url: str
    wasender_base_url: str = DEFAULT_WASENDER_BASE_URL
    outbound_provider: OutboundProvider = "wasender"
    whapi_api_key: str = ""
    whapi_base_url: str = DEFAULT_WHAPI_BASE_URL
    rag_api_url: str = ""
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    completion_model: str = DEFAULT_COMPLETION_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    non_medical_policy: NonMedicalPolicy = "reject"
    outbound_timeout_seconds: float = 10.0
    rag_timeout_seconds: float = 60.0
    user_registry_enabled: bool = True


def _env(environ: dict[str, str], name: str, default: str = "") -> str:
    """Stripped value of `name`; unset or blank falls back to `default`."""
    return environ.get(name, "").strip() or default


def _choice(environ: dict[str, str], name: str, allowed: tuple[str, ...], default: str) -> str:
    value = _env(environ, name, default).lower() or default
    if value not in allowed:
        raise RuntimeError(f"Invalid {name}={value!r}; expected one of {', '.join(allowed)}")
    return value


def _seconds(environ: dict[str, str], name: str, default: float) -> float:
    raw = _env(environ, name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"Invalid {name}={raw!r}; expected a number of seconds") from None
    if value <= 0:
        raise RuntimeError(f"Invalid {name}={raw!r}; must be positive")
    return value


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests).

    Raises:
        RuntimeError: If a required variable is missing or blank, or an
            optional one has an invalid value.
    """
    env = dict(os.environ if environ is None else environ)

    missing = [name for name in REQUIRED_VARS if not _env(env, name)]
    if missing:
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

    outbound_provider = _choice(env, "OUTBOUND_PROVIDER", ("wasender", "whapi"), "wasender")
    whapi_api_key = _env(env, "WHAPI_API_KEY")
    if outbound_provider == "whapi" and not whapi_api_key:
        raise RuntimeError("Missing required configuration: WHAPI_API_KEY")

    return Settings(
        wasender_api_key=_env(env, "WASENDER_API_KEY"),
        openai_api_key=_env(env, "OPENAI_API_KEY"),
        openrouter_api_key=_env(env, "OPENROUTER_API_KEY"),
        pinecone_api_key=_env(env, "PINECONE_API_KEY"),
        pinecone_index_name=_env(env, "PINECONE_INDEX_NAME"),
        database_url=_env(env, "DATABASE_URL"),
        wasender_base_url=_env(env, "WASENDER_BASE_URL", DEFAULT_WASENDER_BASE_URL).rstrip("/"),
        outbound_provider=outbound_provider,  # type: ignore[arg-type]
        whapi_api_key=whapi_api_key,
        whapi_base_url=_env(env, "WHAPI_BASE_URL", DEFAULT_WHAPI_BASE_URL).rstrip("/"),
        rag_api_url=_env(env, "RAG_API_URL"),
        openrouter_base_url=_env(env, "OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL),
        completion_model=_env(env, "COMPLETION_MODEL", DEFAULT_COMPLETION_MODEL),
        embedding_model=_env(env, "EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL),
        non_medical_policy=_choice(  # type: ignore[arg-type]
            env, "NON_MEDICAL_POLICY", ("reject", "ignore"), "reject"
        ),
        outbound_timeout_seconds=_seconds(env, "OUTBOUND_TIMEOUT_SECONDS", 10.0),
        rag_timeout_seconds=_seconds(env, "RAG_TIMEOUT_SECONDS", 60.0),
        user_registry_enabled=_env(env, "USER_REGISTRY_ENABLED", "true").lower()
        not in ("0", "false", "no"),
    )
