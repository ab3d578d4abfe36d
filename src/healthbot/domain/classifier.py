"""Keyword intent classification for inbound chat text.

NO LLM. Plain string matching: cheap to run and easy to explain when a
message is routed the wrong way.
"""

from dataclasses import dataclass

GREETINGS: frozenset[str] = frozenset(
    {
        "hi",
        "hello",
        "hey",
        "hola",
        "gm",
        "good morning",
        "ge",
        "good evening",
        "ga",
        "good afternoon",
    }
)

MEDICAL_KEYWORDS: tuple[str, ...] = (
    "symptom",
    "diagnosis",
    "doctor",
    "health",
    "medication",
    "drug",
    "disease",
    "illness",
    "pain",
    "fever",
    "cough",
    "treatment",
    "cure",
    "malaria",
    "blood pressure",
    "sick",
    "injury",
    "prescription",
    "pharmacy",
    "clinic",
    "tb",
    "tuberculosis",
    "condition",
)

QUESTION_PREFIXES: tuple[str, ...] = (
    "what is",
    "how do i treat",
    "am i sick",
    "what are the signs of",
    "how to cure",
)

# Shorter texts with no keyword/prefix hit are noise ("ok", "yes").
MIN_MEDICAL_LENGTH = 5


@dataclass(frozen=True)
class Classification:
    is_greeting: bool
    is_medical: bool


def _normalize(text: str) -> str:
    return text.strip().lower()


def is_greeting(text: str) -> bool:
    """True only when the whole message is a greeting ("hi", not "hi there")."""
    return _normalize(text) in GREETINGS


def is_medical(text: str) -> bool:
    """True when the text mentions a medical keyword or opens like a health question.

    Matching is by substring, so borderline text may be flagged medical;
    misses get a polite rejection rather than silence.
    """
    lowered = _normalize(text)

    if any(keyword in lowered for keyword in MEDICAL_KEYWORDS):
        return True

    if any(lowered.startswith(prefix) for prefix in QUESTION_PREFIXES):
        return True

    if len(lowered) < MIN_MEDICAL_LENGTH:
        return False

    return False


def classify(text: str) -> Classification:
    return Classification(is_greeting=is_greeting(text), is_medical=is_medical(text))
