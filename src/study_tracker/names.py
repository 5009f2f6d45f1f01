"""Subject name canonicalization.

Stored names may have lost their accents or been mangled by a bad encoding
round trip ("�?lgebra", "Cǭlculo"). canonicalize() maps any such variant to
the display name used everywhere else, and returns unknown names unchanged.
"""
import unicodedata

ALGEBRA = "Álgebra"
CALCULO = "Cálculo"
POO = "Poo"

CANONICAL_NAMES = (ALGEBRA, CALCULO, POO)


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def canonicalize(raw: str) -> str:
    lowered = (raw or "").lower()
    plain = strip_accents(lowered)
    if "poo" in plain:
        return POO
    if "alge" in plain or plain.endswith("lgebra") or "lg" in lowered:
        return ALGEBRA
    if "calcu" in plain or plain.endswith("lculo") or "culo" in plain:
        return CALCULO
    return raw


def subject_key(raw: str) -> str:
    """Stable lowercase ascii key, e.g. "algebra"."""
    return strip_accents(canonicalize(raw)).lower()
