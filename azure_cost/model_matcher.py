"""Model name canonicalizer.

Both the Azure price list (meter/SKU names) and user input spell models in many
ways. Both are mapped onto one canonical key space by a single ordered rule
table, so a meter and a user string naming the same model always agree.

Rule order (first match wins):
1. o-family       o3, O-3, openai.o3, o 3 mini     -> o3 / o3-mini
2. GPT-3.5        gpt-3.5-turbo, gpt35, GPT-35      -> gpt-35-turbo
3. Generic GPT    gpt-4, gpt-4-32k, GPT-4o          -> gpt-4 / gpt-4-32k / gpt-4o
4. Embedding      "Text embedding ada" (price list only) -> text-embedding-ada
5. DALL-E         dall-e-3, DALL-E Image            -> dall-e
6. Fallback       anything else (user input only)   -> slug
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelKeyRule:
    """One entry of the canonicalization table."""
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match], str]
    upstream_only: bool = False


def _o_family_key(match: re.Match) -> str:
    return f"o{match.group('version')}{'-mini' if match.group('mini') else ''}"


def _gpt_key(match: re.Match) -> str:
    version = match.group("version").replace(".", "")
    suffix = match.group("suffix")
    if not suffix:
        return f"gpt-{version}"
    if suffix == "o":
        return f"gpt-{version}o"
    return f"gpt-{version}-{suffix}"


MODEL_KEY_RULES: list[ModelKeyRule] = [
    # "o" must start a token: gpt-4o and turbo-0125 never land here
    ModelKeyRule(
        name="o-family",
        pattern=re.compile(r"(?<![a-z0-9])o[- ]?(?P<version>\d+)(?P<mini>[- ]?mini)?"),
        build=_o_family_key,
    ),
    # before generic GPT, otherwise "35" reads as a version suffix
    ModelKeyRule(
        name="gpt-3.5",
        pattern=re.compile(r"gpt[- ]?3\.?5(?!\d)"),
        build=lambda match: "gpt-35-turbo",
    ),
    ModelKeyRule(
        name="gpt",
        pattern=re.compile(
            r"(?<![a-z])gpt[- ]?(?P<version>\d(?:\.\d)?)"
            r"(?:[- ]?turbo)?"
            r"(?:[- ]?(?P<suffix>32k|16k|8k|1106|0125|o)\b)?"
        ),
        build=_gpt_key,
    ),
    ModelKeyRule(
        name="embedding",
        pattern=re.compile(r"(?=.*embedding).*?\b(?P<family>ada|babbage|curie|davinci|gecko)(?![a-z])"),
        build=lambda match: f"text-embedding-{match.group('family')}",
        upstream_only=True,
    ),
    ModelKeyRule(
        name="dall-e",
        pattern=re.compile(r"dall[-· ]?e"),
        build=lambda match: "dall-e",
    ),
]


def _apply_rules(text: str, include_upstream_only: bool) -> Optional[str]:
    for rule in MODEL_KEY_RULES:
        if rule.upstream_only and not include_upstream_only:
            continue
        match = rule.pattern.search(text)
        if match:
            return rule.build(match)
    return None


def slugify_model_name(model: str) -> str:
    """Lowercase, turn every non [a-z0-9] run into a single hyphen, trim hyphens."""
    slug = re.sub(r"[^a-z0-9]", "-", model.lower())
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def canonicalize(model: str) -> str:
    """Map a user-supplied model name to its canonical key.

    Never fails: names no rule recognizes fall back to a slug, which may
    simply match nothing in the price table.
    """
    normalized = model.lower()
    key = _apply_rules(normalized, include_upstream_only=False)
    if key is None:
        key = slugify_model_name(normalized)
    logger.debug(f"Canonical model key: {model!r} -> {key!r}")
    return key


def extract_model_key(meter_name: str, sku_name: str) -> Optional[str]:
    """Derive the canonical key of a price list meter.

    Args:
        meter_name: Azure meterName, e.g. "GPT-4 Prompt Tokens"
        sku_name: Azure skuName, e.g. "GPT-4"

    Returns:
        Canonical key, or None for meters that are not billable model usage
        (training, provisioned capacity, ...)
    """
    return _apply_rules(f"{meter_name} {sku_name}".lower(), include_upstream_only=True)
