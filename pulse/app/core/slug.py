"""Channel name normalisation."""

from __future__ import annotations

import re
import unicodedata

from pulse.app.config import ChannelNamePolicy

MAX_NAME_LENGTH = 64


def slugify(value: str) -> str:
    """Lowercase ``value`` and collapse every run of non-word characters into ``-``.

    Returns an empty string when nothing usable is left.
    """

    normalized = unicodedata.normalize("NFKC", value).strip()
    if not normalized:
        return ""
    lowered = normalized.casefold()
    slug = re.sub(r"[^\w]+", "-", lowered, flags=re.UNICODE)
    slug = re.sub(r"-+", "-", slug).strip("-")
    if len(slug) > MAX_NAME_LENGTH:
        slug = slug[:MAX_NAME_LENGTH].rstrip("-")
    return slug


def normalize_channel_name(value: str, policy: ChannelNamePolicy) -> str:
    """Apply the configured naming policy.

    ``trim`` strips surrounding whitespace and keeps everything else as typed,
    so ``"Dev Chat"`` and ``"dev chat"`` are distinct channels. ``slug`` maps
    both to ``"dev-chat"``. An empty result means the name is unusable.
    """

    if policy == "slug":
        return slugify(value)
    return value.strip()
