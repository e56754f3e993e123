from __future__ import annotations

from linkvault.models.link import Link  # noqa: F401
from linkvault.models.tag import Tag, LinkTag  # noqa: F401
