"""
Re-upload cover images to our own storage so records don't depend on
third-party image hosts staying up.
"""

import random
import re
import string
import time

from aiohttp import ClientSession
from pydantic import BaseModel

from bookshelf.internal.exceptions import SourceUnavailable
from bookshelf.internal.storage import FileStorage
from bookshelf.util.log import logger

MAX_SLUG_LENGTH = 50

_STRIP = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")


class ImageHint(BaseModel):
    isbn: str | None = None
    title: str | None = None
    author: str | None = None


def to_base36(number: int) -> str:
    digits = string.digits + string.ascii_lowercase
    if number == 0:
        return "0"
    out = ""
    while number:
        number, remainder = divmod(number, 36)
        out = digits[remainder] + out
    return out


def random_suffix(length: int = 6) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def sanitize_filename_part(value: str) -> str:
    """Lowercase, drop everything but alphanumerics/hyphens/spaces, hyphenate whitespace."""
    value = _STRIP.sub("", value.lower())
    return _WHITESPACE.sub("-", value.strip())


def unique_stamp() -> str:
    """Base36 millisecond timestamp plus a random suffix."""
    return f"{to_base36(int(time.time() * 1000))}-{random_suffix()}"


def generate_image_basename(hint: ImageHint | None) -> str:
    """Names always end with a unique stamp, so storage keys are never reused."""
    stamp = unique_stamp()
    if hint and hint.isbn:
        isbn = sanitize_filename_part(hint.isbn)
        if isbn:
            return f"cover-{isbn}-{stamp}"
    if hint and hint.title:
        parts = [hint.title]
        if hint.author:
            parts.append(hint.author)
        slug = sanitize_filename_part(" ".join(parts))[:MAX_SLUG_LENGTH].strip("-")
        if slug:
            return f"{slug}-{stamp}"
    return f"cover-{stamp}"


def extension_for(content_type: str) -> str:
    subtype = content_type.split("/", 1)[-1].split(";", 1)[0].strip().lower()
    if subtype in ("jpeg", "pjpeg", ""):
        return "jpg"
    if subtype == "svg+xml":
        return "svg"
    return subtype


class ImageRehoster:
    def __init__(self, storage: FileStorage):
        self.storage = storage

    async def rehost_best_image(
        self,
        client_session: ClientSession,
        candidate_urls: list[str],
        hint: ImageHint | None = None,
    ) -> str | None:
        basename = generate_image_basename(hint)

        for url in candidate_urls:
            if not url or not url.strip():
                continue
            try:
                return await self._rehost(client_session, url, basename)
            except Exception as e:
                logger.warning("Failed to rehost image, trying next", url=url, error=str(e))

        logger.warning(
            "Could not rehost cover image from any candidate",
            candidates=len(candidate_urls),
            isbn=hint.isbn if hint else None,
            title=hint.title if hint else None,
        )
        return None

    async def _rehost(self, client_session: ClientSession, url: str, basename: str) -> str:
        async with client_session.get(url) as response:
            if not response.ok:
                raise SourceUnavailable(url, f"HTTP {response.status}")
            content_type = response.content_type
            if not content_type.startswith("image/"):
                raise SourceUnavailable(url, f"Invalid content type: {content_type}")
            data = await response.read()

        stored_url = await self.storage.upload(
            data, f"{basename}.{extension_for(content_type)}", content_type
        )
        logger.info("Rehosted cover image", source_url=url, url=stored_url)
        return stored_url
