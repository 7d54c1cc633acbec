# src/md_segmenter/enrichment/paths.py

import logging
import re
from collections.abc import Iterable

from .capabilities import ImageURLResolver

logger = logging.getLogger(__name__)

# Parsers write extracted images next to the markdown as images/<name>
PARSER_IMAGE_DIR = "images/"


def resolve_image_paths(
    markdown: str,
    image_keys: Iterable[str],
    resolver: ImageURLResolver,
) -> tuple[str, list[str]]:
    """Point parse-time image paths at their durable URLs.

    Every ``![...](images/<name>)`` whose ``name`` is in ``image_keys`` and
    resolves is rewritten in place. Returns the new markdown and the names
    that could not be resolved; those references are left as they were.
    """
    unresolved: list[str] = []
    result = markdown

    for name in image_keys:
        url = resolver.resolve(name)
        if url is None:
            logger.warning("No storage URL for image %s, keeping parser path", name)
            unresolved.append(name)
            continue
        pattern = re.compile(
            r"(!\[[^\]]*\]\()" + re.escape(PARSER_IMAGE_DIR + name) + r"(\))"
        )
        result = pattern.sub(lambda m: m.group(1) + url + m.group(2), result)
        logger.debug("Resolved image path %s%s -> %s", PARSER_IMAGE_DIR, name, url)

    return result, unresolved
