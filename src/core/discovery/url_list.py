#!/usr/bin/env python3
"""
URL list discovery from plain text files.
"""

import logging
from pathlib import Path
from typing import List, Union

from core.exceptions import UrlListError
from core.models.item import Item

logger = logging.getLogger(__name__)


def read_url_list(path: Union[str, Path]) -> List[Item]:
    """
    Load items from a text file with one URL per line.

    Blank lines and lines starting with '#' are ignored.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise UrlListError(str(path), e) from e

    items = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#'):
            continue
        items.append(Item(url=line, source=str(path)))

    logger.info(f"Loaded {len(items)} URLs from {path}")
    return items
