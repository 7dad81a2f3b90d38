from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)


Sections = Dict[str, Dict[str, str]]


class IniFileError(RuntimeError):
    pass


def parse_ini_lines(lines: Iterable[str]) -> Sections:
    """Parse ``[section]`` / ``key=value`` lines into a section mapping.

    Only the first occurrence of a section or of a key within a section is
    kept. Lines outside a section, or matching neither form, are ignored.
    """

    sections: Sections = {}
    current: Optional[Dict[str, str]] = None

    for raw in lines:
        line = raw.strip()

        if line.startswith("[") and line.endswith("]"):
            name = line[1:-1].strip()
            if not name:
                continue
            if name in sections:
                # Duplicate header: swallow its entries until the next one.
                current = None
            else:
                current = {}
                sections[name] = current
            continue

        if current is None:
            continue

        i = line.find("=")
        if i <= 0:
            continue
        key = line[:i].strip()
        if not key or key in current:
            continue
        current[key] = line[i + 1 :].strip()

    return sections


def read_ini(path: str) -> Sections:
    p = Path(path)
    try:
        # utf-8-sig: files written by older installers carry a BOM.
        with p.open("r", encoding="utf-8-sig") as f:
            sections = parse_ini_lines(f)
    except FileNotFoundError:
        logger.info("No ini file at %s, starting empty", path)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        raise IniFileError(f"Failed to read {path}: {e}") from e

    logger.debug("Loaded %d section(s) from %s", len(sections), path)
    return sections


def render_ini(sections: Mapping[str, Mapping[str, str]]) -> str:
    blocks: list[str] = []
    for name, entries in sections.items():
        lines = [f"[{name}]"]
        lines.extend(f"{key}={value}" for key, value in entries.items())
        blocks.append("\n".join(lines) + "\n")
    return "\n".join(blocks)


def write_ini(path: str, sections: Mapping[str, Mapping[str, str]]) -> None:
    text = render_ini(sections)
    if logger.isEnabledFor(logging.DEBUG):
        for name, entries in sections.items():
            for key, value in entries.items():
                logger.debug("Writing %s: %s=%s", name, key, value)

    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise IniFileError(f"Failed to write {path}: {e}") from e
