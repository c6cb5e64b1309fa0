"""Reader for ``KEY=value`` files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError

_ASSIGNMENT = re.compile(r"^(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>.*)$")


class DotenvLoader:
    """Parses dotenv files; absent files read as empty."""

    @staticmethod
    def load_from_file(path: Path) -> Dict[str, str]:
        if not path.is_file():
            return {}
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc

        values: Dict[str, str] = {}
        for line in text.splitlines():
            parsed = DotenvLoader.parse_line(line)
            if parsed is not None:
                values[parsed[0]] = parsed[1]
        return values

    @staticmethod
    def parse_line(line: str) -> Optional[Tuple[str, str]]:
        """``(key, value)`` for an assignment line, ``None`` for blanks, comments and junk."""
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return None
        match = _ASSIGNMENT.match(stripped)
        if match is None:
            return None
        value = match.group("value").strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        elif " #" in value:
            value = value.split(" #", 1)[0].rstrip()
        return match.group("key"), value
