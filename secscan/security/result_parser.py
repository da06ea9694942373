"""Parsing helpers for the plain-text output of oscap and yara."""

import logging
import re
from typing import Dict, List

logger = logging.getLogger(__name__)

# "Definition oval:ru.redsoft.redos:def:20231234: true"
_OVAL_DEFINITION_RE = re.compile(r"^Definition\s+(?P<definition>\S+?):\s+(?P<result>[\w ]+)$")

# "RuleName [tag1,tag2] /path/to/file" (tags only with -t)
_YARA_MATCH_RE = re.compile(
    r"^(?P<rule>[A-Za-z_][A-Za-z0-9_]*)\s+(?:\[(?P<tags>[^\]]*)\]\s+)?(?P<target>.+)$"
)

# yara prints these prefixes for diagnostics, never for matches
_YARA_NOISE_PREFIXES = ("warning:", "error:", "error ")


class ResultParser:
    """Utility functions for parsing scanner stdout."""

    @staticmethod
    def parse_oval_results(text: str) -> List[Dict[str, str]]:
        """Parse ``oscap oval eval`` stdout.

        Returns a list of {'definition': id, 'result': 'true'|'false'|...}
        in output order.
        """
        results: List[Dict[str, str]] = []
        for line in text.splitlines():
            line = line.strip()
            match = _OVAL_DEFINITION_RE.match(line)
            if match:
                results.append(
                    {
                        "definition": match.group("definition"),
                        "result": match.group("result").strip().lower(),
                    }
                )
        return results

    @staticmethod
    def parse_yara_matches(text: str) -> List[Dict[str, object]]:
        """Parse ``yara`` stdout into {'rule', 'tags', 'target'} dicts."""
        matches: List[Dict[str, object]] = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.lower().startswith(_YARA_NOISE_PREFIXES):
                continue
            match = _YARA_MATCH_RE.match(line)
            if not match:
                logger.debug(f"Unrecognized yara output line: {line!r}")
                continue
            tags_text = match.group("tags") or ""
            matches.append(
                {
                    "rule": match.group("rule"),
                    "tags": [t.strip() for t in tags_text.split(",") if t.strip()],
                    "target": match.group("target").strip(),
                }
            )
        return matches
