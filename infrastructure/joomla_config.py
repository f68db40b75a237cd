# ============================================================================
# JOOMLA CONFIGURATION READER
# ============================================================================
# STATUS: Infrastructure - configuration.php parsing
# PURPOSE: Read JConfig public properties without executing PHP
# ============================================================================
"""
Joomla Configuration Reader

configuration.php declares the site settings as class properties:

    class JConfig {
        public $dbtype = 'mysqli';
        public $host = 'localhost';
        public $caching = 0;
        public $sef = true;
        ...
    }

Only literal scalars are supported (quoted strings, integers, floats,
true/false/null), which is everything Joomla itself writes. Anything
else is skipped with a debug log line.
"""

import logging
import os
import re
from typing import Any, Dict

from core.models import SiteConfiguration

logger = logging.getLogger(__name__)

_PROPERTY = re.compile(
    r"""(?:public|var)\s+\$(?P<name>\w+)\s*=\s*(?P<value>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|[^;]+?)\s*;""",
    re.DOTALL,
)

_STRING_FIELDS = set(SiteConfiguration.model_fields) - {"extra"}


def _unquote(literal: str) -> str:
    quote = literal[0]
    body = literal[1:-1]
    if quote == "'":
        # Single quotes only know \' and \\
        return re.sub(r"\\([\\'])", r"\1", body)
    return re.sub(r'\\([\\"$])', r"\1", body).replace("\\n", "\n").replace("\\t", "\t")


def _parse_literal(raw: str) -> Any:
    raw = raw.strip()
    if raw[:1] in ("'", '"'):
        return _unquote(raw)

    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None

    if re.fullmatch(r"[+-]?\d+", raw):
        return int(raw)
    if re.fullmatch(r"[+-]?\d*\.\d+", raw):
        return float(raw)

    raise ValueError(f"Unsupported literal: {raw}")


def parse_configuration(source: str) -> Dict[str, Any]:
    """Extract every literal property declaration from configuration.php source."""
    values: Dict[str, Any] = {}
    for match in _PROPERTY.finditer(source):
        name = match.group("name")
        try:
            values[name] = _parse_literal(match.group("value"))
        except ValueError:
            logger.debug(f"Skipping non-literal configuration value: ${name}")
    return values


def load_site_configuration(path: str) -> SiteConfiguration:
    """
    Load configuration.php into a SiteConfiguration.

    Raises:
        ValueError: If the file does not exist or declares nothing
    """
    if not os.path.isfile(path):
        raise ValueError(f"Joomla configuration not found: {path}")

    with open(path, "r", encoding="utf-8", errors="replace") as fh:
        values = parse_configuration(fh.read())

    if not values:
        raise ValueError(f"No configuration values found in {path}")

    known = {}
    extra = {}
    for name, value in values.items():
        if name in _STRING_FIELDS:
            # Empty paths fall back to the Joomla defaults
            if value is None or (name in ("tmp_path", "log_path") and value == ""):
                continue
            known[name] = str(value)
        else:
            extra[name] = value

    logger.debug(f"Loaded {len(values)} configuration values from {path}")
    return SiteConfiguration(**known, extra=extra)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "parse_configuration",
    "load_site_configuration",
]
