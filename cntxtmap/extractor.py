#extractor.py - Regex-based import specifier extraction for JS/TS, stylesheets and other ecosystems.

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Set, Tuple

from cntxtmap.config import DEFAULT_ALIAS_PREFIX

# const x = require('./x') and bare require('./x').
REQUIRE_RE = re.compile(r"""\brequire\s*\(\s*['"]([^'"]+)['"]\s*\)""")
# import x from './x', import { a } from './x', export * from './x'.
FROM_RE = re.compile(r"""\bfrom\s+['"]([^'"]+)['"]""")
# Side effect imports.
SIDE_EFFECT_IMPORT_RE = re.compile(r"""\bimport\s+['"]([^'"]+)['"]""")
# Dynamic imports with a literal argument.
DYNAMIC_IMPORT_RE = re.compile(r"""\bimport\s*\(\s*['"]([^'"]+)['"]\s*\)""")
# @import './x.css' and @import url('./x.css').
STYLE_IMPORT_RE = re.compile(r"""@import\s+(?:url\(\s*)?['"]([^'"]+)['"]""")
URL_RE = re.compile(r"""\burl\s*\(\s*['"]([^'"]+)['"]\s*\)""")
LINK_HREF_RE = re.compile(r"""<link[^>]+href=["']([^"']+)["']""")

SCRIPT_PATTERNS: Tuple[Pattern, ...] = (REQUIRE_RE, FROM_RE, SIDE_EFFECT_IMPORT_RE, DYNAMIC_IMPORT_RE)
STYLE_PATTERNS: Tuple[Pattern, ...] = (STYLE_IMPORT_RE, URL_RE)
DEFAULT_PATTERNS = SCRIPT_PATTERNS + STYLE_PATTERNS
GENERIC_PATTERNS = DEFAULT_PATTERNS + (LINK_HREF_RE,)


class ImportExtractor:
    """Turns source text into the set of local import specifiers it mentions.

    Only relative (``./``, ``../``), root-absolute (``/``) and alias-rooted
    specifiers are kept; bare package names never map to a project file.
    Anything the patterns miss is simply not reported.
    """

    def __init__(self, patterns: Iterable[Pattern] = DEFAULT_PATTERNS,
                 alias_prefix: str = DEFAULT_ALIAS_PREFIX):
        self.patterns = tuple(patterns)
        self.alias_prefix = alias_prefix

    def extract(self, content: str) -> Set[str]:
        specifiers: Set[str] = set()
        for pattern in self.patterns:
            for match in pattern.finditer(content):
                spec = match.group(1).strip()
                if spec and self.is_local(spec):
                    specifiers.add(spec)
        return specifiers

    def is_local(self, spec: str) -> bool:
        if spec.startswith("//"):
            # Protocol-relative URL.
            return False
        if self.alias_prefix and spec.startswith(self.alias_prefix):
            return True
        return spec.startswith((".", "/"))


@dataclass(frozen=True)
class EcosystemSyntax:
    """Import syntax of a non-JS ecosystem and how its names map onto files.

    ``separator`` is the module-path separator turned into ``/``; None means
    the specifier is already a path. ``source_roots`` are tried, in order,
    under the project root unless the syntax is ``relative``.
    """

    name: str
    patterns: Tuple[Pattern, ...]
    extensions: Tuple[str, ...]
    separator: Optional[str] = None
    index_stem: Optional[str] = None
    source_roots: Tuple[str, ...] = ("",)
    relative: bool = False

    def extract(self, content: str) -> Set[str]:
        specifiers: Set[str] = set()
        for pattern in self.patterns:
            for match in pattern.finditer(content):
                spec = next((g for g in match.groups() if g), None)
                if spec and not spec.endswith("*"):
                    specifiers.add(spec.strip())
        return specifiers


ECOSYSTEM_SYNTAXES = {
    "python": EcosystemSyntax(
        name="python",
        patterns=(
            re.compile(r"^\s*from\s+(\.+[\w.]*|[A-Za-z_][\w.]*)\s+import\b", re.MULTILINE),
            re.compile(r"^\s*import\s+([A-Za-z_][\w.]*)", re.MULTILINE),
        ),
        extensions=(".py",),
        separator=".",
        index_stem="__init__",
        source_roots=("", "src"),
    ),
    "java": EcosystemSyntax(
        name="java",
        patterns=(re.compile(r"^\s*import\s+(?:static\s+)?([A-Za-z_][\w.]*\*?)\s*;", re.MULTILINE),),
        extensions=(".java",),
        separator=".",
        source_roots=("src/main/java", "src", ""),
    ),
    "php": EcosystemSyntax(
        name="php",
        patterns=(re.compile(r"^\s*use\s+([A-Za-z_][\w\\]*)\s*;", re.MULTILINE),),
        extensions=(".php",),
        separator="\\",
        source_roots=("src", ""),
    ),
    "ruby": EcosystemSyntax(
        name="ruby",
        patterns=(re.compile(r"""\brequire_relative\s*\(?\s*['"]([^'"]+)['"]"""),),
        extensions=(".rb",),
        relative=True,
    ),
}


def syntax_for(ecosystem: Optional[str]) -> Optional[EcosystemSyntax]:
    if not ecosystem:
        return None
    return ECOSYSTEM_SYNTAXES.get(ecosystem)
