"""Per-kind extractors for captured console text.

Each extractor is a small tolerant scanner rather than a grammar: lines that
match none of its rules are skipped, and optional fields that cannot be found
stay ``None``.  A record fails as a whole only when its identifying fields
cannot be produced (``ExtractionError``).

Function, variable and type listings share ``ListingScanner``, a two-state
machine carrying the file context of ``info functions``/``info variables``
style output:

    SEEKING_ENTRY   --"File <name>:"-->            IN_FILE_CONTEXT
    IN_FILE_CONTEXT --"File <other>:"-->           IN_FILE_CONTEXT
    any             --"Non-debugging symbols:"-->  SEEKING_ENTRY

Within either state a line is classified as an address entry (starts with a
hex token), a declaration (contains ``;``) or skipped.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from enum import auto
import logging
import re
from typing import TYPE_CHECKING

from gdbcapture.core.lexical import address_after
from gdbcapture.core.lexical import find_address
from gdbcapture.core.lexical import next_token
from gdbcapture.core.lexical import parse_address
from gdbcapture.core.lexical import strip_line_prefix
from gdbcapture.core.records import Function
from gdbcapture.core.records import LineInfo
from gdbcapture.core.records import RecordChain
from gdbcapture.core.records import SourceLine
from gdbcapture.core.records import Symbol
from gdbcapture.core.records import TypeInfo
from gdbcapture.core.records import Variable
from gdbcapture.errors import ErrorContext
from gdbcapture.errors import ExtractionError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

FILE_HEADER_PREFIX = "File "
NON_DEBUGGING_HEADER = "Non-debugging symbols"

START_ADDRESS_MARKERS = ("starts at address ", "is at address ")
END_ADDRESS_MARKER = "ends at "

# (substring, kind) checked in order; the first match wins.
SYMBOL_KIND_PHRASES = (
    ("is a function", "function"),
    ("is a variable", "variable"),
    ("is static", "static"),
)

TYPE_KIND_PHRASES = (
    ("type = struct", "struct"),
    ("type = union", "union"),
    ("type = enum", "enum"),
    ("type = class", "class"),
)
TYPE_KEYWORDS = ("struct", "union", "enum", "class", "typedef")
DEFAULT_TYPE_KIND = "other"

_LINE_OF_FILE_RE = re.compile(r'Line (\d+) of "([^"]+)"')
_NO_SYMBOL_PREFIX = "No symbol matches"


class ScanState(Enum):
    """Where a listing scan currently is."""

    SEEKING_ENTRY = auto()  # No file header seen, or inside non-debugging symbols
    IN_FILE_CONTEXT = auto()  # Entries belong to ``current_file``


class LineKind(Enum):
    FILE_HEADER = auto()
    SECTION_HEADER = auto()
    ADDRESS_ENTRY = auto()
    DECLARATION = auto()
    SKIPPED = auto()


@dataclass
class ScannedLine:
    kind: LineKind
    text: str


class ListingScanner:
    """Classify listing lines while tracking the current file header."""

    def __init__(self) -> None:
        self.state = ScanState.SEEKING_ENTRY
        self.current_file: str | None = None

    def classify(self, raw_line: str) -> ScannedLine:
        line = raw_line.strip()
        if not line:
            return ScannedLine(LineKind.SKIPPED, line)

        if line.startswith(FILE_HEADER_PREFIX):
            file_name = _file_from_header(line)
            if file_name:
                self.current_file = file_name
                self.state = ScanState.IN_FILE_CONTEXT
                return ScannedLine(LineKind.FILE_HEADER, line)
            return ScannedLine(LineKind.SKIPPED, line)

        if line.startswith(NON_DEBUGGING_HEADER):
            self.current_file = None
            self.state = ScanState.SEEKING_ENTRY
            return ScannedLine(LineKind.SECTION_HEADER, line)

        if parse_address(line) is not None:
            return ScannedLine(LineKind.ADDRESS_ENTRY, line)

        if ";" in line:
            return ScannedLine(LineKind.DECLARATION, line)

        return ScannedLine(LineKind.SKIPPED, line)

    def scan(self, text: str) -> Iterator[ScannedLine]:
        for raw_line in text.splitlines():
            scanned = self.classify(raw_line)
            if scanned.kind is LineKind.SKIPPED and scanned.text:
                logger.debug("Skipping unrecognized line: %r", scanned.text)
            yield scanned


def _file_from_header(line: str) -> str | None:
    body = line[len(FILE_HEADER_PREFIX):]
    if body.endswith(":"):
        return body[:-1].strip() or None
    colon = body.find(":")
    if colon <= 0:
        return None
    return body[:colon].strip() or None


@contextmanager
def _building(chain: RecordChain, operation: str) -> Iterator[RecordChain]:
    """Release a partially built chain if extraction fails midway."""
    try:
        with ErrorContext(operation, record_kind=chain.kind):
            yield chain
    except BaseException:
        released = chain.release()
        logger.debug("Released %d partial record(s) after failed %s", released, operation)
        raise


def _leading_int(text: str) -> int | None:
    digits = ""
    for ch in text.strip():
        if not ch.isdigit():
            break
        digits += ch
    return int(digits) if digits else None


def extract_symbol_address(name: str, text: str) -> Symbol:
    """Build a symbol from ``info address <name>`` output.

    Example: ``Symbol "foo" is at 0x4011a0 in a file compiled without debugging.``
    """
    symbol = Symbol(name=name)
    symbol.address = find_address(text)
    for phrase, kind in SYMBOL_KIND_PHRASES:
        if phrase in text:
            symbol.kind = kind
            break
    return symbol


def extract_symbol_at(address: int, text: str) -> Symbol:
    """Build a symbol from ``info symbol <address>`` output.

    Example: ``foo + 16 in section .text of /path/to/binary``
    """
    stripped = text.strip()
    if not stripped or stripped.startswith(_NO_SYMBOL_PREFIX):
        raise ExtractionError(
            f"No symbol at 0x{address:x}",
            record_kind="Symbol",
            details={"address": address, "output": stripped},
        )
    symbol = Symbol(address=address)
    symbol.name = stripped.split(" ", 1)[0]
    of = stripped.rfind(" of ")
    if of >= 0:
        symbol.file = stripped[of + len(" of "):].strip() or None
    return symbol


def extract_line_info(file: str | None, line: int, text: str) -> LineInfo:
    """Build line info from ``info line`` output.

    ``file``/``line`` are echoed from the request.  Either address may be
    missing; the record is still returned.
    """
    info = LineInfo(file=file, line=line)
    for marker in START_ADDRESS_MARKERS:
        info.start_address = address_after(text, marker)
        if info.start_address is not None:
            break
    info.end_address = address_after(text, END_ADDRESS_MARKER)
    return info


def extract_line_info_at(address: int, text: str) -> LineInfo:
    """Build line info from ``info line *<address>`` output."""
    m = _LINE_OF_FILE_RE.search(text)
    if not m:
        raise ExtractionError(
            f"No line information for 0x{address:x}",
            record_kind="LineInfo",
            details={"address": address, "output": text.strip()},
        )
    return extract_line_info(m.group(2), int(m.group(1)), text)


def _fill_function(func: Function, entry: str, current_file: str | None) -> None:
    token, end = next_token(entry)
    func.address = parse_address(token)
    rest = entry[end:].strip()
    if not rest:
        return

    first, after_first = next_token(rest)
    if first == "static":
        func.is_static = True
        rest = rest[after_first:].strip()

    name_end = len(rest)
    for i, ch in enumerate(rest):
        if ch == "(" or ch.isspace():
            name_end = i
            break
    func.name = rest[:name_end] or None

    at = rest.find(" at ")
    if at >= 0:
        func.signature = rest[:at].strip() or None
        location = rest[at + len(" at "):].strip()
        colon = location.rfind(":")
        if colon > 0:
            func.file = location[:colon]
            func.line = _leading_int(location[colon + 1:])
        else:
            func.file = location or current_file
    else:
        func.signature = rest
        func.file = current_file


def extract_functions(text: str) -> RecordChain[Function]:
    """Build functions from ``info functions`` output.

    Only address-prefixed entries produce records, e.g.
    ``0x0000000000401136 main(int, char**) at main.c:10``.  Without an
    ``at file:line`` clause the entry takes the last ``File <name>:`` header.
    """
    chain: RecordChain[Function] = RecordChain(Function)
    scanner = ListingScanner()
    with _building(chain, "extract_functions"):
        for scanned in scanner.scan(text):
            if scanned.kind is LineKind.ADDRESS_ENTRY:
                _fill_function(chain.allocate(), scanned.text, scanner.current_file)
    return chain


def _split_declaration(declaration: str) -> tuple[str, str]:
    """Split ``static char *name`` into (``static char *``, ``name``)."""
    i = len(declaration)
    while i > 0 and declaration[i - 1] not in " \t*":
        i -= 1
    return declaration[:i].rstrip(), declaration[i:]


def extract_variables(text: str) -> RecordChain[Variable]:
    """Build variables from ``info variables`` output.

    Only lines with a ``;`` terminator are declarations; the name is the
    trailing identifier before it and the type is everything in front.
    """
    chain: RecordChain[Variable] = RecordChain(Variable)
    scanner = ListingScanner()
    with _building(chain, "extract_variables"):
        for scanned in scanner.scan(text):
            if scanned.kind is not LineKind.DECLARATION:
                continue
            line_number, declaration = strip_line_prefix(scanned.text)
            body = declaration[: declaration.find(";")]
            var_type, name = _split_declaration(body)
            if not name:
                logger.debug("Declaration without a name: %r", scanned.text)
                continue
            var = chain.allocate()
            var.name = name
            var.type = var_type
            var.file = scanner.current_file
            var.line = line_number
            var.is_static = "static" in body
            var.is_global = not var.is_static
    return chain


def classify_type_text(text: str) -> str:
    for phrase, kind in TYPE_KIND_PHRASES:
        if phrase in text:
            return kind
    return DEFAULT_TYPE_KIND


def extract_type_info(name: str, text: str) -> TypeInfo:
    """Build a type from ``ptype``/``whatis`` output.

    The whole captured body is kept as ``members``.
    """
    return TypeInfo(name=name, kind=classify_type_text(text), members=text)


def _fill_type(info: TypeInfo, declaration: str) -> None:
    keyword, after_keyword = next_token(declaration)
    if keyword in TYPE_KEYWORDS:
        info.kind = keyword
        remainder = declaration[after_keyword:].strip()
        if keyword == "typedef":
            _, info.name = _split_declaration(remainder)
        else:
            info.name = remainder
    else:
        info.kind = DEFAULT_TYPE_KIND
        info.name = declaration


def extract_types(text: str) -> RecordChain[TypeInfo]:
    """Build types from ``info types`` output.

    Entries below a file header look like ``12:     struct point;``; base
    types are listed by name alone.
    """
    chain: RecordChain[TypeInfo] = RecordChain(TypeInfo)
    scanner = ListingScanner()
    with _building(chain, "extract_types"):
        for scanned in scanner.scan(text):
            if scanned.kind not in (LineKind.DECLARATION, LineKind.SKIPPED):
                continue
            if scanner.state is not ScanState.IN_FILE_CONTEXT or not scanned.text:
                continue
            line_number, declaration = strip_line_prefix(scanned.text)
            declaration = declaration.rstrip(";").strip()
            if not declaration or declaration.endswith(":"):
                continue
            info = chain.allocate()
            _fill_type(info, declaration)
            info.members = scanned.text
            info.file = scanner.current_file
            info.line = line_number
    return chain


def extract_source_lines(text: str) -> RecordChain[SourceLine]:
    """Build source lines from ``list`` output such as ``42\\tint x = 10;``.

    Lines that do not start with a line number are dropped; order is kept.
    """
    chain: RecordChain[SourceLine] = RecordChain(SourceLine)
    with _building(chain, "extract_source_lines"):
        for raw_line in text.splitlines():
            line_number, rest = strip_line_prefix(raw_line)
            if line_number is None:
                if raw_line.strip():
                    logger.debug("Skipping non-source line: %r", raw_line)
                continue
            source_line = chain.allocate()
            source_line.line_number = line_number
            source_line.text = rest.lstrip() or None
    return chain
