"""Single-pass markup scanner and tree builder.

The scanner walks the input once with a cursor and builds the tree as it
goes. The chain of elements whose start tag has been read but whose end tag
has not is kept on an explicit stack local to one ``scan()`` call; its top is
the element new nodes are attached to. Document nesting therefore never
consumes Python call-stack frames, and two scans never share state.

Every forward search is bounded by the end of the input: running out of input
while looking for ``>``, a closing quote, ``-->`` or ``?>`` raises
``ParseError`` instead of reading past the buffer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from tagtree.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseError,
    ScannerConfig,
    ScanPosition,
    get_logger,
)
from tagtree.tree.node import Node

# Same set as C isspace() in the default locale
WHITESPACE = " \t\n\r\f\v"

_TAG_NAME_STOPS = frozenset(WHITESPACE + "/>")
_ATTR_KEY_STOPS = frozenset(WHITESPACE + "=/>")
_QUOTES = "\"'"

_COMPONENT = "markup_scanner"


@dataclass
class ScanReport:
    """Tree produced by one scan together with what was noticed on the way."""

    root: Node
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    node_count: int = 0
    attribute_count: int = 0
    max_depth: int = 0
    characters_scanned: int = 0


class _Cursor:
    """Read position over the input text."""

    __slots__ = ("text", "offset", "length")

    def __init__(self, text: str) -> None:
        self.text = text
        self.offset = 0
        self.length = len(text)

    @property
    def at_end(self) -> bool:
        return self.offset >= self.length

    def peek(self) -> str:
        """Current character, or an empty string at end of input."""
        if self.offset < self.length:
            return self.text[self.offset]
        return ""

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.offset)

    def skip_whitespace(self) -> None:
        text, offset, length = self.text, self.offset, self.length
        while offset < length and text[offset] in WHITESPACE:
            offset += 1
        self.offset = offset

    def scan_name(self, stops: frozenset) -> str:
        """Consume characters up to (not including) the first one in ``stops``."""
        text, start, length = self.text, self.offset, self.length
        offset = start
        while offset < length and text[offset] not in stops:
            offset += 1
        self.offset = offset
        return text[start:offset]

    def scan_until(self, terminator: str, construct: str, start: int) -> str:
        """Consume through ``terminator`` and return what preceded it.

        ``start`` is where the enclosing construct began; it is the position
        reported when the terminator never appears.
        """
        end = self.text.find(terminator, self.offset)
        if end < 0:
            raise ParseError(
                f"Unterminated {construct}: expected {terminator!r} before end of input",
                self.position(start),
            )
        value = self.text[self.offset:end]
        self.offset = end + len(terminator)
        return value

    def position(self, offset: Optional[int] = None) -> ScanPosition:
        return ScanPosition.from_offset(
            self.text, self.offset if offset is None else offset
        )


class MarkupScanner:
    """Recognizer for tags, attributes, comments, processing instructions and text.

    A scanner holds only configuration, so one instance can scan any number
    of documents, one after another or from several threads.

    Examples:
        >>> report = MarkupScanner().scan('<a><b>hi</b></a>')
        >>> report.root.find_tag('b').text
        'hi'
    """

    def __init__(
        self,
        config: Optional[ScannerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ScannerConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, _COMPONENT)

    def scan(self, text: str) -> ScanReport:
        """Build a tree from ``text``.

        Raises:
            ParseError: The markup cannot be turned into a tree
        """
        cursor = _Cursor(text)
        root = Node(tag=self.config.root_tag)
        report = ScanReport(root=root, characters_scanned=len(text))
        # open_nodes[-1] is the current open node; text_runs stays aligned with it
        open_nodes: List[Node] = [root]
        text_runs: List[List[str]] = [[]]
        debug = self.logger.debug_enabled

        while True:
            run_start = cursor.offset
            cursor.skip_whitespace()
            if cursor.at_end:
                break

            if cursor.peek() != "<":
                end = text.find("<", cursor.offset)
                if end < 0:
                    end = cursor.length
                if len(open_nodes) > 1:
                    text_runs[-1].append(text[run_start:end])
                elif debug:
                    self.logger.debug(
                        "Ignoring text outside any element",
                        extra={"offset": run_start},
                    )
                cursor.offset = end
                continue

            tag_start = cursor.offset
            cursor.offset += 1
            cursor.skip_whitespace()
            if cursor.at_end:
                raise ParseError(
                    "Unterminated tag: input ends after '<'", cursor.position(tag_start)
                )

            if cursor.startswith("?"):
                body = cursor.scan_until("?>", "processing instruction", tag_start)
                if debug:
                    self.logger.debug(
                        "Parsed processing instruction",
                        extra={"content": f"<{body}?>", "offset": tag_start},
                    )
            elif cursor.startswith("!--"):
                cursor.offset += 3
                body = cursor.scan_until("-->", "comment", tag_start)
                if debug:
                    self.logger.debug(
                        "Parsed comment",
                        extra={"content": f"<!--{body}-->", "offset": tag_start},
                    )
            elif cursor.startswith("!"):
                self._skip_declaration(cursor, tag_start, debug)
            elif cursor.startswith("/"):
                cursor.offset += 1
                name = cursor.scan_until(">", "end tag", tag_start).strip(WHITESPACE)
                self._close_element(
                    name, open_nodes, text_runs, report, cursor.position(tag_start)
                )
            else:
                self._scan_start_tag(cursor, open_nodes, text_runs, report, tag_start)

        self._close_unterminated(open_nodes, text_runs, report, cursor)
        return report

    def _skip_declaration(self, cursor: _Cursor, tag_start: int, debug: bool) -> None:
        """Discard a markup declaration such as ``<!DOCTYPE html>``."""
        if cursor.startswith("![CDATA["):
            raise ParseError("CDATA sections are not supported", cursor.position(tag_start))
        body = cursor.scan_until(">", "declaration", tag_start)
        if debug:
            self.logger.debug(
                "Skipped declaration",
                extra={"content": f"<{body}>", "offset": tag_start},
            )

    def _scan_start_tag(
        self,
        cursor: _Cursor,
        open_nodes: List[Node],
        text_runs: List[List[str]],
        report: ScanReport,
        tag_start: int,
    ) -> None:
        depth = len(open_nodes)
        if depth > self.config.max_depth:
            raise ParseError(
                f"Elements nested deeper than {self.config.max_depth} levels",
                cursor.position(tag_start),
            )

        name = cursor.scan_name(_TAG_NAME_STOPS)
        if cursor.at_end:
            raise ParseError(
                "Unterminated tag: expected '>' before end of input",
                cursor.position(tag_start),
            )
        if not name:
            raise ParseError(
                f"Missing tag name before {cursor.peek()!r}", cursor.position(tag_start)
            )

        node = open_nodes[-1].new_child(name)
        report.node_count += 1
        report.max_depth = max(report.max_depth, depth)

        self_closing = self._scan_attributes(cursor, node, report, tag_start)
        if self.logger.debug_enabled:
            self.logger.debug(
                "Parsed self-closing tag" if self_closing else "Parsed start tag",
                extra={
                    "tag": node.tag,
                    "attribute_count": len(node.attributes),
                    "offset": tag_start,
                },
            )
        if not self_closing:
            open_nodes.append(node)
            text_runs.append([])

    def _scan_attributes(
        self,
        cursor: _Cursor,
        node: Node,
        report: ScanReport,
        tag_start: int,
    ) -> bool:
        """Read ``key="value"`` pairs up to the end of the start tag.

        Returns True when the tag is self-closing.
        """
        while True:
            cursor.skip_whitespace()
            char = cursor.peek()
            if not char:
                raise ParseError(
                    f"Unterminated tag <{node.tag}>: expected '>' before end of input",
                    cursor.position(tag_start),
                )
            if char in "/>":
                return self._finish_start_tag(cursor, node, tag_start)

            key_start = cursor.offset
            key = cursor.scan_name(_ATTR_KEY_STOPS)
            if not key:
                raise ParseError(
                    f"Missing attribute name before {char!r} in tag <{node.tag}>",
                    cursor.position(key_start),
                )
            cursor.skip_whitespace()
            if cursor.peek() != "=":
                if cursor.at_end:
                    raise ParseError(
                        f"Unterminated tag <{node.tag}>: expected '>' before end of input",
                        cursor.position(tag_start),
                    )
                raise ParseError(
                    f"Attribute {key!r} of <{node.tag}> has no value",
                    cursor.position(key_start),
                )
            cursor.offset += 1
            cursor.skip_whitespace()

            quote = cursor.peek()
            if not quote:
                raise ParseError(
                    f"Unterminated tag <{node.tag}>: expected '>' before end of input",
                    cursor.position(tag_start),
                )
            if quote not in _QUOTES:
                raise ParseError(
                    f"Value of attribute {key!r} in <{node.tag}> is not quoted",
                    cursor.position(),
                )
            value_start = cursor.offset
            cursor.offset += 1
            value = cursor.scan_until(quote, "attribute value", value_start)
            node.add_attribute(key, value)
            report.attribute_count += 1

    def _finish_start_tag(self, cursor: _Cursor, node: Node, tag_start: int) -> bool:
        """Consume ``>`` or ``/>``; a tag is self-closing iff ``/`` precedes its ``>``."""
        if cursor.peek() == ">":
            cursor.offset += 1
            return False
        slash = cursor.offset
        cursor.offset += 1
        cursor.skip_whitespace()
        if cursor.peek() != ">":
            if cursor.at_end:
                raise ParseError(
                    f"Unterminated tag <{node.tag}>: expected '>' before end of input",
                    cursor.position(tag_start),
                )
            raise ParseError(
                f"Expected '>' after '/' in tag <{node.tag}>", cursor.position(slash)
            )
        cursor.offset += 1
        return True

    def _close_element(
        self,
        name: str,
        open_nodes: List[Node],
        text_runs: List[List[str]],
        report: ScanReport,
        position: ScanPosition,
    ) -> None:
        if len(open_nodes) == 1:
            self._irregularity(
                f"End tag </{name}> has no open element", report, position
            )
            return

        node = open_nodes[-1]
        if name != node.tag:
            self._irregularity(
                f"End tag </{name}> does not match open element <{node.tag}>",
                report,
                position,
            )
        open_nodes.pop()
        self._settle_text(node, text_runs.pop())
        if self.logger.debug_enabled:
            self.logger.debug(
                "Parsed end tag", extra={"tag": node.tag, "offset": position.offset}
            )

    def _close_unterminated(
        self,
        open_nodes: List[Node],
        text_runs: List[List[str]],
        report: ScanReport,
        cursor: _Cursor,
    ) -> None:
        position = cursor.position()
        while len(open_nodes) > 1:
            node = open_nodes.pop()
            self._settle_text(node, text_runs.pop())
            self._irregularity(
                f"Element <{node.tag}> is not closed before end of input",
                report,
                position,
            )

    def _settle_text(self, node: Node, runs: List[str]) -> None:
        """Fix the node's text once its content is complete."""
        if not runs or len(node.children):
            node.text = None
            return
        node.text = "".join(runs).strip(WHITESPACE) or None
        if node.text is not None and self.logger.debug_enabled:
            self.logger.debug(
                "Parsed inner text", extra={"tag": node.tag, "text": node.text}
            )

    def _irregularity(
        self, message: str, report: ScanReport, position: ScanPosition
    ) -> None:
        """Fail in strict mode, otherwise record a warning and keep scanning."""
        if self.config.strict_end_tags:
            raise ParseError(message, position)
        self.logger.warning(message, extra={"position": position.to_dict()})
        report.diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=message,
                component=_COMPONENT,
                position=position.to_dict(),
                correlation_id=self.correlation_id,
            )
        )
