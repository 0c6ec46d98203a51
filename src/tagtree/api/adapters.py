"""Adapters that hand a parsed tree over to other libraries.

``LxmlAdapter`` rebuilds the tree as ``lxml.etree`` elements so it can be
queried with XPath; ``PandasAdapter`` flattens it into one DataFrame row per
element. Conversions never raise: failures come back in a
``ConversionResult`` with ``success`` False.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

import lxml.etree
import pandas as pd

from tagtree.shared import get_logger
from tagtree.tree import Node, ParseResult

MS_PER_SECOND = 1000

BASE_COLUMNS = ["path", "tag", "depth", "text", "attribute_count"]
ATTRIBUTE_COLUMN_PREFIX = "@"


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()
    DATA_FRAME = auto()


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    adapter_type: AdapterType
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class IntegrationAdapter(ABC):
    """Base class for converting a ``ParseResult`` into another library's objects."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def _convert(self, root: Node) -> ConversionResult:
        """Convert a successfully parsed tree."""

    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert ``parse_result`` to the target representation."""
        start_time = time.time()
        if not parse_result.success or parse_result.root is None:
            return self._create_error_result(
                "ParseResult is not successful or has no tree", start_time
            )
        try:
            result = self._convert(parse_result.root)
        except (ValueError, TypeError) as e:
            self._logger.warning(
                "Conversion failed",
                extra={"adapter": self.metadata.name, "error": str(e)},
            )
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}", start_time
            )
        result.conversion_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self._logger.debug(
            "Conversion completed",
            extra={
                "adapter": self.metadata.name,
                "conversion_time_ms": result.conversion_time_ms,
            },
        )
        return result

    def _create_error_result(self, message: str, start_time: float) -> ConversionResult:
        return ConversionResult(
            success=False,
            converted_data=None,
            conversion_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            errors=[message],
        )


class LxmlAdapter(IntegrationAdapter):
    """Convert a tree to ``lxml.etree`` elements.

    The synthetic document root has no element counterpart in lxml, so it is
    represented by a wrapper element named ``wrapper_tag``.
    """

    def __init__(
        self, wrapper_tag: str = "document", correlation_id: Optional[str] = None
    ) -> None:
        super().__init__(correlation_id)
        self.wrapper_tag = wrapper_tag

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Conversion from a parsed tree to lxml.etree elements",
        )

    def _convert(self, root: Node) -> ConversionResult:
        wrapper = lxml.etree.Element(self.wrapper_tag)
        # (source node, lxml parent) pairs; children pushed in reverse keep order
        stack = [(child, wrapper) for child in reversed(list(root.children))]
        count = 0
        while stack:
            node, parent = stack.pop()
            element = lxml.etree.SubElement(parent, node.tag)
            for attribute in node.attributes:
                # First occurrence wins, matching attr()
                if attribute.key not in element.attrib:
                    element.set(attribute.key, attribute.value)
            if node.text is not None:
                element.text = node.text
            count += 1
            stack.extend((child, element) for child in reversed(list(node.children)))

        return ConversionResult(
            success=True,
            converted_data=wrapper,
            conversion_time_ms=0.0,
            metadata={"element_count": count, "lxml_version": lxml.etree.LXML_VERSION},
        )


class PandasAdapter(IntegrationAdapter):
    """Flatten a tree into a ``pandas.DataFrame`` with one row per element.

    Columns are ``path``, ``tag``, ``depth``, ``text``, ``attribute_count``
    and one ``@key`` column per attribute key, in order of first appearance.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="pandas",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            description="Conversion from a parsed tree to a pandas DataFrame",
        )

    def _convert(self, root: Node) -> ConversionResult:
        rows: List[Dict[str, Any]] = []
        attribute_columns: Dict[str, None] = {}
        for node in root.iter():
            if node is root:
                continue
            row: Dict[str, Any] = {
                "path": node.path,
                "tag": node.tag,
                "depth": node.depth,
                "text": node.text,
                "attribute_count": len(node.attributes),
            }
            for attribute in node.attributes:
                column = ATTRIBUTE_COLUMN_PREFIX + attribute.key
                attribute_columns.setdefault(column, None)
                row.setdefault(column, attribute.value)
            rows.append(row)

        df = pd.DataFrame(rows, columns=BASE_COLUMNS + list(attribute_columns))
        return ConversionResult(
            success=True,
            converted_data=df,
            conversion_time_ms=0.0,
            metadata={"row_count": len(df), "columns": list(df.columns)},
        )


_ADAPTERS = {
    "lxml": LxmlAdapter,
    "pandas": PandasAdapter,
}


def get_adapter(name: str, correlation_id: Optional[str] = None) -> Optional[IntegrationAdapter]:
    """Return a new adapter instance by name, or None if there is no such adapter."""
    adapter_class = _ADAPTERS.get(name)
    if adapter_class is None:
        return None
    return adapter_class(correlation_id=correlation_id)


def list_adapters() -> List[str]:
    return sorted(_ADAPTERS)
