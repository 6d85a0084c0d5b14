"""Codec for Elementor documents.

This module converts the raw `_elementor_data` value stored by WordPress
into Document objects and back. The raw value is untrusted: it may be
missing, double-encoded as a JSON string, wrapped in a Markdown code fence,
or simply garbage.
"""

import json
import logging
import re
import reprlib
from typing import Any, Dict, Union

from .errors import EXCERPT_LENGTH, DecodeError
from .models import ABSENT, Document, Element

logger = logging.getLogger(__name__)

# Keys of an element object that map to Element fields; anything else is
# preserved in Element.extra
ELEMENT_KEYS = {"id", "elType", "isInner", "settings", "elements", "widgetType"}

# Deepest element nesting accepted by the decoder; real pages stay far below it
MAX_NESTING_DEPTH = 100

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class DocumentCodec:
    """Decoder and encoder for Elementor data.

    Decoding unwraps exactly one level of string envelope: when the first
    parse yields a string, that string is parsed again. Encoding never adds
    an envelope back.
    """

    def decode(self, raw: Union[str, bytes, None]) -> Document:
        """Parse raw Elementor data into a Document.

        Args:
            raw: The stored value (JSON text, enveloped JSON text, or empty)

        Returns:
            Document with the parsed element tree

        Raises:
            DecodeError: reason "absent" if there is no data at all,
                reason "malformed" if parsing fails at any stage
        """
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(
                    DecodeError.MALFORMED,
                    raw_excerpt=raw[:EXCERPT_LENGTH].decode("utf-8", errors="replace"),
                    detail=f"invalid UTF-8: {e}",
                )

        if raw is None or not str(raw).strip():
            raise DecodeError(DecodeError.ABSENT)

        text = self._strip_code_fence(str(raw).strip())
        parsed = self._parse_json(text, raw)

        # One level of envelope: the store sometimes double-encodes the data
        if isinstance(parsed, str):
            logger.debug("Unwrapping string envelope around Elementor data")
            if not parsed.strip():
                raise DecodeError(DecodeError.ABSENT)
            parsed = self._parse_json(parsed.strip(), parsed)

        if parsed is None:
            raise DecodeError(DecodeError.ABSENT)

        if isinstance(parsed, dict):
            parsed = [parsed]

        if not isinstance(parsed, list):
            raise DecodeError(
                DecodeError.MALFORMED,
                raw_excerpt=str(raw),
                detail=f"expected a list of elements, got {type(parsed).__name__}",
            )

        elements = [
            self._parse_element(element_data, f"root[{index}]", raw)
            for index, element_data in enumerate(parsed)
        ]
        logger.debug(f"Decoded Elementor data with {len(elements)} top-level elements")
        return Document(elements=elements)

    def encode(self, document: Document) -> str:
        """Serialize a Document to Elementor JSON text.

        Args:
            document: Document to serialize

        Returns:
            Compact JSON array of element objects
        """
        return json.dumps(document.to_list(), ensure_ascii=False, separators=(",", ":"))

    def decode_element(self, element_data: Any) -> Element:
        """Parse a single element object (e.g. caller-supplied new element).

        Raises:
            DecodeError: reason "malformed" if the object is not a valid element
        """
        return self._parse_element(element_data, "element", reprlib.repr(element_data))

    def _strip_code_fence(self, text: str) -> str:
        """Remove a surrounding Markdown code fence, if any."""
        match = _FENCE_PATTERN.match(text)
        if match:
            return match.group(1)
        return text

    def _parse_json(self, text: str, raw: Any) -> Any:
        """Parse JSON text, translating failures to DecodeError."""
        try:
            return json.loads(text)
        except RecursionError as e:
            raise DecodeError(
                DecodeError.MALFORMED,
                raw_excerpt=str(raw),
                detail="nesting too deep",
            ) from e
        except (ValueError, TypeError) as e:
            raise DecodeError(
                DecodeError.MALFORMED,
                raw_excerpt=str(raw),
                detail=f"JSON parse failed: {e}",
            )

    def _parse_element(
        self, element_data: Any, path: str, raw: Any, depth: int = 1
    ) -> Element:
        """Parse a single element object from JSON.

        Missing ids and kinds are kept as empty strings so validation can
        report them; only structurally impossible values are rejected here.

        Args:
            element_data: Element data as parsed from JSON
            path: Structural path used in error messages
            raw: Original raw payload (for the error excerpt)
            depth: Nesting level of this element (top level is 1)

        Returns:
            Parsed Element
        """
        if not isinstance(element_data, dict):
            raise DecodeError(
                DecodeError.MALFORMED,
                raw_excerpt=str(raw),
                detail=f"element at {path} is not an object",
            )

        if depth > MAX_NESTING_DEPTH:
            raise DecodeError(
                DecodeError.MALFORMED,
                raw_excerpt=str(raw),
                detail=f"nesting too deep at {path} (limit: {MAX_NESTING_DEPTH})",
            )

        settings = element_data.get("settings")
        # PHP serializes an empty associative array as []
        if settings is None or settings == []:
            settings = {}
        if not isinstance(settings, dict):
            raise DecodeError(
                DecodeError.MALFORMED,
                raw_excerpt=str(raw),
                detail=f"settings at {path} is not an object",
            )

        children_data = element_data.get("elements")
        if children_data is None:
            children_data = []
        if not isinstance(children_data, list):
            raise DecodeError(
                DecodeError.MALFORMED,
                raw_excerpt=str(raw),
                detail=f"elements at {path} is not a list",
            )

        children = [
            self._parse_element(child, f"{path}.children[{index}]", raw, depth + 1)
            for index, child in enumerate(children_data)
        ]

        element_id = element_data.get("id")
        kind = element_data.get("elType")
        widget_type = element_data.get("widgetType")

        extra: Dict[str, Any] = {
            key: value for key, value in element_data.items() if key not in ELEMENT_KEYS
        }

        return Element(
            id="" if element_id is None else str(element_id),
            kind="" if kind is None else str(kind),
            widget_type=widget_type if widget_type else None,
            settings=settings,
            children=children,
            is_inner=element_data.get("isInner", ABSENT),
            extra=extra,
        )


def decode_document(raw: Union[str, bytes, None]) -> Document:
    """Decode raw Elementor data with a default codec."""
    return DocumentCodec().decode(raw)


def encode_document(document: Document) -> str:
    """Encode a Document with a default codec."""
    return DocumentCodec().encode(document)

