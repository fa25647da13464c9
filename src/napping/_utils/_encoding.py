"""Request/response body encodings.

A session picks exactly one encoding when it is constructed. Encodings turn
payload objects into bytes and decode response bodies into a destination
type. Destination types are anything pydantic can validate: models,
dataclasses, TypedDicts, ``dict``, ``list`` or plain scalars.
"""

import dataclasses
import types
import xml.etree.ElementTree as ET
from enum import Enum
from typing import (
    Annotated,
    Any,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from ..models.errors import DecodeError, EncodeError, InvalidEncodingError
from .constants import CONTENT_TYPE_JSON, CONTENT_TYPE_XML


class EncodingType(str, Enum):
    JSON = "json"
    XML = "xml"


class Encoding:
    """Base class for body encodings."""

    content_type: str

    def encode(self, value: Any) -> bytes:
        raise NotImplementedError

    def decode(self, data: bytes, target: Any) -> Any:
        raise NotImplementedError


class JsonEncoding(Encoding):
    content_type = CONTENT_TYPE_JSON

    def encode(self, value: Any) -> bytes:
        try:
            return to_json(value, by_alias=True)
        except PydanticSerializationError as e:
            raise EncodeError(
                f"Cannot encode {type(value).__name__} as JSON: {e}"
            ) from e

    def decode(self, data: bytes, target: Any) -> Any:
        try:
            return TypeAdapter(target).validate_json(data)
        except ValidationError as e:
            raise DecodeError(
                f"Cannot decode JSON body into {_type_name(target)}: {e}"
            ) from e


class XmlEncoding(Encoding):
    """XML bodies via ElementTree.

    Payload models and dataclasses are written with their class name as the
    root tag; dicts must hold exactly one root key. Decoding drops the root
    element and validates its content into the destination type.
    """

    content_type = CONTENT_TYPE_XML

    def encode(self, value: Any) -> bytes:
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode("utf-8")

        if isinstance(value, BaseModel) or (
            dataclasses.is_dataclass(value) and not isinstance(value, type)
        ):
            root_tag = type(value).__name__
            content = to_jsonable_python(value, by_alias=True)
        elif isinstance(value, dict) and len(value) == 1:
            root_tag, content = next(iter(value.items()))
            content = to_jsonable_python(content, by_alias=True)
        else:
            raise EncodeError(
                f"Cannot encode {type(value).__name__} as XML: a model, dataclass "
                "or dict with a single root key is required"
            )

        root = ET.Element(str(root_tag))
        try:
            _fill_element(root, content)
        except (TypeError, ValueError) as e:
            raise EncodeError(
                f"Cannot encode {type(value).__name__} as XML: {e}"
            ) from e
        return ET.tostring(root, encoding="unicode").encode("utf-8")

    def decode(self, data: bytes, target: Any) -> Any:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise DecodeError(f"Cannot parse XML body: {e}") from e
        try:
            content = element_to_python(root)
            # <users><user/><user/></users> into list[User]
            if _is_sequence(target) and isinstance(content, dict) and len(content) == 1:
                key, inner = next(iter(content.items()))
                if not key.startswith(("@", "#")):
                    content = inner
            content = shape_for(content, target)
            return TypeAdapter(target).validate_python(content)
        except ValidationError as e:
            raise DecodeError(
                f"Cannot decode XML body into {_type_name(target)}: {e}"
            ) from e


def _fill_element(element: ET.Element, content: Any) -> None:
    if isinstance(content, dict):
        for key, value in content.items():
            if isinstance(value, list):
                for item in value:
                    _fill_element(ET.SubElement(element, str(key)), item)
            else:
                _fill_element(ET.SubElement(element, str(key)), value)
    elif isinstance(content, list):
        for item in content:
            _fill_element(ET.SubElement(element, "item"), item)
    elif isinstance(content, bool):
        element.text = "true" if content else "false"
    elif content is not None:
        element.text = str(content)


def element_to_python(element: ET.Element) -> Union[dict[str, Any], str]:
    """Convert an element's content to plain Python data.

    Text-only elements become strings. Elements with children or attributes
    become dicts; attributes are keyed ``@name`` and repeated child tags
    collapse into lists.
    """
    children = list(element)
    if not children and not element.attrib:
        return (element.text or "").strip()

    result: dict[str, Any] = {f"@{k}": v for k, v in element.attrib.items()}
    for child in children:
        value = element_to_python(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = [existing]
            result[child.tag].append(value)
        else:
            result[child.tag] = value

    text = (element.text or "").strip()
    if text:
        result["#text"] = text
    return result


_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def shape_for(value: Any, target: Any) -> Any:
    """Reshape converted XML content to fit ``target``.

    XML cannot tell a one-item list from a scalar, or an empty list or model
    from an empty string. The destination type settles it: sequence
    annotations wrap single values, empty elements become ``[]`` / ``{}`` /
    ``None``, and list fields missing from a model are filled with ``[]``.
    """
    origin = get_origin(target)
    if origin is Annotated:
        return shape_for(value, get_args(target)[0])

    if origin is Union or origin is types.UnionType:
        args = get_args(target)
        non_none = [arg for arg in args if arg is not type(None)]
        if value == "" and len(non_none) < len(args):
            return None
        return shape_for(value, non_none[0]) if len(non_none) == 1 else value

    if _is_sequence(target):
        if value == "" or value is None:
            return []
        items = value if isinstance(value, list) else [value]
        item_args = get_args(target)
        item_type = item_args[0] if item_args else Any
        return [shape_for(item, item_type) for item in items]

    if origin is dict or target is dict:
        return {} if value == "" else value

    fields = _field_annotations(target)
    if fields is None:
        return value
    if value == "":
        value = {}
    if not isinstance(value, dict):
        return value

    shaped = dict(value)
    for key, annotation in fields.items():
        if key in shaped:
            shaped[key] = shape_for(shaped[key], annotation)
        elif _is_sequence(annotation):
            shaped[key] = []
    return shaped


def _is_sequence(annotation: Any) -> bool:
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation in _SEQUENCE_TYPES or get_origin(annotation) in _SEQUENCE_TYPES


def _field_annotations(target: Any) -> Optional[dict[str, Any]]:
    if not isinstance(target, type):
        return None
    if issubclass(target, BaseModel):
        return {
            field.alias or name: field.annotation
            for name, field in target.model_fields.items()
        }
    if dataclasses.is_dataclass(target):
        hints = get_type_hints(target)
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(target)}
    return None


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))


_ENCODINGS: dict[EncodingType, type[Encoding]] = {
    EncodingType.JSON: JsonEncoding,
    EncodingType.XML: XmlEncoding,
}


def parse_encoding(value: Any) -> EncodingType:
    if isinstance(value, EncodingType):
        return value
    try:
        return EncodingType(value.lower() if isinstance(value, str) else value)
    except ValueError as e:
        raise InvalidEncodingError(value) from e


def get_encoding(value: Union[EncodingType, str]) -> Encoding:
    return _ENCODINGS[parse_encoding(value)]()
