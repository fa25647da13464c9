import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

import pytest
from pydantic import BaseModel, Field

from napping import DecodeError, EncodeError, EncodingType, InvalidEncodingError
from napping._utils._encoding import (
    JsonEncoding,
    XmlEncoding,
    element_to_python,
    get_encoding,
)


class Item(BaseModel):
    name: str
    tags: list[str] = []
    active: bool = True
    count: Optional[int] = None


class Aliased(BaseModel):
    item_id: int = Field(alias="itemId")


@dataclass
class Point:
    x: int
    y: int


class TestGetEncoding:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("json", JsonEncoding),
            ("JSON", JsonEncoding),
            (EncodingType.XML, XmlEncoding),
            ("xml", XmlEncoding),
        ],
    )
    def test_known_encodings(self, value, expected):
        assert isinstance(get_encoding(value), expected)

    def test_unknown_encoding(self):
        with pytest.raises(InvalidEncodingError) as exc_info:
            get_encoding("msgpack")

        assert "msgpack" in str(exc_info.value)


class TestJsonEncoding:
    def test_encode_model_uses_aliases(self):
        data = JsonEncoding().encode(Aliased(itemId=3))

        assert json.loads(data) == {"itemId": 3}

    def test_encode_dataclass_and_dict(self):
        encoding = JsonEncoding()

        assert json.loads(encoding.encode(Point(1, 2))) == {"x": 1, "y": 2}
        assert json.loads(encoding.encode({"a": [1, 2]})) == {"a": [1, 2]}

    def test_encode_unsupported_type(self):
        with pytest.raises(EncodeError):
            JsonEncoding().encode(object())

    def test_decode_into_model(self):
        item = JsonEncoding().decode(b'{"name": "a", "tags": ["x"]}', Item)

        assert item == Item(name="a", tags=["x"])

    def test_decode_into_builtin_types(self):
        encoding = JsonEncoding()

        assert encoding.decode(b"[1, 2]", list[int]) == [1, 2]
        assert encoding.decode(b'{"k": "v"}', dict) == {"k": "v"}

    def test_decode_invalid_json(self):
        with pytest.raises(DecodeError):
            JsonEncoding().decode(b"{not json", Item)

    def test_decode_wrong_shape(self):
        with pytest.raises(DecodeError) as exc_info:
            JsonEncoding().decode(b'{"tags": []}', Item)

        assert "Item" in str(exc_info.value)


class TestXmlEncoding:
    def test_encode_model(self):
        data = XmlEncoding().encode(Item(name="a", tags=["x", "y"], active=False))

        root = ET.fromstring(data)
        assert root.tag == "Item"
        assert root.findtext("name") == "a"
        assert [tag.text for tag in root.findall("tags")] == ["x", "y"]
        assert root.findtext("active") == "false"
        assert root.find("count") is not None
        assert root.findtext("count") == ""

    def test_encode_has_no_declaration(self):
        data = XmlEncoding().encode(Point(1, 2))

        assert data == b"<Point><x>1</x><y>2</y></Point>"

    def test_encode_single_key_dict(self):
        data = XmlEncoding().encode({"order": {"id": 7, "lines": ["a", "b"]}})

        assert data == b"<order><id>7</id><lines>a</lines><lines>b</lines></order>"

    def test_encode_passes_bytes_and_str_through(self):
        encoding = XmlEncoding()

        assert encoding.encode(b"<a/>") == b"<a/>"
        assert encoding.encode("<b/>") == b"<b/>"

    @pytest.mark.parametrize("value", [{"a": 1, "b": 2}, [1, 2], 42])
    def test_encode_without_root(self, value):
        with pytest.raises(EncodeError):
            XmlEncoding().encode(value)

    def test_decode_into_model(self):
        data = b"<Item><name>a</name><tags>x</tags><tags>y</tags><active>false</active></Item>"

        item = XmlEncoding().decode(data, Item)

        assert item == Item(name="a", tags=["x", "y"], active=False)

    def test_decode_single_item_list(self):
        item = XmlEncoding().decode(b"<Item><name>a</name><tags>x</tags></Item>", Item)

        assert item.tags == ["x"]

    def test_decode_empty_optional_and_missing_list(self):
        item = XmlEncoding().decode(b"<Item><name>a</name><count /></Item>", Item)

        assert item == Item(name="a", tags=[], count=None)

    def test_decode_empty_root_into_dict(self):
        assert XmlEncoding().decode(b"<Empty />", dict) == {}

    def test_decode_dataclass(self):
        point = XmlEncoding().decode(b"<Point><x>1</x><y>2</y></Point>", Point)

        assert point == Point(1, 2)

    def test_decode_wrapped_list(self):
        data = b"<points><Point><x>1</x><y>2</y></Point><Point><x>3</x><y>4</y></Point></points>"

        assert XmlEncoding().decode(data, list[Point]) == [Point(1, 2), Point(3, 4)]

    def test_decode_malformed(self):
        with pytest.raises(DecodeError):
            XmlEncoding().decode(b"<Item><name>a</Item>", Item)

    def test_decode_wrong_shape(self):
        with pytest.raises(DecodeError):
            XmlEncoding().decode(b"<Item><tags>x</tags></Item>", Item)


class TestElementToPython:
    def test_text_element(self):
        assert element_to_python(ET.fromstring("<a> hi </a>")) == "hi"

    def test_attributes_and_text(self):
        element = ET.fromstring('<a id="1">body<b>x</b></a>')

        assert element_to_python(element) == {"@id": "1", "b": "x", "#text": "body"}

    def test_repeated_children_become_lists(self):
        element = ET.fromstring("<a><b>1</b><b>2</b><b>3</b><c/></a>")

        assert element_to_python(element) == {"b": ["1", "2", "3"], "c": ""}
