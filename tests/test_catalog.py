"""Tests for the frame catalog and FrameInfo."""

import pytest
from pydantic import ValidationError

from id3field.catalog import FRAME_DEFS, FieldDef, FrameDef, FrameID, FrameInfo
from id3field.constants import FieldFlags, FieldID, FieldType, TextEncoding, V2Spec
from id3field.field import create_fields


@pytest.fixture
def info():
    return FrameInfo()


class TestFrameInfo:
    """Test catalog queries."""

    def test_names(self, info):
        assert info.long_name(FrameID.TITLE) == "TIT2"
        assert info.short_name(FrameID.TITLE) == "TT2"
        assert info.short_name(FrameID.PICTURE) == "PIC"
        assert info.name(FrameID.COMMENT, V2Spec.ID3V2_2_0) == "COM"
        assert info.name(FrameID.COMMENT, V2Spec.ID3V2_4_0) == "COMM"

    def test_frame_without_v22_name(self, info):
        assert info.short_name(FrameID.PRIVATE) is None

    def test_description(self, info):
        assert info.description(FrameID.TITLE) == "Title"
        assert all(info.description(frame_id) for frame_id in info.frame_ids())

    def test_find(self, info):
        assert info.find("TIT2").frame_id == FrameID.TITLE
        assert info.find("TT2").frame_id == FrameID.TITLE
        assert info.find("ZZZZ") is None

    def test_field_queries(self, info):
        assert info.num_fields(FrameID.COMMENT) == 4
        assert info.field_type(FrameID.COMMENT, 1) == FieldType.ASCII_TEXT
        assert info.field_size(FrameID.COMMENT, 1) == 3
        assert info.field_flags(FrameID.TITLE, 1) == FieldFlags.LIST | FieldFlags.ENCODABLE
        assert info.field_flags(FrameID.TITLE, 0) == FieldFlags.NONE

    def test_field_order(self, info):
        ids = [d.field_id for d in info.field_defs(FrameID.PICTURE)]
        assert ids == [
            FieldID.TEXTENC,
            FieldID.IMAGEFORMAT,
            FieldID.MIMETYPE,
            FieldID.PICTURETYPE,
            FieldID.DESCRIPTION,
            FieldID.DATA,
        ]

    def test_frame_ids(self, info):
        assert FrameID.NOFRAME not in set(info.frame_ids())
        assert info.max_frame_id() == FrameID.PRIVATE

    def test_unknown_frame(self, info):
        with pytest.raises(KeyError):
            info.frame_def(FrameID.NOFRAME)
        with pytest.raises(KeyError):
            info.num_fields(999)

    def test_every_frame_is_well_formed(self):
        for frame_id, frame in FRAME_DEFS.items():
            assert frame.frame_id == frame_id
            assert frame.field_defs


class TestDefinitions:
    """Test definition validation."""

    def test_integer_too_wide(self):
        with pytest.raises(ValidationError):
            FieldDef(field_id=FieldID.COUNTER, field_type=FieldType.INTEGER, fixed_size=5)

    def test_encodable_ascii(self):
        with pytest.raises(ValidationError):
            FieldDef(field_id=FieldID.URL, field_type=FieldType.ASCII_TEXT, flags=FieldFlags.ENCODABLE)

    def test_reversed_scope(self):
        with pytest.raises(ValidationError):
            FieldDef(
                field_id=FieldID.DATA,
                field_type=FieldType.BINARY,
                spec_begin=V2Spec.ID3V2_4_0,
                spec_end=V2Spec.ID3V2_2_0,
            )

    def test_frame_name(self):
        with pytest.raises(ValidationError):
            FrameDef(frame_id=FrameID.TITLE, name="tit2", field_defs=())

    def test_frozen(self):
        definition = FieldDef(field_id=FieldID.DATA, field_type=FieldType.BINARY)
        with pytest.raises(ValidationError):
            definition.fixed_size = 3

    def test_flags(self):
        definition = FieldDef(
            field_id=FieldID.TEXT,
            field_type=FieldType.UNICODE_TEXT,
            flags=FieldFlags.CSTR | FieldFlags.ENCODABLE,
        )
        assert definition.has_flag(FieldFlags.CSTR)
        assert not definition.has_flag(FieldFlags.LIST)
        assert definition.field_flags == FieldFlags.CSTR | FieldFlags.ENCODABLE


class TestCreateFields:
    """Test building fields from the catalog."""

    def test_comment(self):
        fields = create_fields(FrameID.COMMENT, encoding=TextEncoding.UTF8)
        assert [f.field_type for f in fields] == [
            FieldType.INTEGER,
            FieldType.ASCII_TEXT,
            FieldType.UNICODE_TEXT,
            FieldType.UNICODE_TEXT,
        ]
        assert fields[0].width == 1
        assert fields[1].encoding == TextEncoding.LATIN1
        assert fields[2].encoding == TextEncoding.UTF8
        assert fields[3].encoding == TextEncoding.UTF8

    def test_fields_are_fresh(self):
        first = create_fields(FrameID.TITLE)
        second = create_fields(FrameID.TITLE)
        first[1].set("Changed")
        assert second[1].num_text_items == 0
        assert not any(f.has_changed() for f in second)

    def test_frame_def_attached(self):
        fields = create_fields(FrameID.PLAYCOUNTER)
        assert fields[0].frame_def.name == "PCNT"
        assert fields[0].field_id == FieldID.COUNTER

    def test_unknown_frame(self):
        with pytest.raises(KeyError):
            create_fields(FrameID.NOFRAME)
