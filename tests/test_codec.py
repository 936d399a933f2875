"""Tests for the decoder and patcher."""

import pytest

from hksave.core.codec import decode, patch, to_surrogate_text
from hksave.core.errors import PatchFailure
from hksave.core.fields import FIELD_REGISTRY, default_fields


class TestDecode:
    """Tests for decode."""

    def test_sample(self, sample_save):
        fields = decode(sample_save)

        assert fields == {
            "geo": 1234,
            "health": 4,
            "maxHealth": 5,
            "soul": 66,
            "maxSoul": 99,
            "dreamOrbs": 150,
            "permadeathMode": 0,
            "bossRushMode": 0,
            "completionPercentage": 57.5,
        }

    def test_defaults_when_nothing_matches(self):
        assert decode(b"\x00\x01binary junk\xff\xfe") == default_fields()

    def test_empty_buffer(self):
        assert decode(b"") == default_fields()

    def test_extraction(self):
        assert decode(b'xx"geo":12345yy')["geo"] == 12345

    def test_first_occurrence_wins(self):
        assert decode(b'"geo":1,"geo":2')["geo"] == 1

    def test_prefix_key_does_not_match(self):
        assert decode(b'{"geography":5}')["geo"] == 0

    def test_space_after_colon_does_not_match(self):
        assert decode(b'{"geo": 5}')["geo"] == 0

    def test_float_forms(self):
        assert decode(b'"completionPercentage":57.')["completionPercentage"] == 57.0
        assert decode(b'"completionPercentage":112')["completionPercentage"] == 112.0

    def test_integer_stops_at_decimal_point(self):
        assert decode(b'"geo":12.5')["geo"] == 12

    def test_invalid_utf8_around_fields(self):
        assert decode(b'\xff\xc3"soul":42\xe2')["soul"] == 42

    def test_float_overflow_gives_default(self):
        data = b'"completionPercentage":' + b"9" * 400
        assert decode(data)["completionPercentage"] == 0.0

    def test_types_follow_kind(self, sample_save):
        fields = decode(sample_save)
        assert isinstance(fields["geo"], int)
        assert isinstance(fields["completionPercentage"], float)


class TestPatch:
    """Tests for patch."""

    def test_patch_correctness(self):
        fields = decode(b'"geo":0,"health":5')
        fields["geo"] = 999999

        text = to_surrogate_text(patch(b'"geo":0,"health":5', fields))

        assert '"geo":999999' in text
        assert '"health":5' in text

    def test_all_occurrences_replaced(self):
        fields = default_fields()
        fields["geo"] = 9

        assert patch(b'"geo":1,"geo":2', fields) == b'"geo":9,"geo":9'

    def test_key_boundary(self):
        fields = default_fields()
        fields["geo"] = 3

        assert patch(b'{"geography":5,"geo":1}', fields) == b'{"geography":5,"geo":3}'

    def test_float_value(self, sample_save):
        fields = decode(sample_save)
        fields["completionPercentage"] = 106.25

        patched = patch(sample_save, fields)

        assert b'"completionPercentage":106.25' in patched
        assert decode(patched)["completionPercentage"] == 106.25

    def test_integer_field_with_float_literal_replaced_whole(self):
        fields = default_fields()
        fields["geo"] = 12

        assert patch(b'"geo":12.5}', fields) == b'"geo":12}'

    def test_unrelated_bytes_untouched(self):
        prefix = b'\x01\x02header \xc3\xa9 {'
        suffix = b',"name":"Hornet"}\x7f\n'
        data = prefix + b'"geo":0' + suffix
        fields = default_fields()
        fields["geo"] = 777

        patched = patch(data, fields)

        assert patched == prefix + b'"geo":777' + suffix

    def test_invalid_utf8_is_replaced(self):
        fields = default_fields()
        fields["geo"] = 2

        assert patch(b'\xff"geo":1', fields) == b'\xef\xbf\xbd"geo":2'

    def test_input_not_modified(self, sample_save):
        data = bytearray(sample_save)
        fields = default_fields()

        patch(data, fields)

        assert bytes(data) == sample_save

    def test_out_of_range_values_round_trip(self, sample_save):
        fields = decode(sample_save)
        fields["health"] = 99
        fields["soul"] = 100000

        patched_fields = decode(patch(sample_save, fields))

        assert patched_fields["health"] == 99
        assert patched_fields["soul"] == 100000

    def test_missing_field_value(self, sample_save):
        fields = default_fields()
        del fields["soul"]

        with pytest.raises(PatchFailure):
            patch(sample_save, fields)

    def test_unformattable_value(self, sample_save):
        fields = default_fields()
        fields["geo"] = float("nan")

        with pytest.raises(PatchFailure) as exc_info:
            patch(sample_save, fields)

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_infinite_value(self, sample_save):
        fields = decode(sample_save)
        fields["completionPercentage"] = float("inf")

        with pytest.raises(PatchFailure):
            patch(sample_save, fields)

    def test_no_fields_in_buffer(self):
        data = b"\x00plain\x01"
        assert patch(data, default_fields()) == data


class TestPatchIdempotence:
    """Patching twice with the same mapping equals patching once."""

    @pytest.mark.parametrize("changes", [
        {},
        {"geo": 999999, "completionPercentage": 112.0},
        {"geo": -5},
        {"completionPercentage": 1e-7},
        {"completionPercentage": 33.333333333333336},
        {"health": 9, "maxHealth": 9, "soul": 198, "maxSoul": 198},
    ])
    def test_idempotent(self, sample_save, changes):
        fields = decode(sample_save)
        fields.update(changes)

        once = patch(sample_save, fields)

        assert patch(once, fields) == once

    def test_idempotent_with_invalid_bytes(self):
        data = b'\xff\xfe"geo":1\x80"geo":22.5'
        fields = default_fields()
        fields["geo"] = 4

        once = patch(data, fields)

        assert patch(once, fields) == once

    @pytest.mark.parametrize("data, changes", [
        (b'{"geo":1.2.3}', {"geo": 7}),
        (b'{"completionPercentage":3..5}', {"completionPercentage": 2.0}),
    ])
    def test_idempotent_with_malformed_literal(self, data, changes):
        fields = default_fields()
        fields.update(changes)

        once = patch(data, fields)

        assert patch(once, fields) == once

    def test_malformed_literal_left_alone(self):
        data = b'{"geo":1.2.3,"soul":5}'
        fields = default_fields()
        fields["geo"] = 7

        assert patch(data, fields) == b'{"geo":1.2.3,"soul":33}'

    def test_every_registered_field_patched(self, sample_save):
        fields = {spec.name: spec.default for spec in FIELD_REGISTRY}

        assert decode(patch(sample_save, fields)) == fields
