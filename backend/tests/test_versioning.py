"""Tests for the bundle version policy."""

from datetime import datetime, timedelta, timezone

import pytest

from designkit.bundles.models import CompiledBundle
from designkit.bundles.versioning import BundleVersion, next_version, time_patch

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _previous(version, token_count=2, content_hash="abc"):
    return CompiledBundle(
        type="global",
        version=version,
        css_content=":root {}",
        json_content="{}",
        token_count=token_count,
        created_at=NOW - timedelta(days=1),
        content_hash=content_hash,
    )


class TestBundleVersion:
    @pytest.mark.parametrize("text,expected", [
        ("1.2.3", BundleVersion(1, 2, 3)),
        ("v2.0.10", BundleVersion(2, 0, 10)),
        (" 1.0.0 ", BundleVersion(1, 0, 0)),
    ])
    def test_parse(self, text, expected):
        assert BundleVersion.parse(text) == expected

    @pytest.mark.parametrize("text", ["", "1.2", "one.two.three", None, "1.2.3-beta"])
    def test_parse_rejects_malformed(self, text):
        assert BundleVersion.parse(text) is None

    def test_str(self):
        assert str(BundleVersion(1, 4, 99)) == "1.4.99"

    def test_ordering_is_numeric(self):
        assert BundleVersion(1, 10, 0) > BundleVersion(1, 9, 999)


class TestNextVersion:
    def test_first_bundle(self):
        assert next_version(None, 2, "h", NOW) == BundleVersion(1, 0, time_patch(NOW))

    def test_token_count_growth_bumps_minor(self):
        version = next_version(_previous("1.0.5", token_count=2), 3, "h", NOW)
        assert (version.major, version.minor) == (1, 1)

    def test_same_count_keeps_minor(self):
        version = next_version(_previous("1.3.5", token_count=2), 2, "other", NOW)
        assert (version.major, version.minor) == (1, 3)

    def test_shrinking_keeps_minor(self):
        version = next_version(_previous("1.3.5", token_count=5), 2, "h", NOW)
        assert version.minor == 3

    def test_content_change_bumps_minor_when_enabled(self):
        version = next_version(
            _previous("1.3.5", content_hash="old"), 2, "new", NOW, bump_minor_on_change=True,
        )
        assert version.minor == 4

    def test_unchanged_content_does_not_bump_when_enabled(self):
        version = next_version(
            _previous("1.3.5", content_hash="same"), 2, "same", NOW, bump_minor_on_change=True,
        )
        assert version.minor == 3

    def test_patch_is_timestamp(self):
        version = next_version(_previous("1.0.5"), 2, "h", NOW)
        assert version.patch == time_patch(NOW)

    def test_never_decreases_when_clock_goes_back(self):
        future_patch = time_patch(NOW) + 10_000
        previous = _previous(f"1.0.{future_patch}")
        version = next_version(previous, 2, "h", NOW)
        assert version > BundleVersion.parse(previous.version)
        assert version == BundleVersion(1, 0, future_patch + 1)

    def test_major_bump_resets_minor(self):
        version = next_version(_previous("1.7.5"), 10, "h", NOW, major=2)
        assert (version.major, version.minor) == (2, 0)

    def test_higher_previous_major_is_kept(self):
        version = next_version(_previous("3.1.5"), 2, "h", NOW, major=1)
        assert version.major == 3
        assert version > BundleVersion(3, 1, 5)

    def test_unparsable_previous_starts_over(self):
        assert next_version(_previous("garbage"), 2, "h", NOW).minor == 0
