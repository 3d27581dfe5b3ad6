"""
Unit tests for result type filters.
"""

import pytest

from quickfind.models.type_filter import TypeFilter


class TestTypeFilterParse:
    """Test cases for TypeFilter.parse."""

    @pytest.mark.parametrize("value,expected", [
        ("image", TypeFilter.IMAGE),
        ("PDF", TypeFilter.PDF),
        (" folder ", TypeFilter.FOLDER),
        (TypeFilter.APP, TypeFilter.APP),
        (None, TypeFilter.ALL),
        ("", TypeFilter.ALL),
    ])
    def test_known_values(self, value, expected):
        """Test conversion of valid filter names."""
        assert TypeFilter.parse(value) is expected

    def test_unknown_value_degrades_to_all(self):
        """Test that an unknown filter searches all types."""
        assert TypeFilter.parse("spreadsheet") is TypeFilter.ALL


class TestTypeFilterAccepts:
    """Test cases for TypeFilter.accepts on indexed paths."""

    def test_all_accepts_everything(self):
        """Test that ALL never rejects."""
        assert TypeFilter.ALL.accepts("/Users/u/anything.xyz")
        assert TypeFilter.ALL.accepts("/Users/u/Folder")

    def test_image_extensions_case_insensitive(self):
        """Test that extensions are compared case-insensitively."""
        assert TypeFilter.IMAGE.accepts("/Users/u/Desktop/IMG_0001.JPG")
        assert TypeFilter.IMAGE.accepts("/Users/u/Desktop/shot.heic")
        assert not TypeFilter.IMAGE.accepts("/Users/u/Desktop/clip.mov")

    def test_doc_includes_pdf(self):
        """Test that documents include PDFs and office files."""
        assert TypeFilter.DOC.accepts("/Users/u/report.pdf")
        assert TypeFilter.DOC.accepts("/Users/u/budget.xlsx")
        assert not TypeFilter.DOC.accepts("/Users/u/song.mp3")

    def test_folder_heuristic(self):
        """Test that folders are paths without a dot, or application bundles."""
        assert TypeFilter.FOLDER.accepts("/Users/u/Documents/Projects")
        assert TypeFilter.FOLDER.accepts("/Applications/Safari.app")
        assert not TypeFilter.FOLDER.accepts("/Users/u/notes.txt")
        assert not TypeFilter.FOLDER.accepts("/Users/first.last/Documents")

    def test_app_bundles(self):
        """Test application bundle and preference pane matching."""
        assert TypeFilter.APP.accepts("/Applications/Safari.app")
        assert TypeFilter.APP.accepts("/Library/PreferencePanes/Java.prefPane")
        assert not TypeFilter.APP.accepts("/Applications/Safari.app/Contents/Info.plist")
        assert not TypeFilter.APP.accepts("/Users/u/readme.md")


class TestTypeFilterPredicates:
    """Test cases for native index predicates."""

    def test_all_has_no_predicate(self):
        """Test that ALL adds no restriction."""
        assert TypeFilter.ALL.native_predicate == ""

    def test_predicates(self):
        """Test representative predicates."""
        assert TypeFilter.PDF.native_predicate == "kMDItemContentTypeTree == 'com.adobe.pdf'"
        assert "public.folder" in TypeFilter.FOLDER.native_predicate
        assert "com.apple.application-bundle" in TypeFilter.APP.native_predicate
        assert "com.apple.systempreference.pane" in TypeFilter.APP.native_predicate

    def test_every_filter_has_entries(self):
        """Test that every filter defines a predicate and extension list."""
        for type_filter in TypeFilter:
            assert isinstance(type_filter.native_predicate, str)
            assert isinstance(type_filter.extensions, tuple)
