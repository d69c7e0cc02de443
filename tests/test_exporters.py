"""
Tests for rendering, export and utility helpers.
"""

import csv
import json

import pytest

from quadmatch.models import ImageRecord, MatchGroup, ScanFailure, ScanResult
from quadmatch.rendering import group_block, image_fragment, render_groups, render_report_html
from quadmatch.utils import (
    export_results,
    format_count,
    format_duration,
    format_percent,
    preview_status,
    validate_export_target,
    validate_scan_directory,
)


@pytest.fixture
def result():
    a = ImageRecord(path="/p/a.jpg", width=250, height=125, matches=["/p/b.jpg", "/p/a.jpg"])
    b = ImageRecord(path="/p/b.jpg", width=125, height=250, matches=["/p/b.jpg", "/p/a.jpg"])
    c = ImageRecord(path="/p/c.jpg", width=250, height=200, matches=["/p/c.jpg"])
    return ScanResult(records=[a, b, c], failures=[ScanFailure(path="/p/bad.jpg", error="File not found")])


class TestRendering:
    """Tests for HTML fragments."""

    def test_image_fragment(self):
        record = ImageRecord(path="/p/a.jpg", width=250, height=125)
        assert image_fragment(record) == '<img width="250px" src="/p/a.jpg"></img>'
        assert image_fragment(record, size=100) == '<img width="100px" src="/p/a.jpg"></img>'

    def test_image_fragment_portrait(self):
        record = ImageRecord(path="/p/b.jpg", width=125, height=250)
        assert image_fragment(record) == '<img height="250px" src="/p/b.jpg"></img>'

    def test_image_fragment_escapes_path(self):
        record = ImageRecord(path='/p/"quoted" & more.jpg', width=2, height=1)
        assert 'src="/p/&quot;quoted&quot; &amp; more.jpg"' in image_fragment(record)

    def test_image_fragment_source_mapper(self):
        record = ImageRecord(path="/p/a.jpg", width=250, height=125)
        fragment = image_fragment(record, src_for=lambda p: "file://" + p)
        assert 'src="file:///p/a.jpg"' in fragment

    def test_group_block(self):
        images = [
            ImageRecord(path="/p/a.jpg", width=250, height=125),
            ImageRecord(path="/p/b.jpg", width=125, height=250),
        ]
        assert group_block(images) == (
            '<div style="display:inline-flex">\n<br>'
            '<img width="250px" src="/p/a.jpg"></img>\n<br>\n'
            '<img height="250px" src="/p/b.jpg"></img>\n<br>\n</div>'
        )

    def test_render_groups_separated_by_rules(self):
        one = MatchGroup(id=1, images=[ImageRecord(path="/a", width=2, height=1)])
        two = MatchGroup(id=2, images=[ImageRecord(path="/b", width=2, height=1)])
        rendered = render_groups([one, two])
        assert rendered.count('\n<hr>\n') == 1
        assert rendered.index('/a') < rendered.index('/b')

    def test_report_page(self, result):
        page = render_report_html(result, title="Holiday <2024>")
        assert page.startswith('<!DOCTYPE html>')
        assert '<title>Holiday &lt;2024&gt;</title>' in page
        assert '3 images scanned, 1 match groups, 1 skipped' in page
        assert '/p/c.jpg' not in page
        assert '<li>/p/bad.jpg: File not found</li>' in page


class TestExportResults:
    """Tests for export_results."""

    def test_html(self, result, temp_dir):
        output = temp_dir / "report.html"
        export_results(result, output, 'html', image_size=120)
        assert '<img width="120px" src="/p/a.jpg"></img>' in output.read_text()

    def test_txt(self, result, temp_dir):
        output = temp_dir / "report.txt"
        export_results(result, output, 'txt')
        text = output.read_text()
        assert text.startswith("SIMILAR IMAGE REPORT")
        assert "Group 1 (2 images):" in text
        assert "/p/bad.jpg: File not found" in text

    def test_csv(self, result, temp_dir):
        output = temp_dir / "report.csv"
        export_results(result, output, 'csv')
        with open(output, newline='') as f:
            rows = list(csv.reader(f))
        assert rows[0] == ['group_id', 'path', 'width', 'height', 'greater_dimension']
        assert rows[1] == ['1', '/p/b.jpg', '125', '250', 'height']
        assert rows[2] == ['1', '/p/a.jpg', '250', '125', 'width']

    def test_json(self, result, temp_dir):
        output = temp_dir / "report.json"
        export_results(result, output, 'json')
        data = json.loads(output.read_text())
        assert [g['image_count'] for g in data['groups']] == [2]
        assert data['failures'][0]['path'] == "/p/bad.jpg"

    def test_unknown_format(self, result, temp_dir):
        with pytest.raises(ValueError):
            export_results(result, temp_dir / "x", 'xml')


class TestFormatters:
    """Tests for formatting helpers."""

    def test_format_count(self):
        assert format_count(1, 'image') == "1 image"
        assert format_count(0, 'match group') == "0 match groups"
        assert format_count(1234567, 'image') == "1,234,567 images"

    def test_format_duration(self):
        assert format_duration(0.042) == "42ms"
        assert format_duration(7.5) == "7.5s"
        assert format_duration(150) == "2m 30s"

    def test_format_percent(self):
        assert format_percent(0.85) == "85%"
        assert format_percent(0.125) == "12.5%"


class TestValidators:
    """Tests for up-front input checks."""

    def test_scan_directory(self, temp_dir):
        assert validate_scan_directory(temp_dir) == (True, "")
        assert validate_scan_directory(None) == (False, "No directory given")
        assert validate_scan_directory(temp_dir / "nope")[1].startswith("Directory not found")

    def test_scan_directory_rejects_file(self, temp_dir):
        path = temp_dir / "file.jpg"
        path.write_text("x")
        assert validate_scan_directory(path)[1].startswith("Not a directory")

    def test_export_target(self, temp_dir):
        assert validate_export_target(None, 'html') == (True, "")
        assert validate_export_target(temp_dir / "out.csv", 'csv') == (True, "")

    def test_export_target_problems(self, temp_dir):
        assert validate_export_target(temp_dir / "out.xml", 'xml')[1] == "Unsupported export format: xml"
        assert validate_export_target(temp_dir, 'html')[1].startswith("Export path is a directory")
        assert validate_export_target(temp_dir / "missing" / "out.html", 'html')[1].startswith(
            "Export directory does not exist"
        )

    def test_preview_status(self, temp_dir):
        path = temp_dir / "a.jpg"
        path.write_text("x")
        scanned = {str(path), str(temp_dir / "gone.jpg")}

        assert preview_status(str(path), scanned) == (200, "")
        assert preview_status("", scanned)[0] == 400
        assert preview_status(str(temp_dir / "other.jpg"), scanned)[0] == 403
        assert preview_status(str(temp_dir / "gone.jpg"), scanned)[0] == 404
