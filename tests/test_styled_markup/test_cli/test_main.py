"""Tests for the styled-markup command-line tool."""

import json
import xml.etree.ElementTree as ET

import pytest

from styled_markup.cli.main import create_argument_parser, main


@pytest.fixture
def markup_file(tmp_path):
    path = tmp_path / "page.xml"
    path.write_text("<b>Hi</b> there<br/>bye", encoding="utf-8")
    return path


class TestArgumentParser:
    """Test command-line parsing."""

    def test_render_defaults(self, markup_file):
        """Test default render flags."""
        args = create_argument_parser().parse_args(["render", str(markup_file)])

        assert args.command == "render"
        assert args.format == "json"
        assert args.platform == "ios"
        assert args.line_spacing is None


class TestRender:
    """Test the render command."""

    def test_json(self, markup_file, capsys):
        """Test JSON output."""
        assert main(["render", str(markup_file)]) == 0

        data = json.loads(capsys.readouterr().out)
        texts = [child["attributed_string"]["text"] for child in data["children"]]
        assert texts == ["Hi there", "bye"]

    def test_xml(self, markup_file, capsys):
        """Test XML output."""
        assert main(["render", str(markup_file), "--format", "xml"]) == 0

        root = ET.fromstring(capsys.readouterr().out)
        assert [label.text for label in root.findall("label")] == ["Hi there", "bye"]

    def test_options(self, markup_file, capsys):
        """Test spacing and font size flags."""
        code = main([
            "render", str(markup_file),
            "--line-spacing", "4", "--character-spacing", "1.5",
            "--base-font-size", "18",
        ])

        assert code == 0
        label = json.loads(capsys.readouterr().out)["children"][0]
        assert label["properties"]["font"] == {"font_size": 18.0}
        types = [a["type"] for a in label["attributed_string"]["attributes"]]
        assert "PARAGRAPH_STYLE" in types
        assert "KERN" in types

    def test_android_platform(self, markup_file, capsys):
        """Test that Android output sets line spacing on the label."""
        code = main([
            "render", str(markup_file), "--platform", "android",
            "--line-spacing", "4",
        ])

        assert code == 0
        label = json.loads(capsys.readouterr().out)["children"][0]
        assert label["properties"]["line_spacing"] == {"add": 4.0, "multiply": 1.2}
        types = [a["type"] for a in label["attributed_string"]["attributes"]]
        assert "PARAGRAPH_STYLE" not in types

    def test_invalid_option(self, markup_file, capsys):
        """Test rejected option values."""
        assert main(["render", str(markup_file), "--base-font-size", "0"]) == 1
        assert "Invalid options" in capsys.readouterr().err

    def test_report(self, markup_file, capsys):
        """Test the compile report on stderr."""
        assert main(["render", str(markup_file), "--report"]) == 0

        report = json.loads(capsys.readouterr().err)
        assert report["labels_created"] == 2

    def test_missing_file(self, tmp_path, capsys):
        """Test an unreadable input file."""
        assert main(["render", str(tmp_path / "missing.xml")]) == 1
        assert "Cannot read" in capsys.readouterr().err

    def test_no_command(self, capsys):
        """Test running without a command."""
        assert main([]) == 1
