import pytest
import json
from unittest.mock import patch
from webreplay.utils.file_io import safe_read_json, safe_write_json, write_json

def test_safe_read_json_success(tmp_path):
    f = tmp_path / "test.json"
    data = {"hello": "world"}
    f.write_text(json.dumps(data))
    assert safe_read_json(f) == data

def test_safe_read_json_missing(tmp_path):
    f = tmp_path / "missing.json"
    assert safe_read_json(f, default={"def": 1}) == {"def": 1}

def test_safe_read_json_corrupt(tmp_path):
    f = tmp_path / "corrupt.json"
    f.write_text("{invalid")
    assert safe_read_json(f, default={}) == {}

def test_safe_read_json_blank(tmp_path):
    f = tmp_path / "blank.json"
    f.write_text("   \n")
    assert safe_read_json(f) == {}

def test_safe_write_json_success(tmp_path):
    f = tmp_path / "subdir" / "output.json"
    data = {"key": "val"}
    assert safe_write_json(f, data) is True
    assert json.loads(f.read_text()) == data

@patch("pathlib.Path.write_text")
def test_safe_write_json_permission_error(mock_write, tmp_path):
    mock_write.side_effect = PermissionError("Denied")
    assert safe_write_json(tmp_path / "locked.json", {"test": 1}) is False

@patch("pathlib.Path.write_text")
def test_write_json_raises(mock_write, tmp_path):
    mock_write.side_effect = PermissionError("Denied")
    with pytest.raises(PermissionError):
        write_json(tmp_path / "locked.json", [])

def test_write_json_keeps_unicode(tmp_path):
    f = tmp_path / "u.json"
    write_json(f, ["wörld"])
    assert "wörld" in f.read_text(encoding="utf-8")
