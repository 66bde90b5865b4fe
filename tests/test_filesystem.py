import re

import pytest

from litho_book.errors import DirectoryScanError, FileNotFoundInTreeError
from litho_book.filesystem import DocumentTree, FileNode, TreeStats, format_timestamp


@pytest.fixture
def docs(tmp_path):
    (tmp_path / "guide").mkdir()
    (tmp_path / "guide" / "b.md").write_text("# B\n", encoding="utf-8")
    (tmp_path / "guide" / "A.md").write_text("# A\n", encoding="utf-8")
    (tmp_path / "guide" / "notes.txt").write_text("skip", encoding="utf-8")
    (tmp_path / "api").mkdir()
    (tmp_path / "api" / "index.md").write_text("api docs", encoding="utf-8")
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "secret.md").write_text("x", encoding="utf-8")
    (tmp_path / "a.md").write_text("lower", encoding="utf-8")
    (tmp_path / "B.md").write_text("upper", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")
    (tmp_path / ".draft.md").write_text("hidden", encoding="utf-8")
    return tmp_path


def names(node):
    return [child.name for child in node.children]


def test_root_node(docs):
    tree = DocumentTree(docs)
    assert tree.root.name == "root"
    assert tree.root.path == ""
    assert tree.root.is_file is False


def test_top_level_order_dirs_first_case_sensitive(docs):
    tree = DocumentTree(docs)
    assert names(tree.root) == ["api", "guide", "B.md", "a.md"]


def test_nested_order_is_case_insensitive(docs):
    tree = DocumentTree(docs)
    guide = next(child for child in tree.root.children if child.name == "guide")
    assert names(guide) == ["A.md", "b.md"]
    assert [child.path for child in guide.children] == ["guide/A.md", "guide/b.md"]


def test_hidden_and_non_markdown_skipped(docs):
    tree = DocumentTree(docs)
    assert set(tree.file_map) == {"api/index.md", "guide/A.md", "guide/b.md", "a.md", "B.md"}


def test_stats(docs):
    tree = DocumentTree(docs)
    assert tree.stats.total_files == 5
    assert tree.stats.total_dirs == 2
    expected = sum(path.stat().st_size for path in tree.file_map.values())
    assert tree.stats.total_size == expected


def test_file_nodes_have_metadata(docs):
    tree = DocumentTree(docs)
    node = next(child for child in tree.root.children if child.name == "a.md")
    assert node.is_file
    assert node.size == len("lower")
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", node.modified)


def test_to_dict_omits_unknown_fields(docs):
    tree = DocumentTree(docs)
    data = tree.root.to_dict()
    assert "size" not in data and "modified" not in data
    files = [child for child in data["children"] if child["is_file"]]
    assert all("size" in child and "modified" in child for child in files)
    assert data["children"][0]["children"][0]["path"] == "api/index.md"


def test_to_dict_of_plain_node():
    node = FileNode(name="x.md", path="x.md", is_file=True, size=3)
    assert node.to_dict() == {
        "name": "x.md",
        "path": "x.md",
        "is_file": True,
        "children": [],
        "size": 3,
    }


def test_empty_directory(tmp_path):
    tree = DocumentTree(tmp_path)
    assert tree.root.children == []
    assert tree.stats == TreeStats(0, 0, 0)


def test_missing_directory_raises(tmp_path):
    with pytest.raises(DirectoryScanError):
        DocumentTree(tmp_path / "absent")


def test_get_file_content(docs):
    tree = DocumentTree(docs)
    assert tree.get_file_content("api/index.md") == "api docs"


def test_get_file_content_unknown(docs):
    tree = DocumentTree(docs)
    with pytest.raises(FileNotFoundInTreeError) as info:
        tree.get_file_content("guide/notes.txt")
    assert info.value.path == "guide/notes.txt"


def test_file_metadata(docs):
    tree = DocumentTree(docs)
    size, modified = tree.file_metadata("B.md")
    assert size == len("upper")
    assert modified == format_timestamp((docs / "B.md").stat().st_mtime)
    assert tree.file_metadata("nope.md") is None


def test_search_is_case_insensitive(docs):
    tree = DocumentTree(docs)
    assert sorted(tree.search_files("GUIDE")) == ["guide/A.md", "guide/b.md"]
    assert tree.search_files("index") == ["api/index.md"]
    assert tree.search_files("zzz") == []


def test_search_empty_matches_everything(docs):
    tree = DocumentTree(docs)
    assert sorted(tree.search_files("")) == sorted(tree.file_map)


def test_format_timestamp_epoch():
    assert format_timestamp(0) == "1970-01-01 00:00:00"


def test_format_timestamp_before_epoch():
    assert format_timestamp(-5) is None


def test_format_timestamp_truncates_fraction():
    assert format_timestamp(0.9) == format_timestamp(0)


@pytest.fixture
def tree(tmp_path):
    return DocumentTree(tmp_path)


def test_render_table(tree):
    out = tree.render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<table" in out and "<td>1</td>" in out


def test_render_strikethrough(tree):
    assert "<del>gone</del>" in tree.render_markdown("~~gone~~")


def test_render_task_list(tree):
    out = tree.render_markdown("- [x] done\n- [ ] todo\n")
    assert out.count('type="checkbox"') == 2


def test_render_footnote(tree):
    out = tree.render_markdown("Text[^1]\n\n[^1]: Note.\n")
    assert "footnote" in out and "Note." in out


def test_render_smart_punctuation(tree):
    out = tree.render_markdown('He said "hi" -- wait... it\'s done')
    assert "\u201chi\u201d" in out
    assert "\u2013" in out
    assert "\u2026" in out
    assert "it\u2019s" in out


def test_render_code_is_not_smartened(tree):
    out = tree.render_markdown('`"x" -- y`')
    assert "\u201c" not in out and "--" in out


def test_render_heading_attributes(tree):
    out = tree.render_markdown("# Title {#intro .big .wide}\n")
    assert 'id="intro"' in out
    assert 'class="big wide"' in out
    assert "{" not in out and "Title</h1>" in out


def test_render_plain_heading(tree):
    assert tree.render_markdown("## Plain\n").strip() == "<h2>Plain</h2>"