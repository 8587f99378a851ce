import pytest

from import_tidy.errors import SourceParseError
from import_tidy.parser import extract_import_block
from import_tidy.rules import Tier

PREFIX = "git.co/internal"


def test_extract_import_block():
    source = (
        b"package main\n"
        b"\n"
        b"import (\n"
        b"\t\"fmt\"\n"
        b"\n"
        b"\tbar \"github.com/foo/bar\"\n"
        b"\t_ \"git.co/internal/x\"\n"
        b")\n"
        b"\n"
        b"func main() {}\n"
    )
    block = extract_import_block(source, PREFIX)
    assert block is not None
    assert [e.path for e in block.entries] == ["fmt", "github.com/foo/bar", "git.co/internal/x"]
    assert [e.alias for e in block.entries] == [None, "bar", "_"]
    assert [e.tier for e in block.entries] == [Tier.STANDARD, Tier.EXTERNAL, Tier.INTERNAL]
    assert [e.start_line for e in block.entries] == [4, 6, 7]
    assert (block.start_line, block.end_line) == (3, 8)
    assert source[block.start_byte:block.end_byte].startswith(b"import (")
    assert source[block.start_byte:block.end_byte].endswith(b")")


def test_extract_single_import_and_raw_string():
    block = extract_import_block(b"package main\n\nimport . `strings`\n", PREFIX)
    assert len(block.entries) == 1
    assert block.entries[0].path == "strings"
    assert block.entries[0].alias == "."


def test_extract_without_imports():
    assert extract_import_block(b"package main\n\nfunc main() {}\n", PREFIX) is None


def test_extract_first_declaration_only():
    source = b"package main\n\nimport \"C\"\n\nimport \"fmt\"\n"
    block = extract_import_block(source, PREFIX)
    assert [e.path for e in block.entries] == ["C"]


def test_extract_attaches_comments():
    source = (
        b"package main\n"
        b"\n"
        b"import (\n"
        b"\t// printing\n"
        b"\t\"fmt\"\n"
        b"\t\"os\" // exit codes\n"
        b")\n"
    )
    block = extract_import_block(source, PREFIX)
    fmt, os_entry = block.entries
    assert fmt.doc == ("// printing",)
    assert fmt.start_line == 5
    assert fmt.doc_lines == frozenset({4})
    assert fmt.comment is None
    assert os_entry.comment == "// exit codes"
    assert os_entry.doc == ()


def test_extract_invalid_source_raises():
    with pytest.raises(SourceParseError):
        extract_import_block(b"package main\n\nimport (\n\t\"fmt\"\n\nfunc {\n", PREFIX)


def test_extract_multiline_doc_comment():
    source = (
        b"package main\n"
        b"\n"
        b"import (\n"
        b"\t\"fmt\"\n"
        b"\t/* output\n"
        b"\t   helpers */\n"
        b"\t\"os\"\n"
        b")\n"
    )
    os_entry = extract_import_block(source, PREFIX).entries[1]
    assert os_entry.doc == ("/* output\n   helpers */",)
    assert os_entry.doc_lines == frozenset({5, 6})
    assert os_entry.start_line == 7


def test_extract_invalid_utf8_raises():
    source = b"package main\n\nimport (\n\t\"fmt\" // \xff\xfe\n\t\"os\"\n)\n"
    with pytest.raises(SourceParseError) as excinfo:
        extract_import_block(source, PREFIX)
    assert excinfo.value.lineno == 4
