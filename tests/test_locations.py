from pathlib import Path

from lspbridge.core.locations import LocationResultBuilder, LocationResultTask
from lspbridge.core.locator import DocumentLocator
from lspbridge.core.models import FileKey, Location, Range

from conftest import FakeShell


def _builder(shell: FakeShell = None) -> LocationResultBuilder:
    return LocationResultBuilder(DocumentLocator((lambda: shell) if shell is not None else None))


def test_preview_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "Main.java"
    path.write_text("int a = 1;\nint foo = bar();\n", encoding="utf-8")
    file = FileKey.of(path)

    results = _builder().build([Location(file, Range.of(1, 4, 1, 7))])

    [preview] = results[file]
    assert preview.line_text == "int foo = bar();"
    assert preview.match_text == "foo"
    assert preview.range == Range.of(1, 4, 1, 7)


def test_open_document_text_is_preferred_over_disk(tmp_path: Path, shell: FakeShell) -> None:
    path = tmp_path / "Main.java"
    path.write_text("old text here\n", encoding="utf-8")
    doc = shell.add_document(path, "new unsaved text\n")

    results = _builder(shell).build([Location(doc.file, Range.of(0, 4, 0, 11))])

    assert results[doc.file][0].match_text == "unsaved"


def test_bad_range_is_skipped_and_others_kept(tmp_path: Path) -> None:
    path = tmp_path / "Main.java"
    path.write_text("one\ntwo\n", encoding="utf-8")
    file = FileKey.of(path)

    results = _builder().build([
        Location(file, Range.of(0, 0, 0, 3)),
        Location(file, Range.of(40, 0, 40, 2)),
        Location(file, Range.of(1, 0, 1, 3)),
    ])

    assert [p.match_text for p in results[file]] == ["one", "two"]


def test_missing_files_directories_and_none_are_skipped(tmp_path: Path) -> None:
    (tmp_path / "pkg").mkdir()
    results = _builder().build([
        None,
        Location(FileKey.of(tmp_path / "Gone.java"), Range.point(0, 0)),
        Location(FileKey.of(tmp_path / "pkg"), Range.point(0, 0)),
    ])
    assert results == {}


def test_results_grouped_per_file_in_first_seen_order(tmp_path: Path) -> None:
    a = tmp_path / "A.java"
    b = tmp_path / "B.java"
    a.write_text("alpha\nbeta\n", encoding="utf-8")
    b.write_text("gamma\n", encoding="utf-8")
    fa, fb = FileKey.of(a), FileKey.of(b)

    results = _builder().build([
        Location(fb, Range.of(0, 0, 0, 5)),
        Location(fa, Range.of(1, 0, 1, 4)),
        Location(fa, Range.of(0, 0, 0, 5)),
    ])

    assert list(results) == [fb, fa]
    assert [p.match_text for p in results[fa]] == ["beta", "alpha"]


def test_multi_line_match_keeps_first_line_as_preview(tmp_path: Path) -> None:
    path = tmp_path / "Main.java"
    path.write_text("void f() {\n  return;\n}\n", encoding="utf-8")
    file = FileKey.of(path)

    [preview] = _builder().build([Location(file, Range.of(0, 9, 2, 1))])[file]

    assert preview.line_text == "void f() {"
    assert preview.match_text == "{\n  return;\n}"


def test_location_task_emits_results(tmp_path: Path) -> None:
    path = tmp_path / "Main.java"
    path.write_text("hello\n", encoding="utf-8")
    file = FileKey.of(path)
    emitted = []
    task = LocationResultTask(_builder(), [Location(file, Range.of(0, 0, 0, 5))])
    task.signals.finished.connect(emitted.append)

    task.run()

    assert emitted[0][file][0].match_text == "hello"


def test_captured_texts_replace_live_document_reads(tmp_path: Path, shell: FakeShell) -> None:
    path = tmp_path / "Main.java"
    path.write_text("old text here\n", encoding="utf-8")
    doc = shell.add_document(path, "new unsaved text\n")
    other = tmp_path / "Other.java"
    other.write_text("on disk\n", encoding="utf-8")
    locations = [Location(doc.file, Range.of(0, 4, 0, 11)), Location(FileKey.of(other), Range.of(0, 0, 0, 2))]
    builder = _builder(shell)

    open_texts = builder.capture_open_texts(locations)
    assert open_texts == {doc.file: "new unsaved text\n"}

    # Later edits to the live document are not seen by a build using the snapshot
    doc.insert(0, 0, "X")
    results = builder.build(locations, open_texts)

    assert results[doc.file][0].match_text == "unsaved"
    assert results[FileKey.of(other)][0].match_text == "on"


def test_empty_snapshot_reads_disk_even_for_open_files(tmp_path: Path, shell: FakeShell) -> None:
    path = tmp_path / "Main.java"
    path.write_text("old text here\n", encoding="utf-8")
    doc = shell.add_document(path, "new unsaved text\n")

    results = _builder(shell).build([Location(doc.file, Range.of(0, 0, 0, 3))], {})

    assert results[doc.file][0].match_text == "old"
