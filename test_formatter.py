"""
Tests for the Markdown note writer.
"""

from datetime import date, datetime

import yaml

from bookmark_pipeline.formatter import (
    DEFAULT_TAG,
    bookmark_filename,
    format_markdown,
    sanitize_filename,
    save_bookmark,
    summarize,
)
from bookmark_pipeline.models import ExtractedRecord

NOW = datetime(2024, 5, 1, 9, 30, 12)


def make_record(**overrides) -> ExtractedRecord:
    fields = dict(
        id="1790000000000000001",
        url="https://x.com/karpathy/status/1790000000000000001",
        text="Training a GPT from scratch #llm #python\nSecond line",
        author_name="Andrej Karpathy",
        author_handle="@karpathy",
        published_date=date(2024, 4, 28),
        media_urls=("https://pbs.twimg.com/media/a.jpg", "https://pbs.twimg.com/poster/b.jpg"),
    )
    fields.update(overrides)
    return ExtractedRecord(**fields)


def split_front_matter(content: str):
    _, header, body = content.split('---\n', 2)
    return yaml.safe_load(header), body


def test_filename_is_sanitized():
    assert sanitize_filename("@karpathy-123") == "_karpathy-123"
    assert sanitize_filename("a.b/c d") == "a_b_c_d"
    assert bookmark_filename(make_record()) == "_karpathy-1790000000000000001.md"


def test_summarize():
    assert summarize("short\ntext") == "short text"
    long_text = "x" * 200
    assert summarize(long_text) == "x" * 150 + "..."


def test_front_matter_fields():
    meta, _ = split_front_matter(format_markdown(make_record(), now=NOW))

    assert meta['title'].startswith('Andrej Karpathy on X: "Training a GPT')
    assert meta['created'] == date(2024, 5, 1)
    assert meta['published'] == date(2024, 4, 28)
    assert meta['source'] == "https://x.com/karpathy/status/1790000000000000001"
    assert meta['author'] == ["@karpathy"]
    assert meta['tags'] == ["llm", "python"]
    assert meta['status'] == "inbox"
    assert meta['updated'] == "2024-05-01T09:30"
    assert meta['summary'] == "Training a GPT from scratch #llm #python Second line"
    for blank in ('aliases', 'insight', 'project', 'category', 'area'):
        assert meta[blank] is None, f"{blank} should be left blank"


def test_front_matter_defaults():
    record = make_record(text="No tags here", published_date=None, media_urls=())
    content = format_markdown(record, now=NOW)
    meta, _ = split_front_matter(content)

    assert meta['published'] == date(2024, 5, 1), "published falls back to today"
    assert meta['tags'] == [DEFAULT_TAG]
    assert "aliases:\n" in content, "empty fields are blank, not null"


def test_body_and_media_follow_front_matter():
    _, body = split_front_matter(format_markdown(make_record(), now=NOW))

    assert body.startswith("Training a GPT from scratch #llm #python\nSecond line\n\n")
    assert "![](https://pbs.twimg.com/media/a.jpg)\n\n![](https://pbs.twimg.com/poster/b.jpg)" in body


def test_save_bookmark_creates_directory_and_overwrites(tmp_path):
    output_dir = tmp_path / "notes" / "inbox"
    first = save_bookmark(make_record(text="first version"), output_dir, now=NOW)
    second = save_bookmark(make_record(text="second version"), output_dir, now=NOW)

    assert first == second == output_dir / "_karpathy-1790000000000000001.md"
    assert "second version" in second.read_text(encoding='utf-8')
    assert len(list(output_dir.iterdir())) == 1
