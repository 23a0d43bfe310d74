"""
Markdown Bookmark Writer
========================

Renders an ExtractedRecord as a Markdown note with YAML front matter
(Obsidian-style inbox note) and writes it to the output directory.

FILE NAMING:
    <author_handle>-<id>.md with every character outside [A-Za-z0-9-]
    replaced by "_", e.g. "@karpathy-1790" -> "_karpathy-1790.md"
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from .logger import Logger
from .models import ExtractedRecord


SUMMARY_LENGTH = 150
TITLE_SUMMARY_LENGTH = 50
DEFAULT_TAG = "twitter-bookmark"
UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9-]')


class FrontMatterDumper(yaml.SafeDumper):
    """SafeDumper that leaves empty fields blank instead of writing null"""
    pass


FrontMatterDumper.add_representer(
    type(None),
    lambda dumper, _: dumper.represent_scalar('tag:yaml.org,2002:null', '')
)


def summarize(text: str, length: int = SUMMARY_LENGTH) -> str:
    summary = text[:length].replace('\n', ' ')
    return summary + ('...' if len(text) > length else '')


def sanitize_filename(name: str) -> str:
    return UNSAFE_FILENAME_CHARS.sub('_', name)


def bookmark_filename(record: ExtractedRecord) -> str:
    return f"{sanitize_filename(f'{record.author_handle}-{record.id}')}.md"


def format_markdown(record: ExtractedRecord, now: Optional[datetime] = None) -> str:
    """Render a record as front matter, body and media embeds"""
    now = now or datetime.now()
    today = now.date()
    summary = summarize(record.text)

    front_matter = {
        'title': f'{record.author_name} on X: "{summary[:TITLE_SUMMARY_LENGTH]}..."',
        'aliases': None,
        'created': today,
        'source': record.url,
        'author': [record.author_handle],
        'published': record.published_date or today,
        'summary': summary,
        'tags': record.hashtags or [DEFAULT_TAG],
        'status': 'inbox',
        'insight': None,
        'project': None,
        'category': None,
        'area': None,
        'updated': now.strftime('%Y-%m-%dT%H:%M'),
    }
    header = yaml.dump(
        front_matter,
        Dumper=FrontMatterDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=4096,
    )
    media = '\n\n'.join(f"![]({url})" for url in record.media_urls)

    return f"---\n{header}---\n{record.text}\n\n{media}\n"


def save_bookmark(record: ExtractedRecord, output_dir, now: Optional[datetime] = None) -> Path:
    """
    Write the Markdown note for record into output_dir.

    Returns:
        Path of the written file (an existing file with the same name is overwritten)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    file_path = output_dir / bookmark_filename(record)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(format_markdown(record, now))

    Logger.success(f"Saved: {file_path.name}")
    return file_path
