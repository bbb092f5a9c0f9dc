"""Tests for CsvImportService."""

import csv
from unittest.mock import MagicMock

import pytest

from chinese_learn.core import Chapter, Vocabulary
from chinese_learn.io import ApiError
from chinese_learn.services import CsvImportService


@pytest.fixture
def chapter_repository():
    repo = MagicMock()
    repo.list_chapters.return_value = [Chapter(id=1, name="HSK 1")]
    repo.create_chapter.return_value = Chapter(id=2, name="HSK 2")
    return repo


@pytest.fixture
def vocabulary_repository():
    repo = MagicMock()
    repo.list_for_chapter.return_value = [Vocabulary(id=10, chinese="你好", chapter_id=1)]
    repo.update_vocabulary.side_effect = lambda vocab_id, chapter_id, **kw: Vocabulary(
        id=vocab_id, chinese=kw["chinese"], meaning=kw["meaning"], chapter_id=chapter_id
    )
    repo.create_batch.side_effect = lambda chapter_id, records: [
        Vocabulary(id=100 + i, chinese=r["chinese"], chapter_id=chapter_id) for i, r in enumerate(records)
    ]
    return repo


@pytest.fixture
def service(chapter_repository, vocabulary_repository):
    return CsvImportService(chapter_repository, vocabulary_repository)


def write_csv(path, rows):
    path.write_text("Chinese,Pinyin,English Meaning\n" + "".join(f"{r}\n" for r in rows), encoding="utf-8")


def test_existing_words_are_updated_and_new_ones_batched(service, vocabulary_repository, tmp_path):
    write_csv(tmp_path / "lesson1.csv", ["你好,nǐ hǎo,hello", "谢谢,xiè xie,thanks", "谢谢,xiè xie,thank you"])

    summary = service.import_directory(tmp_path, "HSK 1")

    assert summary.chapter.id == 1
    vocabulary_repository.update_vocabulary.assert_called_once()
    records = vocabulary_repository.create_batch.call_args.args[1]
    assert [r["chinese"] for r in records] == ["谢谢"]
    assert records[0]["meaning"] == "thank you"
    assert (summary.created, summary.updated) == (1, 1)


def test_missing_chapter_is_created(service, chapter_repository, tmp_path):
    write_csv(tmp_path / "lesson.csv", ["好,hǎo,good"])

    summary = service.import_directory(tmp_path, "HSK 2", "Second level")

    chapter_repository.create_chapter.assert_called_once_with("HSK 2", "Second level")
    assert summary.chapter.name == "HSK 2"


def test_file_without_chinese_column_is_skipped(service, vocabulary_repository, tmp_path):
    (tmp_path / "bad.csv").write_text("Word\n好\n", encoding="utf-8")
    write_csv(tmp_path / "good.csv", ["好,hǎo,good"])

    summary = service.import_directory(tmp_path, "HSK 1")

    bad, good = summary.files
    assert "Missing 'Chinese' column" in bad.error
    assert good.error is None
    assert vocabulary_repository.create_batch.call_count == 1


def test_backend_failure_is_recorded_per_file(service, vocabulary_repository, tmp_path):
    vocabulary_repository.create_batch.side_effect = ApiError("server down", 503)
    write_csv(tmp_path / "lesson.csv", ["好,hǎo,good"])

    summary = service.import_directory(tmp_path, "HSK 1")

    assert summary.files[0].error == "server down"
    assert summary.created == 0


def test_not_a_directory(service, tmp_path):
    with pytest.raises(ValueError):
        service.import_directory(tmp_path / "nope", "HSK 1")


def test_malformed_csv_is_skipped(service, vocabulary_repository, tmp_path):
    oversized = "x" * (csv.field_size_limit() + 1)
    (tmp_path / "a_broken.csv").write_text(f"Chinese,Pinyin\n好,{oversized}\n", encoding="utf-8")
    write_csv(tmp_path / "b_good.csv", ["好,hǎo,good"])

    summary = service.import_directory(tmp_path, "HSK 1")

    broken, good = summary.files
    assert "field larger than field limit" in broken.error
    assert good.error is None
    assert vocabulary_repository.create_batch.call_count == 1
