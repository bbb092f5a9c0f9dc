"""Unit tests for the chapter, vocabulary and dialogue repositories."""

from unittest.mock import MagicMock

import pytest

from chinese_learn.io import ApiError, ChapterRepository, DialogueRepository, VocabularyRepository


@pytest.fixture
def api():
    return MagicMock()


def vocab_json(vocab_id, chinese, **extra):
    return {"id": vocab_id, "chinese": chinese, "chapter_id": 1, **extra}


class TestChapterRepository:
    def test_requires_api(self):
        with pytest.raises(RuntimeError):
            ChapterRepository(None)

    def test_list_chapters(self, api):
        api.get.return_value = [{"id": 1, "name": "HSK 1"}, {"id": 2, "name": "HSK 2"}]
        chapters = ChapterRepository(api).list_chapters()
        assert [c.name for c in chapters] == ["HSK 1", "HSK 2"]
        api.get.assert_called_once_with("/chapters")

    def test_get_chapter_raises_when_missing(self, api):
        api.get.return_value = [{"id": 1, "name": "HSK 1"}]
        with pytest.raises(RuntimeError, match="Chapter not found: 9"):
            ChapterRepository(api).get_chapter(9)

    def test_create_chapter_trims_name(self, api):
        api.post.return_value = {"id": 4, "name": "HSK 3"}
        chapter = ChapterRepository(api).create_chapter("  HSK 3 ", "Words")
        api.post.assert_called_once_with("/chapters", json={"name": "HSK 3", "description": "Words"})
        assert chapter.id == 4

    def test_create_chapter_rejects_blank_name(self, api):
        with pytest.raises(ValueError, match="Chapter name is required"):
            ChapterRepository(api).create_chapter("   ")
        api.post.assert_not_called()

    def test_update_and_delete_paths(self, api):
        api.put.return_value = {"id": 4, "name": "Renamed"}
        repo = ChapterRepository(api)
        repo.update_chapter(4, "Renamed")
        repo.delete_chapter(4)
        api.put.assert_called_once_with("/chapters/4", json={"name": "Renamed", "description": ""})
        api.delete.assert_called_once_with("/chapters/4")


class TestVocabularyRepository:
    def test_list_for_chapter(self, api):
        api.get.return_value = [vocab_json(1, "你好")]
        vocabularies = VocabularyRepository(api).list_for_chapter(1)
        api.get.assert_called_once_with("/chapters/1/vocabularies")
        assert vocabularies[0].chinese == "你好"

    def test_create_batch_posts_one_request(self, api):
        api.post.return_value = [vocab_json(1, "你好"), vocab_json(2, "谢谢")]
        created = VocabularyRepository(api).create_batch(1, [
            {"chinese": "你好", "pinyin": "nǐ hǎo"},
            {"chinese": "谢谢", "meaning": None},
        ])
        api.post.assert_called_once_with("/chapters/1/vocabularies/batch", json=[
            {"chinese": "你好", "pinyin": "nǐ hǎo", "meaning": "", "image_url": ""},
            {"chinese": "谢谢", "pinyin": "", "meaning": "", "image_url": ""},
        ])
        assert [v.id for v in created] == [1, 2]

    def test_create_batch_rejects_empty(self, api):
        with pytest.raises(ValueError):
            VocabularyRepository(api).create_batch(1, [])

    def test_create_batch_tolerates_missing_echo(self, api):
        api.post.return_value = None
        assert VocabularyRepository(api).create_batch(1, [{"chinese": "好"}]) == []

    def test_create_vocabulary_sends_multipart_form(self, api):
        api.post.return_value = vocab_json(3, "猫", image_url="http://img/cat.png")
        VocabularyRepository(api).create_vocabulary(1, "猫", "māo", "cat", image_url="http://img/cat.png")

        path = api.post.call_args.args[0]
        parts = api.post.call_args.kwargs["files"]
        assert path == "/chapters/1/vocabularies"
        assert parts["chinese"] == (None, "猫")
        assert parts["chapter_id"] == (None, "1")
        assert parts["image_url"] == (None, "http://img/cat.png")

    def test_update_prefers_file_over_url(self, api, tmp_path):
        image = tmp_path / "cat.png"
        image.write_bytes(b"\x89PNG")
        api.put.return_value = vocab_json(3, "猫")

        VocabularyRepository(api).update_vocabulary(3, 1, "猫", image_path=image, image_url="http://ignored")

        parts = api.put.call_args.kwargs["files"]
        assert parts["image"][0] == "cat.png"
        assert "image_url" not in parts

    def test_create_rejects_blank_chinese(self, api):
        with pytest.raises(ValueError, match="Chinese text is required"):
            VocabularyRepository(api).create_vocabulary(1, " ")

    def test_api_errors_propagate(self, api):
        api.get.side_effect = ApiError("boom", 500)
        with pytest.raises(ApiError):
            VocabularyRepository(api).list_for_chapter(1)


class TestDialogueRepository:
    def test_list_returns_sorted_sentences(self, api):
        api.get.return_value = [{
            "id": 1,
            "chapter_id": 1,
            "title": "Greeting",
            "sentences": [
                {"id": 2, "dialogue_id": 1, "chinese": "你好", "order": 2},
                {"id": 1, "dialogue_id": 1, "chinese": "你好吗", "order": 1},
            ],
        }]
        dialogues = DialogueRepository(api).list_for_chapter(1)
        assert [s.id for s in dialogues[0].sentences] == [1, 2]

    def test_create_dialogue_binds_nested_sentences(self, api):
        api.post.return_value = {"id": 8, "chapter_id": 1, "title": "Greeting", "sentences": []}

        DialogueRepository(api).create_dialogue(1, "Greeting", sentences=[
            {"chinese": "你好", "speaker": "B"},
            {"chinese": "再见", "order": 7},
        ])

        payload = api.post.call_args.kwargs["json"]
        assert api.post.call_args.args[0] == "/chapters/1/dialogues"
        assert payload["sentences"][0]["speaker"] == "B"
        assert payload["sentences"][0]["order"] == 1
        assert payload["sentences"][1]["speaker"] == "A"
        assert payload["sentences"][1]["order"] == 7

    def test_create_dialogue_requires_title(self, api):
        with pytest.raises(ValueError, match="Dialogue title is required"):
            DialogueRepository(api).create_dialogue(1, "")

    def test_update_sentence_includes_dialogue_id(self, api):
        api.put.return_value = {"id": 3, "dialogue_id": 8, "chinese": "好", "order": 2}
        DialogueRepository(api).update_sentence(3, 8, "好", order=2)
        payload = api.put.call_args.kwargs["json"]
        assert api.put.call_args.args[0] == "/sentences/3"
        assert payload["dialogue_id"] == 8
        assert payload["order"] == 2

    def test_create_sentence_path(self, api):
        api.post.return_value = {"id": 3, "dialogue_id": 8, "chinese": "好", "order": 4}
        sentence = DialogueRepository(api).create_sentence(8, "好", order=4)
        assert api.post.call_args.args[0] == "/dialogues/8/sentences"
        assert sentence.order == 4
