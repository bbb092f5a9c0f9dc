"""Unit tests for the domain entities."""

import pytest

from chinese_learn.core import (
    DEFAULT_SPEAKER,
    Chapter,
    Dialogue,
    Sentence,
    Vocabulary,
    require_chinese,
    sort_sentences,
)


def make_sentence(sentence_id: int, order: int, chinese: str = "你好") -> Sentence:
    return Sentence(id=sentence_id, dialogue_id=1, chinese=chinese, order=order)


class TestChapter:
    def test_from_api_fills_missing_description(self):
        chapter = Chapter.from_api({"id": "3", "name": "HSK 1"})
        assert chapter == Chapter(id=3, name="HSK 1", description="", created_at=None)


class TestVocabulary:
    def test_from_api_maps_null_fields_to_empty_strings(self):
        vocab = Vocabulary.from_api({
            "id": 7,
            "chinese": "谢谢",
            "pinyin": None,
            "meaning": "thank you",
            "image_url": None,
            "chapter_id": 2,
        })
        assert vocab.pinyin == ""
        assert vocab.image_url == ""
        assert vocab.chapter_id == 2
        assert not vocab.has_image

    def test_has_image_when_url_present(self):
        vocab = Vocabulary(id=1, chinese="猫", image_url="http://img/cat.png")
        assert vocab.has_image

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_require_chinese_rejects_blank(self, value):
        with pytest.raises(ValueError, match="Chinese text is required"):
            require_chinese(value)

    def test_require_chinese_trims(self):
        assert require_chinese("  你好 ") == "你好"


class TestSentence:
    def test_blank_speaker_defaults(self):
        sentence = Sentence.from_api({"id": 1, "dialogue_id": 4, "chinese": "好", "speaker": "  "})
        assert sentence.speaker == DEFAULT_SPEAKER

    def test_has_audio(self):
        assert Sentence(id=1, dialogue_id=1, chinese="好", audio_url="/a.mp3").has_audio
        assert not Sentence(id=1, dialogue_id=1, chinese="好").has_audio


class TestSentenceOrdering:
    def test_sort_is_ascending_by_order(self):
        sentences = [make_sentence(1, 3), make_sentence(2, 1), make_sentence(3, 2)]
        assert [s.id for s in sort_sentences(sentences)] == [2, 3, 1]

    def test_ties_keep_input_order(self):
        sentences = [make_sentence(10, 1), make_sentence(11, 1), make_sentence(12, 0)]
        assert [s.id for s in sort_sentences(sentences)] == [12, 10, 11]

    def test_dialogue_from_api_sorts_sentences(self):
        dialogue = Dialogue.from_api({
            "id": 5,
            "chapter_id": 1,
            "title": "Greeting",
            "sentences": [
                {"id": 2, "dialogue_id": 5, "chinese": "你好", "order": 2},
                {"id": 1, "dialogue_id": 5, "chinese": "你好吗", "order": 1},
            ],
        })
        assert [s.order for s in dialogue.sentences] == [1, 2]

    def test_with_sentences_returns_sorted_copy(self):
        dialogue = Dialogue(id=1, chapter_id=1, title="T")
        updated = dialogue.with_sentences([make_sentence(1, 2), make_sentence(2, 1)])
        assert dialogue.sentences == []
        assert [s.id for s in updated.ordered_sentences()] == [2, 1]


class TestNextSentenceOrder:
    def test_empty_dialogue_starts_at_one(self):
        assert Dialogue(id=1, chapter_id=1, title="T").next_sentence_order() == 1

    def test_uses_max_plus_one(self):
        dialogue = Dialogue(id=1, chapter_id=1, title="T", sentences=[make_sentence(1, 4), make_sentence(2, 2)])
        assert dialogue.next_sentence_order() == 5
