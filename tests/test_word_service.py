import json
import threading
from unittest import mock

import pytest

from wordle_api.config import Config, FALLBACK_WORDS, validate_word_list
from wordle_api.config.game_settings import load_word_file, normalize_words
from wordle_api.errors import EmptyVocabulary
from wordle_api.services.word_service import WordService


def test_bundled_word_list_is_valid():
    words = load_word_file(Config.WORD_LIST_FILE)
    assert len(words) > 100
    assert validate_word_list(words)


def test_normalize_words_drops_bad_entries():
    assert normalize_words(["crane", " Slate ", "cranes", "cr4ne", "CRANE", 12345]) == ["CRANE", "SLATE"]


def test_validate_word_list_reports_duplicates():
    with pytest.raises(ValueError):
        validate_word_list(["CRANE", "CRANE"])
    with pytest.raises(ValueError):
        validate_word_list([])


def test_is_valid_word_is_case_insensitive():
    service = WordService(words=["CRANE"])
    assert service.is_valid_word("crane")
    assert service.is_valid_word(" Crane ")
    assert not service.is_valid_word("slate")
    assert not service.is_valid_word("")


def test_random_word_comes_from_vocabulary():
    service = WordService(words=["CRANE", "SLATE"])
    for _ in range(20):
        assert service.get_random_word() in ("CRANE", "SLATE")


def test_empty_vocabulary():
    with pytest.raises(EmptyVocabulary):
        WordService(words=[]).get_random_word()


def test_store_words_take_priority(tmp_path):
    word_file = tmp_path / "words.json"
    word_file.write_text(json.dumps(["SLATE"]))
    store = mock.Mock()
    store.load_words.return_value = ["crane", "llama"]

    service = WordService(store=store, word_file=str(word_file))
    assert service.get_words() == ["CRANE", "LLAMA"]
    assert service.source == "store"


def test_falls_back_to_file_when_store_fails(tmp_path):
    word_file = tmp_path / "words.json"
    word_file.write_text(json.dumps(["slate", "trace"]))
    store = mock.Mock()
    store.load_words.side_effect = RuntimeError("store down")

    service = WordService(store=store, word_file=str(word_file))
    assert service.get_words() == ["SLATE", "TRACE"]
    assert service.source == "file"


def test_falls_back_to_builtin_list(tmp_path):
    store = mock.Mock()
    store.load_words.return_value = []

    service = WordService(store=store, word_file=str(tmp_path / "missing.json"))
    assert service.get_words() == FALLBACK_WORDS
    assert service.source == "fallback"


def test_malformed_file_uses_fallback(tmp_path):
    word_file = tmp_path / "words.json"
    word_file.write_text("{not json")
    service = WordService(word_file=str(word_file))
    assert service.get_words() == FALLBACK_WORDS


def test_vocabulary_is_loaded_once_across_threads():
    store = mock.Mock()
    store.load_words.return_value = ["crane"]
    service = WordService(store=store)

    threads = [threading.Thread(target=service.get_words) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    service.is_valid_word("CRANE")
    assert store.load_words.call_count == 1


def test_store_list_failing_validation_falls_back_to_file(tmp_path, monkeypatch):
    word_file = tmp_path / "words.json"
    word_file.write_text(json.dumps(["slate"]))
    store = mock.Mock()
    store.load_words.return_value = ["crane"]
    checked = []

    def reject_store_words(words):
        checked.append(list(words))
        if words == ["CRANE"]:
            raise ValueError("bad store list")
        return True

    monkeypatch.setattr("wordle_api.services.word_service.validate_word_list", reject_store_words)
    service = WordService(store=store, word_file=str(word_file))
    assert service.get_words() == ["SLATE"]
    assert service.source == "file"
    assert checked == [["CRANE"], ["SLATE"]]
