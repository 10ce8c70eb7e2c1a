"""Tests for LocalAnswerStore."""

from form_builder.client.answer_store import LocalAnswerStore


def test_values_and_ratings_round_trip(tmp_path):
    store = LocalAnswerStore(tmp_path / "answers")

    store.save_values("survey", {"s0.q0": "Engineer"})
    store.save_ratings("survey", {"s0.q0": {"comment": "Good", "rate": "valid"}})

    assert store.load_values("survey") == {"s0.q0": "Engineer"}
    assert store.load_ratings("survey")["s0.q0"]["rate"] == "valid"
    assert (tmp_path / "answers" / "form_data_survey.json").exists()
    assert (tmp_path / "answers" / "form_ratings_survey.json").exists()


def test_missing_form_is_empty(tmp_path):
    assert LocalAnswerStore(tmp_path).load_values("nope") == {}


def test_corrupt_file_is_empty(tmp_path):
    (tmp_path / "form_data_survey.json").write_text("{broken", encoding="utf-8")
    assert LocalAnswerStore(tmp_path).load_values("survey") == {}


def test_clear_one_form(tmp_path):
    store = LocalAnswerStore(tmp_path)
    store.save_values("a", {"x": 1})
    store.save_ratings("a", {"x": {}})
    store.save_values("b", {"y": 2})

    store.clear("a")

    assert store.load_values("a") == {}
    assert store.load_ratings("a") == {}
    assert store.load_values("b") == {"y": 2}


def test_clear_all_keeps_other_files(tmp_path):
    store = LocalAnswerStore(tmp_path)
    store.save_values("a", {"x": 1})
    store.save_ratings("b", {"y": {}})
    (tmp_path / "notes.json").write_text("{}", encoding="utf-8")

    store.clear_all()

    assert sorted(p.name for p in tmp_path.iterdir()) == ["notes.json"]


def test_unserializable_values_not_raised(tmp_path):
    store = LocalAnswerStore(tmp_path)
    store.save_values("a", {"x": object()})
    assert store.load_values("a") == {}
