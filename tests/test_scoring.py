from dataclasses import replace

import pytest

from keywords import extract_keywords
from lexicon import Lexicon
from scoring import (
    MODE_NAME,
    MODE_SYMPTOMS,
    ScoringWeights,
    rank_records,
    score_record,
    score_text,
    searchable_text,
    sentence_relevance,
    split_sentences,
    top_sentences,
)


def test_empty_keywords_score_zero(sample_records):
    for record in sample_records:
        assert score_record(record, []) == 0
    assert rank_records(sample_records, []) == []


def test_exact_and_partial_weights():
    weights = ScoringWeights(exact=5, partial=2, cross_language=3)

    assert score_text("fever", ["fever"], weights=weights) == 7
    assert score_text("high fever today", ["fever"], weights=weights) == 7
    assert score_text("feverish", ["fever"], weights=weights) == 7
    assert score_text("nothing here", ["fever"], weights=weights) == 0


def test_cross_language_weight_uses_keyword_map():
    lexicon = Lexicon({"keyword_map": {"ta": {"காய்ச்சல்": ["fever"]}}})

    assert score_text("fever", ["காய்ச்சல்"], "ta", lexicon=lexicon) == 3
    assert score_text("fever", ["காய்ச்சல்"], "en", lexicon=lexicon) == 0


def test_scores_are_never_negative(sample_records, lexicon):
    for query in ["fever", "zzz", "மாடு", "udder swelling"]:
        keywords = extract_keywords(query, "ta", lexicon)
        for record in sample_records:
            assert score_record(record, keywords, "ta", lexicon=lexicon) >= 0


def test_containment_is_monotonic(sample_records):
    record = sample_records[0]
    without = replace(record, symptoms=["Swelling of throat", "Nasal discharge"])

    assert score_record(record, ["fever"]) > score_record(without, ["fever"])


def test_fever_in_cattle_ranks_matching_record_first(sample_records):
    matches = rank_records(sample_records, extract_keywords("fever in cattle"), limit=None)

    assert matches[0].record.id == "rec_001"
    assert matches[0].score > 0
    assert "rec_003" not in [match.record.id for match in matches]


def test_ranking_is_stable_for_ties(sample_records):
    first = sample_records[0]
    twin = replace(first, id="rec_twin")
    corpus = [twin, first]

    ids = [match.record.id for match in rank_records(corpus, ["fever"])]

    assert ids == ["rec_twin", "rec_001"]
    assert [m.record.id for m in rank_records(corpus, ["fever"])] == ids


def test_rank_limit_applies(sample_records):
    assert len(rank_records(sample_records, ["neem", "turmeric"], limit=1)) == 1


def test_non_base_search_text_includes_base_fields(sample_records):
    text = searchable_text(sample_records[1], "ta")

    assert "முலைக்காம்பு அடைப்பு" in text
    assert "Teat Obstruction" in text


@pytest.mark.parametrize("mode", [MODE_SYMPTOMS, MODE_NAME])
def test_restricted_modes_exclude_affected_animals(sample_records, mode):
    assert "Cattle" not in searchable_text(sample_records[0], "en", mode)


def test_symptom_mode_only_matches_symptoms(sample_records):
    matches = rank_records(sample_records, ["turmeric"], mode=MODE_SYMPTOMS)

    assert matches == []


def test_name_mode_matches_treatment_name(sample_records):
    matches = rank_records(sample_records, ["paste"], mode=MODE_NAME)

    assert [match.record.id for match in matches] == ["rec_003"]


def test_sentence_relevance_and_top_sentences():
    context = "Fever is treated with tulsi. The weather was pleasant today! Fever in cattle needs rest?\nok"

    assert split_sentences(context) == [
        "Fever is treated with tulsi",
        "The weather was pleasant today",
        "Fever in cattle needs rest",
    ]
    assert sentence_relevance("Fever in cattle needs rest", "fever cattle") > sentence_relevance(
        "The weather was pleasant today", "fever cattle"
    )
    assert top_sentences(context, "fever cattle", 1) == ["Fever in cattle needs rest"]
    assert sentence_relevance("anything", "") == 0.0
