import pytest

from hostmate.utils.validators import (
    clean_text,
    parse_allergies,
    parse_category,
    parse_count,
    parse_flag,
    parse_id_list,
    parse_rank,
)


def test_parse_allergies_trims_and_deduplicates():
    assert parse_allergies(["peanuts", "peanuts", " peanuts "]) == ["peanuts"]


def test_parse_allergies_drops_blanks_and_non_strings():
    assert parse_allergies(["", "  ", 3, None, "soy", "tree-nuts"]) == ["soy", "tree-nuts"]


def test_parse_allergies_rejects_unknown_label_by_name():
    with pytest.raises(ValueError, match="Invalid allergy: kiwi"):
        parse_allergies(["dairy", " kiwi "])


def test_parse_allergies_requires_a_list():
    with pytest.raises(ValueError, match="allergies must be an array"):
        parse_allergies("dairy")
    with pytest.raises(ValueError, match="allergies must be an array"):
        parse_allergies(None)


@pytest.mark.parametrize("value, expected", [(1, 1), (3, 3), ("2", 2), (2.0, 2)])
def test_parse_rank_accepts_one_to_three(value, expected):
    assert parse_rank(value) == expected


@pytest.mark.parametrize("value", [0, 4, 5, -1, 2.5])
def test_parse_rank_rejects_out_of_range(value):
    with pytest.raises(ValueError, match="rank must be between 1 and 3"):
        parse_rank(value)


@pytest.mark.parametrize("value", [None, True, "abc", [], {}])
def test_parse_rank_rejects_non_numbers(value):
    with pytest.raises(ValueError, match="rank must be a number"):
        parse_rank(value)


def test_parse_category():
    assert parse_category(" dessert ") == "dessert"
    with pytest.raises(ValueError, match="Invalid category: starter"):
        parse_category("starter")
    with pytest.raises(ValueError, match="Missing dish information."):
        parse_category(None)


def test_parse_count():
    assert parse_count("mainCount", None) is None
    assert parse_count("mainCount", "0") == 0
    assert parse_count("mainCount", " 7 ") == 7
    for bad in ("-1", "1.5", "two", "", "\u00b2", "\u0663"):
        with pytest.raises(ValueError, match="mainCount must be a non-negative integer"):
            parse_count("mainCount", bad)


def test_parse_flag_only_true_is_true():
    assert parse_flag("true") is True
    assert parse_flag("TRUE") is False
    assert parse_flag(" true") is False
    assert parse_flag("false") is False
    assert parse_flag("1") is False
    assert parse_flag(None) is False


def test_parse_id_list_and_clean_text():
    assert parse_id_list("a, b,,a ,c") == ["a", "b", "c"]
    assert parse_id_list(None) == []
    assert clean_text("  x ") == "x"
    assert clean_text("   ") is None
    assert clean_text(None) is None


@pytest.mark.parametrize("value", [10**400, -(10**400), "1" + "0" * 400])
def test_parse_rank_rejects_huge_numbers_as_out_of_range(value):
    with pytest.raises(ValueError, match="rank must be between 1 and 3"):
        parse_rank(value)
