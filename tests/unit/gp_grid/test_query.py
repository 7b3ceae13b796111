import pytest

from gp_grid.query import ComparisonTerm, QueryTerm, parse_number, parse_query, parse_term

pytestmark = pytest.mark.unit_grid


def test_whitespace_tokens_are_anded() -> None:
    query = parse_query("  Level   2 ")
    assert [term.alternatives for term in query.terms] == [("level",), ("2",)]
    assert query.matches("level 2 plan")
    assert not query.matches("level 1 plan")


def test_empty_query_has_no_terms() -> None:
    assert parse_query("").empty
    assert parse_query("   ").empty
    assert parse_query(None).empty


def test_alternatives_and_negation() -> None:
    query = parse_query("plan|section !draft")
    assert query.matches("level 1 plan")
    assert query.matches("section a")
    assert not query.matches("elevation")
    assert not query.matches("draft plan")


@pytest.mark.parametrize("token", ["!", "|", "!|", "||"])
def test_tokens_without_needles_are_dropped(token: str) -> None:
    assert parse_term(token) is None
    assert parse_query(f"plan {token}").terms == parse_query("plan").terms


def test_extending_a_token_narrows() -> None:
    assert parse_query("plan").narrows(parse_query("pla"))
    assert parse_query("plan level").narrows(parse_query("plan"))
    assert parse_query("a").narrows(parse_query("a|b"))


def test_unrelated_queries_do_not_narrow() -> None:
    assert not parse_query("site").narrows(parse_query("plan"))
    assert not parse_query("plan").narrows(parse_query("plan level"))
    assert not parse_query("a|b").narrows(parse_query("a"))


def test_negation_narrowing() -> None:
    assert parse_query("!dr").narrows(parse_query("!draft"))
    assert not parse_query("!draft").narrows(parse_query("!dr"))
    assert not parse_query("!plan").narrows(parse_query("plan"))


COLUMNS = ["Sheet Number", "Sheet Name", "Revision"]


def _matches(text: str, *cells: str) -> bool:
    lowered = [cell.lower() for cell in cells]
    return parse_query(text).matches("\n".join(lowered), lowered, COLUMNS)


def test_double_bar_separates_or_groups() -> None:
    query = parse_query("level plan || section")
    assert len(query.groups) == 2
    assert query.matches("level 2 plan")
    assert query.matches("section a")
    assert not query.matches("level 2 elevation")


def test_double_bar_inside_quotes_is_literal() -> None:
    query = parse_query('"a||b"')
    assert len(query.groups) == 1
    assert query.matches("x a||b y")
    assert not query.matches("a")


def test_quoted_phrase_keeps_spaces_and_bars() -> None:
    assert parse_term('"level 2"') == QueryTerm(alternatives=("level 2",))
    assert parse_term('"a|b"') == QueryTerm(alternatives=("a|b",))
    query = parse_query('"level 2" !"site plan"')
    assert query.matches("level 2 plan")
    assert not query.matches("level 1 plan 2")
    assert not query.matches("level 2 site plan")


def test_column_value_filters() -> None:
    assert _matches("$name:plan", "A-101", "Level 1 Plan", "3")
    assert not _matches("$name:a-101", "A-101", "Level 1 Plan", "3")
    assert _matches('$"sheet num"::a-1', "A-101", "Level 1 Plan", "3")
    assert _matches('$name::"level 1"', "A-101", "Level 1 Plan", "3")
    assert not _matches("!$name:plan", "A-101", "Level 1 Plan", "3")
    assert _matches("$name:site|level", "A-101", "Level 1 Plan", "3")


def test_unknown_column_filter_is_ignored() -> None:
    assert _matches("$discipline:struct", "A-101", "Level 1 Plan", "3")
    assert _matches("$discipline:>5", "A-101", "Level 1 Plan", "3")


def test_numeric_comparisons() -> None:
    assert _matches(">2", "A-101", "Plan", "3")
    assert not _matches(">3", "A-101", "Plan", "3")
    assert _matches("<10", "A-101", "Plan", "3")
    assert _matches("$rev:>2.5", "A-101", "Plan", "3")
    assert not _matches("$rev:<3", "A-101", "Plan", "3")
    assert not _matches("!$rev:>2", "A-101", "Plan", "3")
    assert _matches(">1000", "A-101", "Plan", "$1,250")
    assert _matches("<1", "A-101", "Plan", "50%")


def test_parse_number() -> None:
    assert parse_number("1,250.5") == 1250.5
    assert parse_number(" $40 ") == 40.0
    assert parse_number("50%") == 0.5
    assert parse_number("a-101") is None
    assert parse_number("") is None


def test_comparison_terms() -> None:
    assert parse_term(">10") == ComparisonTerm(op=">", value=10.0)
    assert parse_term("$rev:<2") == ComparisonTerm(op="<", value=2.0, column=("rev",))
    assert parse_term(">x") == QueryTerm(alternatives=(">x",))


def test_column_tokens_choose_visible_columns() -> None:
    assert parse_query("").visible_columns(COLUMNS) == (0, 1, 2)
    assert parse_query("$name").visible_columns(COLUMNS) == (1,)
    assert parse_query("$sheet").visible_columns(COLUMNS) == (0, 1)
    assert parse_query('$"sheet num" $rev:>1').visible_columns(COLUMNS) == (0, 2)
    assert parse_query("$nothing").visible_columns(COLUMNS) == (0, 1, 2)


def test_column_only_groups_do_not_filter_rows() -> None:
    query = parse_query("$name")
    assert not query.empty
    assert query.unfiltered
    assert query.matches("anything")
    assert parse_query("plan || $name").unfiltered


def test_comparisons_and_column_filters_narrow() -> None:
    assert parse_query(">10").narrows(parse_query(">5"))
    assert not parse_query(">5").narrows(parse_query(">10"))
    assert parse_query("<5").narrows(parse_query("<10"))
    assert parse_query("!>5").narrows(parse_query("!>10"))
    assert parse_query("$name:plan").narrows(parse_query("$name:pla"))
    assert not parse_query("$name:plan").narrows(parse_query("$number:pla"))
    assert not parse_query("$name:plan").narrows(parse_query("plan"))


def test_groups_narrow_group_by_group() -> None:
    assert parse_query("plan 2 || section").narrows(parse_query("plan || sec"))
    assert parse_query("plan").narrows(parse_query("plan || section"))
    assert not parse_query("plan || site").narrows(parse_query("plan"))
