"""Tests for rendering compiled predicates into PostgreSQL."""

import pytest

from wordsearcher.app.query.predicates import (
    Bound,
    Conjunction,
    Equals,
    Filter,
    LookupKey,
    PhraseMatch,
    SearchPipeline,
)
from wordsearcher.app.query.plans import compile_plan_lookup
from wordsearcher.app.query.ranges import (
    compile_book_range,
    compile_chapter_or_verse,
    compile_chapter_range,
    compile_custom_range_lookup,
)
from wordsearcher.app.query.search import compile_search
from wordsearcher.app.repositories.sql import render_aggregate, render_find, render_find_one

VERSE_COLUMNS = "book, book_name, chapter, verse, text, keywords"
ANY_TERM = "replace(plainto_tsquery($1::regconfig, $2)::text, ' & ', ' | ')::tsquery"


class TestRenderFind:
    def test_verse_range(self):
        sql, params = render_find("verse", compile_chapter_or_verse(1, 1, 1, 2))

        assert sql == (
            f"SELECT {VERSE_COLUMNS} FROM verse "
            "WHERE book = $1 AND chapter = $2 AND verse BETWEEN $3 AND $4 "
            "ORDER BY book, chapter, verse"
        )
        assert params == [1, 1, 1, 2]

    def test_whole_chapter(self):
        sql, params = render_find("verse", compile_chapter_or_verse(1, 1, 0, 9))

        assert "WHERE book = $1 AND chapter = $2 ORDER BY" in sql
        assert params == [1, 1]

    def test_book_range(self):
        sql, params = render_find("verse", compile_book_range(2, 3))

        assert "WHERE book BETWEEN $1 AND $2" in sql
        assert params == [2, 3]

    def test_chapter_range(self):
        sql, params = render_find("verse", compile_chapter_range(40, 1, 4))

        assert "WHERE book = $1 AND chapter BETWEEN $2 AND $3" in sql
        assert params == [40, 1, 4]

    def test_reading_plan_ordered_by_track(self):
        sql, params = render_find("readingplan", compile_plan_lookup("McCheyneBasedYearly"))

        assert sql == (
            "SELECT name, number, days FROM readingplan WHERE name = $1 ORDER BY number"
        )
        assert params == ["McCheyneBasedYearly"]

    def test_empty_filter_has_no_where(self):
        sql, params = render_find("verse", Filter(()))

        assert "WHERE" not in sql
        assert params == []

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown field"):
            render_find("verse", Filter((Equals("book; DROP TABLE verse", 1),)))

    def test_unknown_table_rejected(self):
        with pytest.raises(ValueError, match="Unknown table"):
            render_find("users", Filter(()))


class TestRenderFindOne:
    def test_custom_range_columns_aliased(self):
        sql, params = render_find_one("customrange", compile_custom_range_lookup("gospels"))

        assert sql == (
            "SELECT name, type, booknumber AS book_number, customrange AS custom_range "
            "FROM customrange WHERE name = $1 LIMIT 1"
        )
        assert params == ["gospels"]

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            render_find_one("customrange", LookupKey("owner", "x"))


class TestRenderAggregate:
    def test_default_any_term(self):
        sql, params = render_aggregate("verse", compile_search("love"), "english")

        assert f"WHERE to_tsvector($1::regconfig, text) @@ {ANY_TERM}" in sql
        assert f"ts_rank_cd(to_tsvector($1::regconfig, text), {ANY_TERM})" in sql
        assert sql.endswith("ORDER BY score DESC")
        assert params == ["english", "love"]

    def test_exact_old_testament(self):
        sql, params = render_aggregate(
            "verse", compile_search("spake unto Joshua", "exact", "ot"), "english"
        )

        assert (
            "WHERE to_tsvector($1::regconfig, text) @@ phraseto_tsquery($1::regconfig, $2) "
            "AND book <= $3"
        ) in sql
        assert params == ["english", "spake unto Joshua", 39]

    def test_new_testament_bound(self):
        sql, params = render_aggregate("verse", compile_search("spirit", "", "nt"), "english")

        assert "AND book > $3" in sql
        assert params == ["english", "spirit", 39]

    def test_in_filter_without_text_clause(self):
        """Without a text clause the dictionary is not bound and scores are zero."""
        sql, params = render_aggregate("verse", compile_search("light", "in", "law"), "english")

        assert "to_tsvector" not in sql
        assert "(0.0)::float8 AS score" in sql
        assert "WHERE book <= $1" in sql
        assert params == [5]

    def test_projection(self):
        sql, _ = render_aggregate("verse", compile_search("love"), "english")

        assert sql.startswith(f"SELECT {VERSE_COLUMNS}, (")

    def test_configured_dictionary(self):
        _, params = render_aggregate("verse", compile_search("love"), "simple")

        assert params[0] == "simple"

    def test_phrase_slop_unsupported(self):
        with pytest.raises(ValueError, match="slop"):
            render_aggregate(
                "verse", SearchPipeline(search=PhraseMatch("text", "a b", slop=2)), "english"
            )

    def test_bound_operators(self):
        pipeline = SearchPipeline(
            search=Conjunction((Bound("book", "gte", 2), Bound("chapter", "lt", 4)))
        )
        sql, params = render_aggregate("verse", pipeline, "english")

        assert "WHERE book >= $1 AND chapter < $2" in sql
        assert params == [2, 4]
