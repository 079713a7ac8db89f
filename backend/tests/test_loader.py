"""
Tests for the lesson content loader.
"""

import random

import pytest

from elt_scrapers.base import (
    ComprehensionExercise,
    RunResult,
    ScrapedItem,
    SourceStatus,
    VocabularyExercise,
)
from elt_scrapers.storage import save_run_result
from lesson_content import (
    ContentStatus,
    filter_by_approximate_level,
    filter_by_level,
    format_content_for_prompt,
    get_all_content_for_level,
    get_best_content_for_lesson,
    get_valid_content,
    is_content_available,
    load_scraped_content,
    parse_content,
    select_content,
)


BODY = "People in the village grow their own vegetables and sell them at the market every week. " * 2


def make_item(title, level, body=BODY, **kwargs):
    return ScrapedItem(source=kwargs.pop('source', 'BritishCouncil'), level=level, title=title, body=body, **kwargs)


@pytest.fixture
def items():
    return [
        make_item('Business cards', 'A1'),
        make_item('Glaciers are melting faster', 'Level 3', source='BreakingNewsEnglish'),
        make_item('A job advert', 'B2'),
        make_item('Climate summit ends', 'Level 6', source='BreakingNewsEnglish'),
    ]


@pytest.fixture
def content_path(tmp_path, items):
    path = tmp_path / 'content.json'
    result = RunResult(
        scraped_at='2024-01-15T10:00:00+00:00',
        sources=[SourceStatus('BritishCouncil', 'success', 2), SourceStatus('BreakingNewsEnglish', 'success', 2)],
        content=items + [make_item('Access Denied', 'B1', body='[BLOCKED] nothing here', blocked=True)],
    )
    save_run_result(result, path)
    return path


class TestLoading:
    """Test reading the artifact."""

    def test_load(self, content_path):
        result = load_scraped_content(content_path)
        assert result.total_items == 5
        assert len(result.sources) == 2

    def test_missing_file(self, tmp_path):
        assert load_scraped_content(tmp_path / 'missing.json') is None

    def test_malformed_file(self, tmp_path):
        path = tmp_path / 'content.json'
        path.write_text('{"metadata": {', encoding='utf-8')
        assert load_scraped_content(path) is None

    def test_parse_content(self, items):
        data = RunResult(content=items).to_dict()
        assert parse_content(data).content == items


class TestValidity:
    """Test filtering of unusable items."""

    def test_drops_unusable_items(self, items):
        candidates = items + [
            make_item('Short', 'A1', body='Too short.'),
            make_item('Flagged', 'A1', blocked=True),
            make_item('Marker', 'A1', body='[BLOCKED] ' + BODY),
            make_item('Access Denied', 'A1'),
        ]
        assert get_valid_content(candidates) == items

    def test_length_threshold(self):
        exactly = make_item('Edge', 'A1', body='x' * 100)
        longer = make_item('Edge', 'A1', body='x' * 101)
        assert get_valid_content([exactly, longer]) == [longer]


class TestLevelFilters:
    """Test level matching."""

    def test_exact(self, items):
        assert [i.title for i in filter_by_level(items, 'b1')] == ['Glaciers are melting faster']

    def test_exact_with_numeric_target(self, items):
        assert [i.title for i in filter_by_level(items, 'Level 6')] == ['Climate summit ends']

    def test_approximate(self, items):
        titles = [i.title for i in filter_by_approximate_level(items, 'B1')]
        assert titles == ['Glaciers are melting faster', 'A job advert']

    def test_approximate_at_scale_edge(self, items):
        titles = [i.title for i in filter_by_approximate_level(items, 'A1')]
        assert titles == ['Business cards']

    def test_approximate_unknown_target(self, items):
        assert filter_by_approximate_level(items, 'Mixed') == items


class TestSelection:
    """Test picking one item for a lesson."""

    def test_exact_level_preferred(self, items):
        assert select_content(items, 'B2').title == 'A job advert'

    def test_adjacent_level_when_no_exact(self, items):
        selected = select_content(items, 'C2', rng=random.Random(0))
        assert selected.title == 'Climate summit ends'

    def test_any_level_as_last_resort(self):
        only = [make_item('Business cards', 'A1')]
        assert select_content(only, 'C1') == only[0]

    def test_topic_match(self, items):
        more = items + [make_item('Village markets', 'A1', description='A story about food')]
        assert select_content(more, 'A1', topic='FOOD').title == 'Village markets'

    def test_topic_ignored_for_single_candidate(self, items):
        assert select_content(items, 'B2', topic='glaciers').title == 'A job advert'

    def test_random_choice_uses_rng(self, items):
        candidates = [make_item(f'Lesson {n}', 'A1') for n in range(5)]
        first = select_content(candidates, 'A1', rng=random.Random(3))
        second = select_content(candidates, 'A1', rng=random.Random(3))
        assert first == second

    def test_empty(self):
        assert select_content([], 'A1') is None


class TestArtifactQueries:
    """Test the artifact-backed helpers."""

    def test_best_content(self, content_path):
        item = get_best_content_for_lesson('B1', path=content_path)
        assert item.title == 'Glaciers are melting faster'

    def test_best_content_never_blocked(self, content_path):
        for _ in range(10):
            assert not get_best_content_for_lesson('B1', path=content_path).blocked

    def test_best_content_without_file(self, tmp_path):
        assert get_best_content_for_lesson('B1', path=tmp_path / 'missing.json') is None

    def test_best_content_without_valid_items(self, tmp_path):
        path = tmp_path / 'content.json'
        save_run_result(RunResult(content=[make_item('Short', 'A1', body='short')]), path)
        assert get_best_content_for_lesson('A1', path=path) is None

    def test_all_content_for_level(self, content_path):
        titles = [i.title for i in get_all_content_for_level('B2', path=content_path)]
        assert titles == ['Glaciers are melting faster', 'A job advert', 'Climate summit ends']

    def test_all_content_without_file(self, tmp_path):
        assert get_all_content_for_level('B2', path=tmp_path / 'missing.json') == []

    def test_availability(self, content_path):
        status = is_content_available(content_path)
        assert status == ContentStatus(available=True, item_count=4, last_scraped='2024-01-15T10:00:00+00:00')

    def test_availability_without_file(self, tmp_path):
        assert is_content_available(tmp_path / 'missing.json') == ContentStatus(False, 0, None)


class TestPromptFormat:
    """Test rendering for generation prompts."""

    def test_sections(self):
        item = make_item(
            'Glaciers are melting faster',
            'Level 3',
            source='BreakingNewsEnglish',
            exercises=(
                VocabularyExercise('thaw', 'to melt'),
                VocabularyExercise('glacier'),
                ComprehensionExercise('Why?', ('A', 'B')),
            ),
            description='Glaciers are shrinking.',
        )

        text = format_content_for_prompt(item)

        assert '=== AUTHENTIC TEACHING MATERIAL ===' in text
        assert 'Source: BreakingNewsEnglish' in text
        assert 'Level: B1' in text
        assert 'Title: Glaciers are melting faster' in text
        assert 'ARTICLE TEXT:\n' + BODY in text
        assert 'KEY VOCABULARY:\n- thaw: to melt\n- glacier\n' in text
        assert 'Why?' not in text
        assert 'BRIEF SUMMARY:\nGlaciers are shrinking.' in text

    def test_body_capped(self):
        item = make_item('Long', 'A1', body='y' * 3000)
        text = format_content_for_prompt(item)
        assert 'y' * 2000 in text
        assert 'y' * 2001 not in text

    def test_vocabulary_capped(self):
        item = make_item('Words', 'A1', exercises=[VocabularyExercise(f'word{n}') for n in range(15)])
        text = format_content_for_prompt(item)
        assert '- word9' in text
        assert '- word10' not in text

    def test_optional_sections_omitted(self):
        text = format_content_for_prompt(make_item('Plain', 'A1'))
        assert 'KEY VOCABULARY' not in text
        assert 'BRIEF SUMMARY' not in text
