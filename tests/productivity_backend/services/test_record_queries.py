from datetime import date

import pytest

from productivity_backend.services.record_queries import RecordFilter, list_records, parse_month


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('2024-05', (date(2024, 5, 1), date(2024, 6, 1))),
        ('2024-12', (date(2024, 12, 1), date(2025, 1, 1))),
        (' 2024-02 ', (date(2024, 2, 1), date(2024, 3, 1))),
    ],
)
def test_parse_month_returns_half_open_range(value: str, expected: tuple[date, date]) -> None:
    assert parse_month(value) == expected


@pytest.mark.parametrize('value', ['2024-13', '2024-00', '2024-5', 'May 2024', ''])
def test_parse_month_rejects_malformed_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_month(value)


@pytest.fixture
def seeded(make_user, make_record):
    ana = make_user('Ana', 'ana@example.com')
    ben = make_user('Ben', 'ben@example.com')
    make_record(ana, date(2024, 4, 30), 'Closed April books')
    make_record(ana, date(2024, 5, 1), 'Wrote weekly report')
    make_record(ben, date(2024, 5, 15), 'Fixed login bug')
    make_record(ben, date(2024, 5, 31), 'Reviewed 100% of PRs')
    make_record(ana, date(2024, 6, 1), 'Planned June sprint')
    return ana, ben


def test_list_records_joins_owner_name_and_sorts_newest_first(db, seeded) -> None:
    rows = list_records(db)

    assert [row.date for row in rows] == [
        date(2024, 6, 1),
        date(2024, 5, 31),
        date(2024, 5, 15),
        date(2024, 5, 1),
        date(2024, 4, 30),
    ]
    assert [row.name for row in rows] == ['Ana', 'Ben', 'Ben', 'Ana', 'Ana']


def test_list_records_month_filter_excludes_neighbouring_months(db, seeded) -> None:
    rows = list_records(db, RecordFilter(month=parse_month('2024-05')))

    assert {row.date for row in rows} == {date(2024, 5, 1), date(2024, 5, 15), date(2024, 5, 31)}
    assert all(date(2024, 5, 1) <= row.date < date(2024, 6, 1) for row in rows)


def test_list_records_day_filter_matches_exact_day(db, seeded) -> None:
    rows = list_records(db, RecordFilter(day=date(2024, 5, 15)))

    assert [(row.name, row.task) for row in rows] == [('Ben', 'Fixed login bug')]


def test_list_records_user_filter(db, seeded) -> None:
    ana, _ = seeded

    rows = list_records(db, RecordFilter(user_id=ana.id))

    assert {row.user_id for row in rows} == {ana.id}
    assert len(rows) == 3


def test_list_records_search_is_case_insensitive(db, seeded) -> None:
    rows = list_records(db, RecordFilter(search='REPORT'))

    assert [row.task for row in rows] == ['Wrote weekly report']


def test_list_records_search_treats_wildcards_literally(db, seeded) -> None:
    rows = list_records(db, RecordFilter(search='100%'))

    assert [row.task for row in rows] == ['Reviewed 100% of PRs']
    assert list_records(db, RecordFilter(search='%')) == rows


def test_list_records_combines_filters(db, seeded) -> None:
    _, ben = seeded

    rows = list_records(
        db,
        RecordFilter(user_id=ben.id, month=parse_month('2024-05'), search='bug'),
    )

    assert [row.task for row in rows] == ['Fixed login bug']


def test_parse_month_leaves_last_representable_month_open_ended() -> None:
    assert parse_month('9999-12') == (date(9999, 12, 1), None)


def test_list_records_handles_last_representable_day_and_month(db, make_user, make_record) -> None:
    ana = make_user('Ana', 'ana@example.com')
    make_record(ana, date(9999, 11, 30), 'November')
    make_record(ana, date(9999, 12, 31), 'Last day')

    by_day = list_records(db, RecordFilter(day=date(9999, 12, 31)))
    by_month = list_records(db, RecordFilter(month=parse_month('9999-12')))

    assert [row.task for row in by_day] == ['Last day']
    assert [row.task for row in by_month] == ['Last day']


def test_list_records_search_keeps_surrounding_whitespace(db, seeded) -> None:
    assert [row.task for row in list_records(db, RecordFilter(search=' report'))] == ['Wrote weekly report']
    assert list_records(db, RecordFilter(search='report ')) == []


def test_list_records_ignores_blank_search(db, seeded) -> None:
    assert len(list_records(db, RecordFilter(search='   '))) == 5
