import math

import pytest

from core.exception import PagerError, PagerLimitError
from lib.pager import PageKind, Pager, PagerConfig, parse_page


@pytest.mark.parametrize("total_count,limit", [
    (0, 10), (1, 10), (9, 10), (10, 10), (11, 10), (95, 10), (100, 7), (3, 1),
])
def test_page_count(make_request, total_count, limit):
    pager = Pager(make_request(), limit, total_count)
    assert pager.page_count == math.ceil(total_count / limit)


@pytest.mark.parametrize("limit", [0, -1, -10])
def test_invalid_limit(make_request, limit):
    with pytest.raises(PagerLimitError) as exc_info:
        Pager(make_request(), limit, 10)
    assert isinstance(exc_info.value, PagerError)
    assert isinstance(exc_info.value, ValueError)
    assert str(exc_info.value) == "limit should be > 0"


def test_empty(make_request):
    pager = Pager(make_request(), 10, 0)
    assert pager.page_count == 0
    assert pager.is_empty
    assert not pager.has_navigation
    assert len(pager) == 0


def test_first_page_of_95(make_request):
    pager = Pager(make_request(), 10, 95)

    assert pager.page == 1
    assert pager.page_count == 10
    assert pager.offset == 0
    assert pager.is_first_page
    assert not pager.is_last_page
    assert pager.previous_page == 1
    assert pager.next_page == 2
    assert pager.limit_options == {"limit": 10}


def test_last_page_of_95(make_request):
    pager = Pager(make_request(query_string="_page=10"), 10, 95)

    assert pager.is_last_page
    assert not pager.is_first_page
    assert pager.next_page == 10
    assert pager.previous_page == 9
    assert pager.limit_options == {"limit": 10, "offset": 90}
    assert pager.page_range == (90, 94)


@pytest.mark.parametrize("value,expected", [
    (None, 1), ("", 1), ("abc", 1), ("2.5", 1), ("0", 1), ("-3", 1), ("1", 1), ("7", 7),
])
def test_parse_page(value, expected):
    assert parse_page(value) == expected


def test_page_beyond_range_is_kept(make_request):
    pager = Pager(make_request(query_string="_page=50"), 10, 30)

    assert pager.page == 50
    assert pager.offset == 490
    assert pager.next_page == 3
    assert pager.previous_page == 49
    assert not pager.is_last_page


def test_neighbours_stay_in_bounds(make_request):
    for page in range(1, 6):
        pager = Pager(make_request(query_string=f"_page={page}"), 10, 50)
        assert 1 <= pager.previous_page <= pager.page
        assert pager.page <= pager.next_page <= pager.page_count


def test_nav_range(make_request):
    for page in range(1, 31):
        pager = Pager(make_request(query_string=f"_page={page}"), 1, 30)
        pages = list(pager.nav_range())

        assert len(pages) <= 10
        assert page in pages
        assert all(1 <= p <= 30 for p in pages)
        assert pages == sorted(pages)

    assert list(Pager(make_request(), 1, 30).nav_range()) == list(range(1, 11))
    pager = Pager(make_request(query_string="_page=20"), 1, 30)
    assert list(pager.nav_range()) == list(range(15, 25))
    pager = Pager(make_request(query_string="_page=3"), 10, 40)
    assert list(pager.nav_range()) == [1, 2, 3, 4]


def test_custom_key(make_request):
    request = make_request(query_string="_page=2&comments=3")
    articles = Pager(request, 10, 100)
    comments = Pager(request, 5, 100, key="comments")

    assert articles.page == 2
    assert comments.page == 3
    assert comments.offset == 10


def test_config(make_request):
    config = PagerConfig(limit=5, key="p")
    pager = Pager(make_request(query_string="p=4"), config.limit, 100, config=config)

    assert pager.key == "p"
    assert pager.page == 4
    assert pager.offset == 15


def test_set_count_recomputes(make_request):
    pager = Pager(make_request(query_string="_page=3"), 10, 100)
    pager.set_count(25)

    assert pager.total_count == 25
    assert pager.page_count == 3
    assert pager.offset == 20
    assert pager.is_last_page


def test_page_range(make_request):
    pager = Pager(make_request(query_string="_page=2"), 10, 15)
    assert pager.page_range == (10, 14)

    pager = Pager(make_request(), 10, 15)
    assert pager.page_range == (0, 9)


def test_iteration(make_request):
    pager = Pager(make_request(query_string="_page=2"), 3, 10)
    pager.page_items = ["d", "e", "f"]

    assert list(pager) == ["d", "e", "f"]
    assert list(pager.enumerate_items()) == [(4, "d"), (5, "e"), (6, "f")]


def test_target_uri_keeps_params(make_request):
    pager = Pager(make_request(query_string="q=python&_page=2"), 10, 50)
    url = pager.target_uri(3)

    assert url.startswith("http://testserver/articles?")
    assert "q=python" in url
    assert "_page=3" in url
    assert "_page=2" not in url


def test_page_urls(make_request):
    pager = Pager(make_request(query_string="_page=3"), 10, 50)

    assert pager.first_page_url.endswith("_page=1")
    assert pager.previous_page_url.endswith("_page=2")
    assert pager.next_page_url.endswith("_page=4")
    assert pager.last_page_url.endswith("_page=5")
    assert pager.page_url("next") == pager.page_url(PageKind.NEXT)


def test_navigation_first_page(make_request):
    pager = Pager(make_request(), 10, 30)
    html = pager.navigation()

    assert pager.has_navigation
    assert 'class="first"' not in html
    assert 'class="previous"' not in html
    assert '<div class="last"><a href="http://testserver/articles?_page=3">Last</a></div>' in html
    assert '<div class="next"><a href="http://testserver/articles?_page=2">Next</a></div>' in html
    assert '<li class="active">1</li>' in html
    assert '<li><a href="http://testserver/articles?_page=2">2</a></li>' in html
    assert html.count("<li") == 3


def test_navigation_last_page(make_request):
    pager = Pager(make_request(query_string="_page=3"), 10, 30)
    html = pager.navigation()

    assert 'class="first"' in html
    assert 'class="previous"' in html
    assert 'class="last"' not in html
    assert 'class="next"' not in html
    assert '<li class="active">3</li>' in html


def test_navigation_escapes_urls(make_request):
    pager = Pager(make_request(query_string="q=%3Cb%3E&x=1"), 10, 30)
    html = str(pager.navigation())

    assert "<b>" not in html
    assert "&amp;" in html


def test_huge_page_parameter_falls_back_to_first_page(make_request):
    assert parse_page("1" * 20, 10) == 1
    assert parse_page(str(2 ** 63 + 1), 1) == 1
    assert parse_page(str(2 ** 63), 1) == 2 ** 63
    assert parse_page(str(2 ** 62), 1) == 2 ** 62

    pager = Pager(make_request(query_string="_page=" + "1" * 20), 10, 95)
    assert pager.page == 1
    assert pager.limit_options == {"limit": 10}


@pytest.mark.parametrize("limit", [True, False, 2.5, "10"])
def test_non_integer_limit(make_request, limit):
    with pytest.raises(PagerLimitError):
        Pager(make_request(), limit, 10)
