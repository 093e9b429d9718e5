import logging
import re
import threading
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import timedelta

import pytest

from wordcrawl.domain.crawl_context import CrawlContext
from wordcrawl.domain.crawl_task_spec import CrawlTaskSpec
from wordcrawl.exceptions import HttpFetchError
from wordcrawl.services.crawl_policy import CrawlPolicy
from wordcrawl.services.crawl_task import CrawlTask
from wordcrawl.services.fork_join_pool import ForkJoinPool


@pytest.fixture
def pool():
    with ForkJoinPool(4) as p:
        yield p


def _root_spec(clock, url="http://a", depth=3, ignored=(), timeout=timedelta(minutes=5), context=None):
    return CrawlTaskSpec(
        url=url,
        depth=depth,
        deadline=clock.now() + timeout,
        context=context or CrawlContext(),
        ignored_urls=tuple(re.compile(p) for p in ignored),
        clock=clock,
    )


def _run(pool, task, spec):
    pool.submit(task.run, spec).result(timeout=30)


def test_depth_zero_does_not_fetch_or_mutate_state(pool, page_source, clock):
    page_source.add("http://a", {"x": 1})
    spec = _root_spec(clock, depth=0)
    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert page_source.total_fetches == 0
    assert spec.context.urls_visited == 0
    assert spec.context.word_counts.is_empty()


def test_fetches_page_and_forks_links(pool, page_source, clock):
    page_source.add("http://a", {"x": 1}, ["http://b", "http://c"])
    page_source.add("http://b", {"x": 2})
    page_source.add("http://c", {"y": 1})
    spec = _root_spec(clock, depth=2)

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert spec.context.word_counts.snapshot() == {"x": 3, "y": 1}
    assert spec.context.urls_visited == 3


def test_links_beyond_depth_are_not_fetched(pool, page_source, clock):
    page_source.add("http://a", {"a": 1}, ["http://b"])
    page_source.add("http://b", {"b": 1}, ["http://c"])
    page_source.add("http://c", {"c": 1})
    spec = _root_spec(clock, depth=2)

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert page_source.fetch_counts["http://c"] == 0
    assert spec.context.word_counts.snapshot() == {"a": 1, "b": 1}


def test_cycles_and_duplicate_links_fetch_each_url_once(pool, page_source, clock):
    page_source.add("http://a", {"w": 1}, ["http://b", "http://b", "http://a"])
    page_source.add("http://b", {"w": 1}, ["http://a", "http://b"])
    spec = _root_spec(clock, depth=10)

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert page_source.fetch_counts == {"http://a": 1, "http://b": 1}
    assert spec.context.urls_visited == 2
    assert spec.context.word_counts.snapshot() == {"w": 2}


def test_concurrent_resubmission_of_same_url_fetches_once(pool, page_source, clock):
    page_source.add("http://a", {"w": 1})
    context = CrawlContext()
    task = CrawlTask(page_source=page_source, pool=pool)
    handles = [pool.submit(task.run, _root_spec(clock, context=context)) for _ in range(25)]
    pool.join_all(handles)

    assert page_source.fetch_counts["http://a"] == 1
    assert context.urls_visited == 1
    assert context.word_counts.snapshot() == {"w": 1}


def test_ignored_url_is_not_claimed(pool, page_source, clock):
    page_source.add("http://a/skip.pdf", {"w": 1})
    spec = _root_spec(clock, url="http://a/skip.pdf", ignored=[r".*\.pdf"])

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert page_source.total_fetches == 0
    assert spec.context.urls_visited == 0


def test_expired_deadline_stops_before_fetch(pool, page_source, clock):
    page_source.add("http://a", {"w": 1})
    spec = _root_spec(clock, timeout=timedelta(seconds=1))
    clock.advance(timedelta(seconds=2))

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert page_source.total_fetches == 0
    assert spec.context.urls_visited == 0


def test_deadline_passing_mid_fetch_still_merges_but_stops_children(pool, page_source, clock):
    # The clock jumps past the deadline while the root page is being fetched.
    page_source.add("http://a", {"root": 1}, ["http://b"])
    page_source.add("http://b", {"child": 1})
    page_source.on_fetch = lambda url: clock.advance(timedelta(minutes=10))
    spec = _root_spec(clock, timeout=timedelta(minutes=1))

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert spec.context.word_counts.snapshot() == {"root": 1}
    assert page_source.fetch_counts["http://b"] == 0


def test_failed_fetch_only_abandons_its_own_subtree(pool, page_source, clock, caplog):
    page_source.add("http://a", {"a": 1}, ["http://bad", "http://good"])
    page_source.pages["http://bad"] = HttpFetchError("http://bad", ConnectionError("refused"))
    page_source.add("http://good", {"g": 1})
    spec = _root_spec(clock, depth=3)
    caplog.set_level(logging.WARNING)

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert spec.context.word_counts.snapshot() == {"a": 1, "g": 1}
    # the failed URL was claimed before the fetch
    assert spec.context.urls_visited == 3
    assert "Fetch failed for http://bad" in caplog.text


def test_unexpected_page_source_error_is_logged_and_isolated(pool, page_source, clock, caplog):
    page_source.add("http://a", {"a": 1}, ["http://broken", "http://ok"])
    page_source.pages["http://broken"] = KeyError("parser bug")
    page_source.add("http://ok", {"ok": 1})
    spec = _root_spec(clock)
    caplog.set_level(logging.ERROR)

    _run(pool, CrawlTask(page_source=page_source, pool=pool), spec)

    assert spec.context.word_counts.snapshot() == {"a": 1, "ok": 1}
    assert "Fetch error for http://broken" in caplog.text


def test_parent_completes_only_after_children(pool, page_source, clock):
    release = threading.Event()
    page_source.add("http://a", {"a": 1}, ["http://slow"])
    page_source.add("http://slow", {"s": 1})

    def on_fetch(url):
        if url == "http://slow":
            release.wait(5)

    page_source.on_fetch = on_fetch
    spec = _root_spec(clock)
    handle = pool.submit(CrawlTask(page_source=page_source, pool=pool).run, spec)

    with pytest.raises(FutureTimeoutError):
        handle.result(timeout=0.2)
    assert not handle.done()

    release.set()
    handle.result(timeout=30)
    assert spec.context.word_counts.snapshot() == {"a": 1, "s": 1}


class _BrokenPolicy(CrawlPolicy):
    def should_skip(self, spec):
        if spec.url == "http://explode":
            raise RuntimeError("policy bug")
        return super().should_skip(spec)


def test_error_escaping_a_child_subtree_is_logged_and_siblings_finish(pool, page_source, clock, caplog):
    page_source.add("http://a", {"a": 1}, ["http://explode", "http://ok"])
    page_source.add("http://ok", {"ok": 1})
    spec = _root_spec(clock)
    caplog.set_level(logging.ERROR)

    task = CrawlTask(page_source=page_source, pool=pool, crawl_policy=_BrokenPolicy())
    _run(pool, task, spec)

    assert spec.context.word_counts.snapshot() == {"a": 1, "ok": 1}
    assert "Crawl below http://a failed" in caplog.text
