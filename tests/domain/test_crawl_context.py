from wordcrawl.domain.crawl_context import CrawlContext


def test_fresh_contexts_share_nothing():
    a = CrawlContext()
    b = CrawlContext()
    a.claim("http://example.com")
    a.add_word_counts({"x": 1})

    assert b.urls_visited == 0
    assert b.word_counts.is_empty()


def test_claim_counts_each_url_once():
    context = CrawlContext()
    assert context.claim("http://example.com/a")
    assert not context.claim("http://example.com/a")
    assert context.claim("http://example.com/b")
    assert context.urls_visited == 2
    assert not context.claim("http://example.com/b")
