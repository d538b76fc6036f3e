import threading

from depthcrawl.domain.parsed_page import ParsedPage
from depthcrawl.services.crawler import Crawler
from depthcrawl.services.robots_policy import AlwaysAllowPolicy


def wide_site(width, depth):
    """Tree of `width` children per page, `depth` levels deep; returns the page map."""
    pages = {}
    level = ["root"]
    for _ in range(depth):
        next_level = []
        for url in level:
            children = [f"{url}/{i}" for i in range(width)]
            pages[url] = ParsedPage(children, "", "", "")
            next_level.extend(children)
        level = next_level
    for url in level:
        pages[url] = ParsedPage([], "", "", "")
    return pages


def test_in_flight_fetches_never_exceed_cap(make_fetcher, make_indexer):
    fetcher = make_fetcher(wide_site(6, 2), delay=0.005)
    crawler = Crawler(
        page_fetcher=fetcher,
        robots_policy=AlwaysAllowPolicy(),
        depth_limit=2,
        max_workers=16,
        max_in_flight_fetches=3,
    )
    result = crawler.crawl("root", 0, make_indexer())
    assert result.pages_indexed == 1 + 6 + 36
    assert 1 <= fetcher.max_in_flight <= 3


def test_deep_tree_with_single_worker_completes(make_fetcher, make_indexer):
    fetcher = make_fetcher(wide_site(3, 4))
    crawler = Crawler(page_fetcher=fetcher, robots_policy=AlwaysAllowPolicy(), depth_limit=4, max_workers=1)
    result = crawler.crawl("root", 0, make_indexer())
    assert result.pages_indexed == 1 + 3 + 9 + 27 + 81


def test_overlapping_runs_share_visited_state(make_fetcher, make_indexer):
    fetcher = make_fetcher(wide_site(5, 2), delay=0.002)
    crawler = Crawler(page_fetcher=fetcher, robots_policy=AlwaysAllowPolicy(), depth_limit=2, max_workers=4)
    indexer = make_indexer()
    results = []

    def run():
        results.append(crawler.crawl("root", 0, indexer))

    threads = [threading.Thread(target=run) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(fetcher.calls) == len(set(fetcher.calls)) == 31
    assert sum(r.pages_indexed for r in results) == 31
