#!/usr/bin/env python3
"""
Demo script for the FlourishTalents feed cache.

Runs against the in-memory store with a small simulated latency, so it
needs no Supabase instance.
"""

import asyncio
import time

from flourish_cache import (
    ChangeEvent,
    ChangeFeed,
    FeedService,
    InMemoryMediaRepository,
    PageController,
    QueryCache,
)
from flourish_cache.errors import FetchError


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_page_cache(feed: FeedService, repo: InMemoryMediaRepository) -> None:
    """Demonstrate page caching for unauthenticated viewers."""
    print_section("Page Cache")

    for attempt in range(1, 3):
        start = time.perf_counter()
        page = await feed.load_page("stream", 1)
        duration = (time.perf_counter() - start) * 1000
        source = "cache" if page.from_cache else "remote"
        print(f"\n  Load #{attempt}: {len(page.items)} items from {source} in {duration:.1f}ms")
        for card in page.items:
            print(f"    - {card.item.title} ({card.item.creator_name})")

    print(f"\n  Content queries issued: {repo.calls['fetch_page']}")


async def demo_interactions(feed: FeedService, repo: InMemoryMediaRepository) -> None:
    """Demonstrate likes and follows merged into a page."""
    print_section("Likes & Follows")

    first = next(item for item in repo.media if item.type == "listen")
    print(f"\n❤️  u1 likes '{first.title}'")
    await feed.toggle_like("u1", first.id)
    print(f"➕ u1 follows '{first.creator_name}'")
    await feed.toggle_follow("u1", first.creator_name)

    page = await feed.load_page("listen", 1, user_id="u1")
    for card in page.items:
        liked = "♥" if card.is_liked else " "
        followed = "✓" if card.is_followed else " "
        print(f"  [{liked}] [{followed}] {card.item.title} by {card.item.creator_name}")

    print(f"\n  likes_count of '{first.title}': {repo.get_media(first.id).likes_count}")


async def demo_realtime(feed: FeedService, change_feed: ChangeFeed) -> None:
    """Demonstrate invalidation on a change notification."""
    print_section("Realtime Invalidation")

    print(f"\n  Cached keys before: {feed.cache.keys()}")
    change_feed.publish(ChangeEvent(table="media_likes", kind="INSERT"))
    print(f"  Cached keys after:  {feed.cache.keys()}")


async def demo_navigation(feed: FeedService, repo: InMemoryMediaRepository) -> None:
    """Demonstrate page navigation and failure handling."""
    print_section("Page Navigation")

    controller = PageController(feed, "listen")
    await controller.show(1)
    print(f"\n  Showing page {controller.current.page} of {controller.current.total_pages}")

    repo.fail("fetch_page")
    try:
        await controller.show(2)
    except FetchError as e:
        print(f"  ✗ {e}")
        print(f"  Still showing page {controller.current.page}")

    repo.recover()
    await controller.retry()
    print(f"  ✓ Retry succeeded, showing page {controller.current.page}")


async def run() -> None:
    repo = InMemoryMediaRepository.create(latency=0.05)
    change_feed = ChangeFeed()
    feed = FeedService.create(
        content_store=repo,
        interaction_store=repo,
        cache=QueryCache(default_ttl=300),
        page_size=2,
        change_feed=change_feed,
    )

    await demo_page_cache(feed, repo)
    await demo_interactions(feed, repo)
    await demo_realtime(feed, change_feed)
    await demo_navigation(feed, repo)

    feed.close()


def main() -> None:
    """Run all demos."""
    print("\n🚀 FlourishTalents Feed Cache Demo")
    print("=" * 70)
    print("Paginated media listings with per-user likes and follows")

    asyncio.run(run())

    print("\n" + "=" * 70)
    print("✅ Demo completed successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
