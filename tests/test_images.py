"""
Tests for thumbnail URL helpers.
"""

from flourish_cache.utils import image_srcset, optimized_image_url

PEXELS = "https://images.pexels.com/photos/1105666/pexels-photo-1105666.jpeg"


def test_pexels_url_is_resized():
    assert optimized_image_url(PEXELS, 400) == f"{PEXELS}?w=400&q=75"


def test_existing_query_string_is_extended():
    assert optimized_image_url(f"{PEXELS}?auto=compress", 600) == f"{PEXELS}?auto=compress&w=600&q=75"


def test_other_hosts_pass_through():
    url = "https://cdn.example.com/thumb.jpg"
    assert optimized_image_url(url, 400) == url
    assert image_srcset(url) == f"{url} 400w, {url} 600w, {url} 800w"


def test_without_width_url_is_unchanged():
    assert optimized_image_url(PEXELS) == PEXELS


def test_empty_url():
    assert optimized_image_url("", 400) == ""
    assert image_srcset("") == ""


def test_srcset():
    assert image_srcset(PEXELS) == (
        f"{PEXELS}?w=400&q=75 400w, {PEXELS}?w=600&q=75 600w, {PEXELS}?w=800&q=75 800w"
    )
