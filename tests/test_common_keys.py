from common.keys import CacheKeyBuilder, extract_id_from_url

BASE = "https://swapi.dev/api"


def test_key_ignores_param_order():
    keys = CacheKeyBuilder(BASE)
    assert keys.make_key("/people/", {"search": "sky", "page": 2}) == keys.make_key(
        "/people/", {"page": 2, "search": "sky"}
    )
    assert keys.make_key("/people/", {"page": 2, "search": "sky"}) == "/people/|page=2&search=sky"


def test_absolute_and_relative_urls_collide():
    keys = CacheKeyBuilder(BASE)
    assert keys.make_key(f"{BASE}/people/") == keys.make_key("/people/")
    assert keys.make_key(f"{BASE}/people/", {"page": 1}) == "/people/|page=1"


def test_foreign_origin_is_kept_verbatim():
    keys = CacheKeyBuilder(BASE)
    assert keys.make_key("https://example.com/people/") == "https://example.com/people/|"


def test_different_values_give_different_keys():
    keys = CacheKeyBuilder(BASE)
    assert keys.make_key("/people/", {"page": 1}) != keys.make_key("/people/", {"page": 2})
    assert keys.make_key("/people/", {"search": "luke"}) != keys.make_key("/people/", {"search": "leia"})


def test_empty_params_match_no_params():
    keys = CacheKeyBuilder(BASE)
    assert keys.make_key("/films/") == "/films/|"
    assert keys.make_key("/films/", {}) == "/films/|"


def test_build_url():
    keys = CacheKeyBuilder(BASE + "/")
    assert keys.build_url("/films/1/") == f"{BASE}/films/1/"
    assert keys.build_url(f"{BASE}/films/1/") == f"{BASE}/films/1/"


def test_extract_id_from_url():
    assert extract_id_from_url(f"{BASE}/people/1/") == "1"
    assert extract_id_from_url(f"{BASE}/starships/12") == "12"
    assert extract_id_from_url("") == ""
