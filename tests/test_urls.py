import pytest

from utils.urls import clean_path, join_path, rebase_url


@pytest.mark.parametrize("parts, expected", [
    (("/api", "/users/1"), "/api/users/1"),
    (("/api/", "users/1"), "/api/users/1"),
    (("", "/users/1"), "/users/1"),
    (("/api", ""), "/api"),
    (("", ""), ""),
    (("/api//v1", "//users"), "/api/v1/users"),
    (("/api", "./users/../teams/"), "/api/teams"),
    (("/api", "../../etc"), "/etc"),
    (("api", "users"), "api/users"),
])
def test_join_path(parts, expected):
    assert join_path(*parts) == expected


@pytest.mark.parametrize("path, expected", [
    ("", "."),
    ("/", "/"),
    ("a/..", "."),
    ("../a/../..", "../.."),
    ("/../a", "/a"),
    ("a//b/./c/", "a/b/c"),
])
def test_clean_path(path, expected):
    assert clean_path(path) == expected


@pytest.mark.parametrize("url, base, expected", [
    ("/users/1", "http://host/api", "http://host/api/users/1"),
    ("/users/1", "https://host:8443", "https://host:8443/users/1"),
    ("users?page=2#top", "http://host/api/", "http://host/api/users?page=2#top"),
    ("http://other/users/1", "http://host/api", "http://host/api/users/1"),
    ("/files/a%2Fb", "http://host/api", "http://host/api/files/a%2Fb"),
    ("", "http://host", "http://host/"),
])
def test_rebase_url(url, base, expected):
    assert rebase_url(url, base) == expected
