"""Tests for collection_scopes/uris.py and collection_scopes/resolver.py.

Covers:
- parse_uri() on valid, hostless and unparseable input
- exact, origin-prefix and host-suffix matching
- union of matches across scopes
- tolerance of unparseable host-suffix keys
"""

from __future__ import annotations

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from collection_scopes.catalogue import load_catalogue
from collection_scopes.exceptions import UnresolvableURI
from collection_scopes.model import CollectionRule, Scope
from collection_scopes.resolver import iter_matches, resolve
from collection_scopes.scope_index import ScopeIndex
from collection_scopes.uris import is_same_or_subdomain, parse_uri, strip_www
from tests.fixtures import entry, make_catalogue

NEWS = CollectionRule(category_label="News")
GOV = CollectionRule(all_collections=("Government",))
BLOGS = CollectionRule(all_collections=("Blogs",))

_label = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=10)
_host = st.lists(_label, min_size=1, max_size=4).map(".".join)


def _index(**tables: dict[str, CollectionRule]) -> ScopeIndex:
    return ScopeIndex({Scope[name.upper()]: table for name, table in tables.items()})


class TestParseUri:
    """Tests for parse_uri function."""

    def test_simple(self):
        uri = parse_uri("http://example.org/a?b=1")
        assert uri.scheme == "http"
        assert uri.host == "example.org"
        assert uri.origin == "http://example.org"
        assert str(uri) == "http://example.org/a?b=1"

    def test_port_and_userinfo_are_not_part_of_host(self):
        uri = parse_uri("https://user:pw@example.org:8443/")
        assert uri.host == "example.org"
        assert uri.port == 8443
        assert uri.origin == "https://example.org"

    def test_host_keeps_case(self):
        uri = parse_uri("http://Example.ORG/Path")
        assert uri.host == "Example.ORG"
        assert uri.origin == "http://Example.ORG"

    def test_ipv6_host_keeps_brackets(self):
        uri = parse_uri("http://user@[::1]:8080/a")
        assert uri.host == "[::1]"
        assert uri.port == 8080
        assert uri.origin == "http://[::1]"

    def test_relative_uri_has_no_host(self):
        uri = parse_uri("/just/a/path")
        assert uri.host is None
        assert uri.origin is None

    def test_mailto_has_no_host(self):
        assert parse_uri("mailto:someone@example.org").host is None

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "http://bad host/",
            "http://example.org/\n",
            "http://[::1/",
            "http://example.org:99999/",
            "http://example.org:port/",
        ],
    )
    def test_unparseable(self, text):
        with pytest.raises(UnresolvableURI) as excinfo:
            parse_uri(text, record_id="rec-1")
        assert excinfo.value.code == "unresolvable_uri"
        assert excinfo.value.context["record_id"] == "rec-1"


class TestHostHelpers:
    def test_strip_www_once(self):
        assert strip_www("www.example.org") == "example.org"
        assert strip_www("www.www.example.org") == "www.example.org"

    def test_strip_www_is_prefix_literal(self):
        assert strip_www("wwwexample.org") == "wwwexample.org"
        assert strip_www("blog.www.example.org") == "blog.www.example.org"
        assert strip_www("WWW.example.org") == "WWW.example.org"

    def test_subdomain(self):
        assert is_same_or_subdomain("example.org", "example.org")
        assert is_same_or_subdomain("blog.example.org", "example.org")
        assert not is_same_or_subdomain("notexample.org", "example.org")
        assert not is_same_or_subdomain("example.org", "blog.example.org")
        assert not is_same_or_subdomain("", "example.org")

    @given(sub=_host, host=_host)
    def test_any_subdomain_matches(self, sub, host):
        assert is_same_or_subdomain(f"{sub}.{host}", host)

    @given(prefix=_label, host=_host)
    def test_glued_prefix_never_matches(self, prefix, host):
        assert not is_same_or_subdomain(f"{prefix}{host}", host)


class TestExact:
    def test_exact_match(self):
        index = _index(exact_resource={"http://a.org/x": NEWS})
        assert resolve("http://a.org/x", index) == [NEWS]

    def test_exact_is_exact(self):
        index = _index(exact_resource={"http://a.org/x": NEWS})
        assert resolve("http://a.org/x/", index) == []
        assert resolve("http://a.org/y", index) == []

    def test_exact_applies_without_host(self):
        index = _index(exact_resource={"urn:x-archive:1": NEWS})
        assert resolve("urn:x-archive:1", index) == [NEWS]


class TestOriginPrefix:
    @pytest.mark.parametrize(
        "url",
        ["http://example.org", "http://example.org/", "http://example.org/a/b?c=1", "http://example.org:8080/"],
    )
    def test_matches_any_path(self, url):
        index = _index(origin_prefix={"http://example.org": BLOGS})
        assert resolve(url, index) == [BLOGS]

    def test_scheme_must_match(self):
        index = _index(origin_prefix={"http://example.org": BLOGS})
        assert resolve("https://example.org/", index) == []

    def test_subdomain_is_a_different_origin(self):
        index = _index(origin_prefix={"http://example.org": BLOGS})
        assert resolve("http://www.example.org/", index) == []

    @pytest.mark.parametrize(
        ("key", "url"),
        [
            ("http://Example.org", "http://Example.org/a"),
            ("http://[::1]", "http://[::1]/a"),
            ("http://[::1]", "http://[::1]:8080/a"),
        ],
    )
    def test_catalogued_origin_matches_same_text(self, key, url):
        index = load_catalogue(make_catalogue([entry(key, scope="root", collections="Blogs")]))
        assert resolve(url, index) == [BLOGS]


class TestHostSuffix:
    @pytest.mark.parametrize(
        "url",
        [
            "http://example.org/",
            "http://www.example.org/page",
            "http://blog.example.org/",
            "https://a.b.example.org/x",
        ],
    )
    def test_matches_host_and_subdomains(self, url):
        index = _index(host_suffix={"http://example.org": GOV})
        assert resolve(url, index) == [GOV]

    @pytest.mark.parametrize("url", ["http://notexample.org/", "http://wwwexample.org/", "http://example.com/"])
    def test_does_not_match_lookalikes(self, url):
        index = _index(host_suffix={"http://example.org": GOV})
        assert resolve(url, index) == []

    def test_key_path_is_ignored(self):
        index = _index(host_suffix={"https://example.org/some/section/": GOV})
        assert resolve("http://blog.example.org/other", index) == [GOV]

    def test_several_suffix_rules_match(self):
        index = _index(host_suffix={"http://gov.uk": GOV, "http://data.gov.uk": BLOGS})
        assert sorted(resolve("http://www.data.gov.uk/", index), key=repr) == sorted([GOV, BLOGS], key=repr)

    def test_unparseable_key_is_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="collection_scopes.scope_index"):
            index = _index(host_suffix={"http://bad key/": NEWS, "http://gov.uk": GOV})
            assert resolve("http://data.gov.uk/", index) == [GOV]
            assert resolve("http://www.gov.uk/", index) == [GOV]
        warnings = [r for r in caplog.records if "Skipping unparseable" in r.getMessage()]
        assert len(warnings) == 1

    def test_ipv6_key_matches_same_host(self):
        index = _index(host_suffix={"http://[::1]": GOV})
        assert resolve("https://[::1]:8443/x", index) == [GOV]

    def test_hostless_key_is_skipped(self):
        index = _index(host_suffix={"gov.uk": GOV})
        assert resolve("http://gov.uk/", index) == []

    @given(sub=_host, host=_host)
    def test_property_subdomains_resolve(self, sub, host):
        index = _index(host_suffix={f"http://{host}": GOV})
        assert resolve(f"http://{sub}.{host}/", index) == [GOV]


class TestUnion:
    def test_all_scopes_contribute_in_order(self):
        index = _index(
            exact_resource={"http://example.org/a": NEWS},
            origin_prefix={"http://example.org": BLOGS},
            host_suffix={"http://example.org": GOV},
        )
        matches = list(iter_matches(parse_uri("http://example.org/a"), index))
        assert [m.scope for m in matches] == [Scope.EXACT_RESOURCE, Scope.ORIGIN_PREFIX, Scope.HOST_SUFFIX]
        assert [m.rule for m in matches] == [NEWS, BLOGS, GOV]

    def test_hostless_uri_only_checks_exact(self):
        index = _index(origin_prefix={"file://": BLOGS}, host_suffix={"http://example.org": GOV})
        assert resolve("file:///tmp/x", index) == []

    def test_no_match_is_empty_list(self):
        assert resolve("http://nothing.example/", ScopeIndex()) == []

    def test_resolution_does_not_mutate_index(self):
        index = _index(exact_resource={"http://a.org/x": NEWS}, host_suffix={"http://a.org": GOV})
        before = index.counts()
        resolve("http://a.org/x", index)
        resolve("http://b.org/", index)
        assert index.counts() == before


class TestEndToEndResolution:
    def test_exact_catalogue(self):
        index = load_catalogue(
            make_catalogue([entry("http://a.org/x", category="News", subject="Politics|Elections")])
        )
        assert resolve("http://a.org/x", index) == [
            CollectionRule(category_label="News", subjects=("Politics", "Elections"))
        ]
        assert resolve("http://a.org/y", index) == []

    def test_subdomain_catalogue(self):
        index = load_catalogue(
            make_catalogue([entry("http://gov.uk", scope="subdomains", collections="Government")])
        )
        assert resolve("http://data.gov.uk/", index) == [GOV]
        assert resolve("http://mygov.uk/", index) == []

    def test_reserved_scope_never_matches(self):
        index = load_catalogue(make_catalogue([entry("http://a.org/x", scope="plus1", category="P")]))
        assert resolve("http://a.org/x", index) == []
