"""Tests for the supported-site table and field adapters."""

import pytest

from smartreplies.extension.sites import (
    SITE_TABLE,
    ContentEditableAdapter,
    SiteSpec,
    SiteTableError,
    TextAreaAdapter,
    adapter_for,
    validate_site_table,
)

from conftest import FakeDocument, FakeElement


class TestSiteTable:

    def test_shipped_table_is_valid(self):
        validate_site_table(SITE_TABLE)

    def test_covers_supported_sites(self):
        hosts = {spec.hostname for spec in SITE_TABLE}
        assert hosts == {
            "mail.google.com",
            "www.linkedin.com",
            "twitter.com",
            "www.facebook.com",
            "www.reddit.com",
            "www.youtube.com",
        }

    @pytest.mark.parametrize(
        "table",
        [
            (),
            (SiteSpec("a.com", "div"), SiteSpec("a.com", "textarea")),
            (SiteSpec("", "div"),),
            (SiteSpec("Mail.Google.com", "div"),),
            (SiteSpec("a.com", "  "),),
            (SiteSpec("a.com", "div", kind="select"),),
        ],
        ids=["empty", "duplicate", "blank-host", "uppercase-host", "blank-selector", "bad-kind"],
    )
    def test_invalid_tables_rejected(self, table):
        with pytest.raises(SiteTableError):
            validate_site_table(table)


class TestAdapterFor:

    @pytest.mark.parametrize(
        "hostname, adapter_type",
        [
            ("mail.google.com", ContentEditableAdapter),
            ("www.linkedin.com", ContentEditableAdapter),
            ("mobile.twitter.com", ContentEditableAdapter),
            ("www.reddit.com", TextAreaAdapter),
            ("www.youtube.com", ContentEditableAdapter),
        ],
    )
    def test_supported_hosts(self, hostname: str, adapter_type: type):
        assert isinstance(adapter_for(FakeDocument(hostname)), adapter_type)

    def test_unsupported_host(self):
        assert adapter_for(FakeDocument("news.ycombinator.com")) is None

    def test_adapter_uses_site_selector(self):
        document = FakeDocument("www.linkedin.com")
        field = document.add_field("div.msg-form__contenteditable", FakeElement("hey"), mutate=False)
        document.add_field("div[aria-label='Message Body']", FakeElement("other"), mutate=False)

        assert adapter_for(document).find_compose_fields() == [field]


class TestFieldAccess:

    def test_contenteditable_reads_and_writes_inner_text(self):
        adapter = adapter_for(FakeDocument("mail.google.com"))
        field = FakeElement("original")
        assert adapter.read_text(field) == "original"
        adapter.write_text(field, "reply")
        assert field.inner_text == "reply"

    def test_textarea_reads_and_writes_value(self):
        adapter = adapter_for(FakeDocument("www.reddit.com"))
        field = FakeElement(value="original")
        assert adapter.read_text(field) == "original"
        adapter.write_text(field, "reply")
        assert field.value == "reply"
        assert field.inner_text == ""

    def test_textarea_without_value_reads_empty(self):
        adapter = adapter_for(FakeDocument("www.reddit.com"))
        assert adapter.read_text(FakeElement()) == ""
