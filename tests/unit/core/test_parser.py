"""Tests for the PKCS#11 URI parser.

The sample URIs come from RFC 7512 section 3 and from common token
configurations (PIV cards, SoftHSM, p11-kit).
"""

import logging

import pytest

from pk11uri import ErrorKind, Mapping, ParseError, Parser, parse
from pk11uri.core.advisories import AdvisoryKind
from pk11uri.core.registry import get_registry


@pytest.fixture
def parser() -> Parser:
    return Parser(validation=True, advisories=True)


def value_span(uri: str, value: str) -> tuple[int, int]:
    start = uri.index(value)
    return (start, start + len(value))


@pytest.mark.rfc("3")
class TestRfcExamples:
    """Every example URI of RFC 7512 parses."""

    def test_empty_uri(self, parser: Parser) -> None:
        """Matches everything; no attribute is present."""
        mapping = parser.parse("pkcs11:")
        assert mapping.token() is None
        assert mapping.vendor_names() == []

    def test_public_key(self, parser: Parser) -> None:
        mapping = parser.parse("pkcs11:object=my-pubkey;type=public")
        assert mapping.object() == "my-pubkey"
        assert mapping.type() == "public"

    def test_private_key_with_pin_source(self, parser: Parser) -> None:
        mapping = parser.parse("pkcs11:object=my-key;type=private?pin-source=file:/etc/token")
        assert mapping.object() == "my-key"
        assert mapping.type() == "private"
        assert mapping.pin_source() == "file:/etc/token"

    def test_multiline_certificate(self, parser: Parser) -> None:
        """URIs wrapped over several lines parse like their single-line form."""
        uri = """pkcs11:token=The%20Software%20PKCS%2311%20Softtoken;
            manufacturer=Snake%20Oil,%20Inc.;
            model=1.0;
            object=my-certificate;
            type=cert;
            id=%69%95%3E%5C%F4%BD%EC%91;
            serial=
            ?pin-source=file:/etc/token_pin"""
        mapping = parser.parse(uri)
        assert mapping.token() == "The%20Software%20PKCS%2311%20Softtoken"
        assert mapping.manufacturer() == "Snake%20Oil,%20Inc."
        assert mapping.model() == "1.0"
        assert mapping.object() == "my-certificate"
        assert mapping.type() == "cert"
        assert mapping.id() == "%69%95%3E%5C%F4%BD%EC%91"
        assert mapping.serial() == ""
        assert mapping.pin_source() == "file:/etc/token_pin"

    def test_module_name(self, parser: Parser) -> None:
        mapping = parser.parse(
            "pkcs11:object=my-sign-key;\n    type=private\n    ?module-name=mypkcs11"
        )
        assert mapping.object() == "my-sign-key"
        assert mapping.type() == "private"
        assert mapping.module_name() == "mypkcs11"

    def test_module_path(self, parser: Parser) -> None:
        mapping = parser.parse(
            "pkcs11:object=my-sign-key;\n    type=private\n    ?module-path=/mnt/libmypkcs11.so.1"
        )
        assert mapping.module_path() == "/mnt/libmypkcs11.so.1"

    def test_pin_value(self, parser: Parser) -> None:
        mapping = parser.parse(
            "pkcs11:token=Software%20PKCS%2311%20softtoken;\n"
            "    manufacturer=Snake%20Oil,%20Inc.\n"
            "    ?pin-value=the-pin"
        )
        assert mapping.token() == "Software%20PKCS%2311%20softtoken"
        assert mapping.manufacturer() == "Snake%20Oil,%20Inc."
        assert mapping.pin_value() == "the-pin"

    def test_slot_description(self, parser: Parser) -> None:
        mapping = parser.parse("pkcs11:slot-description=Sun%20Metaslot")
        assert mapping.slot_description() == "Sun%20Metaslot"

    def test_library_attributes(self, parser: Parser) -> None:
        mapping = parser.parse(
            "pkcs11:library-manufacturer=Snake%20Oil,%20Inc.;"
            "library-description=Soft%20Token%20Library;"
            "library-version=1.23"
        )
        assert mapping.library_manufacturer() == "Snake%20Oil,%20Inc."
        assert mapping.library_description() == "Soft%20Token%20Library"
        assert mapping.library_version() == "1.23"

    def test_mixed_case_id(self, parser: Parser) -> None:
        mapping = parser.parse(
            "pkcs11:token=My%20token%25%20created%20by%20Joe;"
            "library-version=3;"
            "id=%01%02%03%Ba%dd%Ca%fe%04%05%06"
        )
        assert mapping.token() == "My%20token%25%20created%20by%20Joe"
        assert mapping.library_version() == "3"
        assert mapping.id() == "%01%02%03%Ba%dd%Ca%fe%04%05%06"
        assert mapping.decoded("id") == bytes.fromhex("010203baddcafe040506")

    def test_encoded_separator_in_value(self, parser: Parser) -> None:
        mapping = parser.parse(
            "pkcs11:token=A%20name%20with%20a%20substring%20%25%3B;object=my-certificate;type=cert"
        )
        assert mapping.token() == "A%20name%20with%20a%20substring%20%25%3B"
        assert mapping.decoded("token") == b"A name with a substring %;"

    def test_utf8_value(self, parser: Parser) -> None:
        mapping = parser.parse(
            "pkcs11:token=Name%20with%20a%20small%20A%20with%20acute:%20%C3%A1;"
            "object=my-certificate;type=cert"
        )
        assert mapping.decoded("token").decode("utf-8").endswith("acute: á")

    def test_vendor_attributes(self, parser: Parser) -> None:
        mapping = parser.parse(
            """pkcs11:token=my-token;
            object=my-certificate;
            type=cert;
            vendor-aaa=value-a
            ?pin-source=file:/etc/token_pin
            &vendor-bbb=value-b"""
        )
        assert mapping.token() == "my-token"
        assert mapping.type() == "cert"
        assert mapping.pin_source() == "file:/etc/token_pin"
        assert mapping.vendor("vendor-aaa") == ["value-a"]
        assert mapping.vendor("vendor-bbb") == ["value-b"]


class TestDocumentedExamples:
    """Behaviour of the canonical accept/reject samples."""

    def test_model_and_object(self, parser: Parser) -> None:
        mapping = parser.parse("pkcs11:model=1.0;object=my-certificate;type=cert")
        assert mapping.model() == "1.0"
        assert mapping.object() == "my-certificate"

    def test_embedded_space_is_rejected(self, parser: Parser) -> None:
        uri = "pkcs11:slot=9e;object=Private key for Card Authentication;type=Private Key"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)

        error = exc_info.value
        assert error.kind is ErrorKind.INVALID_VALUE
        assert "component value contains an embedded space" in error.violation
        assert error.error_span == value_span(uri, "Private key for Card Authentication")

    def test_invalid_type_is_rejected(self, parser: Parser) -> None:
        uri = "pkcs11:slot=9e;object=Private%20key%20for%20Card%20Authentication;type=Private Key"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)

        error = exc_info.value
        assert error.kind is ErrorKind.INVALID_ENUMERATION
        assert error.error_span == value_span(uri, "Private Key")
        for member in ("public", "private", "cert", "secret-key", "data"):
            assert member in error.help

    def test_vendor_values_across_components(self, parser: Parser) -> None:
        mapping = parser.parse("pkcs11:NATO=alpha?NATO=bravo&NATO=charlie")
        assert mapping.vendor("NATO") == ["alpha", "bravo", "charlie"]

    def test_duplicate_token(self, parser: Parser) -> None:
        uri = "pkcs11:token=a;token=b"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)

        assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME
        assert exc_info.value.error_span == (uri.rindex("token=b"), len(uri))


class TestScheme:
    """Test the pkcs11: scheme check."""

    @pytest.mark.parametrize(
        "uri",
        ["", "pkcs11", "PKCS11:token=a", "http://example.com", " pkcs11:token=a"],
    )
    def test_wrong_scheme(self, parser: Parser, uri: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert exc_info.value.kind is ErrorKind.SCHEME_MISMATCH
        assert exc_info.value.error_span == (0, 7)
        assert "pkcs11:" in exc_info.value.help

    def test_empty_query(self, parser: Parser) -> None:
        mapping = parser.parse("pkcs11:?")
        assert mapping.pin_source() is None


class TestMalformedTokens:
    """Test structural violations."""

    def test_missing_equals(self, parser: Parser) -> None:
        uri = "pkcs11:token=a;object"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert exc_info.value.kind is ErrorKind.MALFORMED_TOKEN
        assert exc_info.value.error_span == value_span(uri, "object")

    def test_missing_equals_in_query(self, parser: Parser) -> None:
        uri = "pkcs11:?pin-source"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert "pk11-qattr" in exc_info.value.violation

    def test_double_separator(self, parser: Parser) -> None:
        uri = "pkcs11:token=a;;object=b"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        error = exc_info.value
        assert error.kind is ErrorKind.MALFORMED_TOKEN
        assert error.violation == "Misplaced path delimiter."
        assert error.error_span == (uri.index(";;") + 1, uri.index(";;") + 2)
        assert error.replacement == ""

    def test_trailing_separator(self, parser: Parser) -> None:
        uri = "pkcs11:token=a;"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert exc_info.value.error_span == (len(uri) - 1, len(uri))

    def test_leading_query_separator(self, parser: Parser) -> None:
        uri = "pkcs11:?&pin-value=1234"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert exc_info.value.violation == "Misplaced query delimiter."
        assert exc_info.value.error_span == (8, 9)

    def test_missing_name(self, parser: Parser) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse("pkcs11:=value")
        assert exc_info.value.kind is ErrorKind.MALFORMED_TOKEN
        assert "Missing attribute name" in exc_info.value.violation

    def test_invalid_vendor_name(self, parser: Parser) -> None:
        uri = "pkcs11:bad.name=value"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert exc_info.value.kind is ErrorKind.MALFORMED_TOKEN
        assert exc_info.value.error_span == value_span(uri, "bad.name")


TEXT_PATH_ATTRIBUTES = [
    "token",
    "manufacturer",
    "serial",
    "model",
    "library-manufacturer",
    "library-description",
    "object",
    "id",
    "slot-description",
    "slot-manufacturer",
    "vendor-abc",
]
TEXT_QUERY_ATTRIBUTES = ["pin-source", "pin-value", "module-name", "module-path"]


class TestUnsafeCharacters:
    """Characters that must always be percent-encoded."""

    @pytest.mark.parametrize("name", TEXT_PATH_ATTRIBUTES)
    def test_space_in_path(self, parser: Parser, name: str) -> None:
        uri = f"pkcs11:{name}=contains empty spaces"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE
        assert exc_info.value.error_span == value_span(uri, "contains empty spaces")
        assert exc_info.value.replacement == "contains%20empty%20spaces"

    @pytest.mark.parametrize("name", TEXT_QUERY_ATTRIBUTES)
    def test_space_in_query(self, parser: Parser, name: str) -> None:
        with pytest.raises(ParseError):
            parser.parse(f"pkcs11:?{name}=contains empty spaces")

    @pytest.mark.parametrize("name", TEXT_PATH_ATTRIBUTES)
    def test_hash_in_path(self, parser: Parser, name: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"pkcs11:{name}=contains#")
        assert "'#'" in exc_info.value.violation
        assert exc_info.value.replacement == "contains%23"

    @pytest.mark.parametrize("name", TEXT_QUERY_ATTRIBUTES)
    def test_hash_in_query(self, parser: Parser, name: str) -> None:
        with pytest.raises(ParseError):
            parser.parse(f"pkcs11:?{name}=contains#")

    @pytest.mark.parametrize("name", TEXT_PATH_ATTRIBUTES)
    def test_slash_in_path(self, parser: Parser, name: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"pkcs11:{name}=foo/bar")
        assert exc_info.value.replacement == "foo%2Fbar"

    @pytest.mark.parametrize("name", TEXT_QUERY_ATTRIBUTES)
    def test_slash_in_query_is_allowed(self, parser: Parser, name: str) -> None:
        mapping = parser.parse(f"pkcs11:?{name}=foo/bar")
        assert mapping.get(name) == "foo/bar"

    @pytest.mark.parametrize(
        "uri",
        [
            "pkcs11:object=Private key for Card Authentication;type=private",
            "pkcs11:token=PKCS#11 token;object=a/b",
            "pkcs11:token=my-token?pin-source=file:/etc/my pin&pin-value=1#2",
            "pkcs11:vendor-abc= a b c ;serial=1",
        ],
    )
    def test_replacement_parses(self, parser: Parser, uri: str) -> None:
        """Substituting each suggested replacement eventually yields a valid URI."""
        for _ in range(10):
            try:
                parser.parse(uri)
            except ParseError as e:
                assert e.replacement is not None
                start, end = e.error_span
                uri = uri[:start] + e.replacement + uri[end:]
            else:
                break
        parser.parse(uri)


class TestAttributeGrammar:
    """Test enumerated and pattern-restricted values."""

    @pytest.mark.parametrize("object_type", ["public", "private", "cert", "secret-key", "data"])
    def test_type_members(self, parser: Parser, object_type: str) -> None:
        assert parser.parse(f"pkcs11:type={object_type}").type() == object_type

    @pytest.mark.parametrize("object_type", ["Private", "secret", "", "cert%20"])
    def test_type_non_members(self, parser: Parser, object_type: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"pkcs11:type={object_type}")
        assert exc_info.value.kind is ErrorKind.INVALID_ENUMERATION

    @pytest.mark.parametrize("version", ["1", "10", "1.0", "1.01"])
    def test_library_version(self, parser: Parser, version: str) -> None:
        assert parser.parse(f"pkcs11:library-version={version}").library_version() == version

    @pytest.mark.parametrize("version", ["1.", "SNAPSHOT", ".1", "1.2.3", ""])
    def test_invalid_library_version(self, parser: Parser, version: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"pkcs11:library-version={version}")
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE
        assert "M.N" in exc_info.value.help

    @pytest.mark.parametrize("slot_id", ["1", "123"])
    def test_slot_id(self, parser: Parser, slot_id: str) -> None:
        assert parser.parse(f"pkcs11:slot-id={slot_id}").slot_id() == slot_id

    @pytest.mark.parametrize("slot_id", ["-123", "foo", "١٢", ""])
    def test_invalid_slot_id(self, parser: Parser, slot_id: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"pkcs11:slot-id={slot_id}")
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE


class TestComponentAffinity:
    """Standard names must appear in their own component."""

    @pytest.mark.parametrize("name", ["pin-value", "pin-source", "module-name", "module-path"])
    def test_query_attribute_in_path(self, parser: Parser, name: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"pkcs11:{name}=foo")
        assert exc_info.value.kind is ErrorKind.MISPLACED_ATTRIBUTE
        assert exc_info.value.violation == "Naming collision with standard query component."

    @pytest.mark.parametrize(
        "name",
        [
            "token",
            "manufacturer",
            "serial",
            "model",
            "library-manufacturer",
            "library-version",
            "library-description",
            "object",
            "type",
            "id",
            "slot-description",
            "slot-manufacturer",
            "slot-id",
        ],
    )
    def test_path_attribute_in_query(self, parser: Parser, name: str) -> None:
        """Affinity is checked before the value grammar."""
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"pkcs11:?{name}=foo")
        assert exc_info.value.kind is ErrorKind.MISPLACED_ATTRIBUTE
        assert f"Move `{name}`" in exc_info.value.help


@pytest.mark.rfc("2.3")
class TestDuplicates:
    """Standard names may appear only once per URI."""

    @pytest.mark.parametrize(
        "uri",
        [
            "pkcs11:token=foo;token=bar",
            "pkcs11:manufacturer=foo;manufacturer=bar",
            "pkcs11:serial=foo;serial=bar",
            "pkcs11:model=foo;model=bar",
            "pkcs11:library-manufacturer=foo;library-manufacturer=bar",
            "pkcs11:library-version=1;library-version=1.1",
            "pkcs11:library-description=foo;library-description=bar",
            "pkcs11:object=foo;object=bar",
            "pkcs11:type=public;type=private",
            "pkcs11:id=foo;id=bar",
            "pkcs11:slot-description=foo;slot-description=bar",
            "pkcs11:slot-manufacturer=foo;slot-manufacturer=bar",
            "pkcs11:slot-id=123;slot-id=456",
            "pkcs11:?pin-source=foo&pin-source=bar",
            "pkcs11:?pin-value=foo&pin-value=bar",
            "pkcs11:?module-name=foo&module-name=bar",
            "pkcs11:?module-path=foo&module-path=bar",
        ],
    )
    def test_duplicate_standard_names(self, parser: Parser, uri: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse(uri)
        assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME

    def test_identical_values_still_duplicate(self, parser: Parser) -> None:
        with pytest.raises(ParseError) as exc_info:
            parser.parse("pkcs11:object=same;type=cert;object=same")
        assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME

    def test_standard_name_repeated_in_query_fails(self, parser: Parser) -> None:
        with pytest.raises(ParseError):
            parser.parse("pkcs11:token=a?token=a")

    def test_first_violation_wins(self, parser: Parser) -> None:
        """Only the leftmost problem is reported."""
        with pytest.raises(ParseError) as exc_info:
            parser.parse("pkcs11:type=bogus;token=a;token=b")
        assert exc_info.value.kind is ErrorKind.INVALID_ENUMERATION


class TestVendorAttributes:
    """Vendor attributes may repeat."""

    @pytest.mark.parametrize("count", [1, 2, 5, 20])
    def test_repeat_count(self, parser: Parser, count: int) -> None:
        values = [f"v{i}" for i in range(count)]
        uri = "pkcs11:" + ";".join(f"acme-flag={v}" for v in values)
        assert parser.parse(uri).vendor("acme-flag") == values

    def test_multiline_query_repeats(self, parser: Parser) -> None:
        mapping = parser.parse(
            """pkcs11:vendor-attribute=hello?
                vendor-attribute=world&
                vendor-attribute=foo&
                vendor-attribute=bar"""
        )
        assert mapping.vendor("vendor-attribute") == ["hello", "world", "foo", "bar"]

    def test_absent_vendor(self, parser: Parser) -> None:
        assert parser.parse("pkcs11:token=a").vendor("acme") is None

    def test_query_extras_allowed_in_vendor_query_value(self, parser: Parser) -> None:
        mapping = parser.parse("pkcs11:?acme-cfg=/etc/acme?mode=a|b")
        assert mapping.vendor("acme-cfg") == ["/etc/acme?mode=a|b"]


class TestPresence:
    """Present-empty and absent are never conflated."""

    @pytest.mark.parametrize("definition", list(get_registry()), ids=lambda d: d.name)
    def test_absent(self, parser: Parser, definition) -> None:
        mapping = parser.parse("pkcs11:")
        assert getattr(mapping, definition.accessor)() is None

    @pytest.mark.parametrize(
        "name",
        [
            "token",
            "manufacturer",
            "serial",
            "object",
            "id",
            "slot-description",
            "slot-manufacturer",
            "library-description",
        ],
    )
    def test_present_empty_in_path(self, parser: Parser, name: str) -> None:
        mapping = parser.parse(f"pkcs11:{name}=")
        assert mapping.get(name) == ""

    @pytest.mark.parametrize("name", TEXT_QUERY_ATTRIBUTES)
    def test_present_empty_in_query(self, parser: Parser, name: str) -> None:
        mapping = parser.parse(f"pkcs11:?{name}=")
        assert mapping.get(name) == ""

    def test_empty_vendor_value(self, parser: Parser) -> None:
        assert parser.parse("pkcs11:acme=").vendor("acme") == [""]


class TestDeterminism:
    """Identical input always yields an identical mapping."""

    @pytest.mark.parametrize(
        "uri",
        [
            "pkcs11:",
            "pkcs11:model=1.0;object=my-certificate;type=cert",
            "pkcs11:NATO=alpha?NATO=bravo&NATO=charlie",
            "pkcs11:token=a;x-acme=b?pin-value=c&acme=d",
        ],
    )
    def test_repeated_parse(self, parser: Parser, uri: str) -> None:
        first = parser.parse(uri)
        for _ in range(3):
            again = parser.parse(uri)
            assert again == first
            assert again.to_dict() == first.to_dict()
            for name in first.vendor_names():
                assert again.vendor_spans(name) == first.vendor_spans(name)

    def test_spans_point_into_source(self, parser: Parser) -> None:
        uri = "pkcs11:object=my-key;type=private?pin-source=file:/etc/token"
        mapping = parser.parse(uri)
        assert mapping.source is uri
        span = mapping.span("pin-source")
        assert span is not None
        assert span.as_tuple() == value_span(uri, "file:/etc/token")


class TestValidationDisabled:
    """Contract when grammar checks are turned off."""

    @pytest.fixture
    def lenient(self) -> Parser:
        return Parser(validation=False, advisories=False)

    def test_unsafe_values_accepted(self, lenient: Parser) -> None:
        mapping = lenient.parse("pkcs11:object=Private key;type=Private Key")
        assert mapping.object() == "Private key"
        assert mapping.type() == "Private Key"

    def test_last_duplicate_wins(self, lenient: Parser) -> None:
        assert lenient.parse("pkcs11:token=a;token=b").token() == "b"

    def test_standard_name_in_other_component(self, lenient: Parser) -> None:
        mapping = lenient.parse("pkcs11:pin-value=1234?token=foo")
        assert mapping.pin_value() == "1234"
        assert mapping.token() == "foo"

    def test_scheme_still_checked(self, lenient: Parser) -> None:
        with pytest.raises(ParseError) as exc_info:
            lenient.parse("pkcs12:token=a")
        assert exc_info.value.kind is ErrorKind.SCHEME_MISMATCH

    def test_structure_still_checked(self, lenient: Parser) -> None:
        with pytest.raises(ParseError) as exc_info:
            lenient.parse("pkcs11:token")
        assert exc_info.value.kind is ErrorKind.MALFORMED_TOKEN

        with pytest.raises(ParseError):
            lenient.parse("pkcs11:token=a;;object=b")


class TestAdvisories:
    """Advisories never change the outcome of a parse."""

    def test_inspect_returns_advisories(self, parser: Parser) -> None:
        outcome = parser.inspect("pkcs11:x-muppet=cookie<^^>monster!")
        kinds = [a.kind for a in outcome.advisories]
        assert kinds[0] is AdvisoryKind.DEPRECATED_VENDOR_PREFIX
        assert kinds.count(AdvisoryKind.SHOULD_PERCENT_ENCODE) == 4
        assert outcome.mapping.vendor("x-muppet") == ["cookie<^^>monster!"]

    def test_parse_logs_advisories(self, parser: Parser, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pk11uri.core.advisories"):
            parser.parse("pkcs11:token=my{token}")
        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 2
        assert all(m.startswith("pkcs11 warning:") for m in messages)
        assert "the `{` identified at offset 2 in `my{token}`" in messages[0]

    def test_disabled_advisories(self, caplog: pytest.LogCaptureFixture) -> None:
        quiet = Parser(advisories=False)
        with caplog.at_level(logging.WARNING, logger="pk11uri.core.advisories"):
            outcome = quiet.inspect("pkcs11:x-acme=a<b")
            quiet.parse("pkcs11:x-acme=a<b")
        assert outcome.advisories == []
        assert caplog.records == []

    def test_no_advisories_on_failure(
        self, parser: Parser, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="pk11uri.core.advisories"):
            with pytest.raises(ParseError):
                parser.parse("pkcs11:x-acme=a<b;token=a b")
        assert caplog.records == []


class TestModuleLevelParse:
    """Test the module-level parse() entry point."""

    def test_returns_mapping(self) -> None:
        mapping = parse("pkcs11:token=my-token")
        assert isinstance(mapping, Mapping)
        assert mapping.token() == "my-token"

    def test_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse("pkcs11:token=a;token=b")

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse("not a uri")
