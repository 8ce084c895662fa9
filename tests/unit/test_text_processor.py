import pytest

from docscan.structuring import DocumentType, TextProcessor, structure_text

INVOICE_TEXT = (
    "Contact: john.doe@example.com or jane@test.org\n"
    "Phone: (555) 123-4567\n"
    "Date: 01/15/2024 and March 5, 2024\n"
    "Total: $1,250.00 and 300 USD\n"
    "Invoice No: INV-2024-001\n"
    "Mr. John Smith\n"
    "123 Main Street, Springfield, IL 62704"
)


@pytest.fixture()
def processor() -> TextProcessor:
    return TextProcessor()


class TestTotality:
    @pytest.mark.parametrize(
        "raw",
        [
            "",
            " ",
            "\n\n\n",
            "\r\r\r",
            "###",
            "|||",
            "\x00\x01\x02",
            "émoji 💥 text",
            "A" * 10_000,
            "1 " * 5_000,
            "S.No content page no teacher",
        ],
    )
    def test_any_string_produces_a_payload(self, raw: str) -> None:
        result = structure_text(raw)

        assert result.raw_text == raw
        assert 0.0 <= result.confidence <= 1.0
        assert isinstance(result.document_type, DocumentType)

    def test_empty_string(self) -> None:
        result = structure_text("")

        assert result.processed_text == ""
        assert result.document_type == DocumentType.OTHER
        assert result.confidence == 0.3
        assert result.entities.emails == []
        assert result.entities.reference_numbers == []
        assert result.sections.title is None
        assert result.sections.header == []
        assert result.sections.footer == []
        assert result.metadata.line_count == 0
        assert result.metadata.word_count == 0
        assert result.metadata.language == "unknown"

    def test_keeps_raw_text_untouched(self) -> None:
        raw = "Hello   world\r\n"
        result = structure_text(raw)

        assert result.raw_text == raw
        assert result.processed_text == "Hello world"


class TestEntities:
    def test_extracts_every_entity_kind(self, processor: TextProcessor) -> None:
        entities = processor.extract_entities(INVOICE_TEXT)

        assert entities.emails == ["john.doe@example.com", "jane@test.org"]
        assert entities.phones == ["(555) 123-4567"]
        assert entities.dates == ["01/15/2024", "March 5, 2024"]
        assert entities.amounts == ["$1,250.00", "300 USD"]
        assert entities.reference_numbers == ["INV-2024-001"]
        assert "Mr. John Smith" in entities.names
        assert entities.addresses == ["123 Main Street, Springfield, IL 62704"]

    def test_duplicates_are_kept_in_order(self, processor: TextProcessor) -> None:
        entities = processor.extract_entities("a@b.com then c@d.org then a@b.com")
        assert entities.emails == ["a@b.com", "c@d.org", "a@b.com"]

    def test_no_matches_gives_empty_lists(self, processor: TextProcessor) -> None:
        entities = processor.extract_entities("just some plain words")

        assert entities.emails == []
        assert entities.phones == []
        assert entities.dates == []
        assert entities.amounts == []
        assert entities.addresses == []
        assert entities.reference_numbers == []

    def test_iso_dates(self, processor: TextProcessor) -> None:
        assert processor.extract_entities("due 2024-03-31").dates == ["2024-03-31"]

    def test_amount_currency_symbols(self, processor: TextProcessor) -> None:
        amounts = processor.extract_entities("paid €45,50 and £12").amounts
        assert amounts == ["€45,50", "£12"]

    def test_email_tld_must_be_letters(self, processor: TextProcessor) -> None:
        assert processor.extract_entities("user@host.c0m").emails == []

    def test_reference_number_after_prefix(self, processor: TextProcessor) -> None:
        assert processor.extract_entities("Ref: A-77").reference_numbers == ["A-77"]

    def test_entities_come_from_cleaned_text(self) -> None:
        result = structure_text("Write to   someone@example.com\r\n")
        assert result.entities.emails == ["someone@example.com"]


class TestClassification:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Invoice for services", DocumentType.INVOICE),
            ("Thank you for your purchase", DocumentType.RECEIPT),
            ("This agreement is made between", DocumentType.CONTRACT),
            ("My resume lists experience", DocumentType.RESUME),
            ("Passport number", DocumentType.ID),
            ("Quarterly findings", DocumentType.REPORT),
            ("Hello world", DocumentType.OTHER),
            ("", DocumentType.OTHER),
        ],
    )
    def test_keyword_rules(
        self, processor: TextProcessor, text: str, expected: DocumentType
    ) -> None:
        assert processor.classify_document(text) == expected

    def test_earlier_rule_wins(self, processor: TextProcessor) -> None:
        text = "This resume accompanies the invoice"
        assert processor.classify_document(text) == DocumentType.INVOICE

    def test_is_case_insensitive(self, processor: TextProcessor) -> None:
        assert processor.classify_document("RECEIPT") == DocumentType.RECEIPT


class TestConfidence:
    def test_length_boundary_is_strict(self, processor: TextProcessor) -> None:
        assert processor.calculate_confidence("x" * 500) == 0.6
        assert processor.calculate_confidence("x" * 501) == 0.7

    def test_first_length_bonus(self, processor: TextProcessor) -> None:
        assert processor.calculate_confidence("x" * 100) == 0.5
        assert processor.calculate_confidence("x" * 101) == 0.6

    def test_short_text_penalty(self, processor: TextProcessor) -> None:
        assert processor.calculate_confidence("hi") == 0.3

    def test_pattern_bonus(self, processor: TextProcessor) -> None:
        text = "x" * 60 + " contact me at someone@example.com"
        assert processor.calculate_confidence(text) == 0.6

    def test_clamped_to_one(self, processor: TextProcessor) -> None:
        text = INVOICE_TEXT + "\n" + "padding " * 80
        assert processor.calculate_confidence(text) == 1.0


class TestSections:
    def test_title_header_body_footer(self, processor: TextProcessor) -> None:
        raw = "REPORT TITLE\n" + "\n".join(f"l{i}" for i in range(1, 11))
        sections = structure_text(raw).sections

        assert sections.title == "REPORT TITLE"
        assert sections.header == ["l1", "l2"]
        assert sections.body == ["l3", "l4", "l5", "l6", "l7", "l8"]
        assert sections.footer == ["l9", "l10"]

    def test_single_line_ends_up_in_footer(self, processor: TextProcessor) -> None:
        sections = processor.identify_sections(["one line"])

        assert sections.title is None
        assert sections.header == []
        assert sections.body == []
        assert sections.footer == ["one line"]

    def test_header_is_capped(self, processor: TextProcessor) -> None:
        lines = [f"line {i}" for i in range(40)]
        sections = processor.identify_sections(lines)

        assert len(sections.header) == 3
        assert sections.footer == lines[32:]

    def test_mixed_case_first_line_is_not_title(self, processor: TextProcessor) -> None:
        sections = processor.identify_sections(["Not A Title", "body"])
        assert sections.title is None

    def test_blank_lines_are_ignored(self) -> None:
        sections = structure_text("alpha\n\nbeta").sections
        assert sections.header + sections.body + sections.footer == ["alpha", "beta"]


class TestMetadata:
    def test_counts(self) -> None:
        metadata = structure_text("The cat and the dog\nsat in the sun").metadata

        assert metadata.line_count == 2
        assert metadata.word_count == 9
        assert metadata.language == "en"

    def test_unknown_language(self, processor: TextProcessor) -> None:
        assert processor.detect_language("Lorem ipsum dolor") == "unknown"

    def test_signature(self, processor: TextProcessor) -> None:
        assert processor.detect_signature("Authorized signatory")
        assert not processor.detect_signature("nothing here")

    def test_table_detection(self, processor: TextProcessor) -> None:
        assert processor.detect_table("a\tb\tc\nd\te\tf")
        assert not processor.detect_table("a\tb\tc\nplain line")

    def test_table_reflow_flows_into_processed_text(self) -> None:
        raw = "S.No\tContent\tPage No\tTeacher\n1\tIntroduction\t3\tSmith"
        result = structure_text(raw)

        assert result.processed_text.startswith("| S.No | Content | Page No | Teacher |")
        assert result.metadata.has_table
