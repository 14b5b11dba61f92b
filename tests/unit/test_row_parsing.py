from invoice_recon.reconciliation.models import DeliveryRecord, InvoiceRecord
from invoice_recon.reconciliation.parsing import parse_delivery, parse_invoice, split_fields


class TestSplitFields:
    def test_exact_width(self) -> None:
        assert split_fields("a,b,c", 3) == ["a", "b", "c"]

    def test_pads_short_rows(self) -> None:
        assert split_fields("a,b", 4) == ["a", "b", "", ""]

    def test_truncates_long_rows(self) -> None:
        assert split_fields("a,b,c,d,e", 3) == ["a", "b", "c"]

    def test_trims_fields(self) -> None:
        assert split_fields("  a , b  ,c ", 3) == ["a", "b", "c"]

    def test_empty_line(self) -> None:
        assert split_fields("", 2) == ["", ""]

    def test_none_line(self) -> None:
        assert split_fields(None, 2) == ["", ""]

    def test_custom_delimiter(self) -> None:
        assert split_fields("a;b", 2, delimiter=";") == ["a", "b"]


class TestParseRecords:
    def test_parse_invoice(self) -> None:
        record = parse_invoice("2025-01-15,INV-001,ABC Co,1000,200,1200")
        assert record == InvoiceRecord(
            invoice_date="2025-01-15",
            invoice_id="INV-001",
            customer_name="ABC Co",
            amount_excl_vat="1000",
            vat="200",
            total_amount="1200",
        )

    def test_parse_invoice_missing_trailing_fields(self) -> None:
        record = parse_invoice("2025-01-15,INV-001")
        assert record.fields() == ("2025-01-15", "INV-001", "", "", "", "")

    def test_parse_delivery(self) -> None:
        record = parse_delivery("2025-01-16,DN-001,INV-001,2025-01-15,ABC Co")
        assert record == DeliveryRecord(
            delivery_date="2025-01-16",
            delivery_number="DN-001",
            invoice_id="INV-001",
            invoice_date="2025-01-15",
            customer_name="ABC Co",
        )

    def test_parse_delivery_without_invoice_id(self) -> None:
        record = parse_delivery("2025-02-01,DN-099,,,")
        assert record.invoice_id == ""
        assert len(record.fields()) == DeliveryRecord.WIDTH

    def test_parse_delivery_drops_extra_fields(self) -> None:
        record = parse_delivery("d,n,i,id,c,extra,more")
        assert record.fields() == ("d", "n", "i", "id", "c")
