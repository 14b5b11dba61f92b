import csv
import io
from collections.abc import Iterable

from invoice_recon.reconciliation.layout import HEADERS
from invoice_recon.reconciliation.models import ReconciledRow


def to_csv(rows: Iterable[ReconciledRow], delimiter: str = ",") -> str:
    """Serialize the header and ``rows`` as delimited text.

    Fields holding the delimiter, a quote or a line break are quoted and
    embedded quotes doubled. Lines end with ``\\n``.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writerow(HEADERS)
    writer.writerows(rows)
    return buffer.getvalue()
