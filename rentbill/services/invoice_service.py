"""
Invoice Service - Printable rental invoice generation
"""
import io
import logging
from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import BinaryIO, List, Optional

from pypdf import PdfReader, PdfWriter
from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas
from sqlalchemy import String, type_coerce
from sqlalchemy.orm import Session

from rentbill.core import settings, NotFound
from rentbill.models import Customer, Order, OrderItem

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def to_number(value) -> Optional[Decimal]:
    """Coerce a stored value to a finite Decimal, or None when it is not numeric"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def display_quantity(quantity: Optional[Decimal]):
    """Whole quantities as int; legacy fractional ones as stored so the row adds up"""
    if quantity is None:
        return 0
    if quantity == quantity.to_integral_value():
        return int(quantity)
    return quantity.normalize()


def display_amount(price: Optional[Decimal], quantity: Optional[Decimal], line_total: Optional[Decimal]) -> Decimal:
    """Stored line total first, then price x quantity, then zero"""
    if line_total is not None:
        return line_total
    if price is not None and quantity is not None:
        return price * quantity
    return ZERO


class InvoiceService:
    """Service for generating rental invoices"""

    @staticmethod
    def get_invoice_data(db: Session, order_id: int) -> dict:
        """Get all data needed for the invoice of one order"""
        header = db.query(
            Order.id,
            Order.invoice_no,
            Order.order_date,
            Order.total,
            Customer.name,
            Customer.phone,
            Customer.address,
        ).join(Customer, Order.customer_id == Customer.id)\
            .filter(Order.id == order_id)\
            .first()

        if not header:
            raise NotFound("order not found")

        # Raw stored values; legacy rows may hold non-numeric text
        rows = db.query(
            OrderItem.product,
            type_coerce(OrderItem.price, String).label("price"),
            type_coerce(OrderItem.quantity, String).label("quantity"),
            type_coerce(OrderItem.line_total, String).label("line_total"),
        ).filter(OrderItem.order_id == order_id)\
            .order_by(OrderItem.id)\
            .all()

        items = []
        grand_total = ZERO
        for idx, row in enumerate(rows, start=1):
            price = to_number(row.price)
            quantity = to_number(row.quantity)
            amount = display_amount(price, quantity, to_number(row.line_total))

            items.append({
                "no": idx,
                "description": row.product or "",
                "price": price if price is not None else ZERO,
                "quantity": display_quantity(quantity),
                "amount": amount,
            })
            grand_total += amount

        return {
            "order_id": header.id,
            "invoice_number": header.invoice_no,
            "order_date": header.order_date.strftime("%d/%m/%Y") if header.order_date else "-",
            "customer": {
                "name": header.name,
                "phone": header.phone,
                "address": header.address,
            },
            "items": items,
            "grand_total": grand_total,
            "stored_total": to_number(header.total),
        }

    @staticmethod
    def render(db: Session, order_id: int, sink: BinaryIO) -> dict:
        """
        Write the invoice PDF of an order into sink.

        Raises NotFound before anything is written when the order does not
        exist. Returns the invoice data that was rendered.
        """
        data = InvoiceService.get_invoice_data(db, order_id)
        InvoiceRenderer(sink).render(data)

        if data["stored_total"] is not None and data["stored_total"] != data["grand_total"]:
            logger.warning(
                f"Invoice {data['invoice_number']}: rendered total {data['grand_total']:.2f} "
                f"differs from stored total {data['stored_total']:.2f}"
            )
        return data

    @staticmethod
    def render_bytes(db: Session, order_id: int) -> bytes:
        output_stream = io.BytesIO()
        InvoiceService.render(db, order_id, output_stream)
        return output_stream.getvalue()

    @staticmethod
    def render_batch(db: Session, order_ids: List[int]) -> Optional[bytes]:
        """
        Render several invoices into one merged PDF.
        Unknown orders are skipped; returns None when nothing was rendered.
        """
        merger = PdfWriter()

        for order_id in order_ids:
            try:
                pdf_content = InvoiceService.render_bytes(db, order_id)
            except NotFound:
                logger.warning(f"Order not found for invoice batch: {order_id}")
                continue

            reader = PdfReader(io.BytesIO(pdf_content))
            for page in reader.pages:
                merger.add_page(page)

        if len(merger.pages) == 0:
            logger.warning("No invoices were rendered for batch.")
            return None

        output_stream = io.BytesIO()
        merger.write(output_stream)
        return output_stream.getvalue()


class Stage(IntEnum):
    NEW = 0
    HEADER = 1
    CUSTOMER = 2
    TABLE = 3
    TOTAL = 4
    FOOTER = 5
    FINAL = 6


class InvoiceRenderer:
    """
    Sequential invoice writer over a reportlab canvas.

    Stages must run in order: header, customer info, table rows, total box,
    footer, finalize. Positions are measured from the top-left corner of
    the page; the document is only complete after finalize().
    """

    TEAL = HexColor("#006666")
    RULE = HexColor("#dddddd")

    MARGIN = 40
    RIGHT = 550
    ROW_HEIGHT = 22
    COLUMNS = {"description": 40, "price": 260, "quantity": 350, "amount": 450}

    def __init__(self, sink: BinaryIO, pagesize=A4):
        self.canvas = canvas.Canvas(sink, pagesize=pagesize)
        self.width, self.height = pagesize
        self.stage = Stage.NEW
        self.y = 0

    def render(self, data: dict) -> None:
        self.canvas.setTitle(f"Invoice {data['invoice_number']}")
        self.write_header()
        self.write_customer_info(data)
        self.begin_table()
        for item in data["items"]:
            self.write_row(item)
        self.write_total(data["grand_total"])
        self.write_footer()
        self.finalize()

    # --- Stages ---------------------------------------------------------------

    def write_header(self) -> None:
        self._enter(Stage.HEADER)
        self._text(settings.BUSINESS_PHONES, self.MARGIN, 30, "Helvetica", 12, self.TEAL)
        self._centred(settings.BUSINESS_NAME, 60, "Helvetica", 26, self.TEAL)

    def write_customer_info(self, data: dict) -> None:
        self._enter(Stage.CUSTOMER)
        customer = data["customer"]
        lines = [
            f"DATE: {data['order_date']}",
            f"CUSTOMER NAME: {customer['name']}",
            f"PHONE: {customer['phone']}",
            f"ADDRESS: {customer['address']}",
        ]
        self.y = 130
        for line in lines:
            self._centred(line, self.y, "Helvetica", 12, black)
            self.y += 25

    def begin_table(self) -> None:
        self._enter(Stage.TABLE)
        self.y += 30
        self._table_header()

    def write_row(self, item: dict) -> None:
        if self.stage != Stage.TABLE:
            raise RuntimeError(f"cannot write table row at stage {self.stage.name}")

        if self.y + self.ROW_HEIGHT > self.height - self.MARGIN:
            self.canvas.showPage()
            self.y = self.MARGIN
            self._table_header()

        font, size = "Helvetica", 10
        column_width = self.COLUMNS["price"] - self.COLUMNS["description"] - 10
        self._text(self._fit(item["description"], font, size, column_width), self.COLUMNS["description"], self.y, font, size, black)
        self._text(f"{item['price']:.2f}", self.COLUMNS["price"], self.y, font, size, black)
        self._text(str(item["quantity"]), self.COLUMNS["quantity"], self.y, font, size, black)
        self._text(f"{item['amount']:.2f}", self.COLUMNS["amount"], self.y, font, size, black)

        self.y += self.ROW_HEIGHT
        self._line(self.y, self.RULE)

    def write_total(self, grand_total: Decimal) -> None:
        self._enter(Stage.TOTAL)
        box_height = 50
        self.y += 30
        self._ensure_room(box_height)

        self.canvas.setStrokeColor(self.TEAL)
        self.canvas.rect(350, self.height - self.y - box_height, 200, box_height, stroke=1, fill=0)
        self._text("TOTAL", 360, self.y + 8, "Helvetica-Bold", 13, self.TEAL)
        self._text(f"{settings.CURRENCY_PREFIX} {grand_total:.2f}", 360, self.y + 28, "Helvetica-Bold", 16, self.TEAL)
        self.y += box_height

    def write_footer(self) -> None:
        self._enter(Stage.FOOTER)
        self.y += 40
        self._ensure_room(40)
        self._centred(settings.BUSINESS_ADDRESS, self.y, "Helvetica", 10, self.TEAL)
        self.y += 20
        self._centred(settings.INVOICE_THANK_YOU, self.y, "Helvetica-Bold", 11, self.TEAL)

    def finalize(self) -> None:
        self._enter(Stage.FINAL)
        self.canvas.showPage()
        self.canvas.save()

    # --- Drawing helpers ------------------------------------------------------

    def _enter(self, stage: Stage) -> None:
        if stage != self.stage + 1:
            raise RuntimeError(f"cannot enter {stage.name} after {self.stage.name}")
        self.stage = stage

    def _ensure_room(self, height: float) -> None:
        if self.y + height > self.height - self.MARGIN:
            self.canvas.showPage()
            self.y = self.MARGIN

    def _table_header(self) -> None:
        for label, column in zip(("DESCRIPTION", "PRICE", "QTY", "AMOUNT"), self.COLUMNS.values()):
            self._text(label, column, self.y, "Helvetica-Bold", 11, self.TEAL)
        self._line(self.y + 15, self.TEAL)
        self.y += 25

    def _baseline(self, top: float, size: float) -> float:
        return self.height - top - size

    def _text(self, text: str, x: float, top: float, font: str, size: float, color) -> None:
        self.canvas.setFont(font, size)
        self.canvas.setFillColor(color)
        self.canvas.drawString(x, self._baseline(top, size), text)

    def _centred(self, text: str, top: float, font: str, size: float, color) -> None:
        self.canvas.setFont(font, size)
        self.canvas.setFillColor(color)
        self.canvas.drawCentredString(self.width / 2, self._baseline(top, size), text)

    def _line(self, top: float, color) -> None:
        self.canvas.setStrokeColor(color)
        self.canvas.line(self.MARGIN, self.height - top, self.RIGHT, self.height - top)

    @staticmethod
    def _fit(text: str, font: str, size: float, width: float) -> str:
        if stringWidth(text, font, size) <= width:
            return text
        while text and stringWidth(text + "...", font, size) > width:
            text = text[:-1]
        return text + "..."
