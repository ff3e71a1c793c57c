"""
MJML Email Templates
Booking confirmation emails, compiled to HTML by email_service
"""

from typing import Optional

THEME = {
    "primary": "#16a34a",
    "primary_dark": "#15803d",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}

BRAND_NAME = "Courtside"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['card_bg']}" padding="32px 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="0 0 24px 0" />

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              {BRAND_NAME} Sports Complex. Show the QR code at the front desk when you arrive.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _detail_rows(rows: list[tuple[str, str]]) -> str:
    cells = "".join(
        f"""
        <tr>
          <td style="padding: 6px 0; color: {THEME['text_muted']};">{label}</td>
          <td style="padding: 6px 0; text-align: right; font-weight: 600;">{value}</td>
        </tr>
        """
        for label, value in rows
    )
    return f"""
    <mj-table font-size="15px" color="{THEME['text_primary']}" padding="0 0 24px 0">
      {cells}
    </mj-table>
    """


def _qr_block(qr_url: Optional[str]) -> str:
    if not qr_url:
        return ""
    return f"""
    <mj-image src="{qr_url}" alt="Booking QR code" width="200px" padding="8px 0 24px 0" />
    """


def facility_booking_confirmation_template(
    user_name: str,
    booking_id: int,
    sport_name: str,
    court_number: str,
    booking_date: str,
    time_slots: list[str],
    total_hours: int,
    total_price: float,
    qr_url: Optional[str] = None,
    receipt_url: Optional[str] = None,
) -> str:
    """Court booking confirmation MJML template"""
    content = f"""
    <mj-text>
      Hi {user_name},
    </mj-text>

    <mj-text padding="0 0 24px 0">
      Your {sport_name} court is booked. Here are the details:
    </mj-text>

    {_detail_rows([
        ("Booking ID", str(booking_id)),
        ("Court", court_number),
        ("Date", booking_date),
        ("Time Slots", "<br/>".join(time_slots)),
        ("Total Hours", f"{total_hours} hour(s)"),
        ("Total Price", f"Rs. {total_price:.2f}"),
    ])}

    {_qr_block(qr_url)}
    """

    return get_base_template(
        title="Court Booking Confirmed",
        preview_text=f"{sport_name} court {court_number} on {booking_date}",
        content_sections=content,
        cta_url=receipt_url,
        cta_label="View Receipt" if receipt_url else None,
    )


def equipment_booking_confirmation_template(
    user_name: str,
    booking_id: int,
    sport_name: str,
    equipment_name: str,
    quantity: int,
    unit_price: float,
    total_price: float,
    booking_date: str,
    qr_url: Optional[str] = None,
    receipt_url: Optional[str] = None,
) -> str:
    """Equipment rental confirmation MJML template"""
    content = f"""
    <mj-text>
      Hi {user_name},
    </mj-text>

    <mj-text padding="0 0 24px 0">
      Your equipment rental is confirmed.
    </mj-text>

    {_detail_rows([
        ("Booking ID", str(booking_id)),
        ("Sport", sport_name),
        ("Equipment", equipment_name),
        ("Quantity", str(quantity)),
        ("Price Per Unit", f"Rs. {unit_price:.2f}"),
        ("Total Price", f"Rs. {total_price:.2f}"),
        ("Booking Date", booking_date),
    ])}

    {_qr_block(qr_url)}
    """

    return get_base_template(
        title="Equipment Booking Confirmed",
        preview_text=f"{quantity} x {equipment_name} on {booking_date}",
        content_sections=content,
        cta_url=receipt_url,
        cta_label="View Receipt" if receipt_url else None,
    )


def session_booking_confirmation_template(
    user_name: str,
    booking_id: int,
    sport_name: str,
    session_type: str,
    coach_name: str,
    session_fee: float,
    booked_slots: list[str],
    court_no: Optional[str] = None,
    qr_url: Optional[str] = None,
) -> str:
    """Coaching session confirmation MJML template"""
    rows = [
        ("Booking ID", str(booking_id)),
        ("Coach", coach_name),
        ("Sport", sport_name),
        ("Session Type", session_type),
        ("Date &amp; Time", "<br/>".join(booked_slots)),
        ("Fee", f"Rs. {session_fee:.2f}"),
    ]
    if court_no:
        rows.append(("Court", court_no))

    content = f"""
    <mj-text>
      Hi {user_name},
    </mj-text>

    <mj-text padding="0 0 24px 0">
      Your coaching session with {coach_name} is booked.
    </mj-text>

    {_detail_rows(rows)}

    {_qr_block(qr_url)}
    """

    return get_base_template(
        title="Session Booking Confirmed",
        preview_text=f"{session_type} with {coach_name}",
        content_sections=content,
    )
