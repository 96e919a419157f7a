"""Streamlit admin panel: policy, blackout days, reconciliation and print list."""

from datetime import date, timedelta

import streamlit as st

from app.services import policy_service, reconciliation_service
from app.services.errors import ValidationError
from app.services.pdf_exports import render_print_sheet_pdf
from app.utils.weekdays import WEEKDAY_ORDER, Weekday
from streamlit_app.common import SLOT_LABELS, get_session, now_string

st.set_page_config(page_title="Admin", layout="wide")
st.title("Admin / 도시락")
st.caption(f"Last refresh: {now_string()}")

with get_session() as db:
    policy = policy_service.load_policy(db)

    st.subheader("Policy")
    with st.form("policy"):
        base_price = st.number_input("Base price", min_value=0, value=policy.base_price, step=500)
        weekdays = st.multiselect(
            "Allowed weekdays",
            [day.value for day in WEEKDAY_ORDER],
            default=[day.value for day in WEEKDAY_ORDER if day in policy.allowed_weekdays],
        )
        start_date = st.date_input("Start date", value=policy.start_date)
        end_date = st.date_input("End date", value=policy.end_date)
        sms_extra_text = st.text_area("SMS account text", value=policy.sms_extra_text or "")
        if st.form_submit_button("Save policy"):
            try:
                policy = policy_service.save_policy(
                    db,
                    policy_service.PolicySettings(
                        base_price=int(base_price),
                        allowed_weekdays=frozenset(Weekday(day) for day in weekdays),
                        start_date=start_date or None,
                        end_date=end_date or None,
                        sms_extra_text=sms_extra_text or None,
                    ),
                )
                st.success("Policy saved")
            except ValidationError as exc:
                st.error(str(exc))

    st.subheader("No-service days")
    with st.form("blackout"):
        blackout_date = st.date_input("Date", value=date.today())
        blackout_slot = st.selectbox("Slot", ["BOTH", "LUNCH", "DINNER"])
        if st.form_submit_button("Add"):
            policy_service.add_blackout(db, blackout_date, blackout_slot)
    st.write([{"id": day.id, "date": str(day.date), "slot": day.slot} for day in policy_service.list_blackouts(db)])

    st.subheader("Payments")
    monday = date.today() - timedelta(days=date.today().weekday())
    range_start = st.date_input("From", value=monday, key="range_start")
    range_end = st.date_input("To", value=monday + timedelta(days=6), key="range_end")
    summaries = reconciliation_service.applicants_range(db, range_start, range_end)
    if not summaries:
        st.info("No orders in this range.")
    marks = []
    for summary in summaries:
        checked = st.checkbox(
            f"{summary.name} ({summary.code}) · {summary.paid_count}/{summary.applied_count} · {summary.total_amount:,}원",
            value=summary.paid,
            key=f"paid_{summary.id}",
        )
        if checked != summary.paid:
            marks.append({"code": summary.code, "paid": checked})
    if marks and st.button("Save payments"):
        result = reconciliation_service.mark_range(db, range_start, range_end, marks)
        st.success(f"Updated {result.updated} orders")

    st.subheader("Print list")
    print_date = st.date_input("Day", value=date.today(), key="print_date")
    view = reconciliation_service.print_view(db, print_date)
    columns = st.columns(2)
    for column, (slot, entries) in zip(columns, (("LUNCH", view.lunch), ("DINNER", view.dinner))):
        column.markdown(f"**{SLOT_LABELS[slot]}** {len(entries)}")
        column.write([{"name": entry.name, "code": entry.code, "status": entry.status} for entry in entries])
    st.download_button(
        "Download PDF",
        data=render_print_sheet_pdf(view),
        file_name=f"print_{print_date.isoformat()}.pdf",
        mime="application/pdf",
    )
