"""Streamlit student page for picking meal slots."""

from datetime import date

import streamlit as st

from app.services import order_service, policy_service
from app.services.errors import StudentNotFoundError, ValidationError
from streamlit_app.common import SLOT_LABELS, get_session

st.set_page_config(page_title="Order", layout="centered")
st.title("도시락 신청")

code = st.text_input("Student code").strip()
if not code:
    st.stop()

with get_session() as db:
    try:
        effective = policy_service.resolve_effective_policy(db, code)
    except StudentNotFoundError:
        st.error("Unknown student code.")
        st.stop()

    st.write(f"{effective.student_name} · {effective.base_price:,}원 / 식")
    slots = policy_service.selectable_slots(effective, today=date.today())
    if not slots:
        st.warning("No days are open for ordering.")
        st.stop()

    chosen = []
    for slot_date, slot in slots:
        label = f"{slot_date.isoformat()} {SLOT_LABELS[slot]}"
        if st.checkbox(label, key=f"{slot_date.isoformat()}_{slot}"):
            chosen.append({"date": slot_date.isoformat(), "slot": slot, "price": effective.base_price})

    st.write(f"Total: {len(chosen) * effective.base_price:,}원")
    if st.button("Submit"):
        if not chosen:
            st.warning("Select at least one meal.")
        else:
            try:
                result = order_service.commit_selection(db, code, chosen)
            except ValidationError as exc:
                st.error(str(exc))
            else:
                st.success(f"Saved {result.inserted} meals ({result.skipped_duplicates} already selected).")
