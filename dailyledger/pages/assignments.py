# dailyledger/pages/assignments.py
# -*- coding: utf-8 -*-

# --- bootstrap import path (page streamlit dans dailyledger/pages) ---
import os, sys
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
# ---------------------------------------------------------------------

import pandas as pd
import streamlit as st

from dailyledger.config import Settings, configure_logging
from dailyledger.domain.entries import AssignmentKind
from dailyledger.domain.rating import MAX_RATING, MIN_RATING
from dailyledger.errors import LedgerError
from dailyledger.schemas.assignments import AssignmentItem, CreateAssignmentsRequest
from dailyledger.services.assignments_service import KIND_ORDER
from dailyledger.wiring import build_services


@st.cache_resource
def get_services():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings, build_services(settings)


st.set_page_config(page_title="Libellés — DailyLedger", page_icon="🏷️", layout="centered")

settings, services = get_services()

st.title("🏷️ Libellés des notes")

# Récup user courant (depuis main) ou fallback
if "user_id" not in st.session_state or "user_email" not in st.session_state:
    u = services.users.get_or_create(settings.default_email)
    st.session_state["user_id"] = u.id
    st.session_state["user_email"] = u.email

user_id = st.session_state["user_id"]
user_email = st.session_state["user_email"]
st.caption(f"Connecté en tant que **{user_email}** (id={user_id})")

st.write(
    "Associe un libellé à chaque note (0 à 10). Réenregistrer le même tableau ne crée "
    "pas de doublon : une note déjà libellée est mise à jour."
)

LABELS = {
    AssignmentKind.MOOD: "Humeur",
    AssignmentKind.ENERGY: "Énergie",
    AssignmentKind.SLEEP: "Sommeil",
}

try:
    current = services.assignments.read_assignments(user_id)
except LedgerError as e:
    st.error(f"Lecture impossible : {e.public_message}")
    st.stop()

# Une colonne par type, une ligne par note ; vide = pas de libellé
grid = pd.DataFrame({"note": list(range(MIN_RATING, MAX_RATING + 1))})
for kind in KIND_ORDER:
    by_index = {a.index.encode(): a.value for a in current[kind]}
    grid[LABELS[kind]] = [by_index.get(i, "") for i in grid["note"]]

edited = st.data_editor(grid, disabled=["note"], hide_index=True, use_container_width=True, key="assign_editor")

if st.button("Enregistrer les libellés"):
    items = {
        kind: tuple(
            AssignmentItem(value=str(r[LABELS[kind]]).strip(), index=int(r["note"]))
            for _, r in edited.iterrows()
            if str(r[LABELS[kind]] or "").strip()
        )
        for kind in KIND_ORDER
    }
    request = CreateAssignmentsRequest(
        user_id=user_id,
        mood_assignments=items[AssignmentKind.MOOD],
        energy_assignments=items[AssignmentKind.ENERGY],
        sleep_assignments=items[AssignmentKind.SLEEP],
    )
    try:
        stored = services.assignments.create_assignments(request)
        st.success("✅ " + ", ".join(f"{LABELS[k]} : {len(v)}" for k, v in stored.items()))
        st.rerun()
    except LedgerError as e:
        # reprise : resoumettre tout le tableau
        st.error(f"{e.public_message}")
