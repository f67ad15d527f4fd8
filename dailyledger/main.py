# dailyledger/main.py
# -*- coding: utf-8 -*-
# --- bootstrap import path (run as script via streamlit) ---
import os, sys
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
# -----------------------------------------------------------
import datetime as dt
import pandas as pd
import streamlit as st

from dailyledger.config import Settings, configure_logging
from dailyledger.domain.entries import ActivityType
from dailyledger.domain.rating import Rating
from dailyledger.errors import LedgerError
from dailyledger.schemas.entries import (
    CreateActivityEntriesRequest,
    CreateFoodEntriesRequest,
    CreateMoodEntriesRequest,
    NewActivityEntry,
    NewFoodEntry,
    NewMoodEntry,
)
from dailyledger.wiring import build_services


@st.cache_resource
def get_services():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings, build_services(settings)


def current_user(settings, services):
    """Utilisateur courant (session Streamlit) ; créé à la volée au premier chargement."""
    if "user_id" not in st.session_state:
        u = services.users.get_or_create(settings.default_email)
        st.session_state["user_id"] = u.id
        st.session_state["user_email"] = u.email
    return st.session_state["user_id"], st.session_state["user_email"]


def show_error(e: LedgerError):
    # 4xx : "corrige ta saisie" ; 5xx : "réessaie plus tard"
    if e.status_code < 500:
        st.warning(f"Saisie refusée : {e.public_message}")
    else:
        st.error(f"Erreur interne : {e.public_message}. Réessaie plus tard.")


def logged_at_from(day: dt.date, at: dt.time) -> dt.datetime:
    return dt.datetime.combine(day, at).astimezone(dt.timezone.utc)


st.set_page_config(page_title="DailyLedger", page_icon="📒", layout="centered")

settings, services = get_services()

# ---------------------------------------------------------------------
# Sidebar – Sélection / création utilisateur
# ---------------------------------------------------------------------
st.sidebar.title("👤 Utilisateur")
email = st.sidebar.text_input("Email", value=settings.default_email, help="Créé s'il n'existe pas")

if st.sidebar.button("Charger/Créer l'utilisateur"):
    u = services.users.get_or_create(email)
    st.session_state["user_id"] = u.id
    st.session_state["user_email"] = u.email
    st.sidebar.success(f"OK : {u.email} (id={u.id})")

user_id, user_email = current_user(settings, services)
st.caption(f"Connecté en tant que **{user_email}** (id={user_id})")

st.title("📒 DailyLedger — Journal")
tab_mood, tab_food, tab_activity = st.tabs(["Humeur", "Repas", "Activité"])

# ---------------------------------------------------------------------
# Humeur / énergie / sommeil
# ---------------------------------------------------------------------
with tab_mood:
    with st.form("mood_form", clear_on_submit=False):
        col1, col2 = st.columns(2)
        with col1:
            day = st.date_input("Date", value=dt.date.today(), key="mood_day")
            at = st.time_input("Heure", value=dt.datetime.now().time(), key="mood_time")
            notes = st.text_area("Notes", value="")
        with col2:
            ratings = {}
            for name, label in (("mood", "Humeur"), ("energy", "Énergie"), ("sleep", "Sommeil")):
                skip = st.checkbox(f"{label} non renseigné(e)", value=False, key=f"skip_{name}")
                value = st.slider(label, min_value=0, max_value=10, value=6, step=1, key=f"rating_{name}")
                ratings[name] = None if skip else Rating(value)
        submitted = st.form_submit_button("Enregistrer")

    if submitted:
        try:
            request = CreateMoodEntriesRequest(
                user_id=user_id,
                mood_entries=(NewMoodEntry(notes=notes or None, logged_at=logged_at_from(day, at), **ratings),),
            )
            n = services.mood.create_entries(request)
            st.success(f"✅ {n} entrée(s) d'humeur enregistrée(s)")
        except LedgerError as e:
            show_error(e)

# ---------------------------------------------------------------------
# Repas : saisie par lot (un seul INSERT pour tout le tableau)
# ---------------------------------------------------------------------
with tab_food:
    st.write("Ajoute plusieurs lignes puis enregistre le lot d'un coup (tout ou rien).")
    empty = pd.DataFrame(
        [{"description": "", "calories": None, "carbs": None, "protein": None, "fats": None}]
    ).astype({"calories": "float", "carbs": "float", "protein": "float", "fats": "float"})
    edited = st.data_editor(empty, num_rows="dynamic", use_container_width=True, key="food_editor")
    food_day = st.date_input("Date du lot", value=dt.date.today(), key="food_day")

    if st.button("Enregistrer le lot"):
        rows = edited[edited["description"].fillna("").str.strip() != ""]
        try:
            entries = tuple(
                NewFoodEntry(
                    description=r["description"].strip(),
                    calories=None if pd.isna(r["calories"]) else float(r["calories"]),
                    carbs=None if pd.isna(r["carbs"]) else float(r["carbs"]),
                    protein=None if pd.isna(r["protein"]) else float(r["protein"]),
                    fats=None if pd.isna(r["fats"]) else float(r["fats"]),
                    logged_at=logged_at_from(food_day, dt.datetime.now().time()),
                )
                for _, r in rows.iterrows()
            )
            n = services.food.create_entries(CreateFoodEntriesRequest(user_id=user_id, food_entries=entries))
            st.success(f"✅ {n} repas enregistré(s)")
        except LedgerError as e:
            show_error(e)

# ---------------------------------------------------------------------
# Activité
# ---------------------------------------------------------------------
with tab_activity:
    with st.form("activity_form", clear_on_submit=True):
        activity = st.text_input("Activité", value="")
        activity_type = st.selectbox("Type", options=[t.value for t in ActivityType])
        duration = st.number_input("Durée (min)", min_value=0, max_value=600, value=30, step=5)
        act_day = st.date_input("Date", value=dt.date.today(), key="act_day")
        act_submitted = st.form_submit_button("Enregistrer l'activité")

    if act_submitted:
        try:
            request = CreateActivityEntriesRequest(
                user_id=user_id,
                activity_entries=(
                    NewActivityEntry(
                        activity=activity,
                        activity_type=ActivityType(activity_type),
                        activity_info={"duration_min": int(duration)},
                        logged_at=logged_at_from(act_day, dt.datetime.now().time()),
                    ),
                ),
            )
            services.activity.create_entries(request)
            st.success("✅ Activité enregistrée")
        except LedgerError as e:
            show_error(e)
