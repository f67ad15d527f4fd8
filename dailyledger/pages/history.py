# dailyledger/pages/history.py
# -*- coding: utf-8 -*-

# --- bootstrap import path (page streamlit dans dailyledger/pages) ---
import os, sys
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
# ---------------------------------------------------------------------

import datetime as dt
import io
import pandas as pd
import streamlit as st
import altair as alt

from dailyledger.config import Settings, configure_logging
from dailyledger.errors import LedgerError
from dailyledger.schemas.entries import ReadEntriesRequest
from dailyledger.wiring import build_services


@st.cache_resource
def get_services():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings, build_services(settings)


st.set_page_config(page_title="Historique — DailyLedger", page_icon="📜", layout="wide")

settings, services = get_services()

st.title("📜 Historique")

# User courant ou fallback
if "user_id" not in st.session_state or "user_email" not in st.session_state:
    u = services.users.get_or_create(settings.default_email)
    st.session_state["user_id"] = u.id
    st.session_state["user_email"] = u.email

user_id = st.session_state["user_id"]
user_email = st.session_state["user_email"]
st.caption(f"Connecté en tant que **{user_email}** (id={user_id})")

# --- Filtres ---
st.sidebar.header("Filtres")
today = dt.date.today()
default_start = today - dt.timedelta(days=30)

start = st.sidebar.date_input("Du", value=default_start)
end = st.sidebar.date_input("Au", value=today)
limit = st.sidebar.number_input("Max. entrées par type", min_value=1, max_value=settings.default_limit,
                                value=min(500, settings.default_limit), step=50)

if start > end:
    st.warning("Vérifie les bornes : la date de début doit être ≤ à la date de fin.")
    st.stop()

# bornes incluses : du début du premier jour à la fin du dernier (heure locale -> UTC)
logged_after = dt.datetime.combine(start, dt.time.min).astimezone(dt.timezone.utc)
logged_before = dt.datetime.combine(end, dt.time.max).astimezone(dt.timezone.utc)


def read_page(service):
    request = ReadEntriesRequest(
        user_id=user_id,
        limit=int(limit),
        logged_before=logged_before,
        logged_after=logged_after,
    )
    try:
        return service.read_entries(request)
    except LedgerError as e:
        st.error(f"Lecture impossible : {e.public_message}")
        st.stop()


def to_frame(records) -> pd.DataFrame:
    df = pd.DataFrame([e.model_dump(mode="json") for e in records])
    if not df.empty:
        df["logged_at"] = pd.to_datetime(df["logged_at"], utc=True)
        df["day"] = df["logged_at"].dt.tz_convert(None).dt.normalize()
    return df


mood_page = read_page(services.mood)
food_page = read_page(services.food)
activity_page = read_page(services.activity)

tab_mood, tab_food, tab_activity = st.tabs(["Humeur", "Repas", "Activité"])

# ---------------------------------------------------------------------
# Humeur / énergie / sommeil
# ---------------------------------------------------------------------
with tab_mood:
    df = to_frame(mood_page.mood_entries)
    if df.empty:
        st.info("Aucune entrée d'humeur dans cette période.")
    else:
        col1, col2, col3 = st.columns(3)
        for col, name, label in ((col1, "mood", "Humeur"), (col2, "energy", "Énergie"), (col3, "sleep", "Sommeil")):
            ratings = mood_page.ratings_result
            without = getattr(ratings, f"mood_entries_without_{name}")
            rated = mood_page.found_mood_entries - without
            avg = getattr(ratings, f"total_{name}") / rated if rated else float("nan")
            with col:
                st.metric(f"{label} moyenne", f"{avg:.2f}", help=f"{without} entrée(s) sans note")

        # plusieurs saisies le même jour -> on moyenne
        df[["mood", "energy", "sleep"]] = df[["mood", "energy", "sleep"]].apply(pd.to_numeric)
        df_day = (
            df.groupby("day", as_index=False)[["mood", "energy", "sleep"]]
              .mean()
              .sort_values("day")
        )
        long = df_day.melt(id_vars="day", value_vars=["mood", "energy", "sleep"],
                           var_name="métrique", value_name="valeur").dropna()

        chart = (
            alt.Chart(long)
            .mark_line(point=True)
            .encode(
                x=alt.X("yearmonthdate(day):T",
                        title="Jour",
                        axis=alt.Axis(format="%Y-%m-%d", labelAngle=-45)),
                y=alt.Y("valeur:Q", title="Note moyenne", scale=alt.Scale(domain=[0, 10])),
                color=alt.Color("métrique:N", title=""),
                tooltip=[alt.Tooltip("day:T", title="Jour", format="%Y-%m-%d"),
                         "métrique:N", alt.Tooltip("valeur:Q", format=".2f")]
            )
            .properties(height=280)
        )
        st.subheader("Humeur / Énergie / Sommeil (par jour)")
        st.altair_chart(chart, use_container_width=True)
        st.dataframe(df.drop(columns=["day"]), use_container_width=True)

# ---------------------------------------------------------------------
# Repas
# ---------------------------------------------------------------------
with tab_food:
    df = to_frame(food_page.food_entries)
    if df.empty:
        st.info("Aucun repas dans cette période.")
    else:
        calories, macros = food_page.calories_result, food_page.macros_result
        metrics = (
            ("Calories", calories.total_calories, calories.food_entries_without_calories),
            ("Glucides (g)", macros.total_carbs, macros.food_entries_without_carbs),
            ("Protéines (g)", macros.total_protein, macros.food_entries_without_protein),
            ("Lipides (g)", macros.total_fats, macros.food_entries_without_fats),
        )
        for col, (label, total, without) in zip(st.columns(4), metrics):
            with col:
                st.metric(f"{label} total", f"{total:.0f}", help=f"{without} repas sans valeur")

        df[["carbs", "protein", "fats"]] = df[["carbs", "protein", "fats"]].apply(pd.to_numeric)
        df_day = (
            df.groupby("day", as_index=False)[["carbs", "protein", "fats"]]
              .sum(min_count=1)
              .sort_values("day")
        )
        macros = df_day.melt(id_vars="day", value_vars=["carbs", "protein", "fats"],
                             var_name="macro", value_name="grammes").dropna()

        chart = (
            alt.Chart(macros)
            .mark_bar()
            .encode(
                x=alt.X("yearmonthdate(day):T",
                        title="Jour",
                        axis=alt.Axis(format="%Y-%m-%d", labelAngle=-45)),
                y=alt.Y("grammes:Q", title="Grammes", stack=True),
                color=alt.Color("macro:N", title=""),
                tooltip=[alt.Tooltip("day:T", title="Jour", format="%Y-%m-%d"),
                         "macro:N", alt.Tooltip("grammes:Q", format=".1f")]
            )
            .properties(height=280)
        )
        st.subheader("Macronutriments (par jour)")
        st.altair_chart(chart, use_container_width=True)
        st.dataframe(df.drop(columns=["day"]), use_container_width=True)

# ---------------------------------------------------------------------
# Activité
# ---------------------------------------------------------------------
with tab_activity:
    df = to_frame(activity_page.activity_entries)
    if df.empty:
        st.info("Aucune activité dans cette période.")
    else:
        st.metric("Nb. activités", activity_page.found_activity_entries)
        counts = df.groupby("activity_type", as_index=False).size()
        chart = (
            alt.Chart(counts)
            .mark_bar()
            .encode(
                x=alt.X("activity_type:N", title="Type"),
                y=alt.Y("size:Q", title="Nombre"),
                tooltip=["activity_type:N", "size:Q"],
            )
            .properties(height=240)
        )
        st.altair_chart(chart, use_container_width=True)
        st.dataframe(df.drop(columns=["day"]), use_container_width=True)

# Export CSV (une ligne par entrée, tous types confondus)
frames = []
for kind, records in (
    ("mood", mood_page.mood_entries),
    ("food", food_page.food_entries),
    ("activity", activity_page.activity_entries),
):
    df = to_frame(records)
    if not df.empty:
        frames.append(df.drop(columns=["day"]).assign(type=kind))

if frames:
    csv_buf = io.StringIO()
    pd.concat(frames, ignore_index=True).to_csv(csv_buf, index=False)
    st.download_button("⬇️ Export CSV", data=csv_buf.getvalue(), file_name="historique_dailyledger.csv", mime="text/csv")
