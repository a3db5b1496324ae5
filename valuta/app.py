from __future__ import annotations

import pandas as pd
import streamlit as st

# Saját modulok: a szinkron logika és a logger
from valuta_utils import ConfigurationError, FieldSynchronizer, format_fixed, rate_pair
from valuta_log import setup_logger


def _secret(name: str, default):
    # nincs secrets.toml -> alapértelmezés
    try:
        return st.secrets.get(name, default)
    except Exception:
        return default


# --- Beállítások ---
RATE = _secret("EUR_USD_RATE", 1.12)
DEFAULT_EUR = str(_secret("DEFAULT_EUR", "1"))
logger = setup_logger(level=_secret("LOG_LEVEL", "INFO"))

REFERENCE_AMOUNTS = [1, 5, 10, 20, 50, 100]


# --- Szinkronizáló felépítése ---
def _write_widget(name: str, text: str) -> None:
    """Csendes írás: a session state írása nem hívja meg az on_change callbacket."""
    st.session_state[name] = text


def build_synchronizer(rate, default_eur: str) -> FieldSynchronizer:
    sync = FieldSynchronizer(rate_pair(rate), field_a="eur", field_b="usd")
    sync.add_listener(_write_widget)
    sync.set_initial_value("eur", default_eur)
    st.session_state.eur = default_eur
    st.session_state.usd = ""
    # autofókusz az EUR mezőn, majd egy explicit konverzió a kezdőértékből
    sync.set_active_editor("eur")
    sync.resync()
    return sync


# --- Callbackok ---
def on_eur_change():
    sync: FieldSynchronizer = st.session_state.sync
    sync.set_active_editor("eur")
    sync.on_field_a_changed(st.session_state.eur)


def on_usd_change():
    sync: FieldSynchronizer = st.session_state.sync
    sync.set_active_editor("usd")
    sync.on_field_b_changed(st.session_state.usd)


def reset_minden():
    old = st.session_state.get("sync")
    if old is not None:
        old.dispose()
    st.session_state.sync = build_synchronizer(RATE, DEFAULT_EUR)
    logger.info("Converter reset to %s EUR", DEFAULT_EUR)


# --- Streamlit UI ---
st.set_page_config(page_title="EUR ↔ USD átváltó", page_icon="💱", layout="centered")
st.title("💱 EUR ↔ USD átváltó")

if "sync" not in st.session_state:
    try:
        st.session_state.sync = build_synchronizer(RATE, DEFAULT_EUR)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        st.error(f"Hibás beállítás: {e}")
        st.stop()

sync: FieldSynchronizer = st.session_state.sync

st.subheader(f"Árfolyam: €1 = \\${format_fixed(sync.pair.forward(1.0))}")
st.caption(
    "Írj be egy összeget az egyik mezőbe – a másik automatikusan frissül (2 tizedesre kerekítve)."
)

st.text_input("EUR", key="eur", on_change=on_eur_change)
st.text_input("USD", key="usd", on_change=on_usd_change)

st.button("♻️ Alaphelyzet", on_click=reset_minden, key="btn_reset")

st.divider()
with st.expander("Gyors referencia"):
    ref_df = pd.DataFrame(
        {
            "EUR": [format_fixed(a) for a in REFERENCE_AMOUNTS],
            "USD": [format_fixed(sync.pair.forward(a)) for a in REFERENCE_AMOUNTS],
        }
    )
    st.dataframe(ref_df, hide_index=True)
