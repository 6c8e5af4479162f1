"""Streamlit dashboard for macro trading signals.

Tabs:
- Signals: current signal cards and composite breakdown
- Alerts: configure edge-triggered alerts and run a check
- Normalize: merge FRED series onto one timeline and download it
"""

import streamlit as st
import pandas as pd

from macro_signal_dashboard.alerts import AlertService, get_cooldown_remaining
from macro_signal_dashboard.config import Settings, ALLOWED_SERIES
from macro_signal_dashboard.data import FredFetcher, SqliteAlertStore
from macro_signal_dashboard.errors import SeriesFetchError, ValidationError
from macro_signal_dashboard.indicators import SignalCalculator, WEIGHTS
from macro_signal_dashboard.models.alerts import AlertCondition
from macro_signal_dashboard.models.signals import SignalType
from macro_signal_dashboard.models.timestamps import utc_now
from macro_signal_dashboard.normalization import NormalizationService


INTERPRETATION_STYLE = {
    "strong_bullish": {"color": "#10b981", "label": "STRONG BULLISH"},
    "bullish": {"color": "#34d399", "label": "BULLISH"},
    "neutral": {"color": "#f59e0b", "label": "NEUTRAL"},
    "bearish": {"color": "#f97316", "label": "BEARISH"},
    "strong_bearish": {"color": "#ef4444", "label": "STRONG BEARISH"},
}


@st.cache_resource
def get_services() -> tuple[SignalCalculator, AlertService, NormalizationService]:
    """Construct the process-wide services once per server."""
    settings = Settings()
    fetcher = FredFetcher(settings)
    calculator = SignalCalculator(fetcher, max_workers=settings.max_fetch_workers)
    alerts = AlertService(SqliteAlertStore(settings.alert_db_path), calculator.snapshot)
    normalizer = NormalizationService(fetcher, max_workers=settings.max_fetch_workers)
    return calculator, alerts, normalizer


@st.cache_data(ttl=3600)
def load_signals() -> dict:
    calculator, _, _ = get_services()
    return calculator.calculate_all().to_dict()


# =============================================================================
# TAB 1: SIGNALS
# =============================================================================

def render_signal_card(signal: dict) -> None:
    """Render one signal as a card."""
    style = INTERPRETATION_STYLE[signal["interpretation"]]
    st.markdown(
        f"""
        <div style="
            background: #1e293b;
            border: 1px solid #334155;
            border-left: 4px solid {style['color']};
            border-radius: 8px;
            padding: 1rem 1.25rem;
            margin-bottom: 0.75rem;
        ">
            <div style="color: #94a3b8; font-size: 0.75rem; text-transform: uppercase;">
                {signal['name']}
            </div>
            <div style="display: flex; align-items: baseline; gap: 0.75rem;">
                <span style="font-size: 2rem; font-weight: 700; color: {style['color']};">
                    {signal['value']:+.2f}
                </span>
                <span style="color: {style['color']}; font-weight: 600;">{style['label']}</span>
            </div>
            <div style="color: #64748b; font-size: 0.7rem;">
                Confidence {signal['confidence']:.0%}
            </div>
            <div style="color: #cbd5e1; font-size: 0.8rem; margin-top: 0.5rem;">
                {signal['explanation']}
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_signals_tab(report: dict) -> None:
    signals = report["signals"]

    render_signal_card(signals["composite"])

    cols = st.columns(4)
    for col, key in zip(cols, ["rate", "volatility", "credit", "housing"]):
        with col:
            render_signal_card(signals[key])

    st.markdown("#### Composite Breakdown")
    indicators = signals["composite"]["indicators"]
    breakdown = pd.DataFrame([
        {
            "Signal": key.title(),
            "Value": signals[key]["value"],
            "Weight": WEIGHTS[key],
            "Contribution": indicators[f"{key}Contribution"],
        }
        for key in WEIGHTS
    ])
    st.dataframe(breakdown, use_container_width=True, hide_index=True)

    st.markdown("#### Raw Inputs")
    raw = [
        {"Signal": key.title(), "Input": name, "Value": value}
        for key in WEIGHTS
        for name, value in signals[key]["indicators"].items()
    ]
    st.dataframe(pd.DataFrame(raw), use_container_width=True, hide_index=True)
    st.caption(f"Calculated at {report['meta']['calculatedAt']} (v{report['meta']['version']})")


# =============================================================================
# TAB 2: ALERTS
# =============================================================================

def render_alerts_tab(alerts: AlertService) -> None:
    with st.form("create_alert"):
        st.markdown("#### New Alert")
        col1, col2, col3, col4 = st.columns(4)
        signal_type = col1.selectbox("Signal", [t.value for t in SignalType])
        condition = col2.selectbox("Condition", [c.value for c in AlertCondition])
        threshold = col3.slider("Threshold", -1.0, 1.0, 0.0, 0.05)
        cooldown = col4.number_input("Cooldown (min)", 1, 1440, 5)
        if st.form_submit_button("Create"):
            try:
                alerts.create_alert({
                    "signalType": signal_type,
                    "condition": condition,
                    "threshold": threshold,
                    "cooldownMinutes": int(cooldown),
                })
            except ValidationError as e:
                st.error(str(e))

    if st.button("Check alerts now"):
        try:
            result = alerts.check_alerts()
        except SeriesFetchError as e:
            st.error(f"Could not load signals: {e}")
        else:
            if result.triggered:
                for trigger in result.triggered:
                    st.warning(
                        f"{trigger.signal_type.value} {trigger.condition.value} "
                        f"{trigger.threshold:+.2f}: {trigger.previous_value:+.2f} -> "
                        f"{trigger.current_value:+.2f}"
                    )
            else:
                st.info(f"Checked {result.checked} alert(s), none triggered.")

    now = utc_now()
    for alert in alerts.list_alerts():
        col1, col2, col3 = st.columns([4, 1, 1])
        remaining = get_cooldown_remaining(alert, now)
        status = f"cooldown {remaining}s" if remaining else "armed"
        col1.markdown(
            f"**{alert.signal_type.value}** {alert.condition.value} {alert.threshold:+.2f} "
            f"({status}, last value {alert.previous_value})"
        )
        enabled = col2.toggle("Enabled", value=alert.enabled, key=f"enabled-{alert.id}")
        if enabled != alert.enabled:
            alerts.update_alert(alert.id, {"enabled": enabled})
        if col3.button("Delete", key=f"delete-{alert.id}"):
            alerts.delete_alert(alert.id)
            st.rerun()


# =============================================================================
# TAB 3: NORMALIZE
# =============================================================================

def render_normalize_tab(normalizer: NormalizationService) -> None:
    series_ids = st.multiselect(
        "Series", sorted(ALLOWED_SERIES), default=["FEDFUNDS", "UNRATE"], max_selections=10
    )
    col1, col2 = st.columns(2)
    fill_method = col1.selectbox("Fill method", ["forward", "linear", "none"])
    inner_join = col2.checkbox("Only dates present in every series")

    if not series_ids or not st.button("Merge"):
        return

    payload = {
        "series": [{"seriesId": s, "key": s} for s in series_ids],
        "config": {"fillMethod": fill_method, "innerJoin": inner_join},
    }
    try:
        result = normalizer.normalize(payload)
    except (ValidationError, SeriesFetchError) as e:
        st.error(str(e))
        return

    info = pd.DataFrame([i.to_dict() for i in result.series_info])
    st.dataframe(info, use_container_width=True, hide_index=True)

    frame = result.to_frame()
    st.dataframe(frame, use_container_width=True)
    st.download_button(
        "Download CSV",
        frame.to_csv().encode(),
        file_name="merged_series.csv",
        mime="text/csv",
    )


def main() -> None:
    """Main dashboard entry point."""
    st.set_page_config(
        page_title="Macro Signal Dashboard",
        page_icon="",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    st.markdown(
        """
        <style>
            .stApp { background-color: #0f172a; }
            .stMarkdown, .stText, p, span, label { color: #e2e8f0; }
            h1, h2, h3, h4 { color: #f1f5f9 !important; font-weight: 600 !important; }
            #MainMenu, footer, header { visibility: hidden; }
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.markdown("## Macro Signal Dashboard")

    _, alerts, normalizer = get_services()

    try:
        with st.spinner("Loading signals..."):
            report = load_signals()
    except SeriesFetchError as e:
        st.error(f"Could not load signals: {e}")
        return

    tab1, tab2, tab3 = st.tabs(["Signals", "Alerts", "Normalize"])

    with tab1:
        render_signals_tab(report)

    with tab2:
        render_alerts_tab(alerts)

    with tab3:
        render_normalize_tab(normalizer)


if __name__ == "__main__":
    main()
