"""Streamlit dashboard for economic, rates, markets and banking data.

Tabs:
- Economic: inflation, growth, labor and housing releases
- Rates: Treasury curve, policy rates, credit and the 2s10s spread
- Markets: index, commodity and dollar ETFs with period returns
- Banking: weekly H.8 loans, deposits and borrowings
"""

import asyncio
import logging
from datetime import date

import streamlit as st

from market_dashboard.config import (
    BANKING_INDICATORS,
    ECONOMIC_INDICATORS,
    MARKET_INDICATORS,
    RATE_INDICATORS,
    RELEASE_SCHEDULES,
    Settings,
)
from market_dashboard.data.orchestrator import run_once
from market_dashboard.indicators.insights import generate_economic_summary, generate_rates_summary
from market_dashboard.indicators.releases import next_release_date
from market_dashboard.indicators.returns import PERIOD_ORDER
from market_dashboard.models.market_data import (
    Category,
    IndicatorSpec,
    IndicatorUpdate,
    parse_calendar_date,
)
from market_dashboard.ui.charts import (
    CATEGORY_VALUE_KIND,
    CHANGE_COLORS,
    build_figure,
    format_change,
    format_value,
)


logger = logging.getLogger(__name__)


def format_return(key: str, value: float, category: Category) -> str:
    if category in (Category.RATE, Category.SPREAD):
        return f"{key}: {value:+.0f} bps"
    return f"{key}: {value:+.1f}%"


def render_returns(update: IndicatorUpdate) -> None:
    """Period returns row; periods without history are left out."""
    if not update.returns:
        return
    parts = [
        format_return(key, update.returns[key], update.category)
        for key in PERIOD_ORDER
        if key in update.returns
    ]
    st.markdown(
        f'<div style="color: #94a3b8; font-size: 0.75rem;">{" | ".join(parts)}</div>',
        unsafe_allow_html=True,
    )


def render_h8_changes(update: IndicatorUpdate) -> None:
    if update.h8_changes is None:
        return
    changes = update.h8_changes.to_dict()
    parts = [f"{label}: {value:+.1f}%" for label, value in changes.items()]
    if parts:
        st.markdown(
            f'<div style="color: #94a3b8; font-size: 0.75rem;">{" | ".join(parts)}</div>',
            unsafe_allow_html=True,
        )


def render_release_info(update: IndicatorUpdate) -> None:
    schedule = RELEASE_SCHEDULES.get(update.series_id)
    if schedule is None or not update.observation_date:
        return
    observed = parse_calendar_date(update.observation_date)
    upcoming = next_release_date(schedule, observed, date.today())
    st.caption(f"As of {observed:%b %d, %Y} · Next {schedule.name}: {upcoming:%b %d}")


def render_indicator_card(spec: IndicatorSpec, update: IndicatorUpdate | None) -> None:
    """Headline value, change, returns and chart for one indicator."""
    if update is None or update.has_error:
        message = update.error_message if update is not None else "not fetched"
        st.markdown(
            f"""<div style="border: 1px solid #334155; border-radius: 8px; padding: 0.75rem;">
                <div style="color: #94a3b8; font-size: 0.8rem;">{spec.name}</div>
                <div style="color: #6b7280; font-size: 1.2rem;">Unavailable</div>
                <div style="color: #64748b; font-size: 0.7rem;">{message}</div>
            </div>""",
            unsafe_allow_html=True,
        )
        return

    kind = CATEGORY_VALUE_KIND[update.category]
    if update.category is Category.BANKING:
        kind = "currencyBillions"
    color = CHANGE_COLORS[update.change_type]

    st.markdown(
        f"""<div style="border: 1px solid #334155; border-left: 4px solid {color}; border-radius: 8px; padding: 0.75rem;">
            <div style="color: #94a3b8; font-size: 0.8rem;">{spec.name}</div>
            <div style="color: #f1f5f9; font-size: 1.6rem; font-weight: 600;">{format_value(update.current, kind)}</div>
            <div style="color: {color}; font-size: 0.85rem;">{format_change(update)}</div>
        </div>""",
        unsafe_allow_html=True,
    )
    render_returns(update)
    render_h8_changes(update)
    render_release_info(update)
    st.plotly_chart(build_figure(update), use_container_width=True, config={"displayModeBar": False})


def render_insight(summary: str | None) -> None:
    if summary:
        st.markdown(
            f'<div style="background: #1e293b; border-radius: 8px; padding: 0.6rem 0.9rem; '
            f'color: #cbd5e1; font-size: 0.85rem; margin-bottom: 0.75rem;">{summary}</div>',
            unsafe_allow_html=True,
        )


def render_tab(specs: tuple[IndicatorSpec, ...], updates: dict[str, IndicatorUpdate], columns: int = 3) -> None:
    for start in range(0, len(specs), columns):
        cols = st.columns(columns)
        for col, spec in zip(cols, specs[start:start + columns]):
            with col:
                render_indicator_card(spec, updates.get(spec.key))


def load_updates(settings: Settings) -> dict[str, IndicatorUpdate]:
    indicators = ECONOMIC_INDICATORS + RATE_INDICATORS + MARKET_INDICATORS + BANKING_INDICATORS
    return asyncio.run(run_once(indicators, settings))


def main() -> None:
    """Main dashboard entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    st.set_page_config(
        page_title="Market Dashboard",
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
    st.markdown(
        """<h1 style="margin: 0; font-size: 1.5rem; color: #f1f5f9;">Market Dashboard</h1>
        <div style="color: #64748b; font-size: 0.75rem;">Data: FRED + Yahoo Finance</div>""",
        unsafe_allow_html=True,
    )

    settings = Settings()
    try:
        settings.validate()
    except ValueError as e:
        st.error(f"Configuration error: {e}")
        return

    with st.spinner("Fetching data..."):
        updates = load_updates(settings)

    render_insight(generate_economic_summary(updates))

    tab1, tab2, tab3, tab4 = st.tabs(["Economic", "Rates", "Markets", "Banking"])

    with tab1:
        render_tab(ECONOMIC_INDICATORS, updates)

    with tab2:
        render_insight(generate_rates_summary(updates))
        render_tab(RATE_INDICATORS, updates)

    with tab3:
        render_tab(MARKET_INDICATORS, updates, columns=4)

    with tab4:
        render_tab(BANKING_INDICATORS, updates)


if __name__ == "__main__":
    main()
