"""
Streamlit Frontend for Currency Formatter

A small demo page that lets the user switch locale and currency and
shows sample values rendered through the formatting session.

DESIGN PRINCIPLES:
1. One formatting session per browser session
2. Preference changes are visible immediately
3. Preferences are persisted once per script run, after rendering
"""

import streamlit as st

from currency_formatter import FormatConstructionError, FormattingCacheEngine
from currency_formatter.config import get_settings, validate_all_settings
from currency_formatter.session import create_formatter_session


SAMPLE_VALUE = 1234.56

LOCALES = ["en-US", "fr-FR"]
CURRENCIES = ["USD", "EUR"]


# Page configuration
st.set_page_config(
    page_title="Currency Formatter",
    page_icon="💱",
    layout="centered",
)


def get_engine() -> FormattingCacheEngine:
    """Get or create this browser session's formatting engine."""
    if "formatter" not in st.session_state:
        st.session_state.formatter = create_formatter_session()
    return st.session_state.formatter


def render_selectors(engine: FormattingCacheEngine) -> None:
    """Locale and currency buttons; the active choice is disabled."""
    columns = st.columns(len(LOCALES) + len(CURRENCIES))

    for column, locale in zip(columns, LOCALES):
        if column.button(
            f"Locale: {locale}",
            disabled=engine.get_locale() == locale,
            key=f"locale-{locale}",
        ):
            engine.set_locale(locale)
            st.rerun()

    for column, currency in zip(columns[len(LOCALES):], CURRENCIES):
        if column.button(
            f"Currency: {currency}",
            disabled=engine.get_currency() == currency,
            key=f"currency-{currency}",
        ):
            engine.set_currency(currency)
            st.rerun()


def render_samples(engine: FormattingCacheEngine) -> None:
    """Show the current preferences and formatted sample values."""
    st.write(f"Current locale: {engine.get_locale()}")
    st.write(f"Current currency: {engine.get_currency()}")

    try:
        st.write(f"Formatting currency: {engine.format_currency(SAMPLE_VALUE)}")
        st.write(
            "Formatting currency with min and max fractional digits: "
            + engine.format_currency(
                SAMPLE_VALUE,
                minimum_fraction_digits=3,
                maximum_fraction_digits=3,
            )
        )
        st.write(f"Formatting number: {engine.format_number(SAMPLE_VALUE)}")
    except FormatConstructionError as e:
        st.error(f"❌ {e}")


def render_settings_status() -> bool:
    """Sidebar configuration check. Returns False if anything is misconfigured."""
    st.sidebar.markdown("### Configuration")

    status = validate_all_settings()

    sections = [
        ("Formatter defaults", "formatter"),
        ("Preference storage", "preferences"),
        ("Application", "app"),
    ]

    all_ok = True
    for name, key in sections:
        if status.get(key, False):
            st.sidebar.success(f"✅ {name}")
        else:
            all_ok = False
            error = status.get(f"{key}_error", "Not configured")
            st.sidebar.error(f"❌ {name} - {error}")
    return all_ok


def main():
    """Main application entry point."""
    if not render_settings_status():
        st.error("Fix the configuration shown in the sidebar, then reload.")
        return

    engine = get_engine()

    st.title("💱 Currency Formatter")
    render_selectors(engine)
    st.markdown("---")
    render_samples(engine)

    show_cache_stats = st.sidebar.checkbox(
        "Show cache statistics",
        value=get_settings().app.debug_mode,
        key="show_cache_stats",
    )
    if show_cache_stats:
        st.json(engine.cache_info())

    # Persist after rendering so storage never delays the page
    if engine.bridge is not None:
        engine.bridge.flush()


if __name__ == "__main__":
    main()
