"""Centralized CSS and navigation bar for the membership tools.

Both the signup wizard and the admin directory import `render_theme_css`
and `render_nav_bar` instead of inlining their own styles.
"""

from __future__ import annotations

import html as html_mod

import streamlit as st

# ---------------------------------------------------------------------------
# Shared CSS
# ---------------------------------------------------------------------------

_BASE_CSS = """\
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&display=swap');

/* Hide Streamlit chrome */
#MainMenu, footer,
div[data-testid="stToolbar"] { display: none !important; }

.stApp {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
}

/* Navigation bar */
.nav-bar {
    display: flex;
    align-items: center;
    padding: 10px 4px;
    margin: -1rem 0 1.2rem 0;
    border-bottom: 1px solid rgba(0,0,0,0.07);
}
.nav-link {
    font-size: 0.85rem;
    font-weight: 500;
    color: #0066CC;
    text-decoration: none;
    min-width: 150px;
}
.nav-link:hover { color: #004499; text-decoration: underline; }
.nav-title {
    flex: 1;
    text-align: center;
    font-size: 1.15rem;
    font-weight: 700;
    color: #1a2744;
    letter-spacing: -0.02em;
}
.nav-sub {
    font-weight: 400;
    color: #86868b;
    font-size: 0.85rem;
    margin-left: 8px;
}
.nav-spacer { min-width: 150px; }

/* Section labels */
.section-label {
    font-size: 0.78rem;
    font-weight: 600;
    color: #5a6a85;
    text-transform: uppercase;
    letter-spacing: 0.04em;
    margin-bottom: 4px;
    margin-top: 12px;
}

/* Field error */
.field-error {
    font-size: 0.82rem;
    color: #c62828;
    margin-top: -8px;
    margin-bottom: 8px;
}

/* Help text below fields */
.help-text {
    font-size: 0.78rem;
    color: #86868b;
    margin-top: -6px;
    margin-bottom: 10px;
}

/* Progress bar */
.progress-bar {
    background: #e8ecf0;
    border-radius: 6px;
    height: 10px;
    overflow: hidden;
    margin-bottom: 4px;
}
.progress-fill {
    height: 100%;
    background: #1a73e8;
    border-radius: 6px;
    transition: width 0.3s ease;
}

/* Stat cards */
.stat-card {
    background: #fff;
    border: 1px solid #e2e8f0;
    border-radius: 8px;
    padding: 14px 18px;
    box-shadow: 0 1px 4px rgba(0,0,0,0.04);
}
.stat-card .stat-label { font-size: 0.78rem; color: #5a6a85; }
.stat-card .stat-value { font-size: 1.5rem; font-weight: 700; color: #1a2744; }

/* Tier badge */
.tier-badge {
    display: inline-block;
    padding: 3px 10px;
    font-size: 0.7rem;
    font-weight: 600;
    border-radius: 12px;
    color: #fff;
}
.tier-bronze { background: #b45309; }
.tier-silver { background: #4b5563; }
.tier-gold { background: #d97706; }
.tier-platinum { background: #7c3aed; }
.tier-diamond { background: #0891b2; }
.tier-none { background: #2563eb; }

/* Saved confirmation */
.saved-toast {
    font-size: 0.8rem;
    color: #2e7d32;
    font-weight: 600;
}
"""


def render_theme_css(extra_css: str = "") -> None:
    """Inject the shared stylesheet. Pass *extra_css* for tool-specific rules."""
    css = _BASE_CSS
    if extra_css:
        css += "\n" + extra_css
    st.markdown(f"<style>\n{css}\n</style>", unsafe_allow_html=True)


def tier_badge_html(tier: str) -> str:
    """Coloured badge for a membership tier value (bronze, silver, ...)."""
    css_tier = tier if tier in ("bronze", "silver", "gold", "platinum", "diamond") else "none"
    label = tier.title() if tier else "Member"
    return f'<span class="tier-badge tier-{css_tier}">{html_mod.escape(label)}</span>'


# ---------------------------------------------------------------------------
# Navigation bar
# ---------------------------------------------------------------------------

def render_nav_bar(
    tool_title: str,
    link_label: str = "",
    link_url: str = "",
    hotel_name: str = "Coastal Grand Hotel",
) -> None:
    """Render the shared navigation bar with an optional link and centered title."""
    link = (
        f'<a href="{html_mod.escape(link_url)}" class="nav-link" target="_blank">'
        f'{html_mod.escape(link_label)}</a>'
        if link_url else '<div class="nav-spacer"></div>'
    )
    st.markdown(
        f'<div class="nav-bar">'
        f'    {link}'
        f'    <div class="nav-title">{html_mod.escape(tool_title)}'
        f'<span class="nav-sub">&mdash; {html_mod.escape(hotel_name)}</span></div>'
        f'    <div class="nav-spacer"></div>'
        f'</div>',
        unsafe_allow_html=True,
    )
