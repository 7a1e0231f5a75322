"""Membership Signup -- Streamlit dashboard.

Step-by-step membership application for the Coastal Grand Hotel loyalty
program. All navigation and submission rules live in ``WizardController``;
this module only renders widgets and forwards edits to it. The draft is
saved as the applicant types, so a reload resumes where they left off.
"""

from __future__ import annotations

import asyncio
import html as html_mod
import sys
from datetime import date
from pathlib import Path

import streamlit as st

from app.field_catalogue import TERMS_AND_CONDITIONS, TERMS_INTRO, FieldDescriptor, FieldKind
from app.report import render_confirmation_docx
from app.wizard import GateReason, SubmissionPhase, WizardController, create_wizard

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))
from shared.theme import render_nav_bar, render_theme_css  # noqa: E402

# -- Page config --------------------------------------------------------------

st.set_page_config(
    page_title="Membership Signup -- Coastal Grand Hotel",
    layout="centered",
    initial_sidebar_state="collapsed",
)

render_theme_css(
    """
.step-title { font-size: 1.25rem; font-weight: 700; color: #1a2744; margin-bottom: 2px; }
.step-desc { font-size: 0.88rem; color: #5a6a85; margin-bottom: 14px; }
.membership-id {
    font-size: 1.6rem; font-weight: 800; color: #1a73e8;
    letter-spacing: 0.04em; text-align: center; margin: 10px 0;
}
"""
)
render_nav_bar("Membership Signup")

# -- Session state defaults ---------------------------------------------------

_WIDGET_PREFIX = "field_"

if "wizard" not in st.session_state:
    st.session_state.wizard = create_wizard()
_DEFAULTS: dict = {
    "violations": {},
    "nav_message": "",
}
for _k, _v in _DEFAULTS.items():
    if _k not in st.session_state:
        st.session_state[_k] = _v

wizard: WizardController = st.session_state.wizard


# -- Helpers ------------------------------------------------------------------

def _widget_key(name: str, option: str = "") -> str:
    return f"{_WIDGET_PREFIX}{name}__{option}" if option else f"{_WIDGET_PREFIX}{name}"


def _clear_widget_state() -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith(_WIDGET_PREFIX)]:
        del st.session_state[key]


def _on_edit(name: str) -> None:
    wizard.edit_field(name, st.session_state[_widget_key(name)])
    st.session_state.violations.pop(name, None)


def _on_toggle(name: str, option: str) -> None:
    wizard.toggle_option(name, option)
    st.session_state.violations.pop(name, None)


def _on_terms() -> None:
    if st.session_state.terms_checkbox:
        wizard.accept_terms()
    else:
        wizard.decline_terms()


def _label(field_def: FieldDescriptor) -> str:
    return f"{field_def.label} *" if field_def.required else field_def.label


def _seed(key: str, value) -> None:
    """Put the draft value into a widget's state slot the first time it renders."""
    if key not in st.session_state:
        st.session_state[key] = value


# -- Field renderers, one per kind --------------------------------------------

def _render_text(f: FieldDescriptor) -> None:
    key = _widget_key(f.name)
    _seed(key, wizard.value_of(f.name) or "")
    st.text_input(
        _label(f),
        key=key,
        placeholder=f.placeholder,
        help=f.description or None,
        type="password" if f.input_subtype == "password" else "default",
        on_change=_on_edit,
        args=(f.name,),
    )


def _render_textarea(f: FieldDescriptor) -> None:
    key = _widget_key(f.name)
    _seed(key, wizard.value_of(f.name) or "")
    st.text_area(_label(f), key=key, placeholder=f.placeholder, height=100,
                 help=f.description or None, on_change=_on_edit, args=(f.name,))


def _render_select(f: FieldDescriptor) -> None:
    key = _widget_key(f.name)
    current = wizard.value_of(f.name)
    _seed(key, current if current in f.option_values else None)
    st.selectbox(
        _label(f),
        options=f.option_values,
        format_func=f.option_label,
        key=key,
        placeholder=f.placeholder or "Select an option",
        help=f.description or None,
        on_change=_on_edit,
        args=(f.name,),
    )


def _render_radio(f: FieldDescriptor) -> None:
    key = _widget_key(f.name)
    current = wizard.value_of(f.name)
    _seed(key, current if current in f.option_values else None)
    st.radio(
        _label(f),
        options=f.option_values,
        format_func=f.option_label,
        key=key,
        horizontal=len(f.options) <= 4,
        help=f.description or None,
        on_change=_on_edit,
        args=(f.name,),
    )


def _render_multiselect(f: FieldDescriptor) -> None:
    key = _widget_key(f.name)
    _seed(key, [v for v in (wizard.value_of(f.name) or []) if v in f.option_values])
    st.multiselect(_label(f), options=f.option_values, format_func=f.option_label,
                   key=key, help=f.description or None, on_change=_on_edit, args=(f.name,))


def _render_checkbox(f: FieldDescriptor) -> None:
    if not f.options:
        key = _widget_key(f.name)
        _seed(key, wizard.value_of(f.name) is True)
        st.checkbox(_label(f), key=key, help=f.description or None,
                    on_change=_on_edit, args=(f.name,))
        return

    st.markdown(f'<div class="section-label">{html_mod.escape(_label(f))}</div>',
                unsafe_allow_html=True)
    selected = wizard.value_of(f.name) or []
    cols = st.columns(min(len(f.options), 3))
    for i, opt in enumerate(f.options):
        key = _widget_key(f.name, opt.value)
        _seed(key, opt.value in selected)
        with cols[i % len(cols)]:
            st.checkbox(opt.label, key=key, on_change=_on_toggle, args=(f.name, opt.value))


def _render_date(f: FieldDescriptor) -> None:
    key = _widget_key(f.name)
    _seed(key, wizard.value_of(f.name))
    st.date_input(
        _label(f),
        key=key,
        min_value=date(1900, 1, 1),
        max_value=date.today(),
        format="DD/MM/YYYY",
        help=f.description or None,
        on_change=_on_edit,
        args=(f.name,),
    )


def _render_signature(f: FieldDescriptor) -> None:
    key = _widget_key(f.name)
    _seed(key, wizard.value_of(f.name) or "")
    st.text_input(
        _label(f),
        key=key,
        placeholder="Type your full name to sign",
        help=f.description or None,
        on_change=_on_edit,
        args=(f.name,),
    )
    if wizard.value_of(f.name):
        st.markdown('<div class="saved-toast">Signed</div>', unsafe_allow_html=True)


_RENDERERS = {
    FieldKind.TEXT: _render_text,
    FieldKind.TEXTAREA: _render_textarea,
    FieldKind.SELECT: _render_select,
    FieldKind.RADIO: _render_radio,
    FieldKind.MULTISELECT: _render_multiselect,
    FieldKind.CHECKBOX: _render_checkbox,
    FieldKind.DATE: _render_date,
    FieldKind.SIGNATURE: _render_signature,
}


def _render_field(f: FieldDescriptor) -> None:
    _RENDERERS[f.kind](f)
    for err in st.session_state.violations.get(f.name, []):
        st.markdown(f'<div class="field-error">{html_mod.escape(err)}</div>',
                    unsafe_allow_html=True)


# -- Actions ------------------------------------------------------------------

def _apply_navigation(result) -> None:
    if result.ok:
        st.session_state.violations = {}
        st.session_state.nav_message = ""
        return
    st.session_state.violations = result.violations
    if result.reason == GateReason.JUMP_BLOCKED and result.blocked_step is not None:
        title = wizard.catalogue.steps[result.blocked_step].title
        st.session_state.nav_message = (
            f"Please complete step {result.blocked_step + 1} ({title}) first."
        )
    else:
        st.session_state.nav_message = "Please fix the highlighted fields to continue."


def _do_submit() -> None:
    outcome = asyncio.run(wizard.submit())
    if outcome.ok:
        st.session_state.violations = {}
        st.session_state.nav_message = ""
        _clear_widget_state()
        return
    st.session_state.violations = outcome.violations
    if outcome.reason == GateReason.TERMS_NOT_ACCEPTED:
        st.session_state.nav_message = "Please accept the terms and conditions to submit."
    elif outcome.reason == GateReason.GATEWAY_ERROR:
        st.session_state.nav_message = f"Submission failed: {outcome.error}"
    elif outcome.reason == GateReason.FIELD_VIOLATIONS:
        st.session_state.nav_message = "Please fix the highlighted fields before submitting."


def _do_close() -> None:
    wizard.reset_all()
    _clear_widget_state()
    st.session_state.violations = {}
    st.session_state.nav_message = ""
    if "terms_checkbox" in st.session_state:
        del st.session_state["terms_checkbox"]


# -- Confirmation view --------------------------------------------------------

if wizard.phase == SubmissionPhase.SUCCEEDED:
    st.success("Your membership application has been submitted.")
    st.markdown(
        f'<div class="membership-id">{html_mod.escape(wizard.membership_id or "")}</div>',
        unsafe_allow_html=True,
    )
    st.caption("Please keep your membership ID for future reference. "
               "Our team will contact you to complete the enrolment.")

    data = wizard.submitted_data or {}
    conf_cols = st.columns(2)
    with conf_cols[0]:
        st.download_button(
            "Download Confirmation (.docx)",
            data=render_confirmation_docx(data, wizard.catalogue),
            file_name=f"Membership-{wizard.membership_id}.docx",
            mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            use_container_width=True,
        )
    with conf_cols[1]:
        if st.button("Close", use_container_width=True):
            _do_close()
            st.rerun()
    st.stop()

# -- Step indicator -----------------------------------------------------------

st.markdown(
    f'<div class="progress-bar"><div class="progress-fill" '
    f'style="width:{wizard.progress:.0f}%"></div></div>',
    unsafe_allow_html=True,
)
st.caption(f"Step {wizard.current_step + 1} of {wizard.step_count} "
           f"-- {wizard.progress:.0f}% complete")

_STATE_ICONS = {"completed": "✓", "current": "●", "upcoming": "○"}
indicator_cols = st.columns(wizard.step_count)
for idx, state in enumerate(wizard.step_states()):
    with indicator_cols[idx]:
        if st.button(
            f"{_STATE_ICONS[state]} {idx + 1}",
            key=f"step_btn_{idx}",
            help=wizard.catalogue.steps[idx].title,
            type="primary" if state == "current" else "secondary",
            use_container_width=True,
        ):
            _apply_navigation(wizard.jump_to_step(idx))
            st.rerun()

# -- Current step -------------------------------------------------------------

step = wizard.catalogue.steps[wizard.current_step]
st.markdown(f'<div class="step-title">{html_mod.escape(step.title)}</div>',
            unsafe_allow_html=True)
st.markdown(f'<div class="step-desc">{html_mod.escape(step.description)}</div>',
            unsafe_allow_html=True)

for field_def in wizard.current_fields:
    _render_field(field_def)

if wizard.is_last_step:
    with st.expander("Terms and Conditions", expanded=False):
        st.markdown(TERMS_INTRO)
        for i, (title, text) in enumerate(TERMS_AND_CONDITIONS, start=1):
            st.markdown(f"**{i}. {title}.** {text}")
    _seed("terms_checkbox", wizard.terms_accepted)
    st.checkbox("I have read and accept the Terms and Conditions *",
                key="terms_checkbox", on_change=_on_terms)

if st.session_state.nav_message:
    st.error(st.session_state.nav_message)
elif wizard.last_error:
    st.error(f"Submission failed: {wizard.last_error}")

# -- Navigation buttons -------------------------------------------------------

st.markdown("---")
nav_left, nav_right = st.columns(2)
with nav_left:
    if st.button("Previous", use_container_width=True, disabled=wizard.is_first_step):
        _apply_navigation(wizard.go_previous())
        st.rerun()
with nav_right:
    if wizard.is_last_step:
        submitting = wizard.phase == SubmissionPhase.SUBMITTING
        if st.button("Submitting..." if submitting else "Submit Application",
                     type="primary", use_container_width=True, disabled=submitting):
            _do_submit()
            st.rerun()
    else:
        if st.button("Next", type="primary", use_container_width=True):
            _apply_navigation(wizard.go_next())
            st.rerun()

completeness = wizard.completeness()
st.caption(
    f"{completeness['completed_fields']} of {completeness['total_fields']} fields filled. "
    "Your progress is saved automatically."
)
