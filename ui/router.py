# ui/router.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

import streamlit as st

from ui.state import ctx_get, ctx_invalidate_from, ctx_set_step

# ====== Contrato de un paso ======
ValidateFn = Callable[[object], Tuple[bool, List[str]]]
RenderFn = Callable[[object], None]


@dataclass(frozen=True)
class WizardStep:
    id: int
    title: str
    render: RenderFn
    validate: ValidateFn
    requires: List[int]  # steps that must be completed before this one opens


def _can_open(ctx, step: WizardStep) -> bool:
    return all(ctx.completed.get(p, False) for p in step.requires)


def _mark_completed(ctx, step_id: int, ok: bool) -> None:
    ctx.completed[step_id] = bool(ok)


def _sidebar_nav(ctx, steps: List[WizardStep]) -> None:
    st.sidebar.title("Rooftop Solar • Estimator")

    for p in steps:
        enabled = _can_open(ctx, p) or p.id <= ctx.current_step
        mark = "✅" if ctx.completed.get(p.id, False) else ("🔒" if not enabled else "▫️")
        if st.sidebar.button(f"{mark} {p.id}. {p.title}", disabled=not enabled, key=f"nav_{p.id}"):
            ctx_set_step(st, p.id)
            st.rerun()


def render_wizard(steps: List[WizardStep]) -> None:
    """
    Sidebar is always navigable back to completed steps.
    Validation only gates 'Next'.
    """
    ctx = ctx_get(st)
    _sidebar_nav(ctx, steps)

    total = len(steps)
    st.progress((ctx.current_step - 1) / max(total - 1, 1))
    st.subheader(f"Step {ctx.current_step} of {total}")

    step = next(p for p in steps if p.id == ctx.current_step)

    step.render(ctx)

    ok, errors = step.validate(ctx)
    ctx.errors = errors or []
    for e in ctx.errors:
        st.error(e)
    if not ok and ctx.completed.get(step.id, False):
        ctx_invalidate_from(ctx, step.id)

    col1, _, col3 = st.columns([1, 2, 1])

    with col1:
        if st.button("⬅️ Back", disabled=(ctx.current_step == 1)):
            ctx_set_step(st, ctx.current_step - 1)
            st.rerun()

    with col3:
        if st.button("Next ➡️", disabled=not ok or ctx.current_step >= total):
            _mark_completed(ctx, step.id, True)
            ctx_set_step(st, min(ctx.current_step + 1, total))
            st.rerun()
