from __future__ import annotations

from typing import List, Optional, Tuple

import pandas as pd
import streamlit as st

from sudokugame.cache import ValidationCache
from sudokugame.config import configure_logging, resolve_cache_size, resolve_difficulty
from sudokugame.game import (
    apply_hint,
    elapsed_seconds,
    format_time,
    has_error,
    is_initial_cell,
    make_move,
    new_game,
    progress,
    reset_game,
    reveal_solution,
)
from sudokugame.geometry import DIFFICULTIES, difficulty_settings
from sudokugame.models import GameState, Grid


# -----------------------------
# App setup
# -----------------------------

configure_logging()

st.set_page_config(page_title="Sudoku", layout="wide")


def cell_key(n: int, r: int, c: int) -> str:
    # include N so changing size doesn't collide with old widget state
    return f"cell_{n}_{r}_{c}"


def parse_cell(raw: str, n: int) -> Tuple[Optional[int], Optional[str]]:
    """Empty string or '0' => empty. Returns (value, error)."""
    raw = raw.strip()
    if raw in ("", "0"):
        return None, None
    if not raw.isdigit():
        return None, f"not a number: '{raw}'"
    v = int(raw)
    if not 1 <= v <= n:
        return None, f"out of range: {v} (allowed 1..{n}, or blank)"
    return v, None


def sync_inputs(state: GameState) -> None:
    n = state.config.size
    for r in range(n):
        for c in range(n):
            v = state.grid[r][c]
            st.session_state[cell_key(n, r, c)] = "" if v is None else str(v)


def commit(state: GameState) -> None:
    st.session_state.game = state
    st.session_state.needs_sync = True
    st.rerun()


def grid_df(grid: Grid) -> pd.DataFrame:
    return pd.DataFrame([[0 if v is None else v for v in row] for row in grid])


def render_board_html(state: GameState, title: str) -> None:
    """
    Render the grid with thick sub-box borders, given cells in bold and
    conflicting cells highlighted.
    """
    cfg = state.config
    n = cfg.size

    html = [f"<div class='sudoku-wrap'><div class='sudoku-title'>{title}</div>"]
    html.append("<table class='sudoku'>")
    for r in range(n):
        html.append("<tr>")
        for c in range(n):
            v = state.grid[r][c]
            cls = []
            if r % cfg.sub_grid_rows == 0:
                cls.append("top")
            if c % cfg.sub_grid_cols == 0:
                cls.append("left")
            if (r + 1) % cfg.sub_grid_rows == 0:
                cls.append("bottom")
            if (c + 1) % cfg.sub_grid_cols == 0:
                cls.append("right")
            if is_initial_cell(state, r, c):
                cls.append("given")
            if has_error(state, r, c):
                cls.append("conflict")
            if state.selected_cell is not None and (state.selected_cell.row, state.selected_cell.col) == (r, c):
                cls.append("selected")
            cls_attr = f" class='{' '.join(cls)}'" if cls else ""
            disp = "" if v is None else str(v)
            html.append(f"<td{cls_attr}>{disp}</td>")
        html.append("</tr>")
    html.append("</table></div>")

    st.markdown("".join(html), unsafe_allow_html=True)


st.markdown(
    """
<style>
div[data-testid="stTextInput"] input {
    text-align: center;
    font-size: 20px !important;
    height: 2.6rem;
    padding: 0.2rem 0.2rem;
}
div[data-testid="stTextInput"] { margin-bottom: 0rem; }

.sudoku-wrap { margin-top: 0.5rem; }
.sudoku-title { font-size: 1.05rem; font-weight: 600; margin: 0.5rem 0 0.35rem 0; }
table.sudoku { border-collapse: collapse; }
table.sudoku td {
    width: 2.6rem;
    height: 2.6rem;
    text-align: center;
    vertical-align: middle;
    font-size: 20px;
    border: 1px solid rgba(49, 51, 63, 0.25);
}
table.sudoku td.top { border-top: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.left { border-left: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.bottom { border-bottom: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.right { border-right: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.given { font-weight: 700; }
table.sudoku td.conflict { background: rgba(255, 75, 75, 0.30); }
table.sudoku td.selected { outline: 3px solid rgba(28, 131, 225, 0.8); }

.sudoku-spacer { height: 0.25rem; }
</style>
""",
    unsafe_allow_html=True,
)

st.title("Sudoku")

if "game" not in st.session_state:
    st.session_state.game = new_game(resolve_difficulty())
    st.session_state.needs_sync = True
if "cache" not in st.session_state:
    st.session_state.cache = ValidationCache(resolve_cache_size())

game: GameState = st.session_state.game
cache: ValidationCache = st.session_state.cache

if st.session_state.get("needs_sync", False):
    sync_inputs(game)
    st.session_state.needs_sync = False


# -----------------------------
# Sidebar controls
# -----------------------------

with st.sidebar:
    st.header("Game")
    difficulty = st.selectbox(
        "Difficulty",
        DIFFICULTIES,
        index=DIFFICULTIES.index(game.difficulty),
        format_func=lambda d: difficulty_settings(d).name,
    )
    if st.button("New game", use_container_width=True):
        commit(new_game(difficulty))

    st.divider()
    if st.button("Hint", use_container_width=True, disabled=game.is_complete):
        commit(apply_hint(game, cache))
    if st.button("Solve", use_container_width=True, disabled=game.is_complete):
        commit(reveal_solution(game))
    if st.button("Reset", use_container_width=True):
        commit(reset_game(game))


# -----------------------------
# Status
# -----------------------------

c1, c2, c3 = st.columns(3)
with c1:
    st.metric("Time", format_time(elapsed_seconds(game)))
with c2:
    st.metric("Progress", f"{progress(game)}%")
with c3:
    st.metric("Difficulty", difficulty_settings(game.difficulty).name)
st.progress(progress(game) / 100)


# -----------------------------
# Input grid in a form (prevents rerun on every keystroke)
# -----------------------------

n = game.config.size
box_cols = game.config.sub_grid_cols
box_rows = game.config.sub_grid_rows

with st.form("sudoku_form", clear_on_submit=False):
    # spacer columns between sub-boxes
    spacer_w = 0.18
    widths: List[float] = []
    for g in range(n // box_cols):
        widths.extend([1.0] * box_cols)
        if g != n // box_cols - 1:
            widths.append(spacer_w)

    for r in range(n):
        cols = st.columns(widths, gap="small")
        col_idx = 0
        for c in range(n):
            if c > 0 and c % box_cols == 0:
                col_idx += 1  # skip spacer column
            with cols[col_idx]:
                key = cell_key(n, r, c)
                if key not in st.session_state:
                    st.session_state[key] = ""
                st.text_input(
                    label="",
                    key=key,
                    label_visibility="collapsed",
                    disabled=is_initial_cell(game, r, c) or game.is_complete,
                )
            col_idx += 1

        if (r + 1) % box_rows == 0 and (r + 1) != n:
            st.markdown("<div class='sudoku-spacer'></div>", unsafe_allow_html=True)

    submitted = st.form_submit_button("Apply moves", disabled=game.is_complete)

if submitted:
    updated = game
    errors: List[str] = []
    for r in range(n):
        for c in range(n):
            if is_initial_cell(game, r, c):
                continue
            value, err = parse_cell(str(st.session_state.get(cell_key(n, r, c), "")), n)
            if err:
                errors.append(f"Cell ({r+1},{c+1}) {err}")
                continue
            if value != updated.grid[r][c]:
                updated = make_move(updated, r, c, value, cache)

    if errors:
        st.error("Please fix these input issues:")
        st.write("\n".join([f"- {e}" for e in errors]))
        st.session_state.game = updated
        game = updated
    else:
        commit(updated)


# -----------------------------
# Board
# -----------------------------

render_board_html(game, "Board")

if game.is_complete:
    st.success(f"Puzzle complete in {format_time(elapsed_seconds(game))}!")
elif game.errors:
    st.warning(f"{len(game.errors)} conflicting cell(s).")

st.download_button(
    "Download grid as CSV",
    data=grid_df(game.grid).to_csv(index=False, header=False).encode("utf-8"),
    file_name=f"sudoku_{n}x{n}.csv",
    mime="text/csv",
)
