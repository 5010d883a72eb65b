"""
UI utility functions for consistent component rendering across pages.
"""

import streamlit as st
from workout_coach.design_system import (
    get_colors,
    get_empty_state_html,
    get_exercise_card_html,
)


def render_page_header(title, subtitle=None, title_icon=""):
    """
    Render standardized page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle text
        title_icon: Optional emoji/icon before title
    """
    icon_text = f"{title_icon} " if title_icon else ""
    st.markdown(
        f'<div class="main-header">{icon_text}{title}</div>',
        unsafe_allow_html=True
    )
    if subtitle:
        st.markdown(
            f'<div class="sub-header">{subtitle}</div>',
            unsafe_allow_html=True
        )


def empty_state(icon, title, description):
    """
    Render consistent empty state component.

    Args:
        icon: Emoji icon
        title: Empty state title
        description: Empty state description
    """
    colors = get_colors()
    html = get_empty_state_html(icon, title, description, colors)
    st.markdown(html, unsafe_allow_html=True)


def render_workout_plan(plan):
    """
    Render a validated plan with one tab per training day.

    Args:
        plan: WorkoutPlan returned by the plan generator
    """
    colors = get_colors()
    day_numbers = plan.day_numbers
    tabs = st.tabs([f"Day {day}" for day in day_numbers])

    for tab, day in zip(tabs, day_numbers):
        with tab:
            exercises = plan.exercises_for(day)
            if not exercises:
                empty_state("🛌", "No exercises", f"The coach didn't program any exercises for day {day}.")
                continue
            for position, exercise in enumerate(exercises, start=1):
                st.markdown(
                    get_exercise_card_html(exercise, position, colors),
                    unsafe_allow_html=True
                )
