"""
Design system constants and reusable component functions.
Apple-inspired neutral palette, minimal motion, mobile-first.
"""

import html

# Color tokens
COLORS = {
    'primary': '#111111',
    'accent': '#0071E3',
    'background': '#F5F5F7',
    'surface': '#FFFFFF',
    'success': '#34C759',
    'warning': '#FF9F0A',
    'error': '#FF3B30',
    'text_primary': '#111111',
    'text_secondary': '#6E6E73',
    'border_medium': '#D2D2D7',
    'border_light': '#E5E5EA',
}


def get_colors():
    """Get the current color scheme"""
    return COLORS


def get_empty_state_html(icon, title, description, color_scheme=None):
    """Consistent empty state component"""
    if color_scheme is None:
        color_scheme = get_colors()

    icon_block = ""
    if icon:
        icon_block = f'<div style="font-size: 3rem; margin-bottom: 1rem;">{html.escape(str(icon))}</div>'

    return f"""
    <div class="empty-state" style="
        text-align: center;
        padding: 3rem 2rem;
        background: {color_scheme['surface']};
        border: 1px solid {color_scheme['border_medium']};
        border-radius: 16px;
        margin: 2rem 0;
    ">
        {icon_block}
        <div style="font-size: 1.25rem; font-weight: 600; margin-bottom: 0.5rem; color: {color_scheme['text_primary']};">{html.escape(str(title))}</div>
        <div style="color: {color_scheme['text_secondary']}; line-height: 1.5;">{html.escape(str(description))}</div>
    </div>
    """.strip()


def get_exercise_card_html(exercise, position, color_scheme=None):
    """Card for one exercise in a day of the plan. Model text is escaped."""
    if color_scheme is None:
        color_scheme = get_colors()

    safe_name = html.escape(exercise.name)
    safe_reps = html.escape(exercise.reps)
    safe_instructions = html.escape(exercise.instructions)

    instructions_block = ""
    if safe_instructions:
        instructions_block = f"""<div style="
            font-size: 0.9rem;
            color: {color_scheme['text_secondary']};
            line-height: 1.5;
            margin-top: 0.5rem;
        ">{safe_instructions}</div>"""

    return f"""<div class="exercise-card" style="
        background: {color_scheme['surface']};
        border: 1px solid {color_scheme['border_medium']};
        border-left: 3px solid {color_scheme['accent']};
        border-radius: 10px;
        padding: 1rem;
        margin-bottom: 0.75rem;
    ">
        <div style="display: flex; justify-content: space-between; align-items: baseline; gap: 1rem;">
            <div style="font-weight: 600; color: {color_scheme['text_primary']};">{position}. {safe_name}</div>
            <div style="
                font-size: 0.8rem;
                font-weight: 700;
                color: {color_scheme['accent']};
                white-space: nowrap;
            ">{exercise.sets} x {safe_reps}</div>
        </div>
        {instructions_block}
    </div>""".strip()
